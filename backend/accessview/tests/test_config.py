import pytest
from pydantic import ValidationError

from accessview.config import Settings
from accessview.services.query import SortField


def test_default_sort_field_is_an_enum():
    assert Settings().default_sort_field is SortField.RULE
    assert Settings(default_sort_field="severity").default_sort_field is SortField.SEVERITY


def test_unknown_sort_field_rejected_from_environment(monkeypatch):
    monkeypatch.setenv("ACCESSVIEW_DEFAULT_SORT_FIELD", "owner")
    with pytest.raises(ValidationError):
        Settings()
