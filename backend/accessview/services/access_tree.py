from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from accessview.normalization.access_map import AccessMapRow

UNKNOWN = "Unknown"
RESOURCE_PLACEHOLDER = "(resource)"
EMPTY_MESSAGE = "No access map entries."


@dataclass
class ResourceNode:
    label: str
    permissions_label: str
    row: AccessMapRow


@dataclass
class AccountNode:
    name: str
    resources: List[ResourceNode] = field(default_factory=list)


@dataclass
class ProviderNode:
    name: str
    accounts: List[AccountNode] = field(default_factory=list)


@dataclass
class AccessTree:
    providers: List[ProviderNode] = field(default_factory=list)
    search: str = ""
    empty: bool = False
    message: str | None = None

    @property
    def row_count(self) -> int:
        return sum(len(account.resources) for provider in self.providers for account in provider.accounts)


def row_matches(row: AccessMapRow, search: str) -> bool:
    haystack = " ".join([row.provider, row.account, row.resource, *row.permissions]).lower()
    return search in haystack


def build_access_tree(rows: Sequence[AccessMapRow], search: str = "") -> AccessTree:
    """
    Group access rows by provider, then account, keeping first-seen order.

    An empty row set returns a tree flagged ``empty`` so renderers can show a
    placeholder instead of an empty hierarchy.
    """

    search = (search or "").strip().lower()
    if not rows:
        return AccessTree(search=search, empty=True, message=EMPTY_MESSAGE)

    providers: Dict[str, ProviderNode] = {}
    accounts: Dict[tuple[str, str], AccountNode] = {}
    for row in rows:
        if not row_matches(row, search):
            continue
        provider_name = row.provider or UNKNOWN
        account_name = row.account or UNKNOWN

        provider = providers.get(provider_name)
        if provider is None:
            provider = providers[provider_name] = ProviderNode(name=provider_name)
        account = accounts.get((provider_name, account_name))
        if account is None:
            account = accounts[(provider_name, account_name)] = AccountNode(name=account_name)
            provider.accounts.append(account)

        account.resources.append(
            ResourceNode(
                label=row.resource or RESOURCE_PLACEHOLDER,
                permissions_label=", ".join(row.permissions),
                row=row,
            )
        )

    return AccessTree(providers=list(providers.values()), search=search)
