from accessview.normalization.access_map import (
    AccessMapSchema,
    detect_schema,
    flatten_access_map,
    normalize_access_map,
)


def test_legacy_entries_become_one_group():
    entries = [
        {"provider": "aws", "account": "1", "resource": "bucket/x", "permission": "read, write,, "},
        {"provider": "gcp", "account": "2", "permissions": ["owner"]},
    ]

    normalized = normalize_access_map(entries)

    assert detect_schema(entries) is AccessMapSchema.LEGACY
    assert normalized[0].groups[0].resources == ("bucket/x",)
    assert normalized[0].groups[0].permissions == ("read", "write")
    assert normalized[1].groups[0].resources == ()
    assert normalized[1].groups[0].permissions == ("owner",)


def test_grouped_entries_are_normalized_defensively():
    entries = [
        {
            "provider": "github",
            "account": "octo",
            "fingerprint": "fp",
            "groups": [
                {"resources": ["repo/a", "repo/b"], "permissions": ["push"]},
                {"resources": "repo/c", "permissions": None},
                "junk",
            ],
        }
    ]

    (entry,) = normalize_access_map(entries)

    assert entry.fingerprint == "fp"
    assert [group.resources for group in entry.groups] == [("repo/a", "repo/b"), (), ()]
    assert [group.permissions for group in entry.groups] == [("push",), (), ()]


def test_one_grouped_entry_switches_the_whole_sequence():
    entries = [
        {"provider": "aws", "groups": [{"resources": ["r1"], "permissions": ["p"]}]},
        {"provider": "gcp", "resource": "legacy-resource", "permission": "read"},
    ]

    normalized = normalize_access_map(entries)
    rows = flatten_access_map(normalized)

    assert detect_schema(entries) is AccessMapSchema.GROUPED
    assert normalized[1].groups == ()
    assert [row.resource for row in rows] == ["r1"]


def test_flatten_emits_one_row_per_resource():
    entries = normalize_access_map(
        [
            {
                "provider": "aws",
                "account": "1",
                "groups": [
                    {"resources": ["a", "b", "c"], "permissions": ["read"]},
                    {"resources": ["d"], "permissions": ["write"]},
                ],
            },
            {"provider": "aws", "account": "2", "groups": []},
        ]
    )

    rows = flatten_access_map(entries)

    expected = sum(len(group.resources) for entry in entries for group in entry.groups)
    assert len(rows) == expected == 4
    assert rows[0].permissions is rows[2].permissions
    assert rows[3].permissions == ("write",)


def test_non_list_input_is_empty():
    assert normalize_access_map(None) == []
    assert normalize_access_map({"provider": "aws"}) == []
