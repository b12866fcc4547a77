"""Unit tests for cascade data merging."""

from __future__ import annotations

import pytest

from sitecascade.data import MERGED_KEYS, merge_data


def test_last_writer_wins_without_strategies() -> None:
    """Plain keys are shallow-overwritten left to right."""
    merged = merge_data({"a": 1, "b": 1}, {"b": 2, "c": 2}, {"c": 3})
    assert merged == {"a": 1, "b": 2, "c": 3}, f"unexpected merge result {merged!r}"


def test_merge_does_not_mutate_inputs() -> None:
    """Every merge returns a new mapping and leaves inputs untouched."""
    parent = {"tags": ["a"], MERGED_KEYS: {"tags": "array"}}
    child = {"tags": ["b"]}
    merged = merge_data(parent, child)
    assert merged["tags"] == ["a", "b"]
    assert parent == {"tags": ["a"], MERGED_KEYS: {"tags": "array"}}
    assert child == {"tags": ["b"]}
    assert merged is not parent


def test_string_array_dedupes_in_first_seen_order() -> None:
    """``stringArray`` keys concatenate, stringify and dedupe."""
    merged = merge_data(
        {"tags": ["a", "b"], MERGED_KEYS: {"tags": "stringArray"}},
        {"tags": ["b", "c"]},
    )
    assert merged["tags"] == ["a", "b", "c"]


def test_string_array_converts_scalars_to_text() -> None:
    merged = merge_data(
        {"tags": 1, MERGED_KEYS: {"tags": "stringArray"}},
        {"tags": ["1", 2]},
    )
    assert merged["tags"] == ["1", "2"]


def test_array_uses_structural_equality() -> None:
    """``array`` keys dedupe unhashable values by equality."""
    merged = merge_data(
        {"links": [{"href": "/a"}], MERGED_KEYS: {"links": "array"}},
        {"links": [{"href": "/a"}, {"href": "/b"}]},
    )
    assert merged["links"] == [{"href": "/a"}, {"href": "/b"}]


def test_array_treats_missing_side_as_empty() -> None:
    merged = merge_data({MERGED_KEYS: {"tags": "array"}}, {"tags": "solo"})
    assert merged["tags"] == ["solo"]


def test_object_strategy_shallow_merges() -> None:
    """``object`` keys merge mappings with the later side winning per key."""
    merged = merge_data(
        {"meta": {"x": 1, "y": 0}, MERGED_KEYS: {"meta": "object"}},
        {"meta": {"y": 2}},
    )
    assert merged["meta"] == {"x": 1, "y": 2}


def test_string_array_writes_booleans_and_nulls_as_yaml_text() -> None:
    merged = merge_data(
        {"tags": [True, None], MERGED_KEYS: {"tags": "stringArray"}},
        {"tags": ["true", "null", False]},
    )
    assert merged["tags"] == ["true", "null", "false"]


def test_object_strategy_rejects_non_mapping_values() -> None:
    with pytest.raises(TypeError, match="'meta'"):
        merge_data({"meta": {"x": 1}, MERGED_KEYS: {"meta": "object"}}, {"meta": "x"})


def test_strategy_is_cumulative_across_levels() -> None:
    """A strategy declared at the top keeps applying to deeper levels."""
    merged = merge_data(
        {"tags": ["site"], MERGED_KEYS: {"tags": "stringArray"}},
        {"tags": ["blog"]},
        {"tags": ["post", "site"]},
    )
    assert merged["tags"] == ["site", "blog", "post"]


def test_descendant_can_change_strategy() -> None:
    """mergedKeys merge key by key, so a child may switch a strategy."""
    merged = merge_data(
        {"tags": ["a"], MERGED_KEYS: {"tags": "array", "meta": "object"}},
        {"tags": ["b"], MERGED_KEYS: {"tags": "replace"}},
    )
    assert merged["tags"] == ["b"]
    assert merged[MERGED_KEYS] == {"tags": "replace", "meta": "object"}


@pytest.mark.parametrize("datas", [(), ({"a": 1},)])
def test_degenerate_inputs(datas: tuple[dict[str, int], ...]) -> None:
    expected = dict(datas[0]) if datas else {}
    assert merge_data(*datas) == expected
