"""Cascade merging of page data.

Data mappings flow from ancestor directories down to pages. Each level is
combined with :func:`merge_data`, which folds its arguments left to right:
later mappings win key by key, except for keys listed in the ``mergedKeys``
meta-mapping, whose values are combined according to their strategy.

Examples
--------
>>> from sitecascade.data import merge_data
>>> merge_data({"a": 1, "b": 1}, {"b": 2})
{'a': 1, 'b': 2}
>>> merge_data(
...     {"tags": ["a", "b"], "mergedKeys": {"tags": "stringArray"}},
...     {"tags": ["b", "c"]},
... )["tags"]
['a', 'b', 'c']
"""

from __future__ import annotations

import functools
import typing as typ

MERGED_KEYS = "mergedKeys"

MergeStrategy = typ.Literal["replace", "array", "stringArray", "object"]
Data = dict[str, typ.Any]


def _as_list(data: typ.Mapping[str, typ.Any], key: str) -> list[typ.Any]:
    if key not in data:
        return []
    value = data[key]
    if isinstance(value, list | tuple):
        return list(value)
    return [value]


def _to_text(value: object) -> str:
    # YAML booleans and nulls read the way they are written.
    match value:
        case bool():
            return "true" if value else "false"
        case None:
            return "null"
        case _:
            return str(value)


def _as_object(data: typ.Mapping[str, typ.Any], key: str) -> typ.Mapping[str, typ.Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, typ.Mapping):
        msg = f"Cannot merge '{key}' as an object: got {type(value).__name__}."
        raise TypeError(msg)
    return value


def _dedupe(values: typ.Iterable[typ.Any]) -> list[typ.Any]:
    # Elements may be unhashable (mappings, lists), so compare by equality.
    unique: list[typ.Any] = []
    for value in values:
        if value not in unique:
            unique.append(value)
    return unique


def _merge_pair(
    previous: typ.Mapping[str, typ.Any], current: typ.Mapping[str, typ.Any]
) -> Data:
    merged: Data = {**previous, **current}
    strategies: dict[str, str] = {
        **(previous.get(MERGED_KEYS) or {}),
        **(current.get(MERGED_KEYS) or {}),
    }
    if strategies:
        merged[MERGED_KEYS] = strategies

    for key, strategy in strategies.items():
        match strategy:
            case "array" | "stringArray":
                values = _as_list(previous, key) + _as_list(current, key)
                if strategy == "stringArray":
                    values = [_to_text(value) for value in values]
                merged[key] = _dedupe(values)
            case "object":
                merged[key] = {**_as_object(previous, key), **_as_object(current, key)}
            case _:
                continue
    return merged


def merge_data(*datas: typ.Mapping[str, typ.Any]) -> Data:
    """Merge ``datas`` left to right into a new mapping.

    Parameters
    ----------
    *datas : Mapping[str, Any]
        Data mappings ordered from lowest to highest precedence.

    Returns
    -------
    dict[str, Any]
        A new mapping; none of the inputs is modified.
    """
    if not datas:
        return {}
    return functools.reduce(_merge_pair, datas[1:], dict(datas[0]))


__all__ = ["MERGED_KEYS", "Data", "MergeStrategy", "merge_data"]
