"""Per-path overrides registered before a build starts.

Configuration and plugins bind data, injected pages and components to
directory or file paths of the source tree. The build walker only reads the
registry; merges always copy, so registered values are never altered.

Examples
--------
>>> from sitecascade.scopes import ScopeRegistry
>>> scopes = ScopeRegistry()
>>> scopes.add_data("/blog", {"layout": "post"})
>>> scopes.data_for("/blog/")
{'layout': 'post'}
>>> scopes.data_for("/docs")
{}
"""

from __future__ import annotations

import typing as typ

from .components import merge_components
from .data import merge_data
from .urls import normalize_path

if typ.TYPE_CHECKING:
    from .components import Components


class ScopeRegistry:
    """Data, pages and components bound to source paths."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, typ.Any]] = {}
        self._pages: dict[str, list[dict[str, typ.Any]]] = {}
        self._components: dict[str, dict[str, typ.Any]] = {}

    def add_data(self, path: str, data: typ.Mapping[str, typ.Any]) -> None:
        """Bind ``data`` to ``path``, merging with anything registered earlier."""
        key = normalize_path(path)
        self._data[key] = merge_data(self._data.get(key, {}), data)

    def add_page(self, path: str, data: typ.Mapping[str, typ.Any]) -> None:
        """Inject a page built from ``data`` into the directory at ``path``."""
        self._pages.setdefault(normalize_path(path), []).append(dict(data))

    def add_components(self, path: str, components: Components) -> None:
        """Bind a component registry to the directory at ``path``."""
        key = normalize_path(path)
        self._components[key] = merge_components(self._components.get(key, {}), components)

    def data_for(self, path: str) -> dict[str, typ.Any]:
        return dict(self._data.get(normalize_path(path), {}))

    def pages_for(self, path: str) -> list[dict[str, typ.Any]]:
        return [dict(page) for page in self._pages.get(normalize_path(path), [])]

    def components_for(self, path: str) -> Components | None:
        return self._components.get(normalize_path(path))


__all__ = ["ScopeRegistry"]
