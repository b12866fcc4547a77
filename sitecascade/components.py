"""Component registries, their cascade merge and the lazy accessor.

A registry maps lower-case names either to a :class:`Component` or to a
nested registry. Directory levels combine registries with
:func:`merge_components`; templates then reach components through a
:class:`ComponentAccessor`, which resolves names on first use, records the
component's style and script side output, and memoizes the result.

Examples
--------
>>> from sitecascade.components import Component, ComponentAccessor, ExtraCode
>>> button = Component("button", render=lambda props: f"<b>{props['text']}</b>")
>>> comp = ComponentAccessor({"button": button}, ExtraCode())
>>> comp["Button"](text="Go")
'<b>Go</b>'
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from ._constants import EXTRA_CODE_SCRIPT, EXTRA_CODE_STYLE
from .errors import ComponentNotFoundError

RenderFunction = typ.Callable[[typ.Mapping[str, typ.Any]], str]


@dc.dataclass(frozen=True, slots=True)
class Component:
    """A named renderable unit with optional style and script side output."""

    name: str
    render: RenderFunction
    css: str | None = None
    js: str | None = None


Components = typ.Mapping[str, "Component | Components"]


def merge_components(*registries: Components) -> dict[str, typ.Any]:
    """Merge component registries left to right into a new registry.

    Later registries win per name. When both sides hold a nested registry
    under the same name, the two are merged recursively with the later
    registry still winning on conflicting leaves.
    """
    merged: dict[str, typ.Any] = {}
    for registry in registries:
        for key, value in registry.items():
            existing = merged.get(key)
            if isinstance(existing, typ.Mapping) and isinstance(value, typ.Mapping):
                merged[key] = merge_components(existing, value)
            else:
                merged[key] = value
    return merged


class ExtraCode:
    """Style and script snippets recorded by components as they are used.

    Snippets are keyed by kind and component name, so recording a component
    twice keeps a single entry in its original position.
    """

    def __init__(self) -> None:
        self._code: dict[str, dict[str, str]] = {}

    def record(self, kind: str, name: str, code: str) -> None:
        self._code.setdefault(kind, {})[name] = code

    def snippets(self, kind: str) -> list[str]:
        return list(self._code.get(kind, {}).values())

    def joined(self, kind: str) -> str | None:
        """Return the newline-joined snippets for ``kind`` or None when empty."""
        snippets = self.snippets(kind)
        return "\n".join(snippets) if snippets else None

    def __bool__(self) -> bool:
        return any(self._code.values())


@dc.dataclass(frozen=True, slots=True)
class ComponentLeaf:
    """Callable wrapper forwarding props to a component's renderer."""

    component: Component

    def __call__(
        self, props: typ.Mapping[str, typ.Any] | None = None, /, **kwargs: typ.Any
    ) -> str:
        return self.component.render({**(props or {}), **kwargs})


class ComponentAccessor:
    """Read-only, memoizing view over a merged component registry.

    ``accessor.resolve(name)`` (or ``accessor[name]``) returns a
    :class:`ComponentLeaf` for components and a nested
    :class:`ComponentAccessor` for groups. Jinja falls back to item lookup for
    attribute access, so templates can write ``comp.button(text="Go")``.
    """

    def __init__(self, components: Components, extra_code: ExtraCode | None = None) -> None:
        self._components = components
        self._extra_code = extra_code
        self._cache: dict[str, ComponentLeaf | ComponentAccessor] = {}

    def resolve(self, name: str) -> ComponentLeaf | ComponentAccessor:
        """Resolve ``name`` case-insensitively.

        Raises
        ------
        ComponentNotFoundError
            If no component or group is registered under ``name``.
        """
        key = name.lower()
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        value = self._components.get(key)
        if value is None:
            raise ComponentNotFoundError(name)

        resolved: ComponentLeaf | ComponentAccessor
        if isinstance(value, typ.Mapping):
            resolved = ComponentAccessor(value, self._extra_code)
        else:
            self._record_extra_code(key, value)
            resolved = ComponentLeaf(value)
        self._cache[key] = resolved
        return resolved

    def _record_extra_code(self, key: str, component: Component) -> None:
        if self._extra_code is None:
            return
        if component.css:
            self._extra_code.record(EXTRA_CODE_STYLE, key, component.css)
        if component.js:
            self._extra_code.record(EXTRA_CODE_SCRIPT, key, component.js)

    def __getitem__(self, name: str) -> ComponentLeaf | ComponentAccessor:
        return self.resolve(name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._components

    def __repr__(self) -> str:
        return f"ComponentAccessor({sorted(self._components)!r})"


__all__ = [
    "Component",
    "ComponentAccessor",
    "ComponentLeaf",
    "Components",
    "ExtraCode",
    "RenderFunction",
    "merge_components",
]
