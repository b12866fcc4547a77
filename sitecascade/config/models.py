"""Typed dataclasses describing sitecascade site configuration."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from .._constants import (
    DEFAULT_COMPONENTS_CSS_FILE,
    DEFAULT_COMPONENTS_JS_FILE,
    DEFAULT_COMPONENTS_VARIABLE,
)


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class ComponentsConfig:
    """Where components are exposed and where their side output is written.

    Attributes
    ----------
    variable : str
        Data key holding the component accessor, e.g. ``comp``.
    css_file : str
        Output URL of the concatenated component styles.
    js_file : str
        Output URL of the concatenated component scripts.
    """

    variable: str = DEFAULT_COMPONENTS_VARIABLE
    css_file: str = DEFAULT_COMPONENTS_CSS_FILE
    js_file: str = DEFAULT_COMPONENTS_JS_FILE


@dc.dataclass(slots=True)
class StaticPathConfig:
    """A source path copied verbatim, optionally to another destination."""

    source: str
    dest: str | None = None


@dc.dataclass(slots=True)
class SiteConfig:
    """Top-level site configuration consumed by the CLI and build session."""

    src: Path = Path()
    dest: Path = Path("_site")
    pretty_urls: bool = True
    components: ComponentsConfig = dc.field(default_factory=ComponentsConfig)
    static: list[StaticPathConfig] = dc.field(default_factory=list)
    ignore: list[str] = dc.field(default_factory=list)
    copy_remaining: bool = False
    git_dates: bool = True
    pygments_style: str = "monokai"
    data: dict[str, dict[str, typ.Any]] = dc.field(default_factory=dict)
    pages: dict[str, list[dict[str, typ.Any]]] = dc.field(default_factory=dict)


__all__ = ["ComponentsConfig", "SiteConfig", "SiteConfigError", "StaticPathConfig"]
