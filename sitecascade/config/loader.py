"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .models import ComponentsConfig, SiteConfig, SiteConfigError, StaticPathConfig


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing a site build.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/site.yaml``). Relative ``src`` and ``dest`` values are
        resolved against the file's directory.

    Returns
    -------
    SiteConfig
        Parsed configuration with defaults applied.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If a section has the wrong shape.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from sitecascade.config import load_site_config
    >>> config = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
    >>> config.pretty_urls  # doctest: +SKIP
    True
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    base_dir = path.parent

    return SiteConfig(
        src=base_dir / str(raw.get("src", ".")),
        dest=base_dir / str(raw.get("dest", "_site")),
        pretty_urls=bool(raw.get("pretty_urls", True)),
        components=_build_components_config(raw.get("components")),
        static=_build_static_paths(raw.get("static")),
        ignore=[str(item) for item in _as_list(raw.get("ignore"), "ignore")],
        copy_remaining=bool(raw.get("copy_remaining", False)),
        git_dates=bool(raw.get("git_dates", True)),
        pygments_style=str(raw.get("pygments_style", "monokai")),
        data=_build_scoped_data(raw.get("data")),
        pages=_build_scoped_pages(raw.get("pages")),
    )


def _as_list(value: object, section: str) -> list[typ.Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        msg = f"'{section}' must be a list."
        raise SiteConfigError(msg)
    return value


def _as_mapping(value: object, section: str) -> dict[str, typ.Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"'{section}' must be a mapping."
        raise SiteConfigError(msg)
    return dict(value)


def _build_components_config(payload: object) -> ComponentsConfig:
    """Build a ComponentsConfig from the ``components`` section."""
    raw = _as_mapping(payload, "components")
    base = ComponentsConfig()
    return ComponentsConfig(
        variable=str(raw.get("variable", base.variable)),
        css_file=str(raw.get("css_file", base.css_file)),
        js_file=str(raw.get("js_file", base.js_file)),
    )


def _build_static_paths(payload: object) -> list[StaticPathConfig]:
    """Accept bare strings or ``{from, to}`` mappings."""
    result: list[StaticPathConfig] = []
    for item in _as_list(payload, "static"):
        match item:
            case str():
                result.append(StaticPathConfig(source=item))
            case {"from": str() as source, **rest}:
                dest = rest.get("to")
                result.append(
                    StaticPathConfig(source=source, dest=None if dest is None else str(dest))
                )
            case _:
                msg = f"Invalid static path entry: {item!r}"
                raise SiteConfigError(msg)
    return result


def _build_scoped_data(payload: object) -> dict[str, dict[str, typ.Any]]:
    scoped: dict[str, dict[str, typ.Any]] = {}
    for path, data in _as_mapping(payload, "data").items():
        scoped[str(path)] = _as_mapping(data, f"data.{path}")
    return scoped


def _build_scoped_pages(payload: object) -> dict[str, list[dict[str, typ.Any]]]:
    scoped: dict[str, list[dict[str, typ.Any]]] = {}
    for path, pages in _as_mapping(payload, "pages").items():
        scoped[str(path)] = [
            _as_mapping(page, f"pages.{path}") for page in _as_list(pages, f"pages.{path}")
        ]
    return scoped


__all__ = ["load_site_config"]
