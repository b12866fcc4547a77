"""Loaders for the ``_data`` and ``_components`` directory conventions.

:class:`DataLoader` reads ``_data.<ext>`` files and ``_data/`` directories
into a single mapping; :class:`ComponentLoader` turns a ``_components/``
directory of Jinja templates into a component registry. Both read through
the :class:`~sitecascade.entries.Entry` tree and the format registry.

Examples
--------
>>> from sitecascade.formats import default_formats
>>> from sitecascade.loaders import ComponentLoader, DataLoader
>>> data_loader = DataLoader(default_formats())
>>> component_loader = ComponentLoader()
>>> data_loader.load(site_root.children["_data.yml"])  # doctest: +SKIP
{'title': 'My site'}
"""

from __future__ import annotations

import posixpath
import typing as typ
from pathlib import Path

from jinja2 import Environment, select_autoescape
from markupsafe import Markup

from .components import Component
from .logging import get_logger

if typ.TYPE_CHECKING:
    from .entries import Entry
    from .formats import Formats

logger = get_logger("loaders")

TEMPLATE_EXTENSIONS = (".jinja", ".j2", ".html")
STYLE_EXTENSION = ".css"
SCRIPT_EXTENSION = ".js"


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


class DataLoader:
    """Load directory data from ``_data`` files and folders."""

    def __init__(self, formats: Formats) -> None:
        self.formats = formats

    def load(self, entry: Entry) -> dict[str, typ.Any]:
        """Return the data held by ``entry``.

        A file is parsed with the loader registered for its extension; files
        with no loader (``_data.yml.bak``) hold no data. A directory maps each
        child's stem to its data, recursively.
        """
        if entry.type == "directory":
            return self._load_directory(entry)
        return self._load_file(entry)

    def _load_file(self, entry: Entry) -> dict[str, typ.Any]:
        fmt = self.formats.search(entry.path)
        if fmt is None or fmt.loader is None:
            logger.debug("skipping unsupported data file %s", entry.path)
            return {}
        return entry.get_content(fmt.loader)

    def _load_directory(self, entry: Entry) -> dict[str, typ.Any]:
        data: dict[str, typ.Any] = {}
        for child in entry.children.values():
            if _is_hidden(child.name):
                continue
            if child.type == "directory":
                data[child.name] = self._load_directory(child)
                continue
            fmt = self.formats.search(child.path)
            if fmt is None or fmt.loader is None:
                logger.debug("skipping unsupported data file %s", child.path)
                continue
            key = child.name[: -len(fmt.ext)]
            data[key] = child.get_content(fmt.loader)
        return data


class ComponentLoader:
    """Build component registries from ``_components`` directories.

    Every ``name.jinja`` (``.j2``, ``.html``) template becomes a component
    named ``name``; sibling ``name.css`` and ``name.js`` files provide its
    style and script side output. Subdirectories become nested groups.
    """

    def __init__(self, env: Environment | None = None) -> None:
        self.env = env or Environment(
            autoescape=select_autoescape(["html", "xml"], default_for_string=True),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def load(
        self, entry: Entry, data: typ.Mapping[str, typ.Any] | None = None
    ) -> dict[str, typ.Any]:
        """Return the registry for the ``_components`` directory ``entry``.

        Parameters
        ----------
        entry : Entry
            The ``_components`` directory.
        data : Mapping[str, Any], optional
            Directory data available to every component template. The
            mapping is read at render time, so keys added after loading (the
            component accessor) are visible; props passed at call time take
            precedence.
        """
        base: typ.Mapping[str, typ.Any] = data if data is not None else {}
        registry: dict[str, typ.Any] = {}
        files = {child.name.lower(): child for child in entry.children.values()}
        for child in entry.children.values():
            if _is_hidden(child.name):
                continue
            if child.type == "directory":
                registry[child.name.lower()] = self.load(child, base)
                continue
            stem, ext = posixpath.splitext(child.name)
            if ext.lower() not in TEMPLATE_EXTENSIONS:
                continue
            registry[stem.lower()] = self._build_component(
                stem.lower(),
                child,
                base,
                css=_read_sibling(files, stem + STYLE_EXTENSION),
                js=_read_sibling(files, stem + SCRIPT_EXTENSION),
            )
        return registry

    def _build_component(
        self,
        name: str,
        entry: Entry,
        base: typ.Mapping[str, typ.Any],
        *,
        css: str | None,
        js: str | None,
    ) -> Component:
        template = self.env.from_string(Path(entry.src).read_text(encoding="utf-8"))

        def render(props: typ.Mapping[str, typ.Any]) -> str:
            return Markup(template.render({**base, **props}))

        return Component(name=name, render=render, css=css, js=js)


def _read_sibling(files: typ.Mapping[str, Entry], name: str) -> str | None:
    sibling = files.get(name.lower())
    if sibling is None or sibling.type != "file":
        return None
    return Path(sibling.src).read_text(encoding="utf-8")


__all__ = ["ComponentLoader", "DataLoader"]
