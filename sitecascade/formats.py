"""Format registry mapping file extensions to load or copy rules.

A :class:`Format` either loads a file into page data (``loader``) or marks it
for verbatim copying (``copy``). :meth:`Formats.search` resolves the rule for
a path by its longest registered extension, so ``.tmpl.html`` can override
``.html``.

Examples
--------
>>> from sitecascade.formats import default_formats
>>> formats = default_formats()
>>> formats.search("/blog/post.md").ext
'.md'
>>> formats.search("/logo.png") is None
True
"""

from __future__ import annotations

import dataclasses as dc
import json
import re
import typing as typ

import tomlkit
from ruamel.yaml import YAML

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .entries import ContentLoader

CopyRule = bool | typ.Callable[[str], str] | None

FRONT_MATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(?P<yaml>.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)(?P<body>.*)\Z",
    re.DOTALL | re.MULTILINE,
)


@dc.dataclass(slots=True)
class Format:
    """Handling rule for one file extension.

    Attributes
    ----------
    ext : str
        Extension including the leading dot, e.g. ``".md"``.
    loader : ContentLoader | None
        Parser producing page data; set for page formats.
    copy : bool | Callable[[str], str] | None
        ``True`` to copy the file verbatim, or a rename function receiving the
        mirrored output path and returning the destination.
    asset : bool
        Whether pages of this format keep their extension instead of being
        rendered to HTML.
    """

    ext: str
    loader: ContentLoader | None = None
    copy: CopyRule = None
    asset: bool = False


class Formats:
    """Registry of :class:`Format` rules keyed by extension."""

    def __init__(self) -> None:
        self._entries: dict[str, Format] = {}

    def set(self, fmt: Format) -> None:
        """Register ``fmt``, replacing any rule for the same extension."""
        self._entries[fmt.ext.lower()] = fmt

    def search(self, path: str) -> Format | None:
        """Return the rule whose extension is the longest suffix of ``path``."""
        lowered = path.lower()
        best: Format | None = None
        for ext, fmt in self._entries.items():
            if lowered.endswith(ext) and (best is None or len(ext) > len(best.ext)):
                best = fmt
        return best


def _yaml_loader() -> YAML:
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    return loader


def _as_mapping(loaded: object, path: Path) -> dict[str, typ.Any]:
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        msg = f"Data file '{path}' must contain a mapping."
        raise TypeError(msg)
    return dict(loaded)


def load_yaml(path: Path) -> dict[str, typ.Any]:
    """Load a YAML mapping from ``path``."""
    with path.open("r", encoding="utf-8") as handle:
        return _as_mapping(_yaml_loader().load(handle), path)


def load_json(path: Path) -> dict[str, typ.Any]:
    """Load a JSON mapping from ``path``."""
    return _as_mapping(json.loads(path.read_text(encoding="utf-8")), path)


def load_toml(path: Path) -> dict[str, typ.Any]:
    """Load a TOML document from ``path`` as plain Python values."""
    document = tomlkit.parse(path.read_text(encoding="utf-8"))
    return _as_mapping(document.unwrap(), path)


def parse_front_matter(text: str) -> dict[str, typ.Any]:
    """Split YAML front matter from ``text``.

    Returns the front-matter mapping with the remaining body stored under
    ``content``. Text without a leading ``---`` fence is all content.
    """
    match = FRONT_MATTER_PATTERN.match(text)
    if not match:
        return {"content": text}
    loaded = _yaml_loader().load(match.group("yaml")) or {}
    if not isinstance(loaded, dict):
        msg = "Front matter must be a mapping."
        raise TypeError(msg)
    data = dict(loaded)
    data["content"] = match.group("body")
    return data


def load_text(path: Path) -> dict[str, typ.Any]:
    """Load a text page, honouring optional YAML front matter."""
    return parse_front_matter(path.read_text(encoding="utf-8"))


def default_formats() -> Formats:
    """Return a registry preloaded with the built-in page formats."""
    formats = Formats()
    for ext in (".md", ".markdown"):
        formats.set(Format(ext=ext, loader=load_text))
    for ext in (".jinja", ".html"):
        formats.set(Format(ext=ext, loader=load_text))
    for ext in (".yml", ".yaml"):
        formats.set(Format(ext=ext, loader=load_yaml))
    formats.set(Format(ext=".json", loader=load_json))
    formats.set(Format(ext=".toml", loader=load_toml))
    return formats


__all__ = [
    "CopyRule",
    "Format",
    "Formats",
    "default_formats",
    "load_json",
    "load_text",
    "load_toml",
    "load_yaml",
    "parse_front_matter",
]
