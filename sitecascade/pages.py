"""Build outputs: pages to render and static files to copy."""

from __future__ import annotations

import dataclasses as dc
import datetime as dt  # noqa: TC003 - used for runtime type metadata
import posixpath
import typing as typ

if typ.TYPE_CHECKING:
    from .entries import Entry


@dc.dataclass(slots=True)
class PageSource:
    """Where a page came from.

    Attributes
    ----------
    path : str
        Source path without the format extension, e.g. ``"/blog/2024-01-02_hello"``.
    slug : str
        Output basename without extension and without any date prefix.
    ext : str
        Matched format extension.
    asset : bool
        Whether the page keeps its extension instead of becoming HTML.
    created : datetime | None
        Creation time reported by the scanner.
    last_modified : datetime | None
        Modification time reported by the scanner.
    remote : str | None
        Source locator for entries flagged as remote.
    entry : Entry | None
        Backing entry; ``None`` for injected and generated pages.
    """

    path: str = ""
    slug: str = ""
    ext: str = ""
    asset: bool = False
    created: dt.datetime | None = None
    last_modified: dt.datetime | None = None
    remote: str | None = None
    entry: Entry | None = dc.field(default=None, repr=False)


@dc.dataclass(slots=True, eq=False)
class Page:
    """A page produced by the build walker.

    ``data`` holds the fully merged cascade data, including the resolved
    ``url`` and ``date`` and a ``page`` back-reference. ``content`` is filled
    in later by a renderer.
    """

    src: PageSource = dc.field(default_factory=PageSource)
    data: dict[str, typ.Any] = dc.field(default_factory=dict, repr=False)
    content: str | bytes | None = dc.field(default=None, repr=False)

    @property
    def url(self) -> str | typ.Literal[False] | None:
        return self.data.get("url")

    @classmethod
    def create(cls, url: str, content: str | bytes) -> Page:
        """Create a generated page served at ``url`` with fixed ``content``."""
        stem, ext = posixpath.splitext(url)
        page = cls(
            src=PageSource(
                path=stem, slug=posixpath.basename(stem), ext=ext, asset=bool(ext)
            ),
            content=content,
        )
        page.data = {"url": url, "content": content, "page": page}
        return page


@dc.dataclass(slots=True, frozen=True)
class StaticFile:
    """A file to copy verbatim; ``output_path`` is relative to the output root."""

    entry: Entry
    output_path: str


__all__ = ["Page", "PageSource", "StaticFile"]
