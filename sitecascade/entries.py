"""Read-only model of the scanned source tree.

The build walker never touches the disk directly: it consumes the
:class:`Entry` tree produced by :func:`scan_directory` (or built by hand in
tests) and asks entries for their content through a format loader.

Examples
--------
>>> from pathlib import Path
>>> from sitecascade.entries import scan_directory
>>> root = scan_directory(Path("site"))  # doctest: +SKIP
>>> [child.name for child in root.children.values()]  # doctest: +SKIP
['_data.yml', 'blog', 'index.md']
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import os
import posixpath
import typing as typ
from pathlib import Path

EntryType = typ.Literal["file", "directory"]
ContentLoader = typ.Callable[[Path], typ.Mapping[str, typ.Any]]


@dc.dataclass(slots=True)
class EntryInfo:
    """Filesystem metadata captured when the entry was scanned."""

    mtime: dt.datetime | None = None
    birthtime: dt.datetime | None = None


@dc.dataclass(slots=True, eq=False)
class Entry:
    """A file or directory node of the source tree.

    Attributes
    ----------
    name : str
        Basename of the node.
    path : str
        POSIX path relative to the source root with a leading ``/``.
    type : {"file", "directory"}
        Node kind.
    src : str
        Locator of the underlying resource, usually an absolute path.
    children : dict[str, Entry]
        Child nodes keyed by name, in scan order.
    flags : set[str]
        Free-form markers such as ``"remote"``.
    info : EntryInfo | None
        Timestamps reported by the scanner.
    """

    name: str
    path: str
    type: EntryType
    src: str = ""
    children: dict[str, Entry] = dc.field(default_factory=dict)
    flags: set[str] = dc.field(default_factory=set)
    info: EntryInfo | None = None
    _content: dict[int, typ.Mapping[str, typ.Any]] = dc.field(
        default_factory=dict, repr=False
    )

    def get_info(self) -> EntryInfo | None:
        """Return the scanned timestamps, if any."""
        return self.info

    def get_content(self, loader: ContentLoader) -> dict[str, typ.Any]:
        """Load the entry with ``loader`` and memoize the result per loader.

        A fresh ``dict`` copy is returned on every call so callers can never
        alter the cached mapping.
        """
        key = id(loader)
        if key not in self._content:
            self._content[key] = loader(Path(self.src))
        return dict(self._content[key])

    def add(self, child: Entry) -> Entry:
        """Attach ``child`` and return it, keeping insertion order."""
        self.children[child.name] = child
        return child


def _timestamp(value: float | None) -> dt.datetime | None:
    if not value:
        return None
    return dt.datetime.fromtimestamp(value, dt.UTC)


def _info_for(path: Path) -> EntryInfo:
    stat = path.stat()
    birthtime = getattr(stat, "st_birthtime", None)
    return EntryInfo(mtime=_timestamp(stat.st_mtime), birthtime=_timestamp(birthtime))


def scan_directory(root: Path) -> Entry:
    """Scan ``root`` into an :class:`Entry` tree.

    Children are sorted by name so builds are reproducible across platforms.
    Symlinks are followed; unreadable nodes raise the underlying ``OSError``.

    Parameters
    ----------
    root : Path
        Source directory of the site.

    Returns
    -------
    Entry
        The root directory entry, with ``path`` ``"/"``.

    Raises
    ------
    NotADirectoryError
        If ``root`` is not a directory.
    """
    if not root.is_dir():
        msg = f"Source folder '{root}' is not a directory."
        raise NotADirectoryError(msg)
    resolved = root.resolve()
    top = Entry(
        name="",
        path="/",
        type="directory",
        src=str(resolved),
        info=_info_for(resolved),
    )
    _scan_into(top, resolved)
    return top


def _scan_into(parent: Entry, directory: Path) -> None:
    for child in sorted(os.scandir(directory), key=lambda item: item.name):
        child_path = Path(child.path)
        is_dir = child.is_dir()
        entry = parent.add(
            Entry(
                name=child.name,
                path=posixpath.join(parent.path, child.name),
                type="directory" if is_dir else "file",
                src=str(child_path),
                info=_info_for(child_path),
            )
        )
        if is_dir:
            _scan_into(entry, child_path)


__all__ = ["ContentLoader", "Entry", "EntryInfo", "EntryType", "scan_directory"]
