"""Walk the source tree into pages and static files.

:class:`BuildSession` owns everything a build needs: the format registry,
the ``_data`` and ``_components`` loaders, the per-path scope overrides, the
static-path table and ignore rules, and the component side-output
collection. :meth:`BuildSession.build` descends the entry tree depth first,
cascading directory data and components into every page below it.

Example
-------
>>> from pathlib import Path
>>> from sitecascade.entries import scan_directory
>>> from sitecascade.source import create_session
>>> session = create_session()
>>> session.add_static_path("assets/", "public/")
>>> pages, static_files = session.build(scan_directory(Path("site")))  # doctest: +SKIP
>>> [page.data["url"] for page in pages]  # doctest: +SKIP
['/', '/blog/hello/']
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from ._constants import (
    COMPONENTS_DIR,
    DATA_NAME,
    EXTRA_CODE_SCRIPT,
    EXTRA_CODE_STYLE,
    REMOTE_FLAG,
    RESERVED_PREFIXES,
)
from .components import ComponentAccessor, ExtraCode, merge_components
from .config.models import ComponentsConfig
from .dates import GitTimestampOracle, NullTimestampOracle, get_date, parse_date, utc_now
from .data import merge_data
from .formats import default_formats
from .loaders import ComponentLoader, DataLoader
from .logging import get_logger
from .pages import Page, PageSource, StaticFile
from .scopes import ScopeRegistry
from .urls import OutputRule, get_output_path, get_url, join_path, normalize_path

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .components import Components
    from .config.models import SiteConfig
    from .data import Data
    from .dates import Clock, TimestampOracle
    from .entries import Entry
    from .formats import Format, Formats

logger = get_logger("source")

IgnoreFilter = typ.Callable[[str], bool]
CopyRemaining = typ.Callable[[str], "str | bool | None"]


class BuildFilter(typ.Protocol):
    """Predicate deciding whether an entry (and, for pages, its page) is built.

    Filters are called twice: with the entry alone before any data is
    loaded, and with the entry and its fully merged page afterwards.
    """

    def __call__(self, entry: Entry, page: Page | None = None, /) -> bool: ...


class DataLoaderLike(typ.Protocol):
    def load(self, entry: Entry) -> typ.Mapping[str, typ.Any]: ...


class ComponentLoaderLike(typ.Protocol):
    def load(
        self, entry: Entry, data: typ.Mapping[str, typ.Any] | None = None
    ) -> Components: ...


@dc.dataclass(slots=True, frozen=True)
class StaticPath:
    """Destination rule for a registered static path."""

    dest: OutputRule
    dir_only: bool


def _is_data_entry(entry: Entry) -> bool:
    if entry.type == "file":
        return entry.name.startswith(f"{DATA_NAME}.")
    return entry.name == DATA_NAME


class BuildSession:
    """State and entry point for one or more independent builds."""

    def __init__(
        self,
        *,
        formats: Formats,
        data_loader: DataLoaderLike,
        component_loader: ComponentLoaderLike,
        scopes: ScopeRegistry | None = None,
        pretty_urls: bool = True,
        components: ComponentsConfig | None = None,
        date_oracle: TimestampOracle | None = None,
        now: Clock = utc_now,
    ) -> None:
        """Initialize a session.

        Parameters
        ----------
        formats : Formats
            Registry deciding whether a file is loaded, copied or dropped.
        data_loader : DataLoaderLike
            Loader for ``_data`` files and folders.
        component_loader : ComponentLoaderLike
            Loader for ``_components`` folders.
        scopes : ScopeRegistry, optional
            Per-path data, page and component overrides.
        pretty_urls : bool, optional
            Emit ``/hello/`` style URLs instead of ``/hello.html``.
        components : ComponentsConfig, optional
            Accessor key and side-output paths for components.
        date_oracle : TimestampOracle, optional
            Version-control lookup for the git date keywords.
        now : Callable[[], datetime], optional
            Clock used for injected pages and date fallbacks.
        """
        self.formats = formats
        self.data_loader = data_loader
        self.component_loader = component_loader
        self.scopes = scopes or ScopeRegistry()
        self.pretty_urls = pretty_urls
        self.components = components or ComponentsConfig()
        self.date_oracle = date_oracle
        self.now = now
        self.ignored: set[str] = set()
        self.filters: list[IgnoreFilter] = []
        self.static_paths: dict[str, StaticPath] = {}
        self.copy_remaining_files: CopyRemaining | None = None
        self.extra_code = ExtraCode()
        self.data: dict[str, Data] = {}

    def add_ignored_path(self, path: str) -> None:
        self.ignored.add(normalize_path(path))

    def add_ignore_filter(self, predicate: IgnoreFilter) -> None:
        """Skip every entry whose path makes ``predicate`` return true."""
        self.filters.append(predicate)

    def add_static_path(self, source: str, dest: OutputRule = None) -> None:
        """Copy ``source`` verbatim instead of processing it.

        A trailing slash on ``source`` restricts the match to directories.
        ``dest`` is a fixed destination, a rename function receiving the
        mirrored output path, or ``None`` to mirror the source layout.
        """
        self.static_paths[normalize_path(source.rstrip("/") or "/")] = StaticPath(
            dest=dest, dir_only=source.endswith("/")
        )

    def build(
        self, tree: Entry, *filters: BuildFilter
    ) -> tuple[list[Page], list[StaticFile]]:
        """Build every page and static file under ``tree``.

        Returns
        -------
        tuple[list[Page], list[StaticFile]]
            Pages and static files in depth-first scan order.

        Raises
        ------
        CascadeError
            On a missing component, invalid url value or invalid date.
        """
        pages: list[Page] = []
        static_files: list[StaticFile] = []
        self.data = {}
        self.extra_code = ExtraCode()
        self._build_dir(filters, tree, "/", {}, {}, pages, static_files)
        logger.debug(
            "built %d pages and %d static files", len(pages), len(static_files)
        )
        return pages, static_files

    def _rejected(self, filters: cabc.Sequence[BuildFilter], entry: Entry) -> bool:
        return any(not build_filter(entry) for build_filter in filters)

    def _skipped(self, entry: Entry) -> bool:
        return (
            entry.name.startswith(RESERVED_PREFIXES)
            or entry.path in self.ignored
            or any(predicate(entry.path) for predicate in self.filters)
        )

    def _build_dir(
        self,
        filters: cabc.Sequence[BuildFilter],
        directory: Entry,
        path: str,
        parent_components: Components,
        parent_data: Data,
        pages: list[Page],
        static_files: list[StaticFile],
    ) -> None:
        if self._rejected(filters, directory):
            logger.debug("filtered out %s", directory.path)
            return

        name, date = parse_date(directory.name)
        path = join_path(path, name)
        logger.debug("entering %s as %s", directory.path, path)

        loaded_data: Data = {"date": date} if date else {}
        for entry in directory.children.values():
            if _is_data_entry(entry):
                loaded_data.update(self.data_loader.load(entry))

        dir_data = merge_data(
            self.scopes.data_for(directory.path), parent_data, loaded_data
        )

        scoped_components = self.scopes.components_for(directory.path)
        loaded_components: Components | None = None
        components_entry = directory.children.get(COMPONENTS_DIR)
        if components_entry is not None and components_entry.type == "directory":
            # Templates read dir_data when rendered, accessor included.
            loaded_components = self.component_loader.load(components_entry, dir_data)

        if scoped_components or loaded_components:
            parent_components = merge_components(
                parent_components, scoped_components or {}, loaded_components or {}
            )
            dir_data[self.components.variable] = ComponentAccessor(
                parent_components, self.extra_code
            )

        self.data[path] = dict(dir_data)

        for injected in self.scopes.pages_for(directory.path):
            page = Page()
            page.data = merge_data(dir_data, {"date": self.now()}, injected)
            self._resolve_page(page, path, None)
            pages.append(page)

        for entry in directory.children.values():
            if self._rejected(filters, entry):
                continue

            static = self.static_paths.get(entry.path)
            if static is not None:
                self._add_static(entry, path, static, static_files)
                continue

            if self._skipped(entry):
                continue

            if entry.type == "directory":
                self._build_dir(
                    filters,
                    entry,
                    path,
                    parent_components,
                    dir_data,
                    pages,
                    static_files,
                )
                continue

            fmt = self.formats.search(entry.path)
            if fmt is None:
                self._copy_remaining(entry, path, static_files)
            elif fmt.copy:
                rename = fmt.copy if callable(fmt.copy) else None
                static_files.append(
                    StaticFile(entry, get_output_path(entry, path, rename))
                )
            elif fmt.loader is not None:
                page = self._load_page(entry, fmt, path, dir_data)
                if any(not build_filter(entry, page) for build_filter in filters):
                    logger.debug("filtered out page %s", entry.path)
                    continue
                pages.append(page)

    def _add_static(
        self,
        entry: Entry,
        path: str,
        static: StaticPath,
        static_files: list[StaticFile],
    ) -> None:
        if entry.type == "file":
            if not static.dir_only:
                static_files.append(
                    StaticFile(entry, get_output_path(entry, path, static.dest))
                )
            return

        dest_root = (
            static.dest if isinstance(static.dest, str) else join_path(path, entry.name)
        )
        rename = static.dest if callable(static.dest) else None
        static_files.extend(self.collect_static_files(entry, dest_root, rename))

    def _copy_remaining(
        self, entry: Entry, path: str, static_files: list[StaticFile]
    ) -> None:
        if self.copy_remaining_files is None:
            return
        dest = self.copy_remaining_files(entry.path)
        if not dest:
            return
        rule = dest if isinstance(dest, str) else None
        static_files.append(StaticFile(entry, get_output_path(entry, path, rule)))

    def _load_page(
        self, entry: Entry, fmt: Format, path: str, dir_data: Data
    ) -> Page:
        info = entry.get_info()
        slug, date = parse_date(entry.name)
        ext_length = len(fmt.ext)
        page = Page(
            src=PageSource(
                path=entry.path[:-ext_length],
                slug=slug[:-ext_length],
                ext=fmt.ext,
                asset=fmt.asset,
                created=info.birthtime if info else None,
                last_modified=info.mtime if info else None,
                remote=entry.src if REMOTE_FLAG in entry.flags else None,
                entry=entry,
            )
        )
        page.data = merge_data(
            dir_data,
            {"date": date} if date else {},
            self.scopes.data_for(entry.path),
            entry.get_content(fmt.loader),
        )
        self._resolve_page(page, path, entry)
        logger.debug("page %s -> %s", entry.path, page.data["url"])
        return page

    def _resolve_page(self, page: Page, path: str, entry: Entry | None) -> None:
        page.data["url"] = get_url(page, pretty_urls=self.pretty_urls, parent_path=path)
        page.data["date"] = get_date(
            page.data.get("date"), entry, oracle=self.date_oracle, now=self.now
        )
        page.data["page"] = page

    def collect_static_files(
        self,
        directory: Entry,
        dest_path: str,
        rename: typ.Callable[[str], str] | None = None,
    ) -> cabc.Iterator[StaticFile]:
        """Yield a :class:`StaticFile` for every file under ``directory``.

        Reserved (``.``/``_``) names, ignored paths and ignore filters are
        honoured for files and folders alike.
        """
        for entry in directory.children.values():
            if self._skipped(entry):
                continue
            if entry.type == "file":
                yield StaticFile(entry, get_output_path(entry, dest_path, rename))
            else:
                yield from self.collect_static_files(
                    entry, join_path(dest_path, entry.name), rename
                )

    def get_components_extra_code(self) -> list[Page]:
        """Return one page per non-empty style/script side-output collection."""
        targets = (
            (EXTRA_CODE_STYLE, self.components.css_file),
            (EXTRA_CODE_SCRIPT, self.components.js_file),
        )
        pages: list[Page] = []
        for kind, url in targets:
            code = self.extra_code.joined(kind)
            if code:
                pages.append(Page.create(url, code))
        return pages


def create_session(
    config: SiteConfig | None = None,
    *,
    formats: Formats | None = None,
    date_oracle: TimestampOracle | None = None,
    now: Clock = utc_now,
) -> BuildSession:
    """Wire a :class:`BuildSession` with the built-in loaders.

    When ``config`` is given, its scoped data, injected pages, static paths,
    ignore list and copy-remaining policy are registered on the session.
    """
    formats = formats or default_formats()
    if date_oracle is None:
        git_dates = config.git_dates if config else True
        date_oracle = GitTimestampOracle() if git_dates else NullTimestampOracle()
    session = BuildSession(
        formats=formats,
        data_loader=DataLoader(formats),
        component_loader=ComponentLoader(),
        pretty_urls=config.pretty_urls if config else True,
        components=config.components if config else None,
        date_oracle=date_oracle,
        now=now,
    )
    if config is None:
        return session

    for path, data in config.data.items():
        session.scopes.add_data(path, data)
    for path, injected in config.pages.items():
        for page_data in injected:
            session.scopes.add_page(path, page_data)
    for static in config.static:
        session.add_static_path(static.source, static.dest)
    for ignored in config.ignore:
        session.add_ignored_path(ignored)
    if config.copy_remaining:
        session.copy_remaining_files = lambda _path: True
    return session


__all__ = [
    "BuildFilter",
    "BuildSession",
    "ComponentLoaderLike",
    "DataLoaderLike",
    "IgnoreFilter",
    "StaticPath",
    "create_session",
]
