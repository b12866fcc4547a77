"""Compute page URLs and static-file output paths.

Examples
--------
>>> from sitecascade.pages import Page, PageSource
>>> from sitecascade.urls import get_url
>>> page = Page(src=PageSource(slug="hello", ext=".md"))
>>> get_url(page, pretty_urls=True, parent_path="/blog/")
'/blog/hello/'
>>> get_url(page, pretty_urls=False, parent_path="/blog/")
'/blog/hello.html'
>>> page.data["url"] = "./sub"
>>> get_url(page, pretty_urls=True, parent_path="/blog/")
'/blog/sub'
"""

from __future__ import annotations

import posixpath
import typing as typ
from urllib.parse import quote

from .errors import InvalidUrlValueError

if typ.TYPE_CHECKING:
    from .entries import Entry
    from .pages import Page

OutputRule = str | typ.Callable[[str], str] | None

# Characters left untouched by JavaScript's encodeURI, besides alphanumerics.
_URI_SAFE = ";,/?:@&=+$-_.!~*'()#"
_INDEX_HTML = "/index.html"


def join_path(*parts: str) -> str:
    """Join and normalize POSIX path segments, keeping a trailing slash."""
    joined = "/".join(part for part in parts if part)
    if not joined:
        return "."
    normalized = posixpath.normpath(joined)
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    if joined.endswith("/") and not normalized.endswith("/"):
        normalized += "/"
    return normalized


def normalize_path(path: str) -> str:
    """Return ``path`` as an absolute POSIX path without a trailing slash."""
    normalized = join_path("/", path.replace("\\", "/"))
    if len(normalized) > 1:
        normalized = normalized.rstrip("/")
    return normalized


def to_output_path(path: str) -> str:
    """Return ``path`` relative to the output root (no leading slash)."""
    return normalize_path(path).lstrip("/")


def normalize_url(url: str) -> str:
    """Percent-encode ``url`` and collapse a trailing ``/index.html``."""
    encoded = quote(url, safe=_URI_SAFE)
    if encoded.endswith(_INDEX_HTML):
        return encoded[: -len(_INDEX_HTML) + 1]
    return encoded


def _resolve_string(page: Page, url: str, parent_path: str) -> str:
    if url.startswith(("./", "../")):
        return normalize_url(join_path(parent_path, url))
    if url.startswith("/"):
        return normalize_url(url)
    msg = 'The url variable must start with "/", "./" or "../"'
    raise InvalidUrlValueError(msg, page=page, value=url)


def get_url(page: Page, *, pretty_urls: bool, parent_path: str) -> str | typ.Literal[False]:
    """Return the final URL of ``page``.

    Parameters
    ----------
    page : Page
        Page whose ``data["url"]`` and source slug drive the result.
    pretty_urls : bool
        Emit directory-style URLs (``/blog/hello/``) instead of ``.html``.
    parent_path : str
        Output path of the directory containing the page.

    Returns
    -------
    str | Literal[False]
        The URL, or ``False`` when the page must not be written.

    Raises
    ------
    InvalidUrlValueError
        If the url value (or a url function's result) is neither ``False`` nor
        a string starting with ``/``, ``./`` or ``../``.
    """
    url = page.data.get("url")
    if url is False:
        return False

    if callable(url):
        url = url(page)
        if url is False:
            return False

    if isinstance(url, str):
        return _resolve_string(page, url, parent_path)

    if url is not None:
        msg = (
            "If a url is specified, it should either be a string, or a function "
            f"which returns a string. The provided url is of type: {type(url).__name__}."
        )
        raise InvalidUrlValueError(msg, page=page, value=url)

    derived = join_path(parent_path, page.src.slug)
    if page.src.asset:
        return derived + page.src.ext
    if pretty_urls:
        if posixpath.basename(derived) == "index":
            return join_path(posixpath.dirname(derived), "/")
        return join_path(derived, "/")
    return f"{derived}.html"


def get_output_path(entry: Entry, path: str, dest: OutputRule = None) -> str:
    """Return the output-root-relative destination of a static ``entry``.

    ``path`` is the output path of the directory holding the entry. A string
    ``dest`` is used verbatim; a callable receives the mirrored path.
    """
    mirrored = to_output_path(join_path(path, entry.name))
    if callable(dest):
        return to_output_path(dest(mirrored))
    if isinstance(dest, str):
        return to_output_path(dest)
    return mirrored


__all__ = [
    "OutputRule",
    "get_output_path",
    "get_url",
    "join_path",
    "normalize_path",
    "normalize_url",
    "to_output_path",
]
