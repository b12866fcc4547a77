"""Exceptions raised while building a site.

Every error raised by the build core derives from :class:`CascadeError` so
callers can catch the whole family at once. Loader, parser and filter errors
are never wrapped; they reach the caller unchanged.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from .pages import Page


class CascadeError(RuntimeError):
    """Base class for fatal build errors."""


class ComponentNotFoundError(CascadeError):
    """Raised when an accessor lookup names a component that does not exist."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Component "{name}" not found')


class InvalidUrlValueError(CascadeError):
    """Raised when a page's ``url`` value has the wrong type or shape."""

    def __init__(self, message: str, *, page: Page, value: object) -> None:
        self.page = page
        self.value = value
        super().__init__(message)


class InvalidDateError(CascadeError):
    """Raised when an explicit ``date`` string cannot be parsed."""

    def __init__(self, value: str, source: str | None = None) -> None:
        self.value = value
        self.source = source
        super().__init__(f"Invalid date: {value} ({source})")


__all__ = [
    "CascadeError",
    "ComponentNotFoundError",
    "InvalidDateError",
    "InvalidUrlValueError",
]
