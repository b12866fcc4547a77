"""Cascading build core for static sites.

This package turns a scanned source tree into pages and static-file copy
instructions, cascading directory data and components down to every page.

Exports
-------
- ``BuildSession`` / ``create_session``: the build walker and its wiring.
- ``merge_data`` / ``merge_components``: the cascade merge functions.
- ``get_url`` / ``get_date`` / ``parse_date``: page resolution helpers.
- ``app`` / ``main``: the ``cascade`` command line.

Examples
--------
>>> from sitecascade import merge_data
>>> merge_data({"layout": "base"}, {"layout": "post"})
{'layout': 'post'}
"""

from __future__ import annotations

from .cli import app, main
from .components import Component, ComponentAccessor, ExtraCode, merge_components
from .data import merge_data
from .dates import get_date, parse_date
from .entries import Entry, EntryInfo, scan_directory
from .errors import (
    CascadeError,
    ComponentNotFoundError,
    InvalidDateError,
    InvalidUrlValueError,
)
from .pages import Page, PageSource, StaticFile
from .source import BuildSession, create_session
from .urls import get_url

__all__ = [
    "BuildSession",
    "CascadeError",
    "Component",
    "ComponentAccessor",
    "ComponentNotFoundError",
    "Entry",
    "EntryInfo",
    "ExtraCode",
    "InvalidDateError",
    "InvalidUrlValueError",
    "Page",
    "PageSource",
    "StaticFile",
    "app",
    "create_session",
    "get_date",
    "get_url",
    "main",
    "merge_components",
    "merge_data",
    "parse_date",
]
