"""Shared fixtures for sitecascade tests.

Most tests write a real source folder under ``tmp_path`` and scan it with
:func:`sitecascade.entries.scan_directory`; the fixed clock and stub
timestamp oracle from ``tests._helpers`` keep dates deterministic.
"""

from __future__ import annotations

import typing as typ

import pytest

from sitecascade.entries import scan_directory
from sitecascade.source import BuildSession, create_session
from tests._helpers import FIXED_NOW, StubOracle, write_tree

if typ.TYPE_CHECKING:
    from pathlib import Path

    from sitecascade.pages import Page, StaticFile

BuildSite = typ.Callable[..., tuple["list[Page]", "list[StaticFile]"]]


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Return an empty source folder."""
    root = tmp_path / "src"
    root.mkdir()
    return root


@pytest.fixture
def oracle() -> StubOracle:
    return StubOracle()


@pytest.fixture
def session(oracle: StubOracle) -> BuildSession:
    """Return a session with the built-in loaders and deterministic dates."""
    return create_session(date_oracle=oracle, now=lambda: FIXED_NOW)


@pytest.fixture
def build_site(site_root: Path, session: BuildSession) -> BuildSite:
    """Write files, scan them and build with the shared session."""

    def _build(
        files: typ.Mapping[str, str], *filters: typ.Any
    ) -> tuple[list[Page], list[StaticFile]]:
        write_tree(site_root, files)
        return session.build(scan_directory(site_root), *filters)

    return _build
