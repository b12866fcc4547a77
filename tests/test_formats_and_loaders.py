"""Tests for the format registry and the ``_data``/``_components`` loaders."""

from __future__ import annotations

import typing as typ

import pytest

from sitecascade.entries import scan_directory
from sitecascade.formats import Format, Formats, default_formats, parse_front_matter
from sitecascade.loaders import ComponentLoader, DataLoader
from tests._helpers import write_tree

if typ.TYPE_CHECKING:
    from pathlib import Path


def test_search_prefers_longest_extension() -> None:
    formats = Formats()
    formats.set(Format(ext=".html", loader=lambda path: {}))
    formats.set(Format(ext=".tmpl.html", copy=True))
    assert formats.search("/a/page.tmpl.html").ext == ".tmpl.html"
    assert formats.search("/a/PAGE.HTML").ext == ".html"
    assert formats.search("/a/page.txt") is None


def test_front_matter_is_split_from_body() -> None:
    data = parse_front_matter("---\ntitle: Hi\ntags: [a, b]\n---\n# Heading\n")
    assert data == {"title": "Hi", "tags": ["a", "b"], "content": "# Heading\n"}


def test_text_without_front_matter_is_all_content() -> None:
    assert parse_front_matter("plain --- text\n") == {"content": "plain --- text\n"}


def test_front_matter_must_be_a_mapping() -> None:
    with pytest.raises(TypeError):
        parse_front_matter("---\n- a\n---\nbody")


def test_data_loader_reads_every_builtin_format(tmp_path: Path) -> None:
    root = write_tree(
        tmp_path / "site",
        {
            "_data/a.yml": "value: 1\n",
            "_data/b.json": '{"value": 2}',
            "_data/c.toml": "value = 3\n[nested]\nflag = true\n",
            "_data/.ignored.yml": "value: 0\n",
            "_data/readme.txt": "not data",
        },
    )
    tree = scan_directory(root)
    data = DataLoader(default_formats()).load(tree.children["_data"])
    assert data == {
        "a": {"value": 1},
        "b": {"value": 2},
        "c": {"value": 3, "nested": {"flag": True}},
    }


def test_data_loader_ignores_files_without_a_loader(tmp_path: Path) -> None:
    root = write_tree(tmp_path / "site", {"_data.yml.bak": "x: 1", "_data.txt": "note"})
    tree = scan_directory(root)
    loader = DataLoader(default_formats())
    assert loader.load(tree.children["_data.yml.bak"]) == {}
    assert loader.load(tree.children["_data.txt"]) == {}


def test_component_loader_builds_nested_registry(tmp_path: Path) -> None:
    root = write_tree(
        tmp_path / "site",
        {
            "_components/Alert.jinja": "<p>{{ site }}: {{ message }}</p>",
            "_components/alert.js": "console.log('alert')",
            "_components/forms/Input.html": "<input name={{ name }}>",
            "_components/notes.txt": "ignored",
        },
    )
    tree = scan_directory(root)
    registry = ComponentLoader().load(tree.children["_components"], {"site": "Demo"})
    assert set(registry) == {"alert", "forms"}
    alert = registry["alert"]
    assert alert.js == "console.log('alert')"
    assert alert.css is None
    assert alert.render({"message": "<hi>"}) == "<p>Demo: &lt;hi&gt;</p>"
    assert registry["forms"]["input"].render({"name": "q"}) == "<input name=q>"
