"""Unit tests for path-scoped data, pages and components."""

from __future__ import annotations

from sitecascade.components import Component
from sitecascade.scopes import ScopeRegistry


def test_scoped_data_merges_and_is_copied() -> None:
    scopes = ScopeRegistry()
    scopes.add_data("/blog/", {"tags": ["a"], "mergedKeys": {"tags": "array"}})
    scopes.add_data("blog", {"tags": ["b"], "layout": "post"})

    data = scopes.data_for("/blog")
    assert data["tags"] == ["a", "b"], "repeated registrations should merge"
    assert data["layout"] == "post"

    data["layout"] = "changed"
    assert scopes.data_for("/blog")["layout"] == "post", "callers must get a copy"


def test_injected_pages_are_returned_in_registration_order() -> None:
    scopes = ScopeRegistry()
    scopes.add_page("/", {"url": "/first/"})
    scopes.add_page("/", {"url": "/second/"})

    pages = scopes.pages_for("/")
    assert [page["url"] for page in pages] == ["/first/", "/second/"]
    assert scopes.pages_for("/missing") == []


def test_scoped_components_later_registration_wins() -> None:
    scopes = ScopeRegistry()
    first = Component(name="button", render=lambda props: "one")
    second = Component(name="button", render=lambda props: "two")
    scopes.add_components("/docs", {"button": first})
    scopes.add_components("/docs/", {"button": second})

    registry = scopes.components_for("/docs")
    assert registry is not None
    assert registry["button"] is second
    assert scopes.components_for("/blog") is None
