"""Cyclopts CLI entrypoint for building sitecascade sites.

The ``cascade`` console script loads ``site.yaml``, scans the source folder,
runs the build walker and either prints the resulting plan or writes the
pages and static files into the output folder.

Examples
--------
Print what a build would produce:

>>> from sitecascade.cli import app
>>> app(["plan", "--config", "config/site.yaml"])  # doctest: +SKIP

Build the site into ``_site``:

>>> from sitecascade.cli import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

import json
import shutil
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import load_site_config
from .entries import scan_directory
from .loaders import ComponentLoader
from .logging import configure_logging, get_logger
from .renderer import MarkdownRenderer, render_pages
from .source import create_session

if typ.TYPE_CHECKING:
    from .config import SiteConfig
    from .pages import Page, StaticFile

DEFAULT_CONFIG = Path("config/site.yaml")

app = App(name="cascade", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]
logger = get_logger("cli")


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _run_build(site: SiteConfig) -> tuple[list[Page], list[StaticFile], list[Page]]:
    session = create_session(site)
    tree = scan_directory(site.src)
    pages, static_files = session.build(tree)
    loader = session.component_loader
    templates = loader.env if isinstance(loader, ComponentLoader) else None
    render_pages(pages, MarkdownRenderer(site.pygments_style), templates)
    return pages, static_files, session.get_components_extra_code()


def page_output_path(dest: Path, url: str) -> Path:
    """Return the file that serves ``url`` under ``dest``."""
    relative = url.lstrip("/")
    if not relative or url.endswith("/"):
        relative = f"{relative}index.html"
    return dest / relative


def _manifest(pages: list[Page], static_files: list[StaticFile]) -> dict[str, typ.Any]:
    return {
        "pages": [
            {
                "url": page.data.get("url"),
                "source": page.src.entry.path if page.src.entry else None,
                "date": page.data["date"].isoformat() if page.data.get("date") else None,
            }
            for page in pages
        ],
        "static": [
            {"source": static.entry.path, "output": static.output_path}
            for static in static_files
        ],
    }


@app.command(help="Print the pages and static files a build would produce.")
def plan(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    json_output: typ.Annotated[
        bool, Parameter(name="--json", help="Emit a JSON manifest")
    ] = False,
    verbose: bool = False,
) -> None:
    """Build the site in memory and print its plan.

    Parameters
    ----------
    config : Path, optional
        Path to the ``site.yaml`` configuration file (overridable via
        ``INPUT_CONFIG``).
    json_output : bool, optional
        Print a JSON manifest instead of one line per output.
    verbose : bool, optional
        Log every walker decision at debug level.
    """
    configure_logging(verbose=verbose)
    site = load_site_config(config)
    pages, static_files, extra_pages = _run_build(site)
    all_pages = pages + extra_pages
    if json_output:
        print(json.dumps(_manifest(all_pages, static_files), indent=2))
        return
    for page in all_pages:
        source = page.src.entry.path if page.src.entry else "(generated)"
        print(f"page {page.data.get('url')} <- {source}")
    for static in static_files:
        print(f"copy {static.output_path} <- {static.entry.path}")


@app.command(help="Build the site and write it to the output folder.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    dest: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="INPUT_DEST"),
    ] = None,
    verbose: bool = False,
) -> None:
    """Build the site described by ``config`` and write every output file.

    Pages whose url is ``False`` are built but not written.
    """
    configure_logging(verbose=verbose)
    site = load_site_config(config)
    out_dir = dest or site.dest
    pages, static_files, extra_pages = _run_build(site)

    for page in pages + extra_pages:
        url = page.data.get("url")
        if not url:
            logger.debug("not writing %s: no url", page.src.path)
            continue
        target = page_output_path(out_dir, url)
        target.parent.mkdir(parents=True, exist_ok=True)
        content = page.content or ""
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content, encoding="utf-8")
        print(f"wrote {_format_path(target)}")

    for static in static_files:
        target = out_dir / static.output_path
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(static.entry.src, target)
        print(f"copied {_format_path(target)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``cascade`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
