"""
CLI entrypoint.

doctor: print the effective settings.
pages:  list registered page objects (optionally as locator trees).
audit:  open one page in a real browser and report which locators resolve.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from ..core import registry
from ..core.component import is_component, members
from ..core.controller.audit import Auditor
from ..core.logging import configure_logging
from ..core.session import Session
from ..core.settings import settings
from ..io.playwright_driver import PlaywrightDriver
from ..reporting.schemas import AuditReport
from ..reporting.writer import write_report

import pagekit.sites.contact  # noqa: F401  registers pages
import pagekit.sites.gallery  # noqa: F401

app = typer.Typer(help="pagekit CLI")
console = Console()


@app.callback()
def _setup() -> None:
    configure_logging(settings)


@app.command("doctor")
def doctor() -> None:
    """Environment check: print key settings."""
    console.print("[bold green]pagekit[/] environment")
    console.print(f"- base url: {settings.base_url}")
    console.print(f"- headless: {settings.headless}")
    console.print(f"- timeout:  {settings.default_timeout_ms}ms (poll every {settings.poll_interval_ms}ms)")
    console.print(f"- window:   {settings.window_width}x{settings.window_height}")
    console.print(f"- artifacts: {settings.artifacts_dir}")


def _add_members(node: Tree, comp: object) -> None:
    for name, _attr, member in members(comp):
        if is_component(member):
            branch = node.add(f"[bold]{name}[/] [dim]{member.container.describe()}[/]")
            _add_members(branch, member)
        else:
            node.add(f"{name} [dim]{member.describe()}[/]")


@app.command("pages")
def pages(tree: bool = typer.Option(False, "--tree", help="Show each page's locator tree")) -> None:
    """List registered page objects."""
    registered = registry.list_pages()
    if tree:
        for meta in registered.values():
            root = Tree(f"[bold cyan]{meta.name}[/] {meta.relative_url}")
            _add_members(root, meta.build())
            console.print(root)
        return

    table = Table(title="Pages", show_header=True, header_style="bold")
    table.add_column("name")
    table.add_column("relative url")
    table.add_column("class", style="dim")
    for meta in registered.values():
        table.add_row(meta.name, meta.relative_url, meta.page_cls.__name__)
    console.print(table)


def _render(report: AuditReport) -> None:
    table = Table(title=f"Audit: {report.page} ({report.url})", show_header=True, header_style="bold")
    table.add_column("path")
    table.add_column("selector", style="dim")
    table.add_column("matches", justify="right")
    table.add_column("result")
    table.add_column("detail")
    for item in report.items:
        if not item.found:
            result = "[red]MISSING[/]"
        elif not item.visible:
            result = "[yellow]HIDDEN[/]"
        else:
            result = "[green]OK[/]"
        table.add_row(item.path, item.selector, str(item.matches), result, item.detail)
    console.print(table)


@app.command("audit")
def audit(
    name: str = typer.Argument(..., help="Registered page name"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Override PK_BASE_URL"),
    headless: bool = typer.Option(settings.headless, "--headless/--no-headless"),
    out_dir: Path = typer.Option(settings.artifacts_dir, "--out-dir", help="Report directory"),
) -> None:
    """Open a page and report which of its locators resolve right now."""
    try:
        meta = registry.get_page(name)
    except KeyError as ke:
        typer.secho(f"[audit] {ke.args[0]}", fg=typer.colors.RED)
        raise typer.Exit(code=2)

    async def _run() -> AuditReport:
        driver = PlaywrightDriver(
            headless=headless,
            default_timeout_ms=settings.navigation_timeout_ms,
            viewport=(settings.window_width, settings.window_height),
        )
        await driver.start()
        ctx = await driver.new_context()
        try:
            overrides = {"base_url": base_url} if base_url else {}
            session = Session.from_settings(driver, ctx, settings, **overrides)
            page = meta.build()
            await session.open(page)
            return await Auditor(artifacts_dir=out_dir).run(session, page, name=meta.name)
        finally:
            await driver.close_context(ctx)
            await driver.stop()

    report = asyncio.run(_run())
    _render(report)
    json_path, csv_path = write_report(report, out_dir)
    console.print(f"[bold green]Report written[/]: {json_path}  |  {csv_path}")
    if not report.ok:
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
