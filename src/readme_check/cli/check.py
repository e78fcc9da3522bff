from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Annotated, TypeVar

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from readme_check.core.check import check_directory, check_manifest_file, check_markdown_file, check_tree
from readme_check.models import FileReport
from readme_check.settings import LintSettings

console = Console()
error_console = Console(stderr=True)

T = TypeVar("T")


def _render_reports(reports: Sequence[FileReport]) -> None:
    table = Table(show_lines=False)
    for header in ("path", "line", "message"):
        table.add_column(header)
    count = 0
    for report in reports:
        for diagnostic in sorted(report.diagnostics, key=lambda d: (d.line, d.message)):
            table.add_row(escape(report.path), str(diagnostic.line), escape(diagnostic.message))
            count += 1
    if count:
        console.print(table)
    console.print(f"({count} diagnostics in {len(reports)} files)")


def _run(action: Callable[[], T]) -> T:
    """Run a check, turning configuration and I/O errors into exit code 2."""
    try:
        return action()
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        error_console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(2) from None


def _finish(reports: Sequence[FileReport]) -> None:
    _render_reports(reports)
    if any(report.diagnostics for report in reports):
        raise typer.Exit(1)


def file(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Markdown file to check.")],
) -> None:
    """Check the structure of one Markdown file."""
    settings: LintSettings = ctx.obj
    _finish([_run(lambda: check_markdown_file(path, settings))])


def manifest(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Build manifest (build.properties) to check.")],
) -> None:
    """Check the include list of a build manifest."""
    settings: LintSettings = ctx.obj
    _finish([_run(lambda: check_manifest_file(path, settings))])


def directory(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Directory holding the documentation file and build manifest.")],
    with_manifest: Annotated[bool, typer.Option("--manifest/--no-manifest", help="Also check the manifest.")] = True,
) -> None:
    """Check the documentation file and build manifest of one directory."""
    settings: LintSettings = ctx.obj
    _finish(_run(lambda: check_directory(path, settings, include_manifest=with_manifest)))


def tree(
    ctx: typer.Context,
    root: Annotated[Path, typer.Argument(help="Root of the documentation tree.")] = Path("."),
    with_manifest: Annotated[bool, typer.Option("--manifest/--no-manifest", help="Also check manifests.")] = True,
) -> None:
    """Check every documentation file under a directory tree."""
    settings: LintSettings = ctx.obj
    result = _run(lambda: check_tree(root, settings, include_manifest=with_manifest))
    _render_reports(result.reports)
    for failure in result.failures:
        error_console.print(f"[red]{escape(f'{failure.path}: {failure.error}')}[/red]", soft_wrap=True)
    if result.failures:
        raise typer.Exit(2)
    if any(report.diagnostics for report in result.reports):
        raise typer.Exit(1)
