import asyncio
import contextlib
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from readme_check.core.check import check_directory
from readme_check.settings import LintSettings
from readme_check.watcher.watchfiles_adapter import WatchfilesWatcher

console = Console()


async def report_changes(directories: set[Path], settings: LintSettings, include_manifest: bool) -> None:
    """Re-check each changed directory in full and print its diagnostics."""
    for directory in sorted(directories):
        if not (directory / settings.documentation_file_name).is_file():
            continue
        try:
            reports = await asyncio.to_thread(check_directory, directory, settings, include_manifest)
        except (OSError, UnicodeDecodeError) as exc:
            console.print(f"[red]{escape(f'{directory}: {exc}')}[/red]")
            continue
        for report in reports:
            if not report.diagnostics:
                console.print(f"[green]OK[/green] {escape(report.path)}")
                continue
            for diagnostic in sorted(report.diagnostics, key=lambda d: (d.line, d.message)):
                location = escape(f"{report.path}:{diagnostic.line}")
                console.print(f"[yellow]{location}[/yellow] {escape(diagnostic.message)}")


def watch(
    ctx: typer.Context,
    root: Annotated[Path, typer.Argument(help="Directory to watch.")] = Path("."),
    with_manifest: Annotated[bool, typer.Option("--manifest/--no-manifest", help="Also check manifests.")] = True,
) -> None:
    """Re-check a bundle whenever its documentation file, manifest or descriptor files change."""
    settings: LintSettings = ctx.obj

    async def _on_change(directories: set[Path]) -> None:
        await report_changes(directories, settings, with_manifest)

    watcher = WatchfilesWatcher(
        root,
        {settings.documentation_file_name, settings.manifest_file_name},
        _on_change,
        folder_names={settings.descriptor_folder_name},
    )

    async def _run() -> None:
        await watcher.start()
        console.print(f"[green]Watching[/green] {root} (Ctrl+C to stop)")
        try:
            await asyncio.Event().wait()
        finally:
            await watcher.stop()

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_run())
