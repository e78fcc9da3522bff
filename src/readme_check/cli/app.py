import logging
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from readme_check.cli.check import directory, file, manifest, tree
from readme_check.cli.watch import watch
from readme_check.settings import get_settings

app = typer.Typer(
    name="readme-check",
    help="readme-check CLI — lint Markdown documentation and build manifests.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console(stderr=True)


@app.callback()
def configure(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
    doc_file: Annotated[str | None, typer.Option(help="Name of the documentation file.")] = None,
    doc_folder: Annotated[str | None, typer.Option(help="Name of the ancillary documentation folder.")] = None,
    manifest_file: Annotated[str | None, typer.Option(help="Name of the build manifest file.")] = None,
    header_exception: Annotated[
        str | None, typer.Option(help="Regex for headers allowed at the end of the file.")
    ] = None,
    workers: Annotated[int | None, typer.Option(help="Worker threads for tree checks.")] = None,
) -> None:
    """Configure logging and settings shared by all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    try:
        ctx.obj = get_settings(
            documentation_file_name=doc_file,
            ancillary_folder_name=doc_folder,
            manifest_file_name=manifest_file,
            header_exception_pattern=header_exception,
            workers=workers,
        )
    except ValidationError as exc:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(exc))}")
        raise typer.Exit(2) from None


app.command("file")(file)
app.command("manifest")(manifest)
app.command("dir")(directory)
app.command("tree")(tree)
app.command("watch")(watch)


def main() -> None:
    app()
