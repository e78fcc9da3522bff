import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from readme_check.core import manifest
from readme_check.core.rules import header_exception, lint_markdown
from readme_check.core.sinks import ListSink
from readme_check.models import CheckFailure, FileReport, TreeReport
from readme_check.settings import LintSettings

logger = logging.getLogger(__name__)


def check_markdown_file(path: str | Path, settings: LintSettings) -> FileReport:
    file_path = Path(path)
    content = file_path.read_text(encoding="utf-8")

    sink = ListSink()
    lint_markdown(content, file_path.name, sink, header_exception(settings.header_exception_pattern))
    return FileReport(path=str(file_path), diagnostics=sink.diagnostics)


def descriptor_paths(directory: Path, folder_name: str) -> list[str]:
    """Return the files under ``directory/folder_name`` relative to ``directory``."""
    folder = directory / folder_name
    if not folder.is_dir():
        return []
    return sorted(p.relative_to(directory).as_posix() for p in folder.rglob("*") if p.is_file())


def check_manifest_file(path: str | Path, settings: LintSettings) -> FileReport:
    manifest_path = Path(path)
    try:
        content = manifest_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise FileNotFoundError(f"Build manifest not found: {manifest_path}") from None

    diagnostics = manifest.check(
        content,
        settings.documentation_file_name,
        settings.ancillary_folder_name,
        required_paths=descriptor_paths(manifest_path.parent, settings.descriptor_folder_name),
        include_key=settings.include_key,
    )
    return FileReport(path=str(manifest_path), diagnostics=diagnostics)


def check_directory(directory: str | Path, settings: LintSettings, include_manifest: bool = True) -> list[FileReport]:
    """Check the documentation file of a directory and, optionally, its build manifest."""
    base = Path(directory)
    reports = [check_markdown_file(base / settings.documentation_file_name, settings)]
    if include_manifest:
        reports.append(check_manifest_file(base / settings.manifest_file_name, settings))
    return reports


def find_documentation_files(root: str | Path, settings: LintSettings) -> list[Path]:
    return sorted(p for p in Path(root).rglob(settings.documentation_file_name) if p.is_file())


def check_tree(root: str | Path, settings: LintSettings, include_manifest: bool = True) -> TreeReport:
    """Check every documentation file under ``root`` on a worker pool.

    Each directory is checked independently: a directory that cannot be checked
    (missing manifest, unreadable file) is recorded as a failure and the other
    directories' reports are kept. Reports and failures are sorted by path.
    """
    directories = [path.parent for path in find_documentation_files(root, settings)]
    logger.info("Checking %d documentation file(s) under %s", len(directories), root)

    result = TreeReport()
    with ThreadPoolExecutor(max_workers=settings.workers) as pool:
        futures = {
            pool.submit(check_directory, directory, settings, include_manifest): directory for directory in directories
        }
        for future in as_completed(futures):
            directory = futures[future]
            try:
                result.reports.extend(future.result())
            except (OSError, UnicodeDecodeError) as exc:
                logger.error("Could not check %s: %s", directory, exc)
                result.failures.append(CheckFailure(path=str(directory), error=str(exc)))

    result.reports.sort(key=lambda report: report.path)
    result.failures.sort(key=lambda failure: failure.path)
    logger.info(
        "Finished checking %s: %d diagnostic(s), %d failure(s)",
        root,
        sum(len(report.diagnostics) for report in result.reports),
        len(result.failures),
    )
    return result
