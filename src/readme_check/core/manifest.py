import re
from collections.abc import Iterable
from dataclasses import dataclass

from readme_check.models import Diagnostic

DEFAULT_INCLUDE_KEY = "bin.includes"

DOCUMENTATION_FILE_INCLUDED = "{name} file must not be added to the {key} property"
ANCILLARY_FOLDER_INCLUDED = "The {name} folder must not be added to the {key} property"
DESCRIPTOR_NOT_INCLUDED = (
    "{path} isn't included in the build manifest. "
    "Good approach is to include all files by adding the {folder}/ value to the {key} property."
)

_KEY_SEPARATOR = re.compile(r"(?<!\\)[=:\s]")


@dataclass(frozen=True)
class ManifestEntries:
    properties: dict[str, str]
    includes: tuple[str, ...]


def _logical_lines(content: str) -> list[str]:
    """Join backslash-continued physical lines, dropping comments and blank lines."""
    logical: list[str] = []
    pending = ""
    for raw in content.splitlines():
        line = raw.lstrip()
        if not pending and (not line or line[0] in "#!"):
            continue
        continued = len(line) - len(line.rstrip("\\"))
        if continued % 2 == 1:
            pending += line[:-1]
            continue
        logical.append(pending + line)
        pending = ""
    if pending:
        logical.append(pending)
    return logical


def parse_manifest(content: str) -> dict[str, str]:
    """Parse Java-properties style ``key=value`` content."""
    properties: dict[str, str] = {}
    for line in _logical_lines(content):
        match = _KEY_SEPARATOR.search(line)
        if match is None:
            properties[line] = ""
            continue
        key = line[: match.start()]
        value = line[match.end() :].lstrip()
        if match.group() not in "=:" and value[:1] in ("=", ":"):
            value = value[1:].lstrip()
        properties[key] = value.strip()
    return properties


def _normalize(entry: str) -> str:
    entry = entry.strip()
    if entry.startswith("./"):
        entry = entry[2:]
    return entry.rstrip("/")


def read_entries(content: str, include_key: str = DEFAULT_INCLUDE_KEY) -> ManifestEntries:
    properties = parse_manifest(content)
    raw_value = properties.get(include_key, "")
    includes = tuple(entry.strip() for entry in raw_value.split(",") if entry.strip())
    return ManifestEntries(properties=properties, includes=includes)


def _is_covered(path: str, includes: Iterable[str]) -> bool:
    target = _normalize(path)
    for entry in includes:
        normalized = _normalize(entry)
        if not normalized or normalized == ".":
            continue
        if target == normalized or target.startswith(normalized + "/"):
            return True
    return False


def check(
    manifest_content: str,
    documentation_file_name: str,
    ancillary_folder_name: str,
    required_paths: Iterable[str] = (),
    include_key: str = DEFAULT_INCLUDE_KEY,
) -> list[Diagnostic]:
    """Cross-check the include list of a build manifest.

    Flags an explicitly listed documentation file or ancillary folder, and every
    required path that no include entry covers. All findings are at line 0.
    """
    entries = read_entries(manifest_content, include_key)
    normalized = {_normalize(entry) for entry in entries.includes}
    diagnostics: list[Diagnostic] = []

    if _normalize(documentation_file_name) in normalized:
        message = DOCUMENTATION_FILE_INCLUDED.format(name=documentation_file_name.upper(), key=include_key)
        diagnostics.append(Diagnostic(line=0, message=message))
    if _normalize(ancillary_folder_name) in normalized:
        message = ANCILLARY_FOLDER_INCLUDED.format(name=ancillary_folder_name, key=include_key)
        diagnostics.append(Diagnostic(line=0, message=message))

    for path in sorted(set(required_paths)):
        if not _is_covered(path, entries.includes):
            folder = _normalize(path).split("/", 1)[0]
            message = DESCRIPTOR_NOT_INCLUDED.format(path=path, folder=folder, key=include_key)
            diagnostics.append(Diagnostic(line=0, message=message))

    return diagnostics
