import re

from readme_check.core.lines import LineIndex

# Block-level decoration that may precede the text of a line: block quote markers,
# header hashes, bullets, ordered-list markers and task boxes.
_LEADING_DECORATION = re.compile(r"^(?:>\s*|#{1,6}(?=\s|$)\s*|[-*+](?=\s|$)\s*|\d{1,9}[.)](?=\s|$)\s*|\[[ xX]\]\s+)+")
_TRAILING_HASHES = re.compile(r"\s+#+$")


def strip_decoration(text: str) -> str:
    stripped = text.strip()
    stripped = _LEADING_DECORATION.sub("", stripped)
    stripped = _TRAILING_HASHES.sub("", stripped)
    return stripped.strip()


def locate(line_index: LineIndex, searched_text: str, start_hint: int) -> int | None:
    """Return the 0-based index of the first line at or after ``start_hint`` containing ``searched_text``.

    Returns ``None`` when no such line exists. Never searches before the hint.
    """
    needle = strip_decoration(searched_text) or searched_text.strip()
    start = max(start_hint, 0)
    for index in range(start, line_index.line_count()):
        line = line_index.line_at(index)
        if needle in strip_decoration(line) or needle in line:
            return index
    return None
