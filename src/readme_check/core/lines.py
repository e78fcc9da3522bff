import re
from dataclasses import dataclass

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class LineIndex:
    """Ordered lines of one file, addressed by 0-based index."""

    lines: tuple[str, ...]

    @classmethod
    def build(cls, raw_content: str) -> "LineIndex":
        if not raw_content:
            return cls(lines=())
        parts = _LINE_BREAK.split(raw_content)
        # A terminator at the very end closes the last line rather than opening a new one.
        if parts[-1] == "":
            parts.pop()
        return cls(lines=tuple(parts))

    def line_count(self) -> int:
        return len(self.lines)

    def line_at(self, index: int) -> str:
        return self.lines[index]

    def is_blank(self, index: int) -> bool:
        """Whitespace-only lines and indices outside the file count as blank."""
        if index < 0 or index >= len(self.lines):
            return True
        return self.lines[index].strip() == ""
