from typing import Protocol

from readme_check.core.lines import LineIndex


class LineLocator(Protocol):
    def __call__(self, line_index: LineIndex, searched_text: str, start_hint: int) -> int | None: ...
