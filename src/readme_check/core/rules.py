"""Spacing and placement rules for Markdown block nodes.

The engine makes a single forward pass over the nodes produced by
:func:`readme_check.core.parser.parse`. Each node's start line is recovered
with a ``LineLocator`` that scans forward from the line after the previous
node, and every finding goes to a ``DiagnosticSink`` as a 1-based line and a
message. Line 0 is used for findings that cannot be tied to a line.
"""

import logging
import re
from collections.abc import Callable, Sequence

from readme_check.core.lines import LineIndex
from readme_check.core.locator import locate as default_locate
from readme_check.core.parser import parse
from readme_check.core.ports.locator import LineLocator
from readme_check.core.ports.sink import DiagnosticSink
from readme_check.models import BlockNode, CodeBlock, Header, ListBlock

logger = logging.getLogger(__name__)

MISSING_LINE_AFTER_HEADER = "Missing an empty line after the Markdown header (#)."
HEADER_AT_END_OF_FILE = "There is a header at the end of the Markdown file. Please consider adding some content below."
MISSING_LINE_BEFORE_LIST = "The line before a Markdown list must be empty."
MISSING_LINE_AFTER_LIST = "The line after a Markdown list must be empty."
MISSING_LINE_BEFORE_CODE = "The line before code formatting section must be empty."
MISSING_LINE_AFTER_CODE = "The line after code formatting section must be empty."
EMPTY_OR_UNCLOSED_CODE = "There is an empty or unclosed code formatting section. Please correct it."
EMPTY_FILE = "The file {name} should not be empty."

_LINK_TEXT = re.compile(r"^(?:!?\[[^\]]*\](?:\([^)]*\)|\[[^\]]*\])|<[A-Za-z][A-Za-z0-9+.-]*:[^>\s]*>)$")

HeaderPredicate = Callable[[Header], bool]


def is_link_header(header: Header) -> bool:
    return _LINK_TEXT.match(header.text) is not None


def header_exception(pattern: str | None) -> HeaderPredicate:
    """Build the predicate exempting headers from the end-of-file rule."""
    if not pattern:
        return lambda _header: False
    compiled = re.compile(pattern)
    return lambda header: compiled.search(header.text) is not None


class MarkdownRules:
    def __init__(
        self,
        line_index: LineIndex,
        locate: LineLocator,
        sink: DiagnosticSink,
        is_exempt_header: HeaderPredicate | None = None,
    ) -> None:
        self._lines = line_index
        self._locate = locate
        self._sink = sink
        self._is_exempt_header = is_exempt_header or (lambda _header: False)

    def run(self, nodes: Sequence[BlockNode]) -> None:
        hint = 0
        seen_content = False
        for position, node in enumerate(nodes):
            following = nodes[position + 1] if position + 1 < len(nodes) else None
            start = self._find_start(node, hint)
            end = None if start is None else start + node.source.count("\n")

            if isinstance(node, Header):
                self._check_header(node, start, end, following)
            elif isinstance(node, ListBlock):
                self._check_list(start, end, seen_content, following)
            elif isinstance(node, CodeBlock):
                self._check_code(node, start, end, seen_content, following)

            seen_content = True
            if end is not None:
                hint = end + 1

    def _find_start(self, node: BlockNode, hint: int) -> int | None:
        first_line = node.source.split("\n", 1)[0]
        start = self._locate(self._lines, first_line, hint)
        if start is None:
            logger.debug("Could not locate %s block %r at or after line %d", node.kind, first_line, hint + 1)
        return start

    def _report(self, index: int | None, message: str) -> None:
        self._sink.log(0 if index is None else index + 1, message)

    def _check_header(self, header: Header, start: int | None, end: int | None, following: BlockNode | None) -> None:
        if is_link_header(header):
            return
        if following is None:
            if not self._is_exempt_header(header):
                self._report(start, HEADER_AT_END_OF_FILE)
            return
        if start is not None and end is not None and not self._lines.is_blank(end + 1):
            self._report(start, MISSING_LINE_AFTER_HEADER)

    def _check_list(
        self, start: int | None, end: int | None, seen_content: bool, following: BlockNode | None
    ) -> None:
        if start is None or end is None:
            return
        if seen_content and not self._lines.is_blank(start - 1):
            self._report(start - 1, MISSING_LINE_BEFORE_LIST)
        if following is not None and not self._lines.is_blank(end + 1):
            self._report(end + 1, MISSING_LINE_AFTER_LIST)

    def _check_code(
        self,
        block: CodeBlock,
        start: int | None,
        end: int | None,
        seen_content: bool,
        following: BlockNode | None,
    ) -> None:
        if block.fence and (not block.closed or not block.body_lines):
            self._report(start, EMPTY_OR_UNCLOSED_CODE)
        if start is None or end is None:
            return
        if seen_content and not self._lines.is_blank(start - 1):
            self._report(start - 1, MISSING_LINE_BEFORE_CODE)
        if following is not None and not self._lines.is_blank(end + 1):
            self._report(end + 1, MISSING_LINE_AFTER_CODE)


def lint_markdown(
    content: str,
    file_name: str,
    sink: DiagnosticSink,
    is_exempt_header: HeaderPredicate | None = None,
    locate: LineLocator = default_locate,
) -> None:
    """Run every Markdown rule over ``content`` and send findings to ``sink``."""
    if not content.strip():
        sink.log(0, EMPTY_FILE.format(name=file_name))
        return

    line_index = LineIndex.build(content)
    MarkdownRules(line_index, locate, sink, is_exempt_header).run(parse(content))
