import re
from typing import cast

from tree_sitter import Node
from tree_sitter_language_pack import SupportedLanguage, get_parser

from readme_check.core.lines import _LINE_BREAK
from readme_check.models import BlockNode, CodeBlock, Header, ListBlock, ListItem, Paragraph

_CONTAINER_TYPES = frozenset({"document", "section"})
_HEADING_TYPES = frozenset({"atx_heading", "setext_heading"})
_CODE_TYPES = frozenset({"fenced_code_block", "indented_code_block"})

_ATX_HEADING = re.compile(r"^\s{0,3}(#{1,6})(?:[ \t]+|$)(.*)$")
_ATX_CLOSING = re.compile(r"(?:^|[ \t]+)#+[ \t]*$")
_OPENING_FENCE = re.compile(r"^\s*(`{3,}|~{3,})(.*)$")
_LIST_MARKER = re.compile(r"^\s*(?:[-*+]|\d{1,9}[.)])(?:[ \t]+|$)(?:\[[ xX]\][ \t]+)?")


def _source_text(node: Node, source_bytes: bytes) -> str:
    """Return the node's literal text without leading or trailing blank lines."""
    text = source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="replace")
    lines = _LINE_BREAK.split(text)
    while lines and not lines[-1].strip():
        lines.pop()
    while lines and not lines[0].strip():
        lines.pop(0)
    return "\n".join(lines)


def _to_header(source: str) -> Header:
    lines = source.split("\n")
    match = _ATX_HEADING.match(lines[0])
    if match:
        text = _ATX_CLOSING.sub("", match.group(2)).strip()
        return Header(level=len(match.group(1)), text=text, source=source)
    # setext: content lines followed by a '=' or '-' underline
    level = 1 if lines[-1].strip().startswith("=") else 2
    text = " ".join(line.strip() for line in lines[:-1])
    return Header(level=level, text=text, source=source)


def _to_list_item(source: str) -> ListItem:
    lines = [line for line in source.split("\n") if line.strip()]
    if not lines:
        return ListItem(text="")
    first = _LIST_MARKER.sub("", lines[0], count=1)
    text = " ".join(part.strip() for part in [first, *lines[1:]] if part.strip())
    return ListItem(text=text, is_multiline=len(lines) > 1)


def _to_list(node: Node, source: str, source_bytes: bytes) -> ListBlock:
    items = [
        _to_list_item(_source_text(child, source_bytes)) for child in node.named_children if child.type == "list_item"
    ]
    return ListBlock(items=items, source=source)


def _to_code_block(node_type: str, source: str) -> CodeBlock:
    lines = source.split("\n")
    if node_type == "indented_code_block":
        return CodeBlock(fence="", body_lines=lines, closed=True, source=source)

    match = _OPENING_FENCE.match(lines[0])
    fence = match.group(1) if match else lines[0].strip()[:3]
    info = match.group(2).strip() if match else ""
    closing = re.compile(rf"^\s*{re.escape(fence[:1])}{{{len(fence)},}}\s*$")
    closed = len(lines) > 1 and closing.match(lines[-1]) is not None
    body_lines = lines[1:-1] if closed else lines[1:]
    return CodeBlock(fence=fence, info=info, body_lines=body_lines, closed=closed, source=source)


def _collect(node: Node, source_bytes: bytes, blocks: list[BlockNode]) -> None:
    for child in node.named_children:
        if child.type in _CONTAINER_TYPES:
            _collect(child, source_bytes, blocks)
            continue

        source = _source_text(child, source_bytes)
        if not source:
            continue

        if child.type in _HEADING_TYPES:
            blocks.append(_to_header(source))
        elif child.type == "list":
            blocks.append(_to_list(child, source, source_bytes))
        elif child.type in _CODE_TYPES:
            blocks.append(_to_code_block(child.type, source))
        else:
            blocks.append(Paragraph(text=" ".join(line.strip() for line in source.split("\n")), source=source))


def parse(raw_content: str) -> list[BlockNode]:
    """Parse Markdown into top-level block nodes in document order.

    Nodes carry their literal text only; line numbers are recovered later
    against the file's ``LineIndex``.
    """
    # some grammar versions read a fence on an unterminated last line as text
    if raw_content and not raw_content.endswith(("\n", "\r")):
        raw_content += "\n"
    parser = get_parser(cast(SupportedLanguage, "markdown"))
    source_bytes = raw_content.encode("utf-8")
    tree = parser.parse(source_bytes)

    blocks: list[BlockNode] = []
    _collect(tree.root_node, source_bytes, blocks)
    return blocks
