"""Unit tests for the Markdown structural rules."""

from collections import Counter

import pytest

from readme_check.core.lines import LineIndex
from readme_check.core.ports.locator import LineLocator
from readme_check.core.rules import (
    EMPTY_OR_UNCLOSED_CODE,
    HEADER_AT_END_OF_FILE,
    MISSING_LINE_AFTER_CODE,
    MISSING_LINE_AFTER_HEADER,
    MISSING_LINE_AFTER_LIST,
    MISSING_LINE_BEFORE_CODE,
    MISSING_LINE_BEFORE_LIST,
    header_exception,
    is_link_header,
    lint_markdown,
)
from readme_check.core.sinks import ListSink
from readme_check.models import Header


def _lint(
    content: str, pattern: str | None = r"^[^\w\s]+$", locate: LineLocator | None = None
) -> list[tuple[int, str]]:
    sink = ListSink()
    kwargs = {"locate": locate} if locate is not None else {}
    lint_markdown(content, "README.md", sink, header_exception(pattern), **kwargs)
    return [(d.line, d.message) for d in sink.diagnostics]


def _never_found(line_index: LineIndex, searched_text: str, start_hint: int) -> int | None:
    return None


class TestHeaderRules:
    def test_header_followed_by_text(self) -> None:
        assert _lint("# Title\nSome text") == [(1, MISSING_LINE_AFTER_HEADER)]

    def test_header_followed_by_blank_line(self) -> None:
        assert _lint("# Title\n\nSome text") == []

    def test_header_followed_by_whitespace_only_line(self) -> None:
        assert _lint("# Title\n   \nSome text") == []

    def test_reports_the_header_line(self) -> None:
        content = "# Title\n\nIntro text.\n\n## Usage\nRun it.\n"
        assert _lint(content) == [(5, MISSING_LINE_AFTER_HEADER)]

    def test_header_at_end_of_file(self) -> None:
        content = "# Title\n\nIntro\n\nMore intro\n\n# Final Header"
        assert _lint(content) == [(7, HEADER_AT_END_OF_FILE)]

    def test_header_at_end_followed_by_blank_lines(self) -> None:
        assert _lint("Intro\n\n## Last\n\n\n") == [(3, HEADER_AT_END_OF_FILE)]

    def test_exempt_header_at_end_of_file(self) -> None:
        assert _lint("Intro\n\n# ***\n") == []

    def test_exemption_can_be_disabled(self) -> None:
        assert _lint("Intro\n\n# ***\n", pattern=None) == [(3, HEADER_AT_END_OF_FILE)]

    def test_link_header_at_end_of_file(self) -> None:
        assert _lint("Intro\n\n# [Project](https://example.org)\n") == []

    def test_link_header_followed_by_text(self) -> None:
        assert _lint("## [Docs](docs/index.md)\nSee the docs.\n") == []

    def test_repeated_header_text_uses_the_right_line(self) -> None:
        content = "Setup\n\n# Setup\nInstall it.\n"
        assert _lint(content) == [(3, MISSING_LINE_AFTER_HEADER)]

    def test_setext_header_followed_by_text(self) -> None:
        content = "Title\n=====\nText right below\n"
        assert _lint(content) == [(1, MISSING_LINE_AFTER_HEADER)]


class TestListRules:
    def test_text_right_before_list(self) -> None:
        content = "Intro line\n- one\n- two\n\nOutro\n"
        assert _lint(content) == [(1, MISSING_LINE_BEFORE_LIST)]

    def test_text_right_after_list(self) -> None:
        content = "Intro\n\n- one\n- two\n# Next\n\nText\n"
        assert _lint(content) == [(5, MISSING_LINE_AFTER_LIST)]

    def test_list_at_beginning_of_file(self) -> None:
        assert _lint("- one\n- two\n\nText\n") == []

    def test_list_at_end_of_file(self) -> None:
        assert _lint("Intro\n\n- one\n- two\n") == []

    def test_one_element_list(self) -> None:
        assert _lint("Intro\n\n- only\n\nOutro\n") == []

    def test_multiline_list_items(self) -> None:
        content = "Intro\n\n- first item\n  continues here\n- second item\n  also continues\n\nOutro\n"
        assert _lint(content) == []

    def test_separated_list_items(self) -> None:
        content = "Intro\n\n- first\n\n- second\n\n- third\n\nOutro\n"
        assert _lint(content) == []

    def test_emphasized_list_element(self) -> None:
        assert _lint("Intro\n\n- *italic* item\n- **bold** item\n\nOutro\n") == []

    def test_code_formatted_list_element(self) -> None:
        assert _lint("Intro\n\n`- not a list`\n\nOutro\n") == []

    def test_list_inside_code_block(self) -> None:
        assert _lint("Intro\n\n```\n- one\n- two\n```\n\nOutro\n") == []


class TestCodeRules:
    def test_text_around_code_block(self) -> None:
        content = "Intro\n```\ncode\n```\nOutro\n"
        assert Counter(_lint(content)) == Counter([(1, MISSING_LINE_BEFORE_CODE), (5, MISSING_LINE_AFTER_CODE)])

    def test_code_block_at_beginning_of_file(self) -> None:
        assert _lint("```\ncode\n```\n\nText\n") == []

    def test_code_block_at_end_of_file(self) -> None:
        assert _lint("Text\n\n```\ncode\n```\n") == []

    def test_empty_lined_code_block(self) -> None:
        assert _lint("Text\n\n```\n\n\n```\n\nMore\n") == []

    def test_empty_code_block(self) -> None:
        assert _lint("```\n```\n\nText\n") == [(1, EMPTY_OR_UNCLOSED_CODE)]

    def test_unclosed_code_block(self) -> None:
        assert _lint("Intro\n\n```\nsome code\n") == [(3, EMPTY_OR_UNCLOSED_CODE)]

    def test_only_opening_fence(self) -> None:
        assert _lint("```") == [(1, EMPTY_OR_UNCLOSED_CODE)]

    def test_opening_fence_on_unterminated_last_line(self) -> None:
        assert _lint("Intro\n\n```") == [(3, EMPTY_OR_UNCLOSED_CODE)]

    def test_complicated_code_blocks(self) -> None:
        content = (
            "# Title\n"
            "\n"
            "Example:\n"
            "\n"
            "````markdown\n"
            "```\n"
            "nested fence\n"
            "```\n"
            "````\n"
            "\n"
            "~~~xml\n"
            "<thing/>\n"
            "~~~\n"
            "\n"
            "Done.\n"
        )
        assert _lint(content) == []


class TestFileRules:
    @pytest.mark.parametrize("content", ["", "\n\n", "   \n\t\n  "])
    def test_empty_file(self, content: str) -> None:
        assert _lint(content) == [(0, "The file README.md should not be empty.")]

    def test_valid_markdown(self) -> None:
        content = (
            "# Binding\n"
            "\n"
            "This binding integrates things.\n"
            "\n"
            "## Supported Things\n"
            "\n"
            "- thing one\n"
            "- thing two\n"
            "\n"
            "## Configuration\n"
            "\n"
            "```\n"
            "Thing binding:thing:id [ host=\"1.2.3.4\" ]\n"
            "```\n"
            "\n"
            "That's all.\n"
        )
        assert _lint(content) == []

    def test_is_idempotent(self) -> None:
        content = "# Title\nText\n- item\nMore\n```\n"
        assert Counter(_lint(content)) == Counter(_lint(content))


class TestLocatorMiss:
    def test_header_at_end_degrades_to_line_zero(self) -> None:
        assert _lint("Intro\n\n# End\n", locate=_never_found) == [(0, HEADER_AT_END_OF_FILE)]

    def test_unclosed_code_degrades_to_line_zero(self) -> None:
        assert _lint("Intro\n\n```\n", locate=_never_found) == [(0, EMPTY_OR_UNCLOSED_CODE)]

    def test_spacing_rules_are_skipped(self) -> None:
        assert _lint("# Title\nText\n- item\n", locate=_never_found) == []


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("[Project](https://example.org)", True),
        ("[Project][ref]", True),
        ("<https://example.org>", True),
        ("Project", False),
        ("See [Project](https://example.org)", False),
    ],
)
def test_is_link_header(text: str, expected: bool) -> None:
    assert is_link_header(Header(level=1, text=text, source=f"# {text}")) is expected


def test_header_exception_predicate() -> None:
    predicate = header_exception(r"^Changelog$")
    assert predicate(Header(level=2, text="Changelog", source="## Changelog"))
    assert not predicate(Header(level=2, text="Usage", source="## Usage"))
