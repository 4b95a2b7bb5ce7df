"""Unit tests for the Markdown to JIRA markup translator."""

import pytest

from issue_sync.synchronize.markup import (
    BLOCK_RULES,
    DEFAULT_RULES,
    DELETED,
    EMPHASIS_PLACEHOLDER,
    HEADING_RULES,
    LINK_RULES,
    STRONG_PLACEHOLDER,
    TEXT_EFFECT_RULES,
    MarkupTranslator,
    github_to_jira,
    restore_placeholders,
)


@pytest.mark.parametrize(
    "markdown,expected",
    [
        pytest.param("# One", "h1. One", id="heading 1"),
        pytest.param("## Two", "h2. Two", id="heading 2"),
        pytest.param("### Three", "h3. Three", id="heading 3"),
        pytest.param("#### Four", "h4. Four", id="heading 4"),
        pytest.param("##### Five", "h5. Five", id="heading 5"),
        pytest.param("###### Six", "h6. Six", id="heading 6"),
        pytest.param("#NoSpace", "#NoSpace", id="hash without space is not a heading"),
        pytest.param("text\n## Middle\nmore", "text\nh2. Middle\nmore", id="heading between lines"),
    ],
)
def test_headings(markdown: str, expected: str) -> None:
    """Test that each heading level maps to the same JIRA heading level."""
    assert github_to_jira(markdown) == expected


@pytest.mark.parametrize(
    "markdown,expected",
    [
        pytest.param("***both***", "*_both_*", id="strong emphasis"),
        pytest.param("**bold**", "*bold*", id="strong asterisks"),
        pytest.param("__bold__", "*bold*", id="strong underscores"),
        pytest.param("*italic*", "_italic_", id="emphasis asterisk"),
        pytest.param("_italic_", "_italic_", id="emphasis underscore"),
        pytest.param("<cite>Source</cite>", "??Source??", id="citation"),
        pytest.param("~~gone~~", "-gone-", id="deleted single word"),
        pytest.param("~~two words gone~~", "-two words gone-", id="deleted several words"),
        pytest.param("<ins>added</ins>", "+added+", id="inserted"),
        pytest.param("x<sup>2</sup>", "x^2^", id="superscript"),
        pytest.param("H<sub>2</sub>O", "H~2~O", id="subscript"),
        pytest.param("run `make test` now", "run {{make test}} now", id="monospaced"),
        pytest.param("> quoted text", "bq. quoted text", id="block quote"),
    ],
)
def test_text_effects(markdown: str, expected: str) -> None:
    """Test every text effect rule."""
    assert github_to_jira(markdown) == expected


def test_strong_is_not_greedy() -> None:
    """Test that two strong spans on one line translate independently."""
    assert github_to_jira("**a** and **b**") == "*a* and *b*"


def test_strong_output_is_not_rematched_as_emphasis() -> None:
    """Test that the asterisks produced for strong text are not turned into emphasis."""
    assert github_to_jira("Some **bold** and *italic* words") == "Some *bold* and _italic_ words"


@pytest.mark.parametrize(
    "markdown",
    [
        pytest.param("* one\n* two", id="asterisk bullets"),
        pytest.param("- one\n- two", id="dash bullets"),
        pytest.param("2 * 3 * 4", id="arithmetic"),
        pytest.param("call snake_case_name here", id="snake case identifier"),
        pytest.param("| a | b |\n|---|---|\n| 1 | 2 |", id="table"),
        pytest.param("plain text", id="plain text"),
    ],
)
def test_untouched_text(markdown: str) -> None:
    """Test that text without translatable markup passes through unchanged."""
    assert github_to_jira(markdown) == markdown


@pytest.mark.parametrize(
    "markdown,expected",
    [
        pytest.param("![logo](https://example.com/logo.png)", "!https://example.com/logo.png|width=600!", id="image"),
        pytest.param("<https://example.com>", "[https://example.com]", id="autolink"),
        pytest.param("see [the docs](https://example.com/docs)", "see [the docs|https://example.com/docs]", id="link"),
        pytest.param("**[bold link](https://example.com)**", "*[bold link|https://example.com]*", id="strong link"),
        pytest.param("[x](http://a.com/path_(foo))", "[x|http://a.com/path_(foo)]", id="parentheses in link target"),
        pytest.param(
            "![diagram](https://example.com/Flow_(v2).png)",
            "!https://example.com/Flow_(v2).png|width=600!",
            id="parentheses in image target",
        ),
        pytest.param("[a](https://example.com) (see above)", "[a|https://example.com] (see above)", id="link followed by aside"),
    ],
)
def test_links(markdown: str, expected: str) -> None:
    """Test the link rules."""
    assert github_to_jira(markdown) == expected


def test_code_block_with_language() -> None:
    """Test that a fenced block with a language becomes a code macro."""
    markdown = "Example:\n```go\nfmt.Println(1)\n```\nDone"
    assert github_to_jira(markdown) == "Example:\n{code:go}\nfmt.Println(1)\n{code}\nDone"


def test_code_block_without_language() -> None:
    """Test that a fenced block without a language becomes a noformat block and keeps its content."""
    markdown = "```\nplain output\nsecond line\n```"
    assert github_to_jira(markdown) == "{noformat}\nplain output\nsecond line\n{noformat}"


def test_heading_with_strong_text() -> None:
    """Test that rules from different groups compose."""
    assert github_to_jira("## **Important**") == "h2. *Important*"


def test_full_document() -> None:
    """Test the translation of an issue body mixing several constructs."""
    markdown = (
        "# Bug report\n"
        "The **parser** fails on `input.md`.\n"
        "\n"
        "* first step\n"
        "* second step\n"
        "\n"
        "See [upstream](https://example.com/issue/1)."
    )
    expected = (
        "h1. Bug report\n"
        "The *parser* fails on {{input.md}}.\n"
        "\n"
        "* first step\n"
        "* second step\n"
        "\n"
        "See [upstream|https://example.com/issue/1]."
    )
    assert github_to_jira(markdown) == expected


@pytest.mark.parametrize("text", [pytest.param(None, id="none"), pytest.param("", id="empty string")])
def test_empty_input(text: str | None) -> None:
    """Test that missing text translates to an empty string."""
    assert github_to_jira(text) == ""


def test_custom_rules() -> None:
    """Test that a translator only applies the rules it was given."""
    translator = MarkupTranslator([DELETED])
    assert translator.translate("~~x~~ **y**") == "-x- **y**"


def test_rule_groups_are_ordered() -> None:
    """Test that the default rules run headings, text effects, links and blocks in that order."""
    assert DEFAULT_RULES == HEADING_RULES + TEXT_EFFECT_RULES + LINK_RULES + BLOCK_RULES
    assert [rule.name for rule in HEADING_RULES] == [f"heading-{level}" for level in range(6, 0, -1)]


def test_restore_placeholders() -> None:
    """Test that placeholder characters are restored to JIRA delimiters."""
    text = f"{STRONG_PLACEHOLDER}a{STRONG_PLACEHOLDER} {EMPHASIS_PLACEHOLDER}b{EMPHASIS_PLACEHOLDER}"
    assert restore_placeholders(text) == "*a* _b_"
