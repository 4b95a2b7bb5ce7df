"""Translates GitHub Markdown into JIRA wiki markup.

Translation is an ordered pipeline of independent substitution rules, applied
in four groups: headings, text effects, links, and block formatting. Order
matters: link syntax shares brackets and parentheses with other constructs,
so links are resolved after text effects, and fenced blocks are resolved last.

Destination delimiters that are also source syntax (the ``*`` and ``_`` that
JIRA uses for strong and emphasis) are emitted as placeholder characters and
restored once every rule has run, so a later rule never re-matches the output
of an earlier one.

Tables are not translated.

See https://jira.atlassian.com/secure/WikiRendererHelpAction.jspa?section=all
"""

import re
from dataclasses import dataclass
from typing import Callable, Sequence

from issue_sync.utils.constants import JIRA_IMAGE_WIDTH

STRONG_PLACEHOLDER = "\ue000"
EMPHASIS_PLACEHOLDER = "\ue001"

_PLACEHOLDERS = {
    STRONG_PLACEHOLDER: "*",
    EMPHASIS_PLACEHOLDER: "_",
}

Replacement = str | Callable[[re.Match[str]], str]


@dataclass(frozen=True)
class MarkupRule:
    """A single pattern substitution applied to the whole text."""

    name: str
    pattern: re.Pattern[str]
    replacement: Replacement

    def apply(self, text: str) -> str:
        """Apply the substitution to every non-overlapping match in the text."""
        return self.pattern.sub(self.replacement, text)


def _heading_rule(level: int) -> MarkupRule:
    return MarkupRule(
        name=f"heading-{level}",
        pattern=re.compile(rf"^{'#' * level} (.*)$", re.MULTILINE),
        replacement=rf"h{level}. \1",
    )


def _wrap(pattern: str, name: str, delimiter: str, end_delimiter: str | None = None) -> MarkupRule:
    """Build a rule rewriting a delimited span to a new pair of delimiters."""
    closing = delimiter if end_delimiter is None else end_delimiter
    return MarkupRule(
        name=name,
        pattern=re.compile(pattern),
        replacement=lambda match: f"{delimiter}{match.group(1)}{closing}",
    )


# Headings
HEADING_RULES: tuple[MarkupRule, ...] = tuple(_heading_rule(level) for level in range(6, 0, -1))

# Text Effects
#
# Delimited spans are matched lazily and never across lines, so two spans on
# one line translate independently. Asterisk and underscore delimiters must
# hug the enclosed text; underscores must also sit outside words.
STRONG_EMPHASIS = _wrap(
    r"\*\*\*(?!\s)([^\n]+?)(?<!\s)\*\*\*",
    "strong-emphasis",
    STRONG_PLACEHOLDER + EMPHASIS_PLACEHOLDER,
    EMPHASIS_PLACEHOLDER + STRONG_PLACEHOLDER,
)
STRONG_ASTERISKS = _wrap(r"\*\*(?!\s)([^\n]+?)(?<!\s)\*\*", "strong-asterisks", STRONG_PLACEHOLDER)
STRONG_UNDERSCORES = _wrap(r"(?<!\w)__(?!\s)([^\n]+?)(?<!\s)__(?!\w)", "strong-underscores", STRONG_PLACEHOLDER)
EMPHASIS_ASTERISK = _wrap(r"\*(?![\s*])([^*\n]+?)(?<!\s)\*", "emphasis-asterisk", EMPHASIS_PLACEHOLDER)
EMPHASIS_UNDERSCORE = _wrap(r"(?<!\w)_(?![\s_])([^_\n]+?)(?<!\s)_(?!\w)", "emphasis-underscore", EMPHASIS_PLACEHOLDER)
CITATION = _wrap(r"<cite>([^\n]*?)</?cite>", "citation", "??")
DELETED = _wrap(r"~~([^\n]+?)~~", "deleted", "-")
INSERTED = _wrap(r"<ins>([^\n]*?)</?ins>", "inserted", "+")
SUPERSCRIPT = _wrap(r"<sup>([^\n]*?)</?sup>", "superscript", "^")
SUBSCRIPT = _wrap(r"<sub>([^\n]*?)</?sub>", "subscript", "~")
MONOSPACED = _wrap(r"(?<!`)`([^`\n]+)`(?!`)", "monospaced", "{{", "}}")
QUOTE = MarkupRule(name="quote", pattern=re.compile(r"^>[ \t]+(.*)$", re.MULTILINE), replacement=r"bq. \1")

TEXT_EFFECT_RULES: tuple[MarkupRule, ...] = (
    STRONG_EMPHASIS,
    STRONG_ASTERISKS,
    STRONG_UNDERSCORES,
    EMPHASIS_ASTERISK,
    EMPHASIS_UNDERSCORE,
    CITATION,
    DELETED,
    INSERTED,
    SUPERSCRIPT,
    SUBSCRIPT,
    MONOSPACED,
    QUOTE,
)

# Links
#
# A link target may hold one level of balanced parentheses, e.g. wiki URLs.
LINK_TARGET = r"((?:[^()\s]|\([^()\s]*\))+?)"
IMAGE = MarkupRule(
    name="image",
    pattern=re.compile(r"!\[([^\]\n]*?)\]\(" + LINK_TARGET + r"\)"),
    replacement=rf"!\2|width={JIRA_IMAGE_WIDTH}!",
)
AUTOLINK = MarkupRule(
    name="autolink",
    pattern=re.compile(r"<([a-zA-Z][a-zA-Z0-9+.-]*:[^<>\s]+)>"),
    replacement=r"[\1]",
)
LINK = MarkupRule(
    name="link",
    pattern=re.compile(r"\[([^\]\n]*?)\]\(" + LINK_TARGET + r"\)"),
    replacement=r"[\1|\2]",
)

LINK_RULES: tuple[MarkupRule, ...] = (IMAGE, AUTOLINK, LINK)

# Block Formatting
CODE_BLOCK = MarkupRule(
    name="code-block",
    pattern=re.compile(r"^```(\w+)[ \t]*\n([\s\S]*?)\n```[ \t]*$", re.MULTILINE),
    replacement=r"{code:\1}\n\2\n{code}",
)
NOFORMAT_BLOCK = MarkupRule(
    name="noformat-block",
    pattern=re.compile(r"^```[ \t]*\n([\s\S]*?)\n```[ \t]*$", re.MULTILINE),
    replacement=r"{noformat}\n\1\n{noformat}",
)

BLOCK_RULES: tuple[MarkupRule, ...] = (CODE_BLOCK, NOFORMAT_BLOCK)

DEFAULT_RULES: tuple[MarkupRule, ...] = HEADING_RULES + TEXT_EFFECT_RULES + LINK_RULES + BLOCK_RULES


def restore_placeholders(text: str) -> str:
    """Replace placeholder characters with the JIRA delimiters they stand for."""
    for placeholder, delimiter in _PLACEHOLDERS.items():
        text = text.replace(placeholder, delimiter)
    return text


class MarkupTranslator:
    """Translates GitHub Markdown to JIRA markup with an ordered list of rules."""

    def __init__(self, rules: Sequence[MarkupRule] = DEFAULT_RULES) -> None:
        """Initialize the translator with the rules to apply, in order."""
        self.rules = tuple(rules)

    def translate(self, text: str | None) -> str:
        """Translate a Markdown document into JIRA markup."""
        if not text:
            return ""
        for rule in self.rules:
            text = rule.apply(text)
        return restore_placeholders(text)


default_translator = MarkupTranslator()


def github_to_jira(text: str | None) -> str:
    """Translate GitHub Markdown to JIRA markup using the default rules."""
    return default_translator.translate(text)
