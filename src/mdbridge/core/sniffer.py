"""Cheap checks for lightweight-markup syntax in plain text."""

import re

MARKDOWN_PATTERNS = [
    re.compile(r"^#{1,6}\s", re.M),  # ATX heading
    re.compile(r"\*\*[^*]+\*\*", re.M),  # bold
    re.compile(r"\*[^*]+\*", re.M),  # italic
    re.compile(r"^[-*+]\s", re.M),  # unordered list
    re.compile(r"^\d+\.\s", re.M),  # ordered list
    re.compile(r"^>\s", re.M),  # blockquote
    re.compile(r"`[^`]+`", re.M),  # inline code
    re.compile(r"^```", re.M),  # fenced code
    re.compile(r"\[.*\]\(.*\)", re.M),  # link
    re.compile(r"^\|.*\|", re.M),  # table row
]

BLOCK_LINE_PATTERNS = [
    re.compile(r"^#{1,6}\s"),
    re.compile(r"^\s*[-*+]\s"),
    re.compile(r"^\s*\d+\.\s"),
    re.compile(r"^\s*>\s"),
    re.compile(r"^\s*```"),
    re.compile(r"^\s*\|.*\|"),
]


def looks_like_markdown(text: str) -> bool:
    """True if any recognised Markdown construct appears anywhere in `text`."""
    return any(p.search(text) for p in MARKDOWN_PATTERNS)


def has_block_syntax(text: str) -> bool:
    """True if any non-blank line opens a block construct (heading, list, quote, fence, table)."""
    return any(
        p.match(line)
        for line in text.split("\n")
        if line.strip()
        for p in BLOCK_LINE_PATTERNS
    )
