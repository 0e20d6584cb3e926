"""Locate fenced diagram blocks in raw Markdown text."""

from .classifier import classify
from .model import DiagramSegment

FENCE = "```"
DIAGRAM_TAG = "mermaid"


def _fence_positions(text: str) -> list[int]:
    positions = []
    pos = text.find(FENCE)
    while pos != -1:
        positions.append(pos)
        pos = text.find(FENCE, pos + len(FENCE))
    return positions


def _split_tag_line(span: str) -> tuple[str, str]:
    """Return (first non-blank line stripped, everything after it)."""
    lines = span.split("\n")
    for i, line in enumerate(lines):
        if line.strip():
            return line.strip(), "\n".join(lines[i + 1:])
    return "", ""


def scan(text: str) -> list[DiagramSegment]:
    """
    Find every ```mermaid fenced block in `text`.

    The text is split on the fence delimiter into alternating outside/inside
    spans. An inside span is a diagram when its first non-blank line is exactly
    the diagram tag; any other fenced block is ordinary code and is skipped.
    A final fence with no closing partner runs to the end of the text.

    Returns segments in ascending `start` order.
    """
    positions = _fence_positions(text)
    segments: list[DiagramSegment] = []

    # Opening fences sit at even indices, their closers at the following odd index.
    for i in range(0, len(positions), 2):
        open_pos = positions[i]
        body_start = open_pos + len(FENCE)
        if i + 1 < len(positions):
            body_end = positions[i + 1]
            end = body_end + len(FENCE)
        else:
            body_end = len(text)
            end = len(text)

        tag, rest = _split_tag_line(text[body_start:body_end])
        if tag != DIAGRAM_TAG:
            continue

        content = rest.strip()
        segments.append(
            DiagramSegment(
                content=content,
                start=open_pos,
                end=end,
                kind=classify(content),
            )
        )

    return segments
