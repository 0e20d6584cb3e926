"""Infer the diagram kind from Mermaid source."""

import re

from .model import DiagramKind

# Tried in order; first match wins.
KIND_PATTERNS: list[tuple[re.Pattern[str], DiagramKind]] = [
    (re.compile(r"^graph\s+(?:TD|TB|LR|RL|BT)\b", re.I | re.M), DiagramKind.FLOWCHART),
    (re.compile(r"^graph\b", re.I | re.M), DiagramKind.FLOWCHART),
    (re.compile(r"^flowchart\b", re.I | re.M), DiagramKind.FLOWCHART),
    (re.compile(r"^sequenceDiagram\b", re.I | re.M), DiagramKind.SEQUENCE),
    (re.compile(r"^classDiagram", re.I | re.M), DiagramKind.CLASS),
    (re.compile(r"^stateDiagram", re.I | re.M), DiagramKind.STATE),
    (re.compile(r"^gantt\b", re.I | re.M), DiagramKind.GANTT),
    (re.compile(r"^pie\b", re.I | re.M), DiagramKind.PIE),
    (re.compile(r"^mindmap\b", re.I | re.M), DiagramKind.MINDMAP),
    (re.compile(r"^erDiagram\b", re.I | re.M), DiagramKind.ENTITY_RELATIONSHIP),
    (re.compile(r"^gitGraph\b", re.I | re.M), DiagramKind.GIT_HISTORY),
    (re.compile(r"^timeline\b", re.I | re.M), DiagramKind.TIMELINE),
    (re.compile(r"^journey\b", re.I | re.M), DiagramKind.JOURNEY),
    (re.compile(r"^quadrantChart\b", re.I | re.M), DiagramKind.QUADRANT),
    (re.compile(r"^C4(?:Context|Container|Component|Dynamic|Deployment)\b", re.I | re.M),
     DiagramKind.ARCHITECTURE_CONTEXT),
    (re.compile(r"^requirementDiagram\b", re.I | re.M), DiagramKind.REQUIREMENT),
]

DEFAULT_KIND = DiagramKind.FLOWCHART


def _first_significant_line(content: str) -> str:
    """
    First line that can carry the diagram keyword.

    Skips blank lines, `%%` comments and a leading `---` front-matter block.
    """
    lines = content.splitlines()
    i = 0
    while i < len(lines) and not lines[i].strip():
        i += 1
    if i < len(lines) and lines[i].strip() == "---":
        closing = next(
            (j for j in range(i + 1, len(lines)) if lines[j].strip() == "---"), None
        )
        if closing is not None:
            i = closing + 1
    for line in lines[i:]:
        stripped = line.strip()
        if stripped and not stripped.startswith("%%"):
            return stripped
    return ""


def classify(content: str) -> DiagramKind:
    """Map diagram source to a DiagramKind; unrecognised input is a flowchart."""
    line = _first_significant_line(content)
    for pattern, kind in KIND_PATTERNS:
        if pattern.search(line):
            return kind
    return DEFAULT_KIND
