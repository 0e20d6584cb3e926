from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union


class DiagramKind(str, Enum):
    FLOWCHART = "flowchart"
    SEQUENCE = "sequence"
    CLASS = "class"
    STATE = "state"
    GANTT = "gantt"
    PIE = "pie"
    MINDMAP = "mindmap"
    ENTITY_RELATIONSHIP = "er"
    GIT_HISTORY = "git"
    TIMELINE = "timeline"
    JOURNEY = "journey"
    QUADRANT = "quadrant"
    ARCHITECTURE_CONTEXT = "c4"
    REQUIREMENT = "requirement"


class ViewMode(str, Enum):
    SOURCE = "source"
    PREVIEW = "preview"
    SPLIT = "split"


class DiagramTheme(str, Enum):
    DEFAULT = "default"
    DARK = "dark"
    FOREST = "forest"
    NEUTRAL = "neutral"
    BASE = "base"
    RAINBOW = "rainbow"


class Mark(str, Enum):
    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"


@dataclass(frozen=True)
class DiagramSegment:
    content: str  # fence interior minus the tag line, trimmed
    start: int  # offset of the opening fence
    end: int  # offset just past the closing fence (or len(text))
    kind: DiagramKind


# Inline nodes


@dataclass(frozen=True)
class TextRun:
    type: ClassVar[str] = "text"
    text: str
    marks: frozenset[Mark] = frozenset()


@dataclass(frozen=True)
class Link:
    type: ClassVar[str] = "link"
    href: str
    children: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class Image:
    type: ClassVar[str] = "image"
    src: str
    alt: str = ""
    title: str = ""


@dataclass(frozen=True)
class HardBreak:
    type: ClassVar[str] = "hard_break"


# Block nodes


@dataclass(frozen=True)
class Paragraph:
    type: ClassVar[str] = "paragraph"
    children: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class Heading:
    type: ClassVar[str] = "heading"
    level: int
    children: list[Any] = field(default_factory=list)
    id: str = ""


@dataclass(frozen=True)
class ListItem:
    type: ClassVar[str] = "list_item"
    children: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class BulletList:
    type: ClassVar[str] = "bullet_list"
    items: list[ListItem] = field(default_factory=list)


@dataclass(frozen=True)
class OrderedList:
    type: ClassVar[str] = "ordered_list"
    items: list[ListItem] = field(default_factory=list)
    start: int = 1


@dataclass(frozen=True)
class Blockquote:
    type: ClassVar[str] = "blockquote"
    children: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class CodeBlock:
    type: ClassVar[str] = "code_block"
    text: str
    language: str = ""


@dataclass(frozen=True)
class DiagramBlock:
    """Opaque leaf holding diagram source; never decomposed into inline nodes."""
    type: ClassVar[str] = "diagram"
    source: str
    kind: DiagramKind = DiagramKind.FLOWCHART
    view_mode: ViewMode = ViewMode.PREVIEW
    theme: DiagramTheme = DiagramTheme.DEFAULT


@dataclass(frozen=True)
class TableCell:
    type: ClassVar[str] = "table_cell"
    children: list[Any] = field(default_factory=list)
    header: bool = False


@dataclass(frozen=True)
class TableRow:
    type: ClassVar[str] = "table_row"
    cells: list[TableCell] = field(default_factory=list)


@dataclass(frozen=True)
class Table:
    type: ClassVar[str] = "table"
    rows: list[TableRow] = field(default_factory=list)


@dataclass(frozen=True)
class HorizontalRule:
    type: ClassVar[str] = "horizontal_rule"


@dataclass(frozen=True)
class Element:
    """Element-like node of a type the core does not know; children pass through."""
    type: ClassVar[str] = "element"
    tag: str
    children: list[Any] = field(default_factory=list)


InlineNode = Union[TextRun, Link, Image, HardBreak]

DocumentNode = Union[
    Paragraph,
    Heading,
    BulletList,
    OrderedList,
    ListItem,
    Blockquote,
    CodeBlock,
    DiagramBlock,
    Table,
    TableRow,
    TableCell,
    HorizontalRule,
    Element,
    TextRun,
    Link,
    Image,
    HardBreak,
]


def child_nodes(node: Any) -> list[Any]:
    """Return the direct children of any node, whatever the container field is called."""
    for attr in ("children", "items", "rows", "cells"):
        value = getattr(node, attr, None)
        if isinstance(value, (list, tuple)):
            return list(value)
    return []


def text_content(node: Any) -> str:
    """Concatenated plain text of a node or a list of nodes."""
    if isinstance(node, (list, tuple)):
        return "".join(text_content(n) for n in node)
    if isinstance(node, TextRun):
        return node.text
    if isinstance(node, (CodeBlock,)):
        return node.text
    if isinstance(node, DiagramBlock):
        return node.source
    if isinstance(node, Image):
        return node.alt
    if isinstance(node, HardBreak):
        return "\n"
    return "".join(text_content(c) for c in child_nodes(node))
