"""Standard Markdown converter built on markdown-it-py."""

import logging
from typing import Any

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from ..core.model import (
    Blockquote,
    BulletList,
    CodeBlock,
    DocumentNode,
    HardBreak,
    Heading,
    HorizontalRule,
    Image,
    Link,
    ListItem,
    Mark,
    OrderedList,
    Paragraph,
    Table,
    TableCell,
    TableRow,
    TextRun,
)
from ..core.ports import StandardConverter
from ..core.sniffer import has_block_syntax

logger = logging.getLogger(__name__)


def build_markdown_it(
    html: bool = False,
    breaks: bool = False,
    typographer: bool = False,
    tables: bool = True,
) -> MarkdownIt:
    md = MarkdownIt("commonmark", {"html": html, "breaks": breaks, "typographer": typographer})
    if tables:
        md.enable("table")
    return md


def _merge_runs(nodes: list[Any]) -> list[Any]:
    """Join adjacent text runs that carry the same marks."""
    merged: list[Any] = []
    for node in nodes:
        prev = merged[-1] if merged else None
        if isinstance(node, TextRun) and isinstance(prev, TextRun) and prev.marks == node.marks:
            merged[-1] = TextRun(prev.text + node.text, prev.marks)
        elif isinstance(node, TextRun) and not node.text:
            continue
        else:
            merged.append(node)
    return merged


class MarkdownItConverter(StandardConverter):
    """
    Build document nodes straight from the markdown-it syntax tree.

    Headings come out without an id; the heading-id pass fills them in.
    """

    def __init__(self, md: MarkdownIt | None = None):
        self.md = md or build_markdown_it()

    def convert(self, text: str) -> list[DocumentNode]:
        root = SyntaxTreeNode(self.md.parse(text))
        return self._blocks(root.children)

    # Block level

    def _blocks(self, nodes: list[SyntaxTreeNode]) -> list[Any]:
        out: list[Any] = []
        for node in nodes:
            converted = self._block(node)
            if converted is not None:
                out.append(converted)
        return out

    def _block(self, node: SyntaxTreeNode) -> Any:
        t = node.type
        if t == "paragraph":
            return Paragraph(children=self._inline_of(node))
        if t == "heading":
            return Heading(level=int(node.tag[1]), children=self._inline_of(node))
        if t == "bullet_list":
            return BulletList(items=self._items(node))
        if t == "ordered_list":
            start = node.attrs.get("start", 1)
            return OrderedList(items=self._items(node), start=int(start))
        if t == "blockquote":
            return Blockquote(children=self._blocks(node.children))
        if t == "fence":
            language = node.info.strip().split(maxsplit=1)[0] if node.info.strip() else ""
            return CodeBlock(text=_strip_final_newline(node.content), language=language)
        if t == "code_block":
            return CodeBlock(text=_strip_final_newline(node.content))
        if t == "hr":
            return HorizontalRule()
        if t == "table":
            return Table(rows=self._rows(node))
        if t == "html_block":
            return Paragraph(children=[TextRun(node.content.strip())])
        logger.debug("Dropping unsupported block token %r", t)
        return None

    def _items(self, list_node: SyntaxTreeNode) -> list[ListItem]:
        return [
            ListItem(children=self._blocks(item.children))
            for item in list_node.children
            if item.type == "list_item"
        ]

    def _rows(self, table: SyntaxTreeNode) -> list[TableRow]:
        rows = []
        for section in table.children:  # thead / tbody
            for tr in section.children:
                cells = [
                    TableCell(children=self._inline_of(cell), header=cell.type == "th")
                    for cell in tr.children
                ]
                rows.append(TableRow(cells=cells))
        return rows

    # Inline level

    def _inline_of(self, node: SyntaxTreeNode) -> list[Any]:
        children: list[Any] = []
        for child in node.children:
            if child.type == "inline":
                children.extend(self._inline(child.children, frozenset()))
        return _merge_runs(children)

    def _inline(self, nodes: list[SyntaxTreeNode], marks: frozenset[Mark]) -> list[Any]:
        out: list[Any] = []
        for node in nodes:
            t = node.type
            if t == "text":
                out.append(TextRun(node.content, marks))
            elif t == "strong":
                out.extend(self._inline(node.children, marks | {Mark.BOLD}))
            elif t == "em":
                out.extend(self._inline(node.children, marks | {Mark.ITALIC}))
            elif t == "code_inline":
                out.append(TextRun(node.content, marks | {Mark.CODE}))
            elif t == "link":
                href = str(node.attrs.get("href", ""))
                out.append(Link(href=href, children=_merge_runs(self._inline(node.children, marks))))
            elif t == "image":
                out.append(Image(
                    src=str(node.attrs.get("src", "")),
                    alt=node.content,
                    title=str(node.attrs.get("title", "") or ""),
                ))
            elif t == "softbreak":
                out.append(TextRun("\n", marks))
            elif t == "hardbreak":
                out.append(HardBreak())
            elif t == "html_inline":
                out.append(TextRun(node.content, marks))
            else:
                out.extend(self._inline(node.children, marks))
        return out


def _strip_final_newline(text: str) -> str:
    return text[:-1] if text.endswith("\n") else text


class PerLineConverter(StandardConverter):
    """
    Paste-time wrapper: multi-line text without any block syntax is converted
    line by line so each pasted line stays its own block.
    """

    def __init__(self, inner: StandardConverter):
        self.inner = inner

    def convert(self, text: str) -> list[DocumentNode]:
        lines = [line for line in text.split("\n") if line.strip()]
        if len(lines) > 1 and not has_block_syntax(text):
            nodes: list[DocumentNode] = []
            for line in lines:
                nodes.extend(self.inner.convert(line))
            return nodes
        return self.inner.convert(text)
