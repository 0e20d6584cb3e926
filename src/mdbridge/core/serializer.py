"""Document tree to Markdown serialization."""

import re
from typing import Any, Callable, Mapping

from .model import Mark, child_nodes
from .scanner import DIAGRAM_TAG, FENCE

Handler = Callable[["TreeToMarkdownSerializer", Any], str]


def _heading(s: "TreeToMarkdownSerializer", node: Any) -> str:
    level = min(max(int(node.level), 1), 6)
    return "#" * level + " " + s.inline(node.children).strip() + "\n\n"


def _code_span(text: str) -> str:
    if "`" not in text:
        return "`" + text + "`"
    # Delimiter must differ in length from every backtick run inside the span,
    # and must not look like a fence to the scanner.
    runs = {len(run) for run in re.findall(r"`+", text)}
    n = 1
    while n in runs or n == len(FENCE):
        n += 1
    fence = "`" * n
    return fence + " " + text + " " + fence


def _text(s: "TreeToMarkdownSerializer", node: Any) -> str:
    text = node.text
    marks = node.marks
    if Mark.CODE in marks:
        text = _code_span(text)
    if Mark.ITALIC in marks:
        text = "*" + text + "*"
    if Mark.BOLD in marks:
        text = "**" + text + "**"
    return text


def _code_block(s: "TreeToMarkdownSerializer", node: Any) -> str:
    return FENCE + (node.language or "") + "\n" + node.text + "\n" + FENCE + "\n\n"


def _diagram(s: "TreeToMarkdownSerializer", node: Any) -> str:
    return FENCE + DIAGRAM_TAG + "\n" + node.source + "\n" + FENCE + "\n\n"


def _blockquote(s: "TreeToMarkdownSerializer", node: Any) -> str:
    inner = s.serialize(node.children).strip()
    lines = [f"> {line}" if line.strip() else ">" for line in inner.split("\n")]
    return "".join(line + "\n" for line in lines) + "\n"


def _list_items(s: "TreeToMarkdownSerializer", items: list[Any], markers: list[str]) -> str:
    out = []
    for item, marker in zip(items, markers):
        body = s.serialize(child_nodes(item)).strip()
        lines = body.split("\n")
        indent = " " * len(marker)
        rest = [indent + line if line.strip() else "" for line in lines[1:]]
        out.append("\n".join([marker + lines[0], *rest]) + "\n")
    return "".join(out) + "\n"


def _bullet_list(s: "TreeToMarkdownSerializer", node: Any) -> str:
    return _list_items(s, node.items, ["- "] * len(node.items))


def _ordered_list(s: "TreeToMarkdownSerializer", node: Any) -> str:
    start = getattr(node, "start", None)
    if start is None:
        start = 1
    markers = [f"{start + i}. " for i in range(len(node.items))]
    return _list_items(s, node.items, markers)


def _link(s: "TreeToMarkdownSerializer", node: Any) -> str:
    return "[" + s.inline(node.children) + "](" + node.href + ")"


def _image(s: "TreeToMarkdownSerializer", node: Any) -> str:
    return "![" + node.alt + "](" + node.src + ")"


def _paragraph(s: "TreeToMarkdownSerializer", node: Any) -> str:
    content = s.inline(node.children).strip()
    return content + "\n\n" if content else ""


def _hr(s: "TreeToMarkdownSerializer", node: Any) -> str:
    return "---\n\n"


def _hard_break(s: "TreeToMarkdownSerializer", node: Any) -> str:
    return "\n"


def _cell(s: "TreeToMarkdownSerializer", cell: Any) -> str:
    text = s.inline(child_nodes(cell)).strip().replace("\n", " ")
    return text.replace("|", "\\|")


def _table(s: "TreeToMarkdownSerializer", node: Any) -> str:
    out = []
    for i, row in enumerate(node.rows):
        cells = [_cell(s, c) for c in child_nodes(row)]
        out.append("| " + " | ".join(cells) + " |\n")
        if i == 0:
            out.append("| " + " | ".join("---" for _ in cells) + " |\n")
    return "".join(out) + "\n"


DEFAULT_HANDLERS: dict[str, Handler] = {
    "heading": _heading,
    "text": _text,
    "code_block": _code_block,
    "diagram": _diagram,
    "blockquote": _blockquote,
    "bullet_list": _bullet_list,
    "ordered_list": _ordered_list,
    "link": _link,
    "image": _image,
    "paragraph": _paragraph,
    "horizontal_rule": _hr,
    "hard_break": _hard_break,
    "table": _table,
}


class TreeToMarkdownSerializer:
    """
    Walk a document subtree and rebuild Markdown node by node.

    Dispatch is on each node's `type` tag through the handler table given at
    construction. Anything without a handler (list items, table rows, unknown
    elements, stray values) falls through to concatenating its children, so a
    malformed tree degrades to plain text instead of raising.
    """

    def __init__(self, handlers: Mapping[str, Handler] | None = None):
        self.handlers = dict(DEFAULT_HANDLERS if handlers is None else handlers)

    def serialize(self, node: Any) -> str:
        if node is None:
            return ""
        if isinstance(node, str):
            return node
        if isinstance(node, (list, tuple)):
            return "".join(self.serialize(n) for n in node)

        handler = self.handlers.get(getattr(node, "type", None))
        if handler is not None:
            try:
                return handler(self, node)
            except (AttributeError, TypeError, ValueError):
                # Node claims a type but lacks the shape its handler needs.
                pass
        return self.serialize(child_nodes(node))

    def inline(self, nodes: Any) -> str:
        return self.serialize(nodes)

    def to_markdown(self, nodes: Any) -> str:
        """Document text: trailing whitespace removed, one final newline."""
        text = self.serialize(nodes).rstrip()
        return text + "\n" if text else ""
