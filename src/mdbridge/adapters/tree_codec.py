import io
import json
from typing import Any, Iterable

import yaml

from ..core.model import (
    Blockquote,
    BulletList,
    CodeBlock,
    DiagramBlock,
    DiagramKind,
    DiagramTheme,
    Element,
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
    ViewMode,
)

FORMATS = ("yaml", "json")


def node_to_dict(node: Any) -> dict[str, Any]:
    """Plain-data form of a node, tagged by `type`."""
    t = node.type
    if isinstance(node, TextRun):
        data: dict[str, Any] = {"type": t, "text": node.text}
        if node.marks:
            data["marks"] = sorted(Mark(m).value for m in node.marks)
        return data
    if isinstance(node, Heading):
        return {
            "type": t, "level": node.level, "id": node.id, "children": nodes_to_dicts(node.children),
        }
    if isinstance(node, (BulletList, OrderedList)):
        data = {"type": t, "items": nodes_to_dicts(node.items)}
        if isinstance(node, OrderedList) and node.start != 1:
            data["start"] = node.start
        return data
    if isinstance(node, CodeBlock):
        return {"type": t, "language": node.language, "text": node.text}
    if isinstance(node, DiagramBlock):
        return {
            "type": t,
            "kind": node.kind.value,
            "view_mode": node.view_mode.value,
            "theme": node.theme.value,
            "source": node.source,
        }
    if isinstance(node, Table):
        return {"type": t, "rows": nodes_to_dicts(node.rows)}
    if isinstance(node, TableRow):
        return {"type": t, "cells": nodes_to_dicts(node.cells)}
    if isinstance(node, TableCell):
        return {"type": t, "header": node.header, "children": nodes_to_dicts(node.children)}
    if isinstance(node, Link):
        return {"type": t, "href": node.href, "children": nodes_to_dicts(node.children)}
    if isinstance(node, Image):
        return {"type": t, "src": node.src, "alt": node.alt, "title": node.title}
    if isinstance(node, Element):
        return {"type": node.tag, "children": nodes_to_dicts(node.children)}
    if isinstance(node, (HorizontalRule, HardBreak)):
        return {"type": t}
    # Paragraph, ListItem, Blockquote
    return {"type": t, "children": nodes_to_dicts(node.children)}


def nodes_to_dicts(nodes: Iterable[Any]) -> list[dict[str, Any]]:
    return [node_to_dict(n) for n in nodes]


def _children(data: dict[str, Any], key: str = "children") -> list[Any]:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list, got {type(value).__name__}")
    return [node_from_dict(v) for v in value]


def node_from_dict(data: Any) -> Any:
    """
    Rebuild a node from its plain-data form.

    Raises ValueError for non-mapping input or bad enum values. An unknown
    `type` becomes an Element so its children still serialize.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Node must be a mapping, got {type(data).__name__}")
    t = data.get("type")
    if not isinstance(t, str) or not t:
        raise ValueError("Node is missing its 'type'")

    if t == "text":
        marks = frozenset(Mark(m) for m in data.get("marks", []))
        return TextRun(str(data.get("text", "")), marks)
    if t == "paragraph":
        return Paragraph(children=_children(data))
    if t == "heading":
        return Heading(level=int(data.get("level", 1)), id=str(data.get("id") or ""),
                       children=_children(data))
    if t == "bullet_list":
        return BulletList(items=_children(data, "items"))
    if t == "ordered_list":
        return OrderedList(items=_children(data, "items"), start=int(data.get("start", 1)))
    if t == "list_item":
        return ListItem(children=_children(data))
    if t == "blockquote":
        return Blockquote(children=_children(data))
    if t == "code_block":
        return CodeBlock(text=str(data.get("text", "")), language=str(data.get("language") or ""))
    if t == "diagram":
        return DiagramBlock(
            source=str(data.get("source", "")),
            kind=DiagramKind(data.get("kind", DiagramKind.FLOWCHART.value)),
            view_mode=ViewMode(data.get("view_mode", ViewMode.PREVIEW.value)),
            theme=DiagramTheme(data.get("theme", DiagramTheme.DEFAULT.value)),
        )
    if t == "table":
        return Table(rows=_children(data, "rows"))
    if t == "table_row":
        return TableRow(cells=_children(data, "cells"))
    if t == "table_cell":
        return TableCell(children=_children(data), header=bool(data.get("header", False)))
    if t == "horizontal_rule":
        return HorizontalRule()
    if t == "hard_break":
        return HardBreak()
    if t == "link":
        return Link(href=str(data.get("href", "")), children=_children(data))
    if t == "image":
        return Image(src=str(data.get("src", "")), alt=str(data.get("alt", "")),
                     title=str(data.get("title") or ""))
    return Element(tag=t, children=_children(data))


def dump_tree(nodes: Iterable[Any], fmt: str = "yaml") -> str:
    data = nodes_to_dicts(nodes)
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    if fmt == "yaml":
        buf = io.StringIO()
        yaml.safe_dump(data, buf, sort_keys=False, allow_unicode=True)
        return buf.getvalue()
    raise ValueError(f"Unknown tree format: {fmt}")


def load_tree(text: str, fmt: str = "yaml") -> list[Any]:
    if fmt == "json":
        data = json.loads(text)
    elif fmt == "yaml":
        data = yaml.safe_load(io.StringIO(text))
    else:
        raise ValueError(f"Unknown tree format: {fmt}")
    if data is None:
        return []
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise ValueError("Tree document must be a list of nodes")
    return [node_from_dict(d) for d in data]
