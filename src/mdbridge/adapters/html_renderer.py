"""HTML rendering of document trees (the rich clipboard representation)."""

import html
from typing import Any, Callable, Mapping

from ..core.model import Mark, child_nodes

HtmlHandler = Callable[["HtmlRenderer", Any], str]


def _esc(text: str) -> str:
    return html.escape(text, quote=False)


def _attr(text: str) -> str:
    return html.escape(str(text), quote=True)


def _text(r: "HtmlRenderer", node: Any) -> str:
    out = _esc(node.text).replace("\n", " ")
    if Mark.CODE in node.marks:
        out = f"<code>{out}</code>"
    if Mark.ITALIC in node.marks:
        out = f"<em>{out}</em>"
    if Mark.BOLD in node.marks:
        out = f"<strong>{out}</strong>"
    return out


def _heading(r: "HtmlRenderer", node: Any) -> str:
    level = min(max(int(node.level), 1), 6)
    id_attrs = f' id="{_attr(node.id)}" data-id="{_attr(node.id)}"' if node.id else ""
    return f"<h{level}{id_attrs}>{r.render(node.children)}</h{level}>"


def _paragraph(r: "HtmlRenderer", node: Any) -> str:
    return f"<p>{r.render(node.children)}</p>"


def _code_block(r: "HtmlRenderer", node: Any) -> str:
    cls = f' class="language-{_attr(node.language)}"' if node.language else ""
    return f"<pre><code{cls}>{_esc(node.text)}</code></pre>"


def _diagram(r: "HtmlRenderer", node: Any) -> str:
    return (
        '<div data-type="mermaid-block"'
        f' data-diagram-type="{_attr(node.kind.value)}"'
        f' data-view-mode="{_attr(node.view_mode.value)}"'
        f' data-theme="{_attr(node.theme.value)}"'
        ' class="mermaid-block">'
        '<pre class="mermaid-source"><code class="language-mermaid">'
        f"{_esc(node.source)}</code></pre></div>"
    )


def _list(tag: str) -> HtmlHandler:
    def render(r: "HtmlRenderer", node: Any) -> str:
        start = getattr(node, "start", 1)
        start_attr = f' start="{int(start)}"' if tag == "ol" and start != 1 else ""
        items = "".join(f"<li>{r.render(child_nodes(item))}</li>" for item in node.items)
        return f"<{tag}{start_attr}>{items}</{tag}>"
    return render


def _blockquote(r: "HtmlRenderer", node: Any) -> str:
    return f"<blockquote>{r.render(node.children)}</blockquote>"


def _link(r: "HtmlRenderer", node: Any) -> str:
    return f'<a href="{_attr(node.href)}">{r.render(node.children)}</a>'


def _image(r: "HtmlRenderer", node: Any) -> str:
    title = f' title="{_attr(node.title)}"' if node.title else ""
    return f'<img src="{_attr(node.src)}" alt="{_attr(node.alt)}"{title}>'


def _table(r: "HtmlRenderer", node: Any) -> str:
    rows = []
    for row in node.rows:
        cells = []
        for cell in child_nodes(row):
            tag = "th" if getattr(cell, "header", False) else "td"
            cells.append(f"<{tag}>{r.render(child_nodes(cell))}</{tag}>")
        rows.append("<tr>" + "".join(cells) + "</tr>")
    return "<table>" + "".join(rows) + "</table>"


DEFAULT_HTML_HANDLERS: dict[str, HtmlHandler] = {
    "text": _text,
    "heading": _heading,
    "paragraph": _paragraph,
    "code_block": _code_block,
    "diagram": _diagram,
    "bullet_list": _list("ul"),
    "ordered_list": _list("ol"),
    "blockquote": _blockquote,
    "link": _link,
    "image": _image,
    "table": _table,
    "horizontal_rule": lambda r, node: "<hr>",
    "hard_break": lambda r, node: "<br>",
}


class HtmlRenderer:
    """Render nodes to an HTML fragment; unknown nodes render their children."""

    def __init__(self, handlers: Mapping[str, HtmlHandler] | None = None):
        self.handlers = dict(DEFAULT_HTML_HANDLERS if handlers is None else handlers)

    def render(self, node: Any) -> str:
        if node is None:
            return ""
        if isinstance(node, str):
            return _esc(node)
        if isinstance(node, (list, tuple)):
            return "".join(self.render(n) for n in node)
        handler = self.handlers.get(getattr(node, "type", None))
        if handler is not None:
            try:
                return handler(self, node)
            except (AttributeError, TypeError, ValueError):
                pass
        return self.render(child_nodes(node))
