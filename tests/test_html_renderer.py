"""Tests for HTML fragment rendering."""

from mdbridge.adapters.html_renderer import HtmlRenderer
from mdbridge.core.model import (
    BulletList,
    CodeBlock,
    DiagramBlock,
    DiagramKind,
    DiagramTheme,
    Element,
    Heading,
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


def test_heading_with_and_without_id():
    r = HtmlRenderer()
    assert r.render(Heading(level=2, children=[TextRun("T")], id="t")) == '<h2 id="t" data-id="t">T</h2>'
    assert r.render(Heading(level=1, children=[TextRun("T")])) == "<h1>T</h1>"


def test_text_is_escaped_and_marked():
    r = HtmlRenderer()
    node = Paragraph(children=[TextRun("a < b "), TextRun("x", frozenset({Mark.BOLD, Mark.CODE}))])
    assert r.render(node) == "<p>a &lt; b <strong><code>x</code></strong></p>"


def test_diagram_block():
    r = HtmlRenderer()
    node = DiagramBlock(source="graph TD\n  A-->B", kind=DiagramKind.FLOWCHART,
                        view_mode=ViewMode.SPLIT, theme=DiagramTheme.DARK)
    html = r.render(node)
    assert html.startswith('<div data-type="mermaid-block" data-diagram-type="flowchart"')
    assert 'data-view-mode="split"' in html
    assert 'data-theme="dark"' in html
    assert "A--&gt;B" in html


def test_code_lists_links_tables():
    r = HtmlRenderer()
    assert r.render(CodeBlock(text="x", language="py")) == '<pre><code class="language-py">x</code></pre>'
    item = ListItem([Paragraph(children=[TextRun("a")])])
    assert r.render(BulletList(items=[item])) == "<ul><li><p>a</p></li></ul>"
    assert r.render(OrderedList(items=[item], start=2)) == '<ol start="2"><li><p>a</p></li></ol>'
    link = Link(href='https://e.com/?a="1"', children=[TextRun("e")])
    assert r.render(link) == '<a href="https://e.com/?a=&quot;1&quot;">e</a>'
    table = Table(rows=[TableRow(cells=[TableCell([TextRun("h")], header=True)]),
                        TableRow(cells=[TableCell([TextRun("d")])])])
    assert r.render(table) == "<table><tr><th>h</th></tr><tr><td>d</td></tr></table>"


def test_unknown_element_renders_children():
    r = HtmlRenderer()
    assert r.render(Element(tag="callout", children=[Paragraph(children=[TextRun("x")])])) == "<p>x</p>"
