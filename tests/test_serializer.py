"""Tests for document tree to Markdown serialization."""

from mdbridge.core.model import (
    Blockquote,
    BulletList,
    CodeBlock,
    DiagramBlock,
    DiagramKind,
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
)
from mdbridge.core.serializer import DEFAULT_HANDLERS, TreeToMarkdownSerializer


def para(text):
    return Paragraph(children=[TextRun(text)])


def test_heading():
    s = TreeToMarkdownSerializer()
    assert s.serialize(Heading(level=2, children=[TextRun("Title")])) == "## Title\n\n"


def test_heading_level_is_clamped():
    s = TreeToMarkdownSerializer()
    assert s.serialize(Heading(level=9, children=[TextRun("Deep")])) == "###### Deep\n\n"


def test_bullet_list():
    s = TreeToMarkdownSerializer()
    node = BulletList(items=[ListItem([para("a")]), ListItem([para("b")])])
    assert s.serialize(node) == "- a\n- b\n\n"


def test_ordered_list_numbers_from_start():
    s = TreeToMarkdownSerializer()
    node = OrderedList(items=[ListItem([para("x")]), ListItem([para("y")])], start=3)
    assert s.serialize(node) == "3. x\n4. y\n\n"


def test_nested_list_is_indented():
    """Continuation lines of an item line up under its marker."""
    s = TreeToMarkdownSerializer()
    inner = BulletList(items=[ListItem([para("child")])])
    node = BulletList(items=[ListItem([para("parent"), inner])])
    assert s.serialize(node) == "- parent\n\n  - child\n\n"


def test_text_marks():
    """Code wraps first, then italic, then bold."""
    s = TreeToMarkdownSerializer()
    assert s.serialize(TextRun("x", frozenset({Mark.BOLD}))) == "**x**"
    assert s.serialize(TextRun("x", frozenset({Mark.ITALIC}))) == "*x*"
    assert s.serialize(TextRun("x", frozenset({Mark.CODE}))) == "`x`"
    assert s.serialize(TextRun("x", frozenset({Mark.BOLD, Mark.ITALIC}))) == "***x***"
    assert s.serialize(TextRun("x", frozenset({Mark.BOLD, Mark.CODE}))) == "**`x`**"


def test_code_block():
    s = TreeToMarkdownSerializer()
    node = CodeBlock(text="print(1)", language="python")
    assert s.serialize(node) == "```python\nprint(1)\n```\n\n"
    assert s.serialize(CodeBlock(text="plain")) == "```\nplain\n```\n\n"


def test_diagram_block_reemits_fence():
    s = TreeToMarkdownSerializer()
    node = DiagramBlock(source="sequenceDiagram\n  A->>B: hi", kind=DiagramKind.SEQUENCE)
    assert s.serialize(node) == "```mermaid\nsequenceDiagram\n  A->>B: hi\n```\n\n"


def test_blockquote():
    s = TreeToMarkdownSerializer()
    node = Blockquote(children=[para("one"), para("two")])
    assert s.serialize(node) == "> one\n>\n> two\n\n"


def test_link_and_image():
    s = TreeToMarkdownSerializer()
    link = Link(href="https://example.com", children=[TextRun("site")])
    assert s.serialize(link) == "[site](https://example.com)"
    assert s.serialize(Image(src="a.png", alt="pic")) == "![pic](a.png)"


def test_paragraph_and_empty_paragraph():
    s = TreeToMarkdownSerializer()
    assert s.serialize(para("hello")) == "hello\n\n"
    assert s.serialize(Paragraph()) == ""


def test_hard_break_and_rule():
    s = TreeToMarkdownSerializer()
    node = Paragraph(children=[TextRun("a"), HardBreak(), TextRun("b")])
    assert s.serialize(node) == "a\nb\n\n"
    assert s.serialize(HorizontalRule()) == "---\n\n"


def test_table():
    s = TreeToMarkdownSerializer()
    node = Table(rows=[
        TableRow(cells=[TableCell([TextRun("a")], header=True), TableCell([TextRun("b")], header=True)]),
        TableRow(cells=[TableCell([TextRun("1|2")]), TableCell([TextRun("3")])]),
    ])
    assert s.serialize(node) == "| a | b |\n| --- | --- |\n| 1\\|2 | 3 |\n\n"


def test_unknown_nodes_serialize_children():
    """Nodes without a handler fall back to their children."""
    s = TreeToMarkdownSerializer()
    node = Element(tag="callout", children=[para("inside")])
    assert s.serialize(node) == "inside\n\n"


def test_malformed_node_falls_back():
    """A node whose shape does not fit its handler degrades to its children."""

    class BrokenHeading:
        type = "heading"
        children = [TextRun("text")]

    s = TreeToMarkdownSerializer()
    assert s.serialize(BrokenHeading()) == "text"


def test_none_and_strings():
    s = TreeToMarkdownSerializer()
    assert s.serialize(None) == ""
    assert s.serialize("raw") == "raw"
    assert s.serialize([para("a"), para("b")]) == "a\n\nb\n\n"


def test_custom_handler_table():
    """Handlers are supplied at construction time."""
    handlers = dict(DEFAULT_HANDLERS)
    handlers["horizontal_rule"] = lambda s, node: "***\n\n"
    s = TreeToMarkdownSerializer(handlers)
    assert s.serialize(HorizontalRule()) == "***\n\n"
    assert TreeToMarkdownSerializer().serialize(HorizontalRule()) == "---\n\n"


def test_to_markdown_ends_with_single_newline():
    s = TreeToMarkdownSerializer()
    assert s.to_markdown([Heading(level=1, children=[TextRun("T")]), para("x")]) == "# T\n\nx\n"
    assert s.to_markdown([]) == ""


def test_ordered_list_starting_at_zero():
    s = TreeToMarkdownSerializer()
    node = OrderedList(items=[ListItem([para("zero")]), ListItem([para("one")])], start=0)
    assert s.serialize(node) == "0. zero\n1. one\n\n"


def test_code_span_containing_backticks():
    """The delimiter is never the same length as a backtick run in the code."""
    s = TreeToMarkdownSerializer()
    assert s.serialize(TextRun("a`b", frozenset({Mark.CODE}))) == "`` a`b ``"
    assert s.serialize(TextRun("a``b", frozenset({Mark.CODE}))) == "` a``b `"
    assert s.serialize(TextRun("`a`` `", frozenset({Mark.CODE}))) == "```` `a`` ` ````"


def test_nested_diagram_is_written_inside_its_container():
    """
    Diagrams inside quotes and list items keep the container prefixes.

    Only top-level diagram fences are recognised on load, so such a diagram
    comes back as quoted or indented text rather than as a diagram block.
    """
    s = TreeToMarkdownSerializer()
    diagram = DiagramBlock(source="graph TD\nA-->B")
    assert s.serialize(Blockquote(children=[diagram])) == (
        "> ```mermaid\n> graph TD\n> A-->B\n> ```\n\n"
    )
    assert s.serialize(BulletList(items=[ListItem([diagram])])) == (
        "- ```mermaid\n  graph TD\n  A-->B\n  ```\n\n"
    )
