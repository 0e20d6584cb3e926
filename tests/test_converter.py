"""Tests for Markdown to document tree conversion."""

import pytest

from mdbridge.adapters.markdown_it_converter import MarkdownItConverter
from mdbridge.core.converter import MarkdownToTreeConverter
from mdbridge.core.model import (
    CodeBlock,
    DiagramBlock,
    DiagramKind,
    DiagramTheme,
    Heading,
    Paragraph,
    TextRun,
    ViewMode,
)


class RecordingConverter:
    """Standard converter stand-in: one paragraph per call, holding the raw chunk."""

    def __init__(self):
        self.calls = []

    def convert(self, text):
        self.calls.append(text)
        return [Paragraph(children=[TextRun(text)])]


class FailingConverter:
    def convert(self, text):
        raise RuntimeError("converter exploded")


def test_prose_around_diagram():
    """Prose, diagram, separator, prose."""
    std = RecordingConverter()
    converter = MarkdownToTreeConverter(std)
    text = "Hello\n\n```mermaid\nflowchart TD\nA-->B\n```\n\nWorld"

    nodes = converter.parse_slice(text)

    assert std.calls == ["Hello\n\n", "\n\nWorld"]
    assert nodes == [
        Paragraph(children=[TextRun("Hello\n\n")]),
        DiagramBlock(source="flowchart TD\nA-->B", kind=DiagramKind.FLOWCHART),
        Paragraph(),
        Paragraph(children=[TextRun("\n\nWorld")]),
    ]


def test_no_diagram_passes_text_whole():
    """Without diagram fences the standard converter sees the whole text once."""
    std = RecordingConverter()
    converter = MarkdownToTreeConverter(std)
    text = "Intro\n\n```python\nprint('hi')\n```\n"

    nodes = converter.parse_slice(text)

    assert std.calls == [text]
    assert nodes == [Paragraph(children=[TextRun(text)])]


def test_diagram_source_never_reaches_standard_converter():
    """Diagram content is not handed to the standard converter."""
    std = RecordingConverter()
    converter = MarkdownToTreeConverter(std)

    converter.parse_slice("a\n```mermaid\nsequenceDiagram\n  A->>B: hi\n```\nb")

    assert all("sequenceDiagram" not in call for call in std.calls)


def test_diagram_at_end_has_no_separator():
    """A diagram closing the text is not followed by a separator paragraph."""
    converter = MarkdownToTreeConverter(RecordingConverter())

    nodes = converter.parse_slice("```mermaid\npie\n  \"A\" : 1\n```")

    assert len(nodes) == 1
    assert isinstance(nodes[0], DiagramBlock)
    assert nodes[0].kind == DiagramKind.PIE


def test_consecutive_diagrams_get_separator():
    """Back-to-back diagrams are kept apart by an empty paragraph."""
    std = RecordingConverter()
    converter = MarkdownToTreeConverter(std)
    text = "```mermaid\ngraph TD\n```\n\n```mermaid\ngantt\n```"

    nodes = converter.parse_slice(text)

    assert std.calls == []
    assert [type(n) for n in nodes] == [DiagramBlock, Paragraph, DiagramBlock]
    assert nodes[1] == Paragraph()


def test_unclosed_fence_consumes_rest():
    """An unclosed diagram fence swallows the rest of the text."""
    std = RecordingConverter()
    converter = MarkdownToTreeConverter(std)

    nodes = converter.parse_slice("Intro\n```mermaid\ngraph LR\n  A-->B")

    assert std.calls == ["Intro\n"]
    assert nodes[-1] == DiagramBlock(source="graph LR\n  A-->B", kind=DiagramKind.FLOWCHART)


def test_diagram_attributes_from_constructor():
    """View mode and theme come from the converter settings."""
    converter = MarkdownToTreeConverter(
        RecordingConverter(), view_mode=ViewMode.SPLIT, theme=DiagramTheme.DARK
    )

    block = converter.parse_slice("```mermaid\ngraph TD\n```")[0]

    assert block.view_mode == ViewMode.SPLIT
    assert block.theme == DiagramTheme.DARK


def test_whitespace_between_diagrams_is_dropped():
    """Whitespace-only prose produces no nodes."""
    std = RecordingConverter()
    converter = MarkdownToTreeConverter(std)

    converter.parse_slice("```mermaid\ngraph TD\n```\n   \n```mermaid\npie\n```\n  ")

    assert std.calls == []


def test_standard_converter_errors_propagate():
    """Conversion failures are raised to the caller."""
    converter = MarkdownToTreeConverter(FailingConverter())

    with pytest.raises(RuntimeError):
        converter.parse_slice("# Title")


def test_load_document_matches_parse_slice():
    """Both entry points produce the same nodes for the same text."""
    converter = MarkdownToTreeConverter(MarkdownItConverter())
    text = "# Intro\n\ntext\n\n```mermaid\npie\n```\n\n# Intro\n"

    assert converter.load_document(text) == converter.parse_slice(text)


def test_converter_leaves_heading_ids_empty():
    """Heading ids are not assigned during conversion."""
    converter = MarkdownToTreeConverter(MarkdownItConverter())

    nodes = converter.load_document("# Intro\n\n# Intro\n")

    assert [n.id for n in nodes] == ["", ""]


def test_markdown_it_with_diagram_and_code():
    """End to end with the real converter."""
    converter = MarkdownToTreeConverter(MarkdownItConverter())
    text = (
        "# Design\n\n"
        "```mermaid\nclassDiagram\n  class A\n```\n\n"
        "```python\nx = 1\n```\n"
    )

    nodes = converter.load_document(text)

    assert isinstance(nodes[0], Heading)
    assert nodes[1] == DiagramBlock(source="classDiagram\n  class A", kind=DiagramKind.CLASS)
    assert nodes[2] == Paragraph()
    assert nodes[3] == CodeBlock(text="x = 1", language="python")
