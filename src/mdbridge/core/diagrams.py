"""Diagram block templates, attribute commands and preview rendering."""

import logging
from dataclasses import dataclass, replace

from .model import DiagramBlock, DiagramKind, DiagramTheme, ViewMode
from .ports import DiagramRenderer, RenderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiagramTemplate:
    kind: DiagramKind
    name: str
    description: str
    source: str


TEMPLATES: dict[DiagramKind, DiagramTemplate] = {t.kind: t for t in [
    DiagramTemplate(
        DiagramKind.FLOWCHART, "Flowchart", "Flow diagrams, algorithms and workflows",
        "flowchart TD\n"
        "    A[Start] --> B{Condition}\n"
        "    B -->|Yes| C[Action 1]\n"
        "    B -->|No| D[Action 2]\n"
        "    C --> E[End]\n"
        "    D --> E",
    ),
    DiagramTemplate(
        DiagramKind.SEQUENCE, "Sequence Diagram", "Show interactions between objects",
        "sequenceDiagram\n"
        "    participant User\n"
        "    participant System\n"
        "    participant Database\n"
        "    User->>System: Send request\n"
        "    System->>Database: Query data\n"
        "    Database-->>System: Return result\n"
        "    System-->>User: Respond",
    ),
    DiagramTemplate(
        DiagramKind.CLASS, "Class Diagram", "Show class structure and relationships",
        "classDiagram\n"
        "    class Animal {\n"
        "        +String name\n"
        "        +int age\n"
        "        +void eat()\n"
        "    }\n"
        "    class Dog {\n"
        "        +String breed\n"
        "        +void bark()\n"
        "    }\n"
        "    Animal <|-- Dog",
    ),
    DiagramTemplate(
        DiagramKind.STATE, "State Diagram", "Show state transitions of an object",
        "stateDiagram-v2\n"
        "    [*] --> Pending\n"
        "    Pending --> Processing : start\n"
        "    Processing --> Done : finish\n"
        "    Processing --> Cancelled : cancel\n"
        "    Done --> [*]\n"
        "    Cancelled --> [*]",
    ),
    DiagramTemplate(
        DiagramKind.GANTT, "Gantt Chart", "Project timeline and scheduling",
        "gantt\n"
        "    title Project plan\n"
        "    dateFormat YYYY-MM-DD\n"
        "    section Analysis\n"
        "    Gather requirements :a1, 2024-01-01, 7d\n"
        "    Review requirements :a2, after a1, 3d\n"
        "    section Build\n"
        "    Frontend :2024-02-01, 14d\n"
        "    Backend :2024-02-01, 21d",
    ),
    DiagramTemplate(
        DiagramKind.PIE, "Pie Chart", "Show data distribution",
        'pie title Distribution\n'
        '    "A" : 30\n'
        '    "B" : 50\n'
        '    "C" : 20',
    ),
    DiagramTemplate(
        DiagramKind.MINDMAP, "Mind Map", "Show hierarchical relationships",
        "mindmap\n"
        "  root((Topic))\n"
        "    Branch 1\n"
        "      Leaf 1\n"
        "      Leaf 2\n"
        "    Branch 2\n"
        "      Leaf 3",
    ),
    DiagramTemplate(
        DiagramKind.ENTITY_RELATIONSHIP, "ER Diagram", "Entity-Relationship diagrams",
        "erDiagram\n"
        "    CUSTOMER ||--o{ ORDER : places\n"
        "    ORDER ||--|{ LINE_ITEM : contains\n"
        "    CUSTOMER }|..|{ DELIVERY_ADDRESS : uses",
    ),
    DiagramTemplate(
        DiagramKind.GIT_HISTORY, "Git Graph", "Show Git commit history",
        "gitGraph\n"
        '    commit id: "Initial commit"\n'
        '    commit id: "Add feature"\n'
        "    branch develop\n"
        "    checkout develop\n"
        '    commit id: "Bug fix"\n'
        "    checkout main\n"
        "    merge develop",
    ),
    DiagramTemplate(
        DiagramKind.TIMELINE, "Timeline", "Chronological display of events",
        "timeline\n"
        "    title Milestones\n"
        "    2024-01-01 : Kickoff\n"
        "    2024-03-01 : Design complete\n"
        "    2024-06-01 : Launch",
    ),
    DiagramTemplate(
        DiagramKind.JOURNEY, "User Journey", "Show user experience journey",
        "journey\n"
        "    title Shopping experience\n"
        "    section Browse\n"
        "      Open home page: 5: User\n"
        "      Search product: 3: User\n"
        "    section Checkout\n"
        "      Add to cart: 3: User\n"
        "      Pay: 4: User",
    ),
    DiagramTemplate(
        DiagramKind.QUADRANT, "Quadrant Chart", "Technology evaluation matrix",
        "quadrantChart\n"
        "    title Tech Evaluation Matrix\n"
        "    x-axis Low Complexity --> High Complexity\n"
        "    y-axis Low Value --> High Value\n"
        "    quadrant-1 Priority 1\n"
        "    quadrant-2 Priority 2\n"
        "    quadrant-3 Priority 3\n"
        "    quadrant-4 Priority 4\n"
        '    "React": [0.3, 0.8]\n'
        '    "Angular": [0.8, 0.4]',
    ),
    DiagramTemplate(
        DiagramKind.ARCHITECTURE_CONTEXT, "C4 Context", "System architecture context diagram",
        "C4Context\n"
        "    title System context\n"
        '    Person(user, "User", "A system user")\n'
        '    System(system, "Order System", "Handles orders")\n'
        '    System_Ext(payment, "Payment Gateway", "Third-party payments")\n'
        '    Rel(user, system, "Uses")\n'
        '    Rel(system, payment, "Calls")',
    ),
    DiagramTemplate(
        DiagramKind.REQUIREMENT, "Requirement Diagram", "Show requirement relationships",
        "requirementDiagram\n"
        "    requirement login {\n"
        "      id: 1\n"
        "      text: User login\n"
        "      risk: high\n"
        "      verifymethod: test\n"
        "    }\n"
        "    element login_page {\n"
        "      type: page\n"
        "    }\n"
        "    login_page - satisfies -> login",
    ),
]}


def template_for(kind: DiagramKind | str) -> DiagramTemplate:
    """Template for `kind`, the flowchart template for anything unknown."""
    try:
        return TEMPLATES[DiagramKind(kind)]
    except ValueError:
        return TEMPLATES[DiagramKind.FLOWCHART]


def new_diagram_block(
    kind: DiagramKind = DiagramKind.FLOWCHART,
    content: str | None = None,
    theme: DiagramTheme = DiagramTheme.DEFAULT,
) -> DiagramBlock:
    """A freshly inserted diagram opens in source view."""
    source = content if content is not None else template_for(kind).source
    return DiagramBlock(source=source, kind=kind, view_mode=ViewMode.SOURCE, theme=theme)


def with_kind(block: DiagramBlock, kind: DiagramKind) -> DiagramBlock:
    return replace(block, kind=DiagramKind(kind))


def with_view_mode(block: DiagramBlock, view_mode: ViewMode) -> DiagramBlock:
    return replace(block, view_mode=ViewMode(view_mode))


def with_theme(block: DiagramBlock, theme: DiagramTheme) -> DiagramBlock:
    return replace(block, theme=DiagramTheme(theme))


@dataclass(frozen=True)
class DiagramPreview:
    source: str
    svg: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def render_preview(block: DiagramBlock, renderer: DiagramRenderer, instance_id: str) -> DiagramPreview:
    """Render a diagram; a failed render keeps the source so nothing is lost."""
    try:
        result = renderer.render(block.source, instance_id, block.theme)
    except RenderError as e:
        logger.warning("Diagram %s failed to render: %s", instance_id, e)
        return DiagramPreview(source=block.source, error=str(e))
    return DiagramPreview(source=block.source, svg=result.svg)
