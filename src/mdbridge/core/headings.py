"""Heading anchor ids, assigned as a separate pass over a finished tree."""

from dataclasses import replace
from typing import Any, Callable, Iterable

from .model import Heading, text_content
from .utils import unique_slug

IdFactory = Callable[[Heading, set[str]], str]


def _slug_id(heading: Heading, taken: set[str]) -> str:
    return unique_slug(text_content(heading.children), taken)


def assign_ids(
    nodes: Iterable[Any],
    existing_ids: Iterable[str] = (),
    make_id: IdFactory | None = None,
) -> list[Any]:
    """
    Return a copy of `nodes` where every heading has an id unique across the
    tree and `existing_ids`.

    The first heading holding a given id keeps it; later duplicates, headings
    without an id and headings reusing an id from `existing_ids` get a new one.
    Nested headings (inside quotes, list items, ...) are visited too. The input
    tree is left untouched.
    """
    make_id = make_id or _slug_id
    taken = set(existing_ids)
    reserved = frozenset(taken)
    seen: set[str] = set()

    def visit(node: Any) -> Any:
        if isinstance(node, Heading):
            if node.id and node.id not in reserved and node.id not in seen:
                seen.add(node.id)
                taken.add(node.id)
                return node
            new_id = make_id(node, taken)
            seen.add(new_id)
            taken.add(new_id)
            return replace(node, id=new_id)

        for attr in ("children", "items", "rows", "cells"):
            value = getattr(node, attr, None)
            if isinstance(value, list):
                updated = [visit(child) for child in value]
                if any(a is not b for a, b in zip(updated, value)):
                    return replace(node, **{attr: updated})
                return node
        return node

    return [visit(node) for node in nodes]
