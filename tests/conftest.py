"""Shared pytest fixtures for prefill tests."""

import pytest

from prefill.graph.models import ActionBlueprintGraph, Edge, Field, FormNode


def make_form(form_id: str, *field_ids: str, name: str = "") -> FormNode:
    """Build a FormNode whose fields are labelled by id."""
    return FormNode(
        id=form_id,
        name=name or f"Form {form_id}",
        fields=tuple(Field(id=field_id, type="short-text") for field_id in field_ids),
    )


def make_graph(forms: list[FormNode], edges: list[tuple[str, str]]) -> ActionBlueprintGraph:
    """Build a graph from forms and (source, target) pairs."""
    return ActionBlueprintGraph(
        forms=tuple(forms),
        edges=tuple(Edge(source=s, target=t) for s, t in edges),
    )


@pytest.fixture
def chain_graph():
    """A -> B -> C, every form with an email field."""
    return make_graph(
        [make_form("A", "email"), make_form("B", "email"), make_form("C", "email")],
        [("A", "B"), ("B", "C")],
    )


@pytest.fixture
def diamond_graph():
    """A -> B, A -> C, B -> D, C -> D, D -> E."""
    return make_graph(
        [
            make_form("A", "email", "name"),
            make_form("B", "email"),
            make_form("C", "notes"),
            make_form("D", "email"),
            make_form("E", "email"),
        ],
        [("A", "B"), ("A", "C"), ("B", "D"), ("C", "D"), ("D", "E")],
    )


@pytest.fixture
def schema_payload():
    """SCHEMA shaped payload: A -> B -> C over two form definitions."""
    return {
        "nodes": [
            {"id": "A", "type": "form", "data": {"name": "Form A", "component_id": "def-1"}},
            {"id": "B", "type": "form", "data": {"name": "Form B", "component_id": "def-2"}},
            {"id": "C", "type": "form", "data": {"name": "Form C", "component_id": "def-1"}},
        ],
        "edges": [
            {"source": "A", "target": "B"},
            {"source": "B", "target": "C"},
        ],
        "forms": [
            {
                "id": "def-1",
                "name": "first",
                "field_schema": {
                    "properties": {
                        "email": {"avantos_type": "short-text", "title": "Email", "type": "string"},
                        "tags": {"type": ["string", "null"]},
                    }
                },
            },
            {
                "id": "def-2",
                "name": "second",
                "field_schema": {
                    "properties": {
                        "email": {"avantos_type": "short-text", "title": "Email", "type": "string"},
                        "age": {"title": "Age", "type": "integer"},
                        "misc": {},
                    }
                },
            },
        ],
    }


@pytest.fixture
def legacy_payload():
    """LEGACY shaped payload equivalent to ``schema_payload``."""
    return {
        "forms": [
            {
                "id": "A",
                "name": "Form A",
                "fields": [
                    {"id": "email", "label": "Email", "type": "short-text"},
                    {"id": "tags", "type": "string|null"},
                ],
            },
            {
                "id": "B",
                "name": "Form B",
                "fields": [
                    {"id": "email", "label": "Email", "type": "short-text"},
                    {"id": "age", "label": "Age", "type": "integer"},
                    {"id": "misc"},
                ],
            },
            {
                "id": "C",
                "name": "Form C",
                "fields": [
                    {"id": "email", "label": "Email", "type": "short-text"},
                    {"id": "tags", "type": "string|null"},
                ],
            },
        ],
        "edges": [
            {"from": "A", "to": "B"},
            {"from": "B", "to": "C"},
        ],
    }
