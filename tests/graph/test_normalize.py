"""Tests for graph/normalize.py - Raw payload normalization."""

import pytest
from structlog.testing import capture_logs

from prefill.graph.models import EMPTY_GRAPH, Edge, Field
from prefill.graph.normalize import (
    PayloadShape,
    detect_shape,
    normalize_field_type,
    normalize_graph,
)


class TestDetectShape:
    """Shape is decided from the envelope only."""

    def test_nodes_and_forms_is_schema(self, schema_payload):
        assert detect_shape(schema_payload) is PayloadShape.SCHEMA

    def test_forms_only_is_legacy(self, legacy_payload):
        assert detect_shape(legacy_payload) is PayloadShape.LEGACY

    def test_nodes_without_forms_is_legacy(self):
        assert detect_shape({"nodes": [], "edges": []}) is PayloadShape.LEGACY

    def test_non_list_nodes_is_legacy(self):
        assert detect_shape({"nodes": {}, "forms": []}) is PayloadShape.LEGACY

    def test_non_mapping_is_legacy(self):
        assert detect_shape(None) is PayloadShape.LEGACY
        assert detect_shape([1, 2]) is PayloadShape.LEGACY


class TestNormalizeFieldType:
    """Type precedence: avantos_type, list type, string type, unknown."""

    @pytest.mark.parametrize(
        "prop, expected",
        [
            ({"avantos_type": "short-text", "type": "string"}, "short-text"),
            ({"type": ["string", "null"]}, "string|null"),
            ({"type": "integer"}, "integer"),
            ({"title": "No type"}, "unknown"),
            ({}, "unknown"),
            (None, "unknown"),
        ],
    )
    def test_precedence(self, prop, expected):
        assert normalize_field_type(prop) == expected


class TestSchemaShape:
    """Conversion of nodes + form definitions."""

    def test_forms_follow_node_order(self, schema_payload):
        graph = normalize_graph(schema_payload)

        assert [form.id for form in graph.forms] == ["A", "B", "C"]
        assert [form.name for form in graph.forms] == ["Form A", "Form B", "Form C"]

    def test_fields_follow_property_order(self, schema_payload):
        graph = normalize_graph(schema_payload)

        assert graph.find_form("B").field_ids() == ["email", "age", "misc"]

    def test_field_label_and_type_defaults(self, schema_payload):
        graph = normalize_graph(schema_payload)
        form_b = graph.find_form("B")

        assert form_b.find_field("email") == Field(id="email", label="Email", type="short-text")
        assert form_b.find_field("age") == Field(id="age", label="Age", type="integer")
        assert form_b.find_field("misc") == Field(id="misc", label="misc", type="unknown")

    def test_nodes_share_form_definition(self, schema_payload):
        graph = normalize_graph(schema_payload)

        assert graph.find_form("A").fields == graph.find_form("C").fields

    def test_edges_use_source_target(self, schema_payload):
        graph = normalize_graph(schema_payload)

        assert graph.edges == (Edge("A", "B"), Edge("B", "C"))

    def test_missing_form_definition_yields_empty_fields(self):
        """A node whose component_id matches no definition is tolerated."""
        payload = {
            "nodes": [{"id": "X", "data": {"name": "Orphan", "component_id": "nope"}}],
            "edges": [],
            "forms": [],
        }

        graph = normalize_graph(payload)

        assert graph.find_form("X").name == "Orphan"
        assert graph.find_form("X").fields == ()

    def test_missing_form_definition_is_logged(self):
        payload = {
            "nodes": [{"id": "X", "data": {"name": "Orphan", "component_id": "nope"}}],
            "edges": [],
            "forms": [],
        }

        with capture_logs() as logs:
            normalize_graph(payload)

        assert [e for e in logs if e["event"] == "form_definition_missing"] == [
            {
                "event": "form_definition_missing",
                "log_level": "debug",
                "node_id": "X",
                "component_id": "nope",
            }
        ]

    def test_edges_missing_endpoints_are_dropped(self, schema_payload):
        schema_payload["edges"].extend([{}, {"source": "A"}, {"target": "C"}])

        graph = normalize_graph(schema_payload)

        assert graph.edges == (Edge("A", "B"), Edge("B", "C"))

    def test_definition_without_field_schema(self):
        payload = {
            "nodes": [{"id": "X", "data": {"name": "Bare", "component_id": "d"}}],
            "forms": [{"id": "d", "name": "bare"}],
        }

        graph = normalize_graph(payload)

        assert graph.find_form("X").fields == ()
        assert graph.edges == ()


class TestLegacyShape:
    """Conversion of flat forms."""

    def test_forms_and_fields_in_order(self, legacy_payload):
        graph = normalize_graph(legacy_payload)

        assert [form.id for form in graph.forms] == ["A", "B", "C"]
        assert graph.find_form("B").field_ids() == ["email", "age", "misc"]

    def test_field_defaults(self):
        graph = normalize_graph({"forms": [{"id": "F", "name": "F", "fields": [{"id": "x"}]}]})

        assert graph.find_form("F").fields == (Field(id="x", label="x", type="unknown"),)

    def test_edges_from_to(self, legacy_payload):
        graph = normalize_graph(legacy_payload)

        assert graph.edges == (Edge("A", "B"), Edge("B", "C"))

    def test_edges_fall_back_to_source_target(self):
        payload = {
            "forms": [{"id": "A", "name": "A"}, {"id": "B", "name": "B"}],
            "edges": [{"source": "A", "target": "B"}],
        }

        assert normalize_graph(payload).edges == (Edge("A", "B"),)

    def test_edges_missing_endpoints_are_dropped(self, legacy_payload):
        legacy_payload["edges"].extend([{"from": "A"}, {"to": "C"}, {}])

        graph = normalize_graph(legacy_payload)

        assert graph.edges == (Edge("A", "B"), Edge("B", "C"))

    def test_form_without_fields(self):
        graph = normalize_graph({"forms": [{"id": "A", "name": "A"}]})

        assert graph.find_form("A").fields == ()


class TestNormalizeGraph:
    """Envelope-level behavior."""

    def test_schema_and_legacy_payloads_are_equal(self, schema_payload, legacy_payload):
        """Equivalent payloads in different envelopes normalize identically."""
        assert normalize_graph(schema_payload) == normalize_graph(legacy_payload)

    @pytest.mark.parametrize("raw", [None, [], "graph", 42])
    def test_non_mapping_payload_is_empty_graph(self, raw):
        assert normalize_graph(raw) == EMPTY_GRAPH

    def test_empty_mapping_is_empty_graph(self):
        graph = normalize_graph({})

        assert graph.is_empty
        assert graph.edges == ()

    def test_does_not_mutate_payload(self, schema_payload):
        import copy

        before = copy.deepcopy(schema_payload)
        normalize_graph(schema_payload)

        assert schema_payload == before
