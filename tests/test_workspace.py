"""Tests for workspace.py - Load lifecycle and selection glue."""

import os

import pytest

from prefill.config import get_config
from prefill.errors import (
    ConfigError,
    FetchError,
    InvalidCommitError,
    SessionStateError,
    UnknownFormError,
)
from prefill.graph.resolver import GroupKind
from prefill.mapping.sources import FormFieldSource, GlobalSource
from prefill.workspace import DEFAULT_PREFILL_STATE, LoadState, Workspace


def _fetcher(payload):
    return lambda: payload


def _failing(message="Failed to load graph: 500", status=500):
    def fetcher():
        raise FetchError(message, status=status)

    return fetcher


@pytest.fixture
def workspace(schema_payload):
    ws = Workspace(_fetcher(schema_payload))
    ws.load()
    return ws


class TestLoad:
    def test_starts_idle_with_empty_graph(self, schema_payload):
        ws = Workspace(_fetcher(schema_payload))

        assert ws.status is LoadState.IDLE
        assert ws.graph.is_empty
        assert ws.selected_form_id is None

    def test_queries_before_load_are_well_defined(self, schema_payload):
        ws = Workspace(_fetcher(schema_payload))

        direct, transitive, global_ = ws.source_groups()

        assert direct.forms == ()
        assert transitive.forms == ()
        assert global_.forms
        assert ws.field_rows() == []

    def test_success_selects_first_form(self, workspace):
        assert workspace.status is LoadState.SUCCESS
        assert workspace.error is None
        assert workspace.selected_form_id == "A"
        assert workspace.graph.form_count() == 3

    def test_failure_enters_error_state(self):
        ws = Workspace(_failing())

        assert ws.load() is LoadState.ERROR
        assert ws.error == "Failed to load graph: 500"
        assert ws.graph.is_empty

    def test_failure_keeps_store(self):
        ws = Workspace(_failing(), initial_state=DEFAULT_PREFILL_STATE)

        ws.load()

        assert ws.store.snapshot() == DEFAULT_PREFILL_STATE

    def test_reload_keeps_selection_and_store(self, workspace):
        workspace.select_form("C")
        workspace.store.set("C", "legacy", GlobalSource("x"))

        workspace.load()

        assert workspace.selected_form_id == "C"
        assert ("C", "legacy") in workspace.store

    def test_reload_with_prune(self, schema_payload):
        ws = Workspace(_fetcher(schema_payload), prune_on_reload=True)
        ws.store.set("C", "legacy", GlobalSource("x"))
        ws.store.set("C", "email", GlobalSource("y"))

        ws.load()

        assert ws.store.snapshot() == {"C": {"email": GlobalSource("y")}}

    def test_reload_drops_vanished_selection(self, workspace):
        workspace.select_form("C")
        workspace._fetcher = _fetcher({"forms": [{"id": "Z", "name": "Z"}]})

        workspace.load()

        assert workspace.selected_form_id == "Z"

    def test_from_config_uses_base_url(self, monkeypatch, schema_payload):
        calls = []

        def fake_fetch(base_url, timeout=None):
            calls.append((base_url, timeout))
            return schema_payload

        monkeypatch.setattr("prefill.workspace.fetch_graph", fake_fetch)
        ws = Workspace.from_config({"api": {"base_url": "http://upstream:9000", "timeout": 3}})

        ws.load()

        assert calls == [("http://upstream:9000", 3)]
        assert ws.status is LoadState.SUCCESS

    def test_decimal_timeout_from_env(self, monkeypatch, tmp_path, schema_payload):
        timeouts = []

        def fake_fetch(base_url, timeout=None):
            timeouts.append(timeout)
            return schema_payload

        for name in list(os.environ):
            if name.startswith("PREFILL_"):
                monkeypatch.delenv(name)
        monkeypatch.setenv("PREFILL_API_TIMEOUT", "2.5")
        monkeypatch.setattr("prefill.workspace.fetch_graph", fake_fetch)
        ws = Workspace.from_config(get_config(start_path=tmp_path))

        assert ws.load() is LoadState.SUCCESS
        assert timeouts == [2.5]

    @pytest.mark.parametrize("timeout", ["soon", True, 0, -1])
    def test_invalid_timeout_raises(self, timeout):
        with pytest.raises(ConfigError, match="api.timeout"):
            Workspace.from_config({"api": {"timeout": timeout}})


class TestSelection:
    def test_select_unknown_form_raises(self, workspace):
        with pytest.raises(UnknownFormError):
            workspace.select_form("nope")
        assert workspace.selected_form_id == "A"

    def test_select_form_cancels_open_session(self, workspace):
        workspace.select_form("B")
        workspace.open_mapping("email")

        workspace.select_form("C")

        assert not workspace.session.is_open

    def test_source_groups_follow_selection(self, workspace):
        workspace.select_form("C")

        direct, transitive, _ = workspace.source_groups()

        assert [f.id for f in direct.forms] == ["B"]
        assert [f.id for f in transitive.forms] == ["A"]


class TestMappingFlow:
    def test_map_b_email_from_a_email(self, workspace):
        workspace.select_form("B")
        workspace.open_mapping("email")
        workspace.highlight(GroupKind.DIRECT, "A", "email")

        workspace.commit()

        assert workspace.store.get("B") == {
            "email": FormFieldSource(form_id="A", field_id="email", label="Form A.email")
        }

    def test_map_global_source(self, workspace):
        workspace.select_form("C")
        workspace.open_mapping("email")
        workspace.highlight(GroupKind.GLOBAL, "global_action_properties", "priority")

        committed = workspace.commit()

        assert isinstance(committed, GlobalSource)
        assert workspace.field_rows()[0].source == committed

    def test_highlight_outside_group_raises(self, workspace):
        workspace.select_form("C")
        workspace.open_mapping("email")

        with pytest.raises(KeyError):
            workspace.highlight(GroupKind.DIRECT, "A", "email")

    def test_commit_without_highlight(self, workspace):
        workspace.select_form("B")
        workspace.open_mapping("email")

        assert not workspace.can_commit()
        with pytest.raises(InvalidCommitError):
            workspace.commit()
        assert workspace.store.get("B") == {}

    def test_open_mapping_unknown_field(self, workspace):
        with pytest.raises(SessionStateError):
            workspace.open_mapping("phone")

    def test_cancel_leaves_store(self, workspace):
        workspace.select_form("B")
        workspace.open_mapping("email")
        workspace.highlight(GroupKind.DIRECT, "A", "email")

        workspace.cancel()

        assert workspace.store.get("B") == {}

    def test_clear_mapping(self, workspace):
        workspace.select_form("B")
        workspace.store.set("B", "email", GlobalSource("x"))

        workspace.clear_mapping("email")
        workspace.clear_mapping("email")

        assert workspace.store.get("B") == {}

    def test_field_rows(self, workspace):
        workspace.select_form("B")
        workspace.store.set("B", "age", GlobalSource("x"))

        rows = workspace.field_rows()

        assert [r.field.id for r in rows] == ["email", "age", "misc"]
        assert [r.is_mapped for r in rows] == [False, True, False]
