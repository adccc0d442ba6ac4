"""
prefill.commands.map_cmd - Map one field of a form to a prefill source.

SOURCE is ``form:<form_id>.<field_id>`` for an upstream form field or
``global:<catalog_id>.<field_id>`` for a global property. The mapping
lives for the duration of the command; the resulting state is printed.
"""

from __future__ import annotations

import argparse
import json
import sys

from prefill.commands.forms import load_workspace
from prefill.graph.resolver import GroupKind
from prefill.graph.serialize import serialize_state
from prefill.mapping.sources import PrefillSource
from prefill.workspace import Workspace

_FORM_GROUPS = (GroupKind.DIRECT, GroupKind.TRANSITIVE)


def parse_source_spec(spec: str) -> tuple[str, str, str]:
    """Split ``kind:<form>.<field>`` into its parts.

    Raises:
        ValueError: If the spec is malformed or the kind is unknown.
    """
    kind, sep, rest = spec.partition(":")
    form_id, dot, field_id = rest.rpartition(".")
    if not sep or not dot or not form_id or not field_id or kind not in ("form", "global"):
        raise ValueError(
            f"Invalid source '{spec}'; expected form:<form>.<field> or global:<id>.<field>"
        )
    return kind, form_id, field_id


def _highlight(workspace: Workspace, kind: str, form_id: str, field_id: str) -> PrefillSource:
    group_kinds = (GroupKind.GLOBAL,) if kind == "global" else _FORM_GROUPS
    for group_kind in group_kinds:
        try:
            return workspace.highlight(group_kind, form_id, field_id)
        except KeyError:
            continue
    raise ValueError(
        f"{form_id}.{field_id} is not a {kind} source for '{workspace.selected_form_id}'"
    )


def run(args: argparse.Namespace) -> int:
    """Run the map command."""
    try:
        kind, source_form, source_field = parse_source_spec(args.source)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    workspace = load_workspace(args)
    if workspace is None:
        return 1

    workspace.open_mapping(args.field_id)
    try:
        source = _highlight(workspace, kind, source_form, source_field)
    except ValueError as e:
        workspace.cancel()
        print(f"Error: {e}", file=sys.stderr)
        return 1
    workspace.commit()

    form = workspace.selected_form
    if args.json:
        print(json.dumps(serialize_state({form.id: workspace.store.visible(form)}), indent=2))
    else:
        print(f"{form.name}.{args.field_id} <- {source.label} ({source.kind.value})")
    return 0
