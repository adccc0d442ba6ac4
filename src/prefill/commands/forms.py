"""
prefill.commands.forms - Inspect the upstream graph.

- `prefill forms` - List forms with field counts
- `prefill fields FORM_ID` - Fields of a form with their prefill status
- `prefill sources FORM_ID` - Direct / transitive / global source groups
"""

from __future__ import annotations

import argparse
import json
import sys

from prefill.graph.serialize import serialize_graph, serialize_groups, serialize_state
from prefill.workspace import DEFAULT_PREFILL_STATE, LoadState, Workspace


def load_workspace(args: argparse.Namespace) -> Workspace | None:
    """Build a Workspace from config + CLI overrides and load the graph.

    Prints the fetch error and returns None when loading fails.
    """
    from prefill.config import get_config

    config = get_config(getattr(args, "config", None))
    if getattr(args, "base_url", None):
        config.setdefault("api", {})["base_url"] = args.base_url

    workspace = Workspace.from_config(config, initial_state=DEFAULT_PREFILL_STATE)
    if workspace.load() is LoadState.ERROR:
        print(f"Error: {workspace.error}", file=sys.stderr)
        return None
    form_id = getattr(args, "form_id", None)
    if form_id:
        workspace.select_form(form_id)
    return workspace


def run(args: argparse.Namespace) -> int:
    """Run the forms, fields or sources command."""
    workspace = load_workspace(args)
    if workspace is None:
        return 1

    if args.command == "forms":
        return _print_forms(workspace, args)
    elif args.command == "fields":
        return _print_fields(workspace, args)
    elif args.command == "sources":
        return _print_sources(workspace, args)
    print(f"Unknown command: {args.command}", file=sys.stderr)
    return 1


def _print_forms(workspace: Workspace, args: argparse.Namespace) -> int:
    if args.json:
        print(json.dumps(serialize_graph(workspace.graph), indent=2))
        return 0
    if workspace.graph.is_empty:
        print("No forms available.")
        return 0
    for form in workspace.graph.iter_forms():
        count = len(form.fields)
        print(f"{form.name} ({form.id}) - {count} field{'' if count == 1 else 's'}")
    return 0


def _print_fields(workspace: Workspace, args: argparse.Namespace) -> int:
    form = workspace.selected_form
    if form is None:
        print("Select a form to view its fields.")
        return 0
    if args.json:
        print(json.dumps(serialize_state({form.id: workspace.store.visible(form)}), indent=2))
        return 0
    print(f"Fields for {form.name}:")
    for row in workspace.field_rows():
        status = f"Prefilled from {row.source.label}" if row.source else "No mapping"
        print(f"  {row.field.label} [{row.field.id}, {row.field.type}] - {status}")
    return 0


def _print_sources(workspace: Workspace, args: argparse.Namespace) -> int:
    groups = workspace.source_groups()
    if args.json:
        print(json.dumps(serialize_groups(groups), indent=2))
        return 0
    for group in groups:
        print(f"{group.label}:")
        if not group.forms:
            print("  No sources in this group.")
            continue
        for form in group.forms:
            print(f"  {form.name} ({form.id})")
            if not form.fields:
                print("    No fields available")
            for f in form.fields:
                print(f"    - {f.label} ({f.id})")
    return 0
