"""Global source catalog.

Pseudo-forms that are not part of the graph but are always offered as
prefill sources, whatever form is selected.
"""

from __future__ import annotations

from prefill.graph.models import Field, FormNode

GLOBAL_CATALOG: tuple[FormNode, ...] = (
    FormNode(
        id="global_action_properties",
        name="Action Properties",
        fields=(
            Field(id="action_type", label="Action Type"),
            Field(id="priority", label="Priority"),
            Field(id="due_date", label="Due Date"),
        ),
    ),
    FormNode(
        id="global_client_org",
        name="Client Organization Properties",
        fields=(
            Field(id="org_name", label="Org Name"),
            Field(id="account_tier", label="Account Tier"),
        ),
    ),
)
