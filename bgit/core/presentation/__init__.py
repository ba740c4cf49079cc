"""Presentation layer for the read-only report commands.

Each renderer turns a RepositoryContext (plus any extra query results)
into the fixed lines printed by status, where, remote, log and check.
"""

from bgit.core.presentation.report_renderer import (
    SHIP_SUGGESTION,
    render_check,
    render_log,
    render_remote,
    render_status,
    render_where,
)

__all__ = [
    "SHIP_SUGGESTION",
    "render_check",
    "render_log",
    "render_remote",
    "render_status",
    "render_where",
]
