"""Read-only reporting use cases: status, log, where, remote and check."""

import logging
from dataclasses import dataclass

from bgit.core.commands.base import UseCase
from bgit.core.guards import require_remote, ship_preflight
from bgit.core.presentation.report_renderer import (
    render_check,
    render_log,
    render_remote,
    render_status,
    render_where,
)
from bgit.domain.entities import ExitSignal
from bgit.domain.exceptions import BgitError

logger = logging.getLogger(__name__)


@dataclass
class ReportRequest:
    """Request for a report.

    Attributes:
        limit: Maximum number of entries (log only).
    """

    limit: int | None = None


class StatusUseCase(UseCase):
    operation_name = "status"

    def _run(self, request: ReportRequest) -> ExitSignal:
        context = self.inspector.snapshot()
        return ExitSignal.ok(*render_status(context, self.inspector.status_lines()))


class LogUseCase(UseCase):
    operation_name = "log"

    def _run(self, request: ReportRequest) -> ExitSignal:
        limit = request.limit or self.env.settings.log.limit
        return ExitSignal.ok(*render_log(self.inspector.recent_commits(limit)))


class WhereUseCase(UseCase):
    operation_name = "where"

    def _run(self, request: ReportRequest) -> ExitSignal:
        return ExitSignal.ok(*render_where(self.inspector.snapshot()))


class RemoteUseCase(UseCase):
    operation_name = "remote"

    def _run(self, request: ReportRequest) -> ExitSignal:
        context = self.inspector.snapshot()
        require_remote(context)
        return ExitSignal.ok(
            *render_remote(
                context.remote_url,
                self.inspector.default_remote_branch(),
                self.inspector.remote_branches(),
            )
        )


class CheckUseCase(UseCase):
    """Report whether ship would proceed, using ship's own preconditions."""

    operation_name = "check"

    def _run(self, request: ReportRequest) -> ExitSignal:
        blocker = None
        try:
            ship_preflight(self.inspector)
        except BgitError as e:
            blocker = e.message
        return ExitSignal.ok(*render_check(self.inspector.snapshot(), blocker))
