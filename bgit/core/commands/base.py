"""Shared plumbing for command use cases.

Error handling contract:
    Use cases catch exceptions internally and return an ExitSignal, so the
    caller only ever inspects signal.code. See bgit.core.use_case_errors.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from bgit.core.guards import require_repository
from bgit.core.inspector import RepositoryInspector
from bgit.core.plan import PlanResult, PlanRunner
from bgit.core.use_case_errors import signal_from_exception
from bgit.domain.config import BgitConfig, ExecutionConfig
from bgit.domain.entities import CommandPlan, ExitSignal
from bgit.domain.exceptions import InvalidUsageError, SubprocessFailureError
from bgit.ports.output import Output
from bgit.ports.vcs import VCS

logger = logging.getLogger(__name__)

DRY_RUN_NOTICE = "Dry run: no changes made."

ConfirmCallback = Callable[[str], bool]


@dataclass
class CommandEnvironment:
    """Dependencies every command use case is built from.

    Attributes:
        config: Per-invocation execution settings.
        vcs: Adapter used for reads, runs and plans.
        output: Where progress lines and planned commands are written.
        settings: Persistent configuration.
        runner: Applies plans; built from vcs and config when omitted.
        confirm: Asks the user to approve a destructive command. None means
            no confirmation is needed.
    """

    config: ExecutionConfig
    vcs: VCS
    output: Output
    settings: BgitConfig = field(default_factory=BgitConfig.default)
    runner: PlanRunner | None = None
    confirm: ConfirmCallback | None = None

    def __post_init__(self) -> None:
        if self.runner is None:
            self.runner = PlanRunner(self.vcs, dry_run=self.config.dry_run)
        self.inspector = RepositoryInspector(self.vcs, self.config.cwd)


class UseCase:
    """Base class: one subclass per command."""

    operation_name = "command"
    # merge parses its arguments before the repository check
    validate_first = False

    def __init__(self, env: CommandEnvironment) -> None:
        self.env = env
        self.inspector = env.inspector
        self.runner = env.runner
        self.output = env.output

    @property
    def dry_run(self) -> bool:
        return self.env.config.dry_run

    def note(self, message: str) -> None:
        """Print a progress line immediately."""
        self.output.line(message)

    def apply(self, plan: CommandPlan, context: str, description: str | None = None) -> PlanResult:
        """Apply a plan whose failures have no special meaning.

        Raises:
            SubprocessFailureError: If any step fails.
        """
        result = self.runner.execute(plan, description)
        if not result.succeeded:
            raise SubprocessFailureError(result.failure, context)
        return result

    def confirm(self, prompt: str) -> None:
        """Ask for approval of a destructive step unless dry-running.

        Raises:
            InvalidUsageError: If the user declines.
        """
        if self.dry_run or self.env.confirm is None:
            return
        if not self.env.confirm(prompt):
            raise InvalidUsageError("Aborted.")

    def validate(self, request) -> None:
        """Reject malformed requests before touching the repository."""

    def _run(self, request) -> ExitSignal:
        raise NotImplementedError

    def execute(self, request) -> ExitSignal:
        """Run the command and return exactly one ExitSignal."""
        try:
            if self.validate_first:
                self.validate(request)
                require_repository(self.inspector)
            else:
                require_repository(self.inspector)
                self.validate(request)
            return self._run(request)
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception as e:
            return signal_from_exception(e, self.operation_name)

    def finish(self, *lines: str) -> ExitSignal:
        if self.dry_run:
            lines = (*lines, DRY_RUN_NOTICE)
        return ExitSignal.ok(*lines)
