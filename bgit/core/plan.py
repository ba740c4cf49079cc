"""Executes or prints a CommandPlan.

In live mode each step runs through VCS.run and must succeed before the
next one starts. In dry-run mode every step goes through VCS.plan, which
only prints it, so a dry run never issues a mutating git call.
"""

import logging
from dataclasses import dataclass, field

from bgit.domain.entities import CommandPlan, ExecutionOutcome, PlanStep
from bgit.ports.progress import ProgressCallback
from bgit.ports.vcs import VCS

logger = logging.getLogger(__name__)


@dataclass
class PlanResult:
    """Outcome of applying a plan.

    Attributes:
        outcomes: Outcomes of the steps that ran, in order.
        failed_step: The step that failed, or None if every step succeeded.
    """

    outcomes: list[ExecutionOutcome] = field(default_factory=list)
    failed_step: PlanStep | None = None

    @property
    def succeeded(self) -> bool:
        return self.failed_step is None

    @property
    def failure(self) -> ExecutionOutcome:
        """The failing outcome. Only valid when succeeded is False."""
        return self.outcomes[-1]


class PlanRunner:
    """Applies command plans through a VCS adapter."""

    def __init__(
        self,
        vcs: VCS,
        dry_run: bool = False,
        progress: ProgressCallback | None = None,
    ) -> None:
        self.vcs = vcs
        self.dry_run = dry_run
        self.progress = progress

    def execute(self, plan: CommandPlan, description: str | None = None) -> PlanResult:
        """Run (or print) every step, stopping at the first failure.

        Args:
            plan: Steps to apply.
            description: Label for progress reporting. Progress is only
                reported when a description is given.
        """
        result = PlanResult()
        report = self.progress is not None and description is not None and not self.dry_run
        if report:
            self.progress.on_start(len(plan), description)
        try:
            for index, step in enumerate(plan.steps, start=1):
                logger.debug("Step %d/%d: %s", index, len(plan), step.description)
                if self.dry_run:
                    outcome = self.vcs.plan(step.args)
                else:
                    outcome = self.vcs.run(step.args, allow_failure=True)
                result.outcomes.append(outcome)
                if report:
                    self.progress.on_progress(index, step.description)
                if not outcome.ok:
                    result.failed_step = step
                    break
        finally:
            if report:
                self.progress.on_complete()
        return result
