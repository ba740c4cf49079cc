"""Git adapter implementing the VCS protocol using subprocess git commands."""

import logging
import os
import shlex
import subprocess
from collections.abc import Sequence

from bgit.domain.config import ExecutionConfig
from bgit.domain.entities import ExecutionOutcome, OutcomeTag
from bgit.domain.exceptions import SubprocessFailureError
from bgit.ports.output import Output

logger = logging.getLogger(__name__)

# Known failure signatures, matched case-insensitively against captured
# stderr/stdout. Anything not listed here is a generic failure.
_FAILURE_SIGNATURES: tuple[tuple[str, OutcomeTag], ...] = (
    ("not possible to fast-forward", OutcomeTag.NON_FAST_FORWARD),
    ("diverging branches", OutcomeTag.NON_FAST_FORWARD),
    ("have diverged", OutcomeTag.NON_FAST_FORWARD),
    ("non-fast-forward", OutcomeTag.NON_FAST_FORWARD),
    ("[rejected]", OutcomeTag.NON_FAST_FORWARD),
    ("fetch first", OutcomeTag.NON_FAST_FORWARD),
    ("conflict", OutcomeTag.CONFLICT),
    ("automatic merge failed", OutcomeTag.CONFLICT),
)


def classify_outcome(returncode: int, stdout: str, stderr: str) -> OutcomeTag:
    """Classify a finished git invocation.

    Args:
        returncode: Process exit status.
        stdout: Captured standard output.
        stderr: Captured standard error.

    Returns:
        SUCCESS for exit 0, otherwise the first matching signature's tag,
        or FAILURE when nothing matches.
    """
    if returncode == 0:
        return OutcomeTag.SUCCESS

    text = f"{stderr}\n{stdout}".lower()
    for signature, tag in _FAILURE_SIGNATURES:
        if signature in text:
            return tag
    return OutcomeTag.FAILURE


def format_command(argv: Sequence[str]) -> str:
    """Render a command line the way it is traced: "+ git <args>"."""
    return f"+ {shlex.join(argv)}"


class GitAdapter:
    """Git VCS adapter using subprocess calls to git CLI."""

    def __init__(
        self,
        config: ExecutionConfig,
        output: Output | None = None,
        git_binary: str = "git",
    ) -> None:
        """Initialize Git adapter.

        Args:
            config: Execution settings; cwd is where git runs, verbose
                enables "+ git" tracing of mutating commands.
            output: Destination for trace and plan lines.
            git_binary: Program to invoke.
        """
        self.config = config
        self.output = output
        self.git_binary = git_binary
        # Failure classification matches English messages.
        self._env = {**os.environ, "LC_ALL": "C"}

    def _run_git(self, args: Sequence[str]) -> ExecutionOutcome:
        """Run a git command in the configured directory.

        Args:
            args: Git command arguments (without 'git' prefix).

        Returns:
            Classified ExecutionOutcome. A missing git binary is reported as
            a failed outcome with exit code 127.
        """
        argv = (self.git_binary, *args)
        logger.debug("git %s", shlex.join(args))
        try:
            result = subprocess.run(
                argv,
                cwd=self.config.cwd,
                env=self._env,
                capture_output=True,
                text=True,
                errors="replace",
                check=False,
            )
        except FileNotFoundError as e:
            return ExecutionOutcome(
                argv=argv,
                returncode=127,
                stderr=str(e),
                tag=OutcomeTag.FAILURE,
            )

        tag = classify_outcome(result.returncode, result.stdout, result.stderr)
        if tag is not OutcomeTag.SUCCESS:
            logger.debug(
                "git %s exited %d (%s)", shlex.join(args), result.returncode, tag.value
            )
        return ExecutionOutcome(
            argv=argv,
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
            tag=tag,
        )

    def query(self, args: Sequence[str]) -> ExecutionOutcome:
        """Run a read-only git command. Never raises on non-zero exit."""
        return self._run_git(args)

    def run(self, args: Sequence[str], *, allow_failure: bool = False) -> ExecutionOutcome:
        """Run a mutating git command, tracing it first in verbose mode.

        Raises:
            SubprocessFailureError: If the command fails and allow_failure is False.
        """
        if self.config.verbose and self.output is not None:
            self.output.trace((self.git_binary, *args))

        outcome = self._run_git(args)
        if not outcome.ok and not allow_failure:
            raise SubprocessFailureError(outcome)
        return outcome

    def plan(self, args: Sequence[str]) -> ExecutionOutcome:
        """Print a mutating git command instead of running it."""
        argv = (self.git_binary, *args)
        if self.output is not None:
            self.output.line(format_command(argv))
        logger.debug("planned: %s", shlex.join(argv))
        return ExecutionOutcome.planned_success(argv)
