"""Domain exceptions for bgit.

Each exception maps to exactly one ErrorKind and therefore to one exit
code. They are raised by guards and use cases and converted into an
ExitSignal at the use case boundary; the CLI never sees them directly.
"""

from bgit.domain.entities import ErrorKind, ExecutionOutcome, ExitCode


class BgitError(Exception):
    """Base exception for all bgit domain errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
        detail: Raw git diagnostic text, if any.
    """

    kind: ErrorKind = ErrorKind.SUBPROCESS_FAILURE

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.detail = detail

    @property
    def exit_code(self) -> ExitCode:
        return self.kind.exit_code


class InvalidUsageError(BgitError):
    kind = ErrorKind.INVALID_USAGE


class NotARepositoryError(BgitError):
    kind = ErrorKind.NOT_A_REPOSITORY


class RemoteMissingError(BgitError):
    kind = ErrorKind.REMOTE_MISSING


class DirtyTreeError(BgitError):
    kind = ErrorKind.DIRTY_TREE


class DetachedHeadError(BgitError):
    kind = ErrorKind.DETACHED_HEAD


class NoUpstreamError(BgitError):
    kind = ErrorKind.NO_UPSTREAM


class DivergedHistoryError(BgitError):
    kind = ErrorKind.DIVERGED_HISTORY


class UnshippedCommitsError(BgitError):
    """Raised when a branch involved in a merge is not fully shipped.

    Attributes:
        branch: The offending branch.
    """

    kind = ErrorKind.UNSHIPPED_COMMITS

    def __init__(
        self,
        branch: str,
        message: str,
        hint: str | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint, detail=detail)
        self.branch = branch


class MergeConflictError(BgitError):
    kind = ErrorKind.MERGE_CONFLICT


class BranchNotFoundError(BgitError):
    kind = ErrorKind.BRANCH_NOT_FOUND


class NothingToUndoError(BgitError):
    kind = ErrorKind.NOTHING_TO_UNDO


class SubprocessFailureError(BgitError):
    """Catch-all for a git failure that matched no known signature.

    Attributes:
        outcome: The failed invocation, stderr included.
    """

    kind = ErrorKind.SUBPROCESS_FAILURE

    def __init__(self, outcome: ExecutionOutcome, context: str | None = None) -> None:
        command = " ".join(outcome.argv)
        message = f"{context or 'Command failed'}: {command} (exit code {outcome.returncode})"
        super().__init__(message, detail=outcome.diagnostic or None)
        self.outcome = outcome
