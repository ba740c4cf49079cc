"""Core domain entities for bgit.

These are the value objects that flow between the inspector, the guards,
the plan runner and the command use cases. All of them are immutable and
live for a single command invocation.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path

DETACHED = "(detached)"
"""Sentinel returned in place of a branch name when HEAD is detached."""

REMOTE_NAME = "origin"


class ExitCode(IntEnum):
    """Process exit codes. These values are a stable contract."""

    SUCCESS = 0
    INVALID_USAGE = 1
    NOT_A_REPOSITORY = 2
    DIRTY_TREE = 3
    REMOTE_MISSING = 4
    DIVERGED = 5
    UNSHIPPED = 6
    MERGE_CONFLICT = 7


class ErrorKind(Enum):
    """Closed set of failure kinds a command can terminate with."""

    INVALID_USAGE = "InvalidUsage"
    NOT_A_REPOSITORY = "NotARepository"
    REMOTE_MISSING = "RemoteMissing"
    DIRTY_TREE = "DirtyTree"
    DETACHED_HEAD = "DetachedHead"
    NO_UPSTREAM = "NoUpstream"
    DIVERGED_HISTORY = "DivergedHistory"
    UNSHIPPED_COMMITS = "UnshippedCommits"
    MERGE_CONFLICT = "MergeConflict"
    BRANCH_NOT_FOUND = "BranchNotFound"
    NOTHING_TO_UNDO = "NothingToUndo"
    SUBPROCESS_FAILURE = "GenericSubprocessFailure"

    @property
    def exit_code(self) -> ExitCode:
        return _EXIT_CODES[self]


_EXIT_CODES: dict[ErrorKind, ExitCode] = {
    ErrorKind.INVALID_USAGE: ExitCode.INVALID_USAGE,
    ErrorKind.NOT_A_REPOSITORY: ExitCode.NOT_A_REPOSITORY,
    ErrorKind.REMOTE_MISSING: ExitCode.REMOTE_MISSING,
    ErrorKind.DIRTY_TREE: ExitCode.DIRTY_TREE,
    ErrorKind.DETACHED_HEAD: ExitCode.INVALID_USAGE,
    ErrorKind.NO_UPSTREAM: ExitCode.REMOTE_MISSING,
    ErrorKind.DIVERGED_HISTORY: ExitCode.DIVERGED,
    ErrorKind.UNSHIPPED_COMMITS: ExitCode.UNSHIPPED,
    ErrorKind.MERGE_CONFLICT: ExitCode.MERGE_CONFLICT,
    ErrorKind.BRANCH_NOT_FOUND: ExitCode.INVALID_USAGE,
    ErrorKind.NOTHING_TO_UNDO: ExitCode.INVALID_USAGE,
    ErrorKind.SUBPROCESS_FAILURE: ExitCode.INVALID_USAGE,
}


class OutcomeTag(Enum):
    """Classification of a finished git invocation."""

    SUCCESS = "success"
    NON_FAST_FORWARD = "non-fast-forward"
    CONFLICT = "conflict"
    FAILURE = "generic-failure"


@dataclass(frozen=True)
class ExecutionOutcome:
    """Result of running (or planning) one git invocation.

    Attributes:
        argv: Full command line, program name included.
        returncode: Process exit status (0 for planned steps).
        stdout: Captured standard output.
        stderr: Captured standard error.
        tag: Classified outcome used by callers to pick the next step.
        planned: True when the command was only printed (dry-run).
    """

    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    tag: OutcomeTag = OutcomeTag.SUCCESS
    planned: bool = False

    @property
    def ok(self) -> bool:
        return self.tag is OutcomeTag.SUCCESS

    @property
    def output(self) -> str:
        """Stripped stdout, the form most read queries want."""
        return self.stdout.strip()

    @property
    def diagnostic(self) -> str:
        """The tool's own error text, unmodified apart from trimming."""
        return (self.stderr.strip() or self.stdout.strip())

    @classmethod
    def planned_success(cls, argv: tuple[str, ...]) -> "ExecutionOutcome":
        return cls(argv=argv, returncode=0, planned=True)


@dataclass(frozen=True)
class PlanStep:
    """One git operation inside a CommandPlan."""

    args: tuple[str, ...]
    description: str
    program: str = "git"

    @property
    def argv(self) -> tuple[str, ...]:
        return (self.program, *self.args)


@dataclass
class CommandPlan:
    """Ordered sequence of mutating operations produced by a command.

    The same plan is either executed step by step or printed, so dry-run
    output and live behaviour come from one source.
    """

    steps: list[PlanStep] = field(default_factory=list)

    def add(self, description: str, *args: str) -> "CommandPlan":
        self.steps.append(PlanStep(args=tuple(args), description=description))
        return self

    def extend(self, other: "CommandPlan") -> "CommandPlan":
        self.steps.extend(other.steps)
        return self

    def __len__(self) -> int:
        return len(self.steps)

    def __bool__(self) -> bool:
        return bool(self.steps)


@dataclass(frozen=True)
class AheadBehind:
    ahead: int = 0
    behind: int = 0


@dataclass(frozen=True)
class RepositoryContext:
    """Immutable snapshot of repository state taken at one point in time.

    A new snapshot is taken after any step that changes repository state;
    snapshots are never updated in place.

    Attributes:
        root: Repository top-level directory.
        cwd: Directory the command was invoked from.
        branch: Current branch name, or DETACHED.
        upstream: Upstream ref such as "origin/main", or None.
        remote_url: URL of the conventional remote, or None.
        clean: True when `git status --porcelain` reports nothing at all.
        sync: Ahead/behind counts relative to the upstream.
        commit_count: Number of commits reachable from HEAD.
    """

    root: Path
    cwd: Path
    branch: str
    upstream: str | None
    remote_url: str | None
    clean: bool
    sync: AheadBehind = field(default_factory=AheadBehind)
    commit_count: int = 0

    @property
    def detached(self) -> bool:
        return self.branch == DETACHED

    @property
    def has_remote(self) -> bool:
        return bool(self.remote_url)


@dataclass(frozen=True)
class BranchRef:
    """A branch name plus the existence facts used during resolution."""

    name: str
    exists_locally: bool
    exists_on_remote: bool
    is_tracking: bool

    @property
    def remote_ref(self) -> str:
        return f"{REMOTE_NAME}/{self.name}"

    @property
    def exists(self) -> bool:
        return self.exists_locally or self.exists_on_remote


@dataclass(frozen=True)
class ExitSignal:
    """Terminal result of a command: one exit code plus human-readable lines.

    Attributes:
        code: Exit code from the ExitCode table.
        lines: Informational lines to print on stdout.
        error: Primary error message for failures, None on success.
        hint: Optional actionable guidance for failures.
        detail: Raw diagnostic text from git, passed through unmodified.
        kind: Error kind for failures, None on success.
    """

    code: ExitCode = ExitCode.SUCCESS
    lines: tuple[str, ...] = ()
    error: str | None = None
    hint: str | None = None
    detail: str | None = None
    kind: ErrorKind | None = None

    @property
    def success(self) -> bool:
        return self.code == ExitCode.SUCCESS

    @classmethod
    def ok(cls, *lines: str) -> "ExitSignal":
        return cls(code=ExitCode.SUCCESS, lines=tuple(lines))

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str,
        *,
        hint: str | None = None,
        detail: str | None = None,
        lines: tuple[str, ...] = (),
    ) -> "ExitSignal":
        return cls(
            code=kind.exit_code,
            lines=lines,
            error=message,
            hint=hint,
            detail=detail,
            kind=kind,
        )
