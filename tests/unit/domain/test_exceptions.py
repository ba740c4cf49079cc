"""Tests for the domain exception hierarchy."""

import pytest

from bgit.domain.entities import ErrorKind, ExecutionOutcome, ExitCode, OutcomeTag
from bgit.domain.exceptions import (
    BgitError,
    BranchNotFoundError,
    DetachedHeadError,
    DirtyTreeError,
    DivergedHistoryError,
    InvalidUsageError,
    MergeConflictError,
    NoUpstreamError,
    NotARepositoryError,
    NothingToUndoError,
    RemoteMissingError,
    SubprocessFailureError,
    UnshippedCommitsError,
)


@pytest.mark.parametrize(
    "error_cls,kind,code",
    [
        (InvalidUsageError, ErrorKind.INVALID_USAGE, ExitCode.INVALID_USAGE),
        (NotARepositoryError, ErrorKind.NOT_A_REPOSITORY, ExitCode.NOT_A_REPOSITORY),
        (RemoteMissingError, ErrorKind.REMOTE_MISSING, ExitCode.REMOTE_MISSING),
        (DirtyTreeError, ErrorKind.DIRTY_TREE, ExitCode.DIRTY_TREE),
        (DetachedHeadError, ErrorKind.DETACHED_HEAD, ExitCode.INVALID_USAGE),
        (NoUpstreamError, ErrorKind.NO_UPSTREAM, ExitCode.REMOTE_MISSING),
        (DivergedHistoryError, ErrorKind.DIVERGED_HISTORY, ExitCode.DIVERGED),
        (MergeConflictError, ErrorKind.MERGE_CONFLICT, ExitCode.MERGE_CONFLICT),
        (BranchNotFoundError, ErrorKind.BRANCH_NOT_FOUND, ExitCode.INVALID_USAGE),
        (NothingToUndoError, ErrorKind.NOTHING_TO_UNDO, ExitCode.INVALID_USAGE),
    ],
)
def test_error_kind_and_exit_code(error_cls, kind, code) -> None:
    error = error_cls("message", hint="hint")
    assert isinstance(error, BgitError)
    assert error.kind is kind
    assert error.exit_code == code
    assert error.message == "message"
    assert error.hint == "hint"
    assert str(error) == "message"


def test_unshipped_commits_error_names_branch() -> None:
    error = UnshippedCommitsError("feature", "Branch 'feature' has 1 unshipped commit(s)")
    assert error.branch == "feature"
    assert error.exit_code == ExitCode.UNSHIPPED


class TestSubprocessFailureError:
    def test_message_includes_command_and_exit_code(self) -> None:
        outcome = ExecutionOutcome(
            argv=("git", "push"),
            returncode=128,
            stderr="fatal: unable to access remote\n",
            tag=OutcomeTag.FAILURE,
        )
        error = SubprocessFailureError(outcome, "Push failed")

        assert error.message == "Push failed: git push (exit code 128)"
        assert error.detail == "fatal: unable to access remote"
        assert error.outcome is outcome
        assert error.exit_code == ExitCode.INVALID_USAGE

    def test_default_context(self) -> None:
        outcome = ExecutionOutcome(argv=("git", "fetch"), returncode=1, tag=OutcomeTag.FAILURE)
        error = SubprocessFailureError(outcome)
        assert error.message.startswith("Command failed: git fetch")
        assert error.detail is None
