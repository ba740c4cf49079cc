"""Use case tests against a scripted VCS.

These cover the decisions each command makes before and instead of
mutating anything: guard failures, confirmation and dry-run planning.
"""

import re
from pathlib import Path

import pytest

from bgit.core.commands.base import DRY_RUN_NOTICE, CommandEnvironment
from bgit.core.commands.branch import BranchRequest, BranchUseCase
from bgit.core.commands.merge import MergeRequest, MergeUseCase
from bgit.core.commands.nuke import NukeRequest, NukeUseCase
from bgit.core.commands.report import (
    CheckUseCase,
    LogUseCase,
    RemoteUseCase,
    ReportRequest,
    StatusUseCase,
    WhereUseCase,
)
from bgit.core.commands.ship import ALREADY_UP_TO_DATE, ShipRequest, ShipUseCase
from bgit.core.commands.undo import UndoRequest, UndoUseCase
from bgit.domain.config import BgitConfig, ExecutionConfig, ShipConfig
from bgit.domain.entities import ErrorKind, ExitCode
from tests.helpers.fakes import FakeVCS, RecordingOutput

STATUS = ("status", "--porcelain", "--untracked-files=all")


def repo_vcs(status: str = "", commits: int = 2, ahead: int = 0) -> FakeVCS:
    """FakeVCS for a repository on main tracking origin/main."""
    return FakeVCS(
        {
            ("rev-parse", "--is-inside-work-tree"): "true",
            ("rev-parse", "--show-toplevel"): "/repo",
            ("symbolic-ref", "--short", "-q", "HEAD"): "main",
            ("rev-parse", "--abbrev-ref", "--symbolic-full-name", "main@{upstream}"): "origin/main",
            ("remote", "get-url", "origin"): "/srv/origin.git",
            ("rev-list", "--left-right", "--count", "HEAD...origin/main"): f"{ahead}\t0",
            ("rev-list", "--count", "HEAD"): str(commits),
            ("log", "-1", "--format=%h %s"): "abc1234 second",
            STATUS: status,
        }
    )


def make_env(vcs: FakeVCS, dry_run: bool = False, **kwargs) -> CommandEnvironment:
    return CommandEnvironment(
        config=ExecutionConfig(dry_run=dry_run, cwd=Path("/repo")),
        vcs=vcs,
        output=RecordingOutput(),
        **kwargs,
    )


class TestNotARepository:
    @pytest.mark.parametrize(
        "use_case_cls,request_obj",
        [
            (ShipUseCase, ShipRequest()),
            (BranchUseCase, BranchRequest("feature")),
            (MergeUseCase, MergeRequest(("feature", "->", "main"))),
            (UndoUseCase, UndoRequest()),
            (NukeUseCase, NukeRequest()),
            (StatusUseCase, ReportRequest()),
            (LogUseCase, ReportRequest()),
            (WhereUseCase, ReportRequest()),
            (RemoteUseCase, ReportRequest()),
            (CheckUseCase, ReportRequest()),
        ],
    )
    def test_exit_code_two_and_no_mutation(self, use_case_cls, request_obj) -> None:
        vcs = FakeVCS()

        signal = use_case_cls(make_env(vcs)).execute(request_obj)

        assert signal.code == ExitCode.NOT_A_REPOSITORY
        assert signal.kind is ErrorKind.NOT_A_REPOSITORY
        assert vcs.runs == []
        assert vcs.plans == []

    @pytest.mark.parametrize(
        "use_case_cls,request_obj",
        [
            (ShipUseCase, ShipRequest(message="")),
            (BranchUseCase, BranchRequest("")),
        ],
    )
    def test_repository_checked_before_arguments(self, use_case_cls, request_obj) -> None:
        signal = use_case_cls(make_env(FakeVCS())).execute(request_obj)
        assert signal.code == ExitCode.NOT_A_REPOSITORY

    def test_merge_format_checked_before_repository(self) -> None:
        signal = MergeUseCase(make_env(FakeVCS())).execute(MergeRequest(("feature", "main")))
        assert signal.code == ExitCode.INVALID_USAGE


class TestShip:
    def test_dry_run_plans_without_running(self) -> None:
        vcs = repo_vcs(status="?? file.txt\n")

        signal = ShipUseCase(make_env(vcs, dry_run=True)).execute(ShipRequest())

        assert signal.success
        assert vcs.runs == []
        assert vcs.plans[0] == ("pull", "--ff-only")
        assert vcs.plans[1] == ("add", "-A")
        assert vcs.plans[2][:2] == ("commit", "-m")
        assert re.match(r"^main: .* \(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\)$", vcs.plans[2][2])
        assert vcs.plans[3] == ("push", "origin", "HEAD:main")
        assert signal.lines[-1] == DRY_RUN_NOTICE

    def test_clean_and_pushed_is_already_up_to_date(self) -> None:
        vcs = repo_vcs()

        signal = ShipUseCase(make_env(vcs)).execute(ShipRequest())

        assert signal.lines == (ALREADY_UP_TO_DATE,)
        assert vcs.runs == [("pull", "--ff-only")]

    def test_pushes_commits_ahead_without_committing(self) -> None:
        vcs = repo_vcs(ahead=1)

        signal = ShipUseCase(make_env(vcs)).execute(ShipRequest())

        assert signal.success
        assert vcs.runs == [("pull", "--ff-only"), ("push", "origin", "HEAD:main")]

    def test_uses_given_message(self) -> None:
        vcs = repo_vcs(status=" M README.md\n")

        ShipUseCase(make_env(vcs)).execute(ShipRequest(message="Fix typo"))

        assert ("commit", "-m", "Fix typo") in vcs.runs

    def test_empty_message_rejected(self) -> None:
        signal = ShipUseCase(make_env(repo_vcs())).execute(ShipRequest(message="   "))
        assert signal.code == ExitCode.INVALID_USAGE

    def test_message_required_when_auto_message_disabled(self) -> None:
        env = make_env(repo_vcs(), settings=BgitConfig(ship=ShipConfig(auto_message=False)))

        signal = ShipUseCase(env).execute(ShipRequest())

        assert signal.code == ExitCode.INVALID_USAGE
        assert "message is required" in signal.error

    def test_diverged_pull(self) -> None:
        vcs = repo_vcs()
        vcs.respond(
            ("pull", "--ff-only"),
            stderr="fatal: Not possible to fast-forward, aborting.",
            returncode=128,
        )

        signal = ShipUseCase(make_env(vcs)).execute(ShipRequest())

        assert signal.code == ExitCode.DIVERGED
        assert signal.detail == "fatal: Not possible to fast-forward, aborting."
        assert ("push", "origin", "HEAD:main") not in vcs.runs


class TestBranch:
    def test_dirty_tree_exits_three_without_fetching(self) -> None:
        vcs = repo_vcs(status="?? notes.txt\n")

        signal = BranchUseCase(make_env(vcs)).execute(BranchRequest("feature"))

        assert signal.code == ExitCode.DIRTY_TREE
        assert "uncommitted changes" in signal.error
        assert vcs.runs == []

    def test_invalid_name(self) -> None:
        vcs = repo_vcs()
        vcs.respond(("check-ref-format", "--branch", "bad..name"), stderr="fatal: 'bad..name' is not a valid branch name", returncode=128)

        signal = BranchUseCase(make_env(vcs)).execute(BranchRequest("bad..name"))

        assert signal.code == ExitCode.INVALID_USAGE
        assert vcs.runs == []


class TestMerge:
    def test_same_branch_rejected_before_any_git_call(self) -> None:
        vcs = repo_vcs()

        signal = MergeUseCase(make_env(vcs)).execute(MergeRequest(("main", "->", "main")))

        assert signal.code == ExitCode.INVALID_USAGE
        assert vcs.queries == []

    def test_dirty_tree(self) -> None:
        vcs = repo_vcs(status=" M a.txt\n")

        signal = MergeUseCase(make_env(vcs)).execute(MergeRequest(("feature", "->", "main")))

        assert signal.code == ExitCode.DIRTY_TREE
        assert vcs.runs == []


class TestUndo:
    def test_declined_confirmation_aborts(self) -> None:
        vcs = repo_vcs(commits=3)
        prompts: list[str] = []

        def decline(prompt: str) -> bool:
            prompts.append(prompt)
            return False

        signal = UndoUseCase(make_env(vcs, confirm=decline)).execute(UndoRequest())

        assert signal.code == ExitCode.INVALID_USAGE
        assert signal.error == "Aborted."
        assert "abc1234 second" in prompts[0]
        assert vcs.runs == []

    def test_dry_run_skips_confirmation(self) -> None:
        vcs = repo_vcs(commits=3)

        signal = UndoUseCase(make_env(vcs, dry_run=True, confirm=lambda prompt: False)).execute(
            UndoRequest()
        )

        assert signal.success
        assert vcs.plans == [("reset", "--hard", "HEAD~1"), ("push", "--force", "origin", "HEAD:main")]
        assert signal.lines == ("Undone: abc1234 second", DRY_RUN_NOTICE)

    def test_only_commit_cannot_be_undone(self) -> None:
        vcs = repo_vcs(commits=1)

        signal = UndoUseCase(make_env(vcs)).execute(UndoRequest())

        assert signal.code == ExitCode.INVALID_USAGE
        assert signal.kind is ErrorKind.NOTHING_TO_UNDO
        assert vcs.runs == []

    def test_remote_missing(self) -> None:
        vcs = repo_vcs(commits=3)
        vcs.respond(("remote", "get-url", "origin"), returncode=2)

        signal = UndoUseCase(make_env(vcs)).execute(UndoRequest())

        assert signal.code == ExitCode.REMOTE_MISSING


class TestNuke:
    def test_declined_confirmation_fetches_nothing(self) -> None:
        vcs = repo_vcs()

        signal = NukeUseCase(make_env(vcs, confirm=lambda prompt: False)).execute(NukeRequest())

        assert signal.error == "Aborted."
        assert vcs.runs == []

    def test_origin_without_branches(self) -> None:
        vcs = repo_vcs()

        signal = NukeUseCase(make_env(vcs)).execute(NukeRequest())

        assert signal.code == ExitCode.REMOTE_MISSING
        assert vcs.runs == [("fetch", "--prune", "origin")]


class TestReports:
    def test_log_uses_configured_limit(self) -> None:
        vcs = repo_vcs()
        vcs.respond(
            ("log", "--max-count=20", "--format=%h %ad %an  %s", "--date=short"),
            stdout="abc1234 2024-01-01 Test User  second\n",
        )

        signal = LogUseCase(make_env(vcs)).execute(ReportRequest())

        assert signal.lines == ("abc1234 2024-01-01 Test User  second",)

    def test_check_reports_blocker_without_failing(self) -> None:
        vcs = repo_vcs()
        vcs.respond(("remote", "get-url", "origin"), returncode=2)

        signal = CheckUseCase(make_env(vcs)).execute(ReportRequest())

        assert signal.success
        assert any(line.startswith("Would ship succeed? no") for line in signal.lines)
        assert vcs.runs == []
