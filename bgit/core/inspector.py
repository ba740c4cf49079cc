"""Read-only repository state queries.

Every query tolerates any repository state (detached HEAD, unborn branch,
missing remote) and reports absence as an empty result rather than an
error. Only `is_inside_repository` returns a result callers must check
before anything else.
"""

import logging
from pathlib import Path

from bgit.domain.entities import (
    DETACHED,
    REMOTE_NAME,
    AheadBehind,
    BranchRef,
    RepositoryContext,
)
from bgit.ports.vcs import VCS

logger = logging.getLogger(__name__)

_REMOTE_PREFIX = f"refs/remotes/{REMOTE_NAME}/"


class RepositoryInspector:
    """Answers questions about the repository through read-only git calls."""

    def __init__(self, vcs: VCS, cwd: Path) -> None:
        self.vcs = vcs
        self.cwd = cwd

    def is_inside_repository(self) -> bool:
        outcome = self.vcs.query(["rev-parse", "--is-inside-work-tree"])
        return outcome.ok and outcome.output == "true"

    def repository_root(self) -> Path | None:
        outcome = self.vcs.query(["rev-parse", "--show-toplevel"])
        if not outcome.ok or not outcome.output:
            return None
        return Path(outcome.output).resolve()

    def git_dir(self) -> Path | None:
        outcome = self.vcs.query(["rev-parse", "--absolute-git-dir"])
        if not outcome.ok or not outcome.output:
            return None
        return Path(outcome.output)

    def current_branch(self) -> str:
        """Return the checked-out branch name, or DETACHED."""
        outcome = self.vcs.query(["symbolic-ref", "--short", "-q", "HEAD"])
        if not outcome.ok or not outcome.output:
            return DETACHED
        return outcome.output

    def status_lines(self) -> list[str]:
        """Porcelain status lines, untracked files included."""
        outcome = self.vcs.query(["status", "--porcelain", "--untracked-files=all"])
        if not outcome.ok:
            return []
        return [line for line in outcome.stdout.splitlines() if line.strip()]

    def is_clean(self) -> bool:
        """True only when status is exactly empty (untracked files count as dirty)."""
        outcome = self.vcs.query(["status", "--porcelain", "--untracked-files=all"])
        return outcome.ok and not outcome.output

    def upstream_of(self, branch: str) -> str | None:
        if branch == DETACHED:
            return None
        outcome = self.vcs.query(
            ["rev-parse", "--abbrev-ref", "--symbolic-full-name", f"{branch}@{{upstream}}"]
        )
        if not outcome.ok or not outcome.output:
            return None
        return outcome.output

    def ahead_behind(self, ref: str, base: str = "HEAD") -> AheadBehind:
        """Count commits on base not on ref (ahead) and on ref not on base (behind)."""
        outcome = self.vcs.query(["rev-list", "--left-right", "--count", f"{base}...{ref}"])
        if not outcome.ok:
            return AheadBehind()
        parts = outcome.output.split()
        if len(parts) != 2:
            return AheadBehind()
        return AheadBehind(ahead=int(parts[0]), behind=int(parts[1]))

    def unpublished_count(self) -> int:
        """Commits on HEAD that are not on any remote-tracking branch of origin."""
        outcome = self.vcs.query(
            ["rev-list", "--count", "HEAD", "--not", f"--remotes={REMOTE_NAME}"]
        )
        if not outcome.ok or not outcome.output:
            return 0
        return int(outcome.output)

    def commit_count(self, ref: str = "HEAD") -> int:
        outcome = self.vcs.query(["rev-list", "--count", ref])
        if not outcome.ok or not outcome.output:
            return 0
        return int(outcome.output)

    def remote_url(self, remote: str = REMOTE_NAME) -> str | None:
        outcome = self.vcs.query(["remote", "get-url", remote])
        if not outcome.ok or not outcome.output:
            return None
        return outcome.output

    def remote_branches(self) -> list[str]:
        """Branch names known under refs/remotes/origin, excluding HEAD."""
        outcome = self.vcs.query(["for-each-ref", "--format=%(refname)", _REMOTE_PREFIX])
        if not outcome.ok:
            return []
        names = []
        for ref in outcome.stdout.splitlines():
            name = ref.strip().removeprefix(_REMOTE_PREFIX)
            if name and name != "HEAD":
                names.append(name)
        return names

    def local_branches(self) -> list[str]:
        outcome = self.vcs.query(["for-each-ref", "--format=%(refname:short)", "refs/heads/"])
        if not outcome.ok:
            return []
        return [name.strip() for name in outcome.stdout.splitlines() if name.strip()]

    def default_remote_branch(self) -> str | None:
        """Resolve the remote's default branch.

        Order: the local origin/HEAD symref, then the remote's advertised
        HEAD, then main/master, then the first remote branch.
        """
        outcome = self.vcs.query(
            ["symbolic-ref", "--quiet", f"refs/remotes/{REMOTE_NAME}/HEAD"]
        )
        if outcome.ok and outcome.output.startswith(_REMOTE_PREFIX):
            return outcome.output.removeprefix(_REMOTE_PREFIX)

        branches = self.remote_branches()
        outcome = self.vcs.query(["ls-remote", "--symref", REMOTE_NAME, "HEAD"])
        if outcome.ok:
            for line in outcome.stdout.splitlines():
                # "ref: refs/heads/main\tHEAD"
                if line.startswith("ref: refs/heads/"):
                    name = line.split()[1].removeprefix("refs/heads/")
                    if name in branches:
                        return name

        for candidate in ("main", "master"):
            if candidate in branches:
                return candidate
        if branches:
            logger.debug("No default branch advertised; using %s", branches[0])
            return branches[0]
        return None

    def local_branch_exists(self, name: str) -> bool:
        return self.vcs.query(["show-ref", "--verify", "--quiet", f"refs/heads/{name}"]).ok

    def remote_branch_exists(self, name: str) -> bool:
        return self.vcs.query(["show-ref", "--verify", "--quiet", f"{_REMOTE_PREFIX}{name}"]).ok

    def resolve_sha(self, ref: str) -> str | None:
        outcome = self.vcs.query(["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"])
        if not outcome.ok or not outcome.output:
            return None
        return outcome.output

    def is_valid_branch_name(self, name: str) -> bool:
        return self.vcs.query(["check-ref-format", "--branch", name]).ok

    def staged_shortstat(self) -> str:
        """One-line diffstat of the index against HEAD, e.g. "1 file changed, 1 insertion(+)"."""
        outcome = self.vcs.query(["diff", "--cached", "--shortstat"])
        return outcome.output if outcome.ok else ""

    def head_summary(self) -> str:
        """Short SHA and subject of HEAD, or "" on an unborn branch."""
        outcome = self.vcs.query(["log", "-1", "--format=%h %s"])
        return outcome.output if outcome.ok else ""

    def recent_commits(self, limit: int) -> list[str]:
        outcome = self.vcs.query(
            ["log", f"--max-count={limit}", "--format=%h %ad %an  %s", "--date=short"]
        )
        if not outcome.ok:
            return []
        return outcome.stdout.splitlines()

    def branch_ref(self, name: str) -> BranchRef:
        exists_locally = self.local_branch_exists(name)
        return BranchRef(
            name=name,
            exists_locally=exists_locally,
            exists_on_remote=self.remote_branch_exists(name),
            is_tracking=exists_locally and self.upstream_of(name) is not None,
        )

    def snapshot(self) -> RepositoryContext:
        """Take a fresh RepositoryContext. Call after any state change."""
        branch = self.current_branch()
        upstream = self.upstream_of(branch)
        root = self.repository_root() or self.cwd.resolve()
        return RepositoryContext(
            root=root,
            cwd=self.cwd.resolve(),
            branch=branch,
            upstream=upstream,
            remote_url=self.remote_url(),
            clean=self.is_clean(),
            sync=self.ahead_behind(upstream) if upstream else AheadBehind(),
            commit_count=self.commit_count(),
        )
