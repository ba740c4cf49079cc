"""Precondition guards shared by the command use cases.

Guards are decision functions over a RepositoryContext or BranchRef: they
return normally when the precondition holds and raise the matching domain
error otherwise. `require_shipped` is the one guard that mutates state (it
pulls); callers must treat it as a mutating step.
"""

import logging

from bgit.core.inspector import RepositoryInspector
from bgit.core.plan import PlanRunner
from bgit.domain.entities import (
    REMOTE_NAME,
    CommandPlan,
    OutcomeTag,
    RepositoryContext,
)
from bgit.domain.exceptions import (
    BgitError,
    DetachedHeadError,
    DirtyTreeError,
    DivergedHistoryError,
    NoUpstreamError,
    NotARepositoryError,
    RemoteMissingError,
    SubprocessFailureError,
    UnshippedCommitsError,
)

logger = logging.getLogger(__name__)


def require_repository(inspector: RepositoryInspector) -> None:
    if not inspector.is_inside_repository():
        raise NotARepositoryError(
            f"Not a git repository: {inspector.cwd}",
            hint="Run bgit from inside a git working tree",
        )


def require_remote(context: RepositoryContext) -> None:
    if not context.has_remote:
        raise RemoteMissingError(
            f"Remote '{REMOTE_NAME}' is not configured",
            hint=f"Add one with: git remote add {REMOTE_NAME} <url>",
        )


def require_clean_tree(context: RepositoryContext) -> None:
    if not context.clean:
        raise DirtyTreeError(
            "Working tree has uncommitted changes",
            hint="Commit and push them with 'bgit ship', or use git directly",
        )


def require_attached_head(context: RepositoryContext, operation: str) -> None:
    if context.detached:
        raise DetachedHeadError(
            f"Cannot {operation}: HEAD is detached",
            hint="Switch to a branch first with 'bgit branch <name>'",
        )


def require_upstream(context: RepositoryContext) -> str:
    if context.upstream is None:
        raise NoUpstreamError(
            f"Branch '{context.branch}' has no upstream on {REMOTE_NAME}",
            hint=f"Publish it with 'bgit ship' while on '{context.branch}'",
        )
    return context.upstream


def ship_preflight(inspector: RepositoryInspector) -> RepositoryContext:
    """Evaluate the read-only preconditions of `ship`.

    Used by both `ship` and `check`, so the two always agree.

    Returns:
        The snapshot the decision was made on.
    """
    require_repository(inspector)
    context = inspector.snapshot()
    require_remote(context)
    if context.upstream is None:
        require_attached_head(context, "ship")
    return context


def pull_fast_forward(runner: PlanRunner, branch: str, upstream: str | None) -> None:
    """Fast-forward the current branch from its upstream.

    Raises:
        DivergedHistoryError: If local and remote histories have diverged.
        SubprocessFailureError: For any other failure.
    """
    plan = CommandPlan().add(
        f"Fast-forward {branch} from {upstream}", "pull", "--ff-only"
    )
    result = runner.execute(plan)
    if result.succeeded:
        return
    outcome = result.failure
    if outcome.tag is OutcomeTag.NON_FAST_FORWARD:
        raise DivergedHistoryError(
            f"Branch '{branch}' has diverged from {upstream}",
            hint="Resolve manually: integrate the remote changes with git, then run 'bgit ship'",
            detail=outcome.diagnostic or None,
        )
    raise SubprocessFailureError(outcome, "Pull failed")


def require_shipped(
    inspector: RepositoryInspector,
    runner: PlanRunner,
    branch: str,
) -> RepositoryContext:
    """Prove that the checked-out branch has no unshipped work.

    Requires an upstream, fast-forwards from it, then requires a clean tree
    and zero commits ahead. Any failure is reported as UnshippedCommitsError
    naming the branch.

    Mutates: performs a fast-forward pull.
    """
    context = inspector.snapshot()
    try:
        require_upstream(context)
        pull_fast_forward(runner, context.branch, context.upstream)
        context = inspector.snapshot()
        require_clean_tree(context)
    except BgitError as e:
        raise UnshippedCommitsError(
            branch,
            f"Branch '{branch}' is not fully shipped: {e.message}",
            hint=f"Run 'bgit branch {branch}' and 'bgit ship' first",
            detail=e.detail,
        ) from e

    if context.sync.ahead > 0:
        raise UnshippedCommitsError(
            branch,
            f"Branch '{branch}' has {context.sync.ahead} unshipped commit(s)",
            hint=f"Run 'bgit branch {branch}' and 'bgit ship' first",
        )
    logger.debug("Branch %s is fully shipped", branch)
    return context
