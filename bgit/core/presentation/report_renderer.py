"""Fixed-format rendering of repository state for the read-only commands."""

from pathlib import Path

from bgit.domain.entities import REMOTE_NAME, RepositoryContext

SHIP_SUGGESTION = "Run 'bgit ship' to commit and push your work."


def _sync_line(context: RepositoryContext) -> str:
    if context.upstream is None:
        return "Sync: not published"
    ahead, behind = context.sync.ahead, context.sync.behind
    if ahead == 0 and behind == 0:
        return f"Sync: up to date with {context.upstream}"
    return f"Sync: {ahead} ahead, {behind} behind {context.upstream}"


def render_status(context: RepositoryContext, changes: list[str]) -> list[str]:
    """Render `bgit status`.

    Args:
        context: Snapshot to describe.
        changes: Porcelain status lines, shown beneath the summary.
    """
    state = "clean" if context.clean else f"dirty ({len(changes)} changed)"
    lines = [
        f"Branch: {context.branch}",
        f"Upstream: {context.upstream or '(none)'}",
        f"State: {state}",
        _sync_line(context),
    ]
    lines.extend(f"  {change}" for change in changes)
    if not context.clean or context.sync.ahead > 0 or (context.upstream is None and not context.detached):
        lines.append(SHIP_SUGGESTION)
    return lines


def render_where(context: RepositoryContext) -> list[str]:
    try:
        relative = context.cwd.relative_to(context.root)
    except ValueError:
        relative = context.cwd
    directory = "." if relative == Path(".") else str(relative)
    return [
        f"Repo: {context.root}",
        f"Branch: {context.branch}",
        f"Directory: {directory}",
    ]


def render_remote(url: str, default_branch: str | None, branches: list[str]) -> list[str]:
    return [
        f"Remote: {REMOTE_NAME}",
        f"URL: {url}",
        f"Default branch: {default_branch or '(unknown)'}",
        f"Branches: {', '.join(branches) if branches else '(none fetched)'}",
    ]


def render_log(commits: list[str]) -> list[str]:
    return commits or ["No commits yet."]


def render_check(context: RepositoryContext, blocker: str | None) -> list[str]:
    """Render `bgit check`.

    Args:
        context: Snapshot the ship preconditions were evaluated on.
        blocker: Why ship would fail, or None if it would proceed.
    """
    lines = [
        f"Branch: {context.branch}",
        f"Upstream: {context.upstream or '(none, ship will publish it)'}",
        f"Remote: {context.remote_url or '(missing)'}",
        f"Working tree: {'clean' if context.clean else 'has changes to ship'}",
        _sync_line(context),
    ]
    if blocker is None:
        lines.append("Would ship succeed? yes")
    else:
        lines.append(f"Would ship succeed? no: {blocker}")
    if context.sync.ahead > 0 and context.sync.behind > 0:
        lines.append(
            f"Warning: history has diverged from {context.upstream} as of the last fetch; "
            "the pull step of ship would stop."
        )
    return lines
