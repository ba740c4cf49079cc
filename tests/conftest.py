"""Pytest configuration and shared fixtures."""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

import pytest

# ============================================================================
# Environment Isolation
# ============================================================================
# The user's git and bgit configuration must not leak into tests: commit
# signing, pull.rebase or a global [safety] policy would change behaviour.


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point git and bgit at empty configuration for every test."""
    global_gitconfig = tmp_path / "gitconfig"
    global_gitconfig.write_text("")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_gitconfig))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("BGIT_VERBOSE", raising=False)


@pytest.fixture(autouse=True)
def reset_bgit_logger():
    """Undo the CLI's logging setup so caplog sees bgit records in every test."""
    yield
    logger = logging.getLogger("bgit")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ============================================================================
# Git Repository Helpers
# ============================================================================
# These helpers consolidate git setup code to avoid duplication across tests.


def git(path: Path, *args: str) -> str:
    """Run a git command in path and return its stripped stdout.

    Raises:
        subprocess.CalledProcessError: If git fails.
    """
    result = subprocess.run(
        ["git", *args],
        cwd=path,
        check=True,
        capture_output=True,
        text=True,
        timeout=10,
    )
    return result.stdout.strip()


def init_git_repo(
    path: Path,
    user_name: str = "Test User",
    user_email: str = "test@example.com",
) -> None:
    """Initialize a git repository on branch main with user configuration.

    Args:
        path: Directory to initialize as a git repository.
        user_name: Git user.name configuration value.
        user_email: Git user.email configuration value.
    """
    path.mkdir(parents=True, exist_ok=True)
    git(path, "init", "-b", "main")
    configure_user(path, user_name, user_email)


def configure_user(
    path: Path,
    user_name: str = "Test User",
    user_email: str = "test@example.com",
) -> None:
    git(path, "config", "user.name", user_name)
    git(path, "config", "user.email", user_email)


def create_test_files(path: Path, files: dict[str, str]) -> None:
    """Create files under path, making parent directories as needed.

    Example:
        create_test_files(repo, {"a.txt": "a", "src/b.txt": "b"})
    """
    for name, content in files.items():
        file_path = path / name
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)


def git_add_and_commit(
    path: Path,
    message: str = "Test commit",
    files: dict[str, str] | None = None,
) -> str:
    """Optionally create files, then stage everything and commit.

    Returns:
        SHA of the new commit.
    """
    if files:
        create_test_files(path, files)
    git(path, "add", "-A")
    git(path, "commit", "-m", message)
    return git(path, "rev-parse", "HEAD")


@dataclass
class RemoteRepo:
    """A bare origin plus a working clone tracking origin/main.

    Attributes:
        origin: Path to the bare repository.
        work: Path to the working clone.
        base: Directory holding both, used to add more clones.
    """

    origin: Path
    work: Path
    base: Path

    def clone(self, name: str) -> Path:
        """Make another working clone of origin."""
        path = self.base / name
        git(self.base, "clone", str(self.origin), str(path))
        configure_user(path)
        return path


def create_remote_repo(base: Path) -> RemoteRepo:
    """Create a bare origin and a clone with one initial commit on main pushed.

    Args:
        base: Directory to create both repositories in.

    Returns:
        RemoteRepo describing the pair.
    """
    base.mkdir(parents=True, exist_ok=True)
    origin = base / "origin.git"
    git(base, "init", "--bare", "-b", "main", str(origin))

    work = base / "work"
    init_git_repo(work)
    git(work, "remote", "add", "origin", str(origin))
    git_add_and_commit(work, "Initial commit", {"README.md": "# project\n"})
    git(work, "push", "-u", "origin", "main")
    return RemoteRepo(origin=origin, work=work, base=base)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def remote_repo(tmp_path: Path) -> RemoteRepo:
    """Origin plus working clone, main published and tracked."""
    return create_remote_repo(tmp_path / "repos")


@pytest.fixture
def local_repo(tmp_path: Path) -> Path:
    """A repository with one commit and no remote."""
    repo = tmp_path / "local"
    init_git_repo(repo)
    git_add_and_commit(repo, "Initial commit", {"README.md": "# local\n"})
    return repo


@pytest.fixture
def not_a_repo(tmp_path: Path) -> Path:
    """A plain directory outside any git repository."""
    path = tmp_path / "plain"
    path.mkdir()
    return path
