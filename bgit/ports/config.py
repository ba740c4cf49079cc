"""Configuration provider port.

Defines the interface for loading persistent bgit settings.
"""

from pathlib import Path
from typing import Protocol

from bgit.domain.config import BgitConfig


class ConfigProvider(Protocol):
    """Protocol for loading and providing configuration."""

    def load(self, git_dir: Path | None) -> BgitConfig:
        """Load configuration, optionally including repository-local settings.

        Args:
            git_dir: The repository's git directory holding bgit.toml, or None
                outside a repository.

        Returns:
            BgitConfig instance with loaded or default values

        Note:
            Implementations should gracefully fall back to defaults
            if config file is missing or invalid.
        """
        ...
