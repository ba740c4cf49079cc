"""TOML-based configuration provider.

Config loading priority (highest to lowest):
1. Local: <git-dir>/bgit.toml (repo-specific)
2. Global: ~/.config/bgit/config.toml (user defaults)
3. Built-in defaults
"""

import logging
from pathlib import Path

from bgit.domain.config import BgitConfig
from bgit.shared.config_io import (
    get_global_config_path,
    get_local_config_path,
    load_config_data,
)

logger = logging.getLogger(__name__)


class TomlConfigProvider:
    """Configuration provider that loads from TOML files.

    Later sources override earlier ones key by key within a section.
    Missing or invalid files are skipped with a warning.
    """

    def __init__(self, global_path: Path | None = None) -> None:
        self.global_path = global_path or get_global_config_path()

    def load(self, git_dir: Path | None) -> BgitConfig:
        """Load configuration with global fallback.

        Args:
            git_dir: Repository git directory, or None outside a repository.

        Returns:
            BgitConfig instance with merged global/local values or defaults
        """
        config = BgitConfig.default()

        paths = [("global", self.global_path)]
        if git_dir is not None:
            paths.append(("local", get_local_config_path(git_dir)))

        for label, path in paths:
            if not path.exists():
                continue
            try:
                config = BgitConfig.from_partial(config, load_config_data(path))
                logger.debug("Loaded %s config from %s", label, path)
            except (FileNotFoundError, ValueError) as e:
                logger.warning(
                    "Failed to parse %s config at %s: %s. Ignoring it.",
                    label,
                    path,
                    e,
                )
        return config
