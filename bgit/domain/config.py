"""Config domain models for bgit.

Persistent settings live in TOML files (see bgit.shared.config_io) and are
represented here as validated, frozen dataclasses. ExecutionConfig is the
per-invocation configuration threaded through every adapter and use case.
"""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Literal

ConfirmPolicy = Literal["tty", "always", "never"]


@dataclass(frozen=True)
class ShipConfig:
    """Configuration for the ship command.

    Attributes:
        auto_message: Generate "<branch>: <diffstat> (<timestamp>)" when no
            message is given. When False, ship requires -m.
    """

    auto_message: bool = True


@dataclass(frozen=True)
class SafetyConfig:
    """Confirmation policy for destructive commands (undo, nuke).

    Attributes:
        confirm: "tty" prompts only when stdin is a terminal, "always" always
            prompts, "never" never prompts.

    Raises:
        ValueError: If confirm is not one of the known policies.
    """

    confirm: ConfirmPolicy = "tty"

    def __post_init__(self) -> None:
        if self.confirm not in ("tty", "always", "never"):
            raise ValueError(
                f"confirm must be one of 'tty', 'always', 'never', got {self.confirm!r}"
            )


@dataclass(frozen=True)
class LogConfig:
    """Configuration for `bgit log`.

    Raises:
        ValueError: If limit is not positive.
    """

    limit: int = 20

    def __post_init__(self) -> None:
        if self.limit <= 0:
            raise ValueError(f"limit must be positive, got {self.limit}")


@dataclass(frozen=True)
class OutputConfig:
    """Output defaults.

    Attributes:
        verbose: Trace every git command by default.
        progress: Show progress bars for long plans on a terminal.
    """

    verbose: bool = False
    progress: bool = True


@dataclass(frozen=True)
class BgitConfig:
    """Complete persistent bgit configuration."""

    ship: ShipConfig = field(default_factory=ShipConfig)
    safety: SafetyConfig = field(default_factory=SafetyConfig)
    log: LogConfig = field(default_factory=LogConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def default() -> "BgitConfig":
        """Create a config with all default values."""
        return BgitConfig(
            ship=ShipConfig(),
            safety=SafetyConfig(),
            log=LogConfig(),
            output=OutputConfig(),
        )

    @staticmethod
    def from_partial(base: "BgitConfig", data: dict) -> "BgitConfig":
        """Overlay a partial TOML mapping on top of an existing config.

        Sections missing from data keep their values from base; keys inside a
        present section override the base section key by key.

        Raises:
            ValueError: If a section holds unknown keys or invalid values.
        """
        sections = {
            "ship": (ShipConfig, base.ship),
            "safety": (SafetyConfig, base.safety),
            "log": (LogConfig, base.log),
            "output": (OutputConfig, base.output),
        }
        merged = {}
        for name, (section_cls, current) in sections.items():
            overrides = data.get(name, {})
            if not isinstance(overrides, dict):
                raise ValueError(f"[{name}] must be a table")
            values = {**asdict(current), **overrides}
            try:
                merged[name] = section_cls(**values)
            except TypeError as e:
                raise ValueError(f"Invalid key in [{name}]: {e}") from e
        return BgitConfig(**merged)


@dataclass(frozen=True)
class ExecutionConfig:
    """Per-invocation settings passed explicitly instead of held globally.

    Attributes:
        verbose: Trace mutating commands as "+ git <args>".
        dry_run: Print planned mutating commands instead of running them.
        cwd: Directory every git subprocess runs in.
    """

    verbose: bool = False
    dry_run: bool = False
    cwd: Path = field(default_factory=Path.cwd)
