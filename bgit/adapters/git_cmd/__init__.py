"""Git command-line adapter."""

from bgit.adapters.git_cmd.git_adapter import GitAdapter, classify_outcome, format_command

__all__ = ["GitAdapter", "classify_outcome", "format_command"]
