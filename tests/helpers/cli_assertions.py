"""CLI output assertion helpers.

These helpers prioritize semantic assertions (exit codes, repository state)
over exact string matching. Exact strings are only checked where the output
itself is part of the contract, such as "Already up to date.".

Available helpers:
- assert_command_success/failed: Exit code validation
- assert_output_matches/contains/excludes: Pattern and substring matching
- assert_error_message: Error and hint detection
"""

import re

from click.testing import Result


def assert_command_success(result: Result, *, context: str = "") -> None:
    """Assert that a CLI command succeeded.

    Example:
        result = runner.invoke(cli, ["status"])
        assert_command_success(result, context="bgit status")
    """
    ctx = f" ({context})" if context else ""
    assert result.exit_code == 0, (
        f"Command failed{ctx}:\n"
        f"  Exit code: {result.exit_code}\n"
        f"  Output: {result.output[:1000]}"
    )


def assert_command_failed(
    result: Result,
    *,
    expected_code: int = 1,
    context: str = "",
) -> None:
    """Assert that a CLI command failed with the expected exit code.

    Args:
        result: Click test runner Result object.
        expected_code: Expected non-zero exit code (default: 1).
        context: Optional context string for error messages.
    """
    ctx = f" ({context})" if context else ""
    assert result.exit_code == expected_code, (
        f"Expected command to fail{ctx} with code {expected_code}, "
        f"but got {result.exit_code}:\n"
        f"  Output: {result.output[:1000]}"
    )


def assert_output_matches(
    result: Result,
    pattern: str,
    *,
    flags: int = 0,
    context: str = "",
) -> re.Match[str]:
    """Assert that output matches a regex pattern.

    Returns:
        The regex Match object for further inspection if needed.
    """
    ctx = f" ({context})" if context else ""
    match = re.search(pattern, result.output, flags)
    assert match is not None, (
        f"Pattern not found{ctx}:\n"
        f"  Pattern: {pattern}\n"
        f"  Output: {result.output[:1000]}"
    )
    return match


def assert_output_contains(
    result: Result,
    *substrings: str,
    case_sensitive: bool = True,
    context: str = "",
) -> None:
    """Assert that output contains all specified substrings.

    Example:
        assert_output_contains(result, "Branch: main", "State: clean")
    """
    ctx = f" ({context})" if context else ""
    output = result.output if case_sensitive else result.output.lower()

    for substring in substrings:
        check = substring if case_sensitive else substring.lower()
        assert check in output, (
            f"Substring not found{ctx}:\n"
            f"  Expected: {substring!r}\n"
            f"  Output: {result.output[:1000]}"
        )


def assert_output_excludes(result: Result, *substrings: str, context: str = "") -> None:
    """Assert that none of the substrings appear in output."""
    ctx = f" ({context})" if context else ""
    for substring in substrings:
        assert substring not in result.output, (
            f"Unexpected substring{ctx}:\n"
            f"  Found: {substring!r}\n"
            f"  Output: {result.output[:1000]}"
        )


def assert_error_message(result: Result, *, hint: str | None = None) -> None:
    """Assert that output contains an error indication and optionally a hint.

    Example:
        result = runner.invoke(cli, ["remote"])
        assert_command_failed(result, expected_code=4)
        assert_error_message(result, hint="git remote add")
    """
    has_error = re.search(r"error", result.output, re.IGNORECASE) is not None
    assert has_error, (
        f"Expected error message in output:\n"
        f"  Output: {result.output[:1000]}"
    )

    if hint:
        assert hint in result.output, (
            f"Expected hint '{hint}' in error output:\n"
            f"  Output: {result.output[:1000]}"
        )
