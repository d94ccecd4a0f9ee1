"""
Input validation functions for folder-mirror.

Provides validation for the folder paths, synchronization period and log
file location supplied on the command line, in the environment or in a
config file, before any sync pass is attempted.
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# Error message formatting helpers
# ---------------------------------------------------------------------------


def format_validation_error(field_name: str, reason: str) -> str:
    """
    Generate consistent error message for validation failures.

    Args:
        field_name: Human-readable field name (e.g., "Source folder")
        reason: Description of validation failure (e.g., "does not exist")

    Returns:
        Formatted error message string
    """
    return f"{field_name} {reason}"


def validate_folder(
    path: str | Path | None, field_name: str
) -> tuple[bool, str]:
    """
    Validate that a path refers to an existing directory.

    Args:
        path: The folder path to validate
        field_name: Label used in the error message (e.g., "Source folder")

    Returns:
        Tuple of (is_valid, error_message).
        Returns (True, "") if valid, (False, reason) if invalid.
    """
    if path is None or not str(path).strip():
        return (
            False,
            format_validation_error(field_name, "must be specified"),
        )

    if not Path(path).is_dir():
        return (
            False,
            format_validation_error(
                f"{field_name} '{path}'", "does not exist"
            ),
        )

    return (True, "")


def validate_sync_period(period: object) -> tuple[bool, str]:
    """
    Validate a synchronization period in seconds.

    Args:
        period: Raw period value (int or numeric string)

    Returns:
        Tuple of (is_valid, error_message).

    Validation rules:
        - Must parse as an integer (booleans are rejected)
        - Must be greater than zero
    """
    invalid = (
        False,
        format_validation_error(
            f"Synchronization period '{period}'",
            "is not a valid positive integer",
        ),
    )
    if isinstance(period, bool):
        return invalid
    try:
        value = int(str(period).strip())
    except ValueError:
        return invalid
    if value <= 0:
        return invalid
    return (True, "")


def validate_log_file(path: str | None) -> tuple[bool, str]:
    """
    Validate an optional log file path.

    Args:
        path: Log file path, or None when logging to stderr only

    Returns:
        Tuple of (is_valid, error_message).

    Validation rules:
        - None is accepted (no log file)
        - Otherwise must be a non-blank absolute path
        - Its parent directory must already exist
    """
    if path is None:
        return (True, "")

    if not path.strip() or not Path(path).is_absolute():
        return (
            False,
            format_validation_error(
                f"Log file path '{path}'", "is not a valid absolute path"
            ),
        )

    if not Path(path).parent.is_dir():
        return (
            False,
            format_validation_error(
                f"Log file directory '{Path(path).parent}'", "does not exist"
            ),
        )

    return (True, "")
