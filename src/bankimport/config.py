"""Runtime settings for the import workflow."""

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping, Optional

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024


def _env_int(env: Mapping[str, str], name: str, default: int, minimum: int = 1) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'")
    if value < minimum:
        raise ValueError(f"{name} must be at least {minimum}, got {value}")
    return value


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ImportSettings:
    """Limits and policies for CSV import sessions.

    Attributes:
        max_file_size: Largest accepted upload in bytes
        preview_row_limit: Number of raw rows echoed back after upload
        session_ttl: Idle lifetime of an import session
        duplicate_window_days: Date tolerance for duplicate detection
        rejection_takes_precedence: When a row is both approved and rejected,
            skip it (True) or import it (False)
    """

    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    preview_row_limit: int = 10
    session_ttl: timedelta = timedelta(minutes=30)
    duplicate_window_days: int = 1
    rejection_takes_precedence: bool = True

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ImportSettings":
        """Build settings from BANKIMPORT_* environment variables.

        Args:
            env: Mapping to read from (defaults to os.environ)

        Raises:
            ValueError: If a numeric variable is malformed
        """
        if env is None:
            env = os.environ

        approval_wins = _env_bool(env, "BANKIMPORT_APPROVAL_WINS", False)
        return cls(
            max_file_size=_env_int(env, "BANKIMPORT_MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE),
            preview_row_limit=_env_int(env, "BANKIMPORT_PREVIEW_ROWS", 10),
            session_ttl=timedelta(minutes=_env_int(env, "BANKIMPORT_SESSION_TTL_MINUTES", 30)),
            duplicate_window_days=_env_int(env, "BANKIMPORT_DUPLICATE_WINDOW_DAYS", 1, minimum=0),
            rejection_takes_precedence=not approval_wins,
        )
