from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the guest import tool.

These are what ``guest_import.config.loader.load_config`` hands back after the YAML
file has passed schema validation and defaults have been applied.
"""


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for a guest import run."""
    wedding_id: str  # Wedding the imported guests belong to
    default_side: str = "mutual"  # Side used when the side column is unmapped or blank
    event_ids: tuple[str, ...] = ()  # Events every imported guest is invited to
    column_overrides: dict[str, str | None] = field(default_factory=dict)  # field -> header
    error_display_limit: int = 5  # Errors listed before "...and N more"
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
