from __future__ import annotations

import logging
from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from travel_api.core.config import ENV_NORMALIZED
from travel_api.core.errors import ConfigurationError

logger = logging.getLogger(__name__)
STARTUP_PREFIX = "[STARTUP]"
MIGRATIONS_PREFIX = "[MIGRATIONS]"


def validate_jwt_secret(secret: str | None) -> str:
    if not (secret or "").strip():
        logger.critical("%s JWT_SECRET_KEY is not configured", STARTUP_PREFIX)
        raise ConfigurationError("JWT secret not configured")
    return secret


def validate_database_environment(database_url: str, *, env: str = ENV_NORMALIZED) -> None:
    if env in {"prod", "production"} and database_url.startswith("sqlite"):
        logger.critical("%s SQLite is forbidden in production", MIGRATIONS_PREFIX)
        raise ConfigurationError("SQLite is forbidden in production environment")


def ensure_migrations_applied(*, engine: Engine, alembic_config_path: Path, env: str = ENV_NORMALIZED) -> None:
    if env == "test":
        logger.info("%s skipped migration check in test environment", MIGRATIONS_PREFIX)
        return

    if not alembic_config_path.exists():
        logger.critical("%s alembic config not found path=%s", MIGRATIONS_PREFIX, alembic_config_path)
        raise ConfigurationError("alembic config not found")

    alembic_cfg = Config(str(alembic_config_path))
    script_directory = ScriptDirectory.from_config(alembic_cfg)
    expected_heads = set(script_directory.get_heads())

    with engine.connect() as connection:
        inspector = inspect(connection)
        if "alembic_version" not in inspector.get_table_names():
            logger.critical("%s alembic_version table missing", MIGRATIONS_PREFIX)
            raise ConfigurationError("Database has no migration state")

        current_rows = connection.exec_driver_sql("SELECT version_num FROM alembic_version").fetchall()

    current_heads = {row[0] for row in current_rows if row and row[0]}
    if current_heads != expected_heads:
        logger.critical(
            "%s pending migration detected current=%s expected=%s",
            MIGRATIONS_PREFIX,
            sorted(current_heads),
            sorted(expected_heads),
        )
        raise ConfigurationError("Pending migrations detected")

    logger.info("%s migration state verified", MIGRATIONS_PREFIX)
