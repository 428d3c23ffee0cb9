"""Application entry point and composition root."""

from psycopg_pool import AsyncConnectionPool

from accessgraph import __version__
from accessgraph.application.engine import AuthorizationEngine
from accessgraph.config import Settings, get_settings
from accessgraph.infrastructure.persistence.postgres.connection import create_pool
from accessgraph.infrastructure.persistence.postgres.unit_of_work import (
    create_uow_factory,
)
from accessgraph.logging import configure_logging, get_logger


def main() -> None:
    """CLI entry point."""
    print(f"accessgraph v{__version__}")


def create_engine(
    settings: Settings | None = None,
) -> tuple[AuthorizationEngine, AsyncConnectionPool]:
    """Composition root - build the engine over a PostgreSQL pool.

    The pool is returned unopened; the caller owns its lifecycle
    (``await pool.open()`` / ``await pool.close()``).
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, json_output=settings.log_json)

    config = settings.engine_config()
    pool = create_pool(
        settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )
    uow_factory = create_uow_factory(pool, config.table_names)
    engine = AuthorizationEngine(uow_factory, config)

    get_logger(__name__).info(
        "Engine created",
        version=__version__,
        environment=settings.environment,
        role_type=config.entity_types.role,
        permission_type=config.entity_types.permission,
    )
    return engine, pool
