"""Database engine and session factory used across the application."""

from loguru import logger
from sqlalchemy import Engine, StaticPool, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, create_engine

from src.lending.runtime.config.config_data import DatabaseConfig
from src.lending.runtime.context import get_config


class DbSessionService:
    def __init__(self, db_config: DatabaseConfig | None = None):
        """Initialize the shared database engine and session factory."""

        logger.info("Setting up database engine and session factory")
        main_config = get_config()
        db_config = db_config or main_config.database
        self._environment = main_config.app.environment

        logger.info("Configuring database engine for environment: {}", self._environment)
        engine_kwargs = {
            # Set echo to True only when debugging specific SQL issues
            "echo": False,
            "echo_pool": False,
            "connect_args": self._get_connect_args(db_config),
        }
        if make_url(db_config.url).database in (None, "", ":memory:"):
            # An in-memory SQLite database lives inside a single connection
            engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs.update(
                {
                    "pool_size": db_config.pool_size,
                    "max_overflow": db_config.max_overflow,
                    "pool_timeout": db_config.pool_timeout,
                    "pool_recycle": db_config.pool_recycle,
                    "pool_pre_ping": True,  # Validate connections before use
                }
            )

        logger.info(
            "Initializing database engine for {}",
            make_url(db_config.url).render_as_string(hide_password=True),
        )
        self._engine = create_engine(db_config.connection_string, **engine_kwargs)

        if self._environment == "production":
            logger.bind(
                pool_size=db_config.pool_size,
                max_overflow=db_config.max_overflow,
                pool_timeout=db_config.pool_timeout,
                pool_recycle=db_config.pool_recycle,
            ).info("Database engine initialized")

    @property
    def engine(self) -> Engine:
        return self._engine

    def _get_connect_args(self, db_config: DatabaseConfig) -> dict:
        """Get database-specific connection arguments."""
        connect_args = {}

        if "postgresql" in db_config.url:
            connect_args.update(
                {
                    # Application name for connection tracking
                    "application_name": f"{self._environment}_library_api",
                    "connect_timeout": 30,
                }
            )

        elif "sqlite" in db_config.url:
            connect_args.update(
                {
                    "check_same_thread": False,  # Sessions are used from worker threads
                    "timeout": 20,  # Lock timeout
                }
            )

            if self._environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )

        return connect_args

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,  # Prevent lazy loading issues
            autoflush=True,
        )

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except SQLAlchemyError as e:
            logger.bind(
                error_type=type(e).__name__,
                error_message=str(e),
            ).error("Database health check failed")
            return False

    def get_pool_status(self) -> dict:
        """Get current connection pool status for monitoring."""
        pool = self._engine.pool
        return {
            "size": getattr(pool, "size", lambda: 0)(),
            "checked_in": getattr(pool, "checkedin", lambda: 0)(),
            "checked_out": getattr(pool, "checkedout", lambda: 0)(),
            "overflow": getattr(pool, "overflow", lambda: 0)(),
        }

    def dispose(self) -> None:
        self._engine.dispose()
