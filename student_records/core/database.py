from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool
from .config import settings
import logging

logger = logging.getLogger(__name__)

# =============================================================================
# DATABASE ENGINE CONFIGURATION
# =============================================================================


def build_engine(database_url: str = None, echo: bool = None):
    """
    Create the SQLAlchemy engine for the configured database.

    PostgreSQL gets a QueuePool sized from settings; SQLite (local runs and
    tests) gets a plain engine that may be shared across threads.
    """
    database_url = database_url or settings.DATABASE_URL
    echo = settings.DB_ECHO_SQL if echo is None else echo

    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        database_url,

        # Connection pool settings
        poolclass=QueuePool,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,

        # Test connection before using (detect disconnects)
        pool_pre_ping=True,

        echo=echo,

        connect_args={
            "connect_timeout": 10,
        }
    )


engine = build_engine()


# =============================================================================
# SESSION CONFIGURATION
# =============================================================================

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False
)

# Create Base class for models
Base = declarative_base()


# =============================================================================
# DATABASE UTILITIES
# =============================================================================

def create_database_tables(bind=None):
    """
    Create all database tables defined in models.

    ⚠️ WARNING: Only use this in development!
    In production, use Alembic migrations instead.
    """
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=bind or engine)
    logger.info("✅ Database tables created successfully!")


def drop_database_tables(bind=None):
    """
    Drop all database tables.

    ⚠️ DANGER: This will delete all data!
    Only use in development/testing.
    """
    logger.warning("⚠️ Dropping all database tables...")
    Base.metadata.drop_all(bind=bind or engine)
    logger.info("✅ Database tables dropped!")


def check_database_connection() -> bool:
    """
    Check if database connection is working.

    Returns:
        bool: True if connection successful, False otherwise
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        logger.info("✅ Database connection successful!")
        return True
    except Exception as e:
        logger.error(f"❌ Database connection failed: {e}")
        return False


# =============================================================================
# EVENT LISTENERS
# =============================================================================

@event.listens_for(engine, "connect")
def on_connect(dbapi_conn, connection_record):
    """
    Event listener for new database connections.
    SQLite needs foreign keys switched on per connection.
    """
    if settings.is_sqlite:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
    if settings.DEBUG:
        logger.debug("New database connection established")


@event.listens_for(engine, "checkout")
def receive_checkout(dbapi_conn, connection_record, connection_proxy):
    """
    Event listener when connection is retrieved from pool.
    """
    if settings.DEBUG:
        logger.debug("Connection checked out from pool")


# =============================================================================
# INITIALIZATION
# =============================================================================

def init_db():
    """
    Initialize database.
    Run this when starting the application.
    """
    logger.info("Initializing database...")

    if not check_database_connection():
        raise RuntimeError("Cannot connect to database!")

    # Alembic owns the schema in production; SQLite dev runs create it here
    if settings.is_sqlite:
        logger.info("SQLite database: creating tables if missing...")
        create_database_tables()

    logger.info("✅ Database initialized successfully!")


if __name__ == "__main__":
    """Test database connection when running this file directly."""
    logging.basicConfig(level=logging.INFO)

    from .config import print_config
    print_config()

    if check_database_connection():
        print("✅ Connection successful!")
    else:
        print("❌ Connection failed!")
