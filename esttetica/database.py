import logging

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv

from esttetica.core.config import settings

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL

if not DATABASE_URL:
    raise ValueError("[ERROR] DATABASE_URL not found!")

IS_SQLITE = DATABASE_URL.lower().startswith("sqlite")

engine = create_engine(
    DATABASE_URL,
    connect_args={
        "check_same_thread": False  # SQLite multi-thread
    } if IS_SQLITE else {
        "connect_timeout": 10,
        "options": "-c statement_timeout=30000"  # 30s query timeout
    },
    echo=False,
    pool_pre_ping=True,
    pool_recycle=settings.DATABASE_POOL_RECYCLE,
)

# Create SessionLocal class
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


def get_db():
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def test_connection():
    """Test database connection - NON-BLOCKING."""
    try:
        with engine.connect() as conn:
            result = conn.execute(text("SELECT 1"))
            result.fetchone()
            safe_url = DATABASE_URL.split('@')[1] if '@' in DATABASE_URL else DATABASE_URL.split('/')[-1]
            logger.info(f"[OK] Database connected: {safe_url}")
            return True
    except Exception as e:
        logger.warning(f"[WARN] Database connection failed (continuing): {str(e)}")
        return False


def init_db(bind=None):
    """Initialize database tables - NON-BLOCKING."""
    try:
        # Import all models so they're registered with Base
        from esttetica.db.base import Base
        from esttetica.models.subscription import Subscription, SubscriptionHistory  # noqa: F401

        Base.metadata.create_all(bind=bind or engine)
        logger.info("[OK] Database tables initialized!")
        return True
    except Exception as e:
        logger.warning(f"[WARN] Database init warning: {str(e)}")
        return False


def close_db_connection():
    """Close database connections."""
    try:
        engine.dispose()
        logger.info("[OK] Database connections closed")
    except Exception as e:
        logger.warning(f"[WARN] Error closing DB: {str(e)}")
