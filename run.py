import uvicorn
import os
import logging

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("esttetica.run")


def run_migrations():
    """Run Alembic migrations."""
    try:
        from alembic.config import Config
        from alembic import command

        alembic_cfg = Config("alembic.ini")
        logger.info("[STARTUP] Running database migrations...")
        command.upgrade(alembic_cfg, "head")
        logger.info("[STARTUP] Migrations complete!")
        return True
    except Exception as e:
        logger.warning(f"[WARN] Migration failed: {e}")
        return False


if __name__ == "__main__":
    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", 8000))

    # Tables are otherwise created by the app's startup hook
    if os.getenv("RUN_MIGRATIONS") == "true":
        if not run_migrations():
            logger.warning("[WARN] Falling back to direct table creation on startup")

    # Disable reload in production
    reload = os.getenv("ENVIRONMENT") == "development"

    logger.info(f"[STARTUP] Server binding to host={host} port={port}")
    uvicorn.run(
        "esttetica.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info",
        workers=1,
    )
