"""
Process pending cancellations

Ends subscriptions whose cancellation request is older than the grace
period. Meant to run daily from cron:

    0 3 * * * cd /srv/esttetica && python process_cancellations.py
"""
import logging
import sys

from esttetica.database import SessionLocal, init_db
from esttetica.services.cancellation_service import process_pending_cancellations
from esttetica.services.stripe_service import stripe_service

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("esttetica.process_cancellations")


def main() -> int:
    init_db()
    db = SessionLocal()
    try:
        result = process_pending_cancellations(db, stripe_service)
    finally:
        db.close()

    logger.info(f"{result['message']} ({result['processed']}/{result['total']})")
    for error in result.get("errors", []):
        logger.error(error)
    return 1 if result.get("errors") else 0


if __name__ == "__main__":
    sys.exit(main())
