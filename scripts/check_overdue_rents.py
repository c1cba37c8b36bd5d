"""
Daily overdue rent check.

Run from cron (or any scheduler) once a day:

     python -m scripts.check_overdue_rents

Exits non-zero if the check fails.
"""
import json
import logging
import os
import sys

from dotenv import load_dotenv

from database import get_session_context
from services.rent_sweep import check_overdue_rents

logger = logging.getLogger("scripts.check_overdue_rents")


def main() -> int:
     load_dotenv()
     logging.basicConfig(
          level=os.getenv("LOG_LEVEL", "INFO").upper(),
          format="%(asctime)s %(levelname)s %(name)s: %(message)s",
     )

     try:
          with get_session_context() as db:
               result = check_overdue_rents(db)
     except Exception:
          logger.exception("Overdue rent check failed")
          return 1

     print(json.dumps(result, indent=2))
     return 0


if __name__ == "__main__":
     sys.exit(main())
