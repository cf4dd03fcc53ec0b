"""
Connection health check.
"""

import logging

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

_log = logging.getLogger(__name__)


def health_check(engine: Engine) -> bool:
    """
    Run SELECT 1 through the pool and return True if no exception.
    """
    try:
        with Session(engine) as session:
            session.exec(select(1)).first()
        return True
    except Exception:
        _log.debug("Health check failed", exc_info=True)
        return False
