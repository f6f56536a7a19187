"""
db/router.py
------------
Primary/fallback routing.

Every call tries the primary first. Only a RETRYABLE failure moves the call
to the fallback, and only once; anything else propagates untouched.
"""

import threading
from enum import Enum
from typing import Any, Optional, Sequence

from db.backends import Backend
from db.classifier import Classification, classify
from db.params import normalize
from utils.logger import get_logger

logger = get_logger(__name__)


class OperatingMode(str, Enum):
    PRIMARY_UNSET = "primary_unset"
    PRIMARY_ACTIVE = "primary_active"
    FALLBACK_ACTIVE = "fallback_active"


class WarningState:
    """Process-scoped, set-once flags for one-time warnings."""

    NO_PRIMARY = "no_primary"
    PRIMARY_FALLBACK = "primary_fallback"

    def __init__(self):
        self._lock = threading.Lock()
        self._raised: set[str] = set()

    def claim(self, event: str) -> bool:
        """Mark ``event`` as warned. True only for the first caller."""
        with self._lock:
            if event in self._raised:
                return False
            self._raised.add(event)
            return True

    def is_set(self, event: str) -> bool:
        with self._lock:
            return event in self._raised


class FailoverRouter:
    """
    Routes statements to the primary backend, falling back once on outage.

    Args:
        primary: Preferred backend, or None when no primary is configured.
        fallback: Always-available local backend.
        warnings: Shared one-time warning flags.
    """

    def __init__(
        self,
        primary: Optional[Backend],
        fallback: Backend,
        warnings: Optional[WarningState] = None,
    ):
        self.primary = primary
        self.fallback = fallback
        self.warnings = warnings or WarningState()
        self._mode = OperatingMode.PRIMARY_UNSET if primary is None else OperatingMode.PRIMARY_ACTIVE

    @property
    def mode(self) -> OperatingMode:
        """Mode observed by the most recent call."""
        return self._mode

    def run(self, query: str, params: Sequence[Any] = ()) -> list[dict]:
        """
        Run a statement with at most two physical attempts.

        Raises:
            Whatever the backend raised: a FATAL error from the primary, or
            any error from the fallback.
        """
        if self.primary is None:
            if self.warnings.claim(WarningState.NO_PRIMARY):
                logger.warning("DATABASE_URL is not set; using local database connection settings.")
            return self._run_on(self.fallback, query, params)

        try:
            rows = self._run_on(self.primary, query, params)
        except Exception as e:
            if classify(e) is not Classification.RETRYABLE:
                raise
            if self.warnings.claim(WarningState.PRIMARY_FALLBACK):
                logger.warning("Primary database unavailable; falling back to local database.")
            self._mode = OperatingMode.FALLBACK_ACTIVE
            return self._run_on(self.fallback, query, params)

        self._mode = OperatingMode.PRIMARY_ACTIVE
        return rows

    def test_connection(self) -> bool:
        """Ping primary then fallback; report overall health without raising."""
        if self.primary is not None:
            try:
                self.primary.ping()
                logger.info("Database connected successfully (primary)")
                return True
            except Exception as e:
                if classify(e) is not Classification.RETRYABLE:
                    logger.error(f"Primary database connection failed: {e}")
                    return False
                logger.warning("Primary database unavailable, testing fallback.")

        try:
            self.fallback.ping()
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            return False
        logger.info("Database connected successfully (fallback)")
        return True

    def close(self) -> None:
        if self.primary is not None:
            self.primary.close()
        self.fallback.close()

    @staticmethod
    def _run_on(backend: Backend, query: str, params: Sequence[Any]) -> list[dict]:
        return backend.run(normalize(query, backend.paramstyle), params)
