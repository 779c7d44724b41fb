"""
In-memory prediction history.

Keeps every scored record per user so the API can serve history, risk
profiles and cohort summaries. Nothing is persisted; a real deployment swaps
this for its storage layer behind the same methods.

The store is bounded by ``max_logs``: once full, the oldest inserted log is
dropped for each new one.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..errors import PredictionNotFoundError
from ..records import ClinicalRecord, PredictionResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PredictionLog:
    id: str
    user_id: str
    timestamp: datetime
    record: ClinicalRecord
    prediction: PredictionResult

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "timestamp": self.timestamp.isoformat(),
            "features": self.record.to_dict(),
            "prediction": self.prediction.to_dict(),
        }


class PredictionHistory:
    """Prediction logs keyed by id, insertion ordered.

    Parameters
    ----------
    max_logs:
        Maximum number of logs kept; ``None`` means unbounded.
    """

    def __init__(self, max_logs: Optional[int] = None) -> None:
        if max_logs is not None and max_logs < 1:
            raise ValueError("max_logs must be >= 1.")
        self.max_logs = max_logs
        self._logs: Dict[str, PredictionLog] = {}

    def __len__(self) -> int:
        return len(self._logs)

    def record(
        self,
        user_id: str,
        record: ClinicalRecord,
        prediction: PredictionResult,
        timestamp: Optional[datetime] = None,
    ) -> PredictionLog:
        if timestamp is None:
            timestamp = datetime.now(timezone.utc)
        elif timestamp.tzinfo is None:
            # naive timestamps are UTC
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        log = PredictionLog(
            id=f"pred_{uuid.uuid4().hex}",
            user_id=user_id,
            timestamp=timestamp,
            record=record,
            prediction=prediction,
        )
        self._logs[log.id] = log
        if self.max_logs is not None and len(self._logs) > self.max_logs:
            evicted = next(iter(self._logs))
            del self._logs[evicted]
            logger.debug("Evicted prediction %s", evicted)
        logger.info("Stored prediction %s (label=%s)", log.id, prediction.label.value)
        return log

    def get(self, prediction_id: str) -> PredictionLog:
        try:
            return self._logs[prediction_id]
        except KeyError:
            raise PredictionNotFoundError(prediction_id) from None

    def for_user(self, user_id: str) -> List[PredictionLog]:
        """All logs for a user, newest first (later insertions win ties)."""
        logs = [log for log in self._logs.values() if log.user_id == user_id]
        return sorted(logs, key=lambda log: log.timestamp)[::-1]

    def latest(self, user_id: str) -> Optional[PredictionLog]:
        logs = self.for_user(user_id)
        return logs[0] if logs else None

    def all_latest(self) -> List[PredictionLog]:
        """Most recent log of every user."""
        latest: Dict[str, PredictionLog] = {}
        for log in self._logs.values():
            current = latest.get(log.user_id)
            if current is None or log.timestamp >= current.timestamp:
                latest[log.user_id] = log
        return list(latest.values())

    def clear(self) -> None:
        self._logs.clear()
