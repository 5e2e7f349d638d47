from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import declarative_base


Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. ``2024-05-01T09:30:00.000Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class KeyValueRecord(Base):
    __tablename__ = "calculator_kv"

    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False, default="")
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


@dataclass(frozen=True)
class HistoryEntry:
    expression: str
    result: str
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return {"expr": self.expression, "res": self.result, "at": self.timestamp}

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["HistoryEntry"]:
        if not isinstance(raw, dict):
            return None
        expr = raw.get("expr")
        res = raw.get("res")
        if not isinstance(expr, str) or res is None:
            return None
        return cls(expression=expr, result=str(res), timestamp=str(raw.get("at") or ""))
