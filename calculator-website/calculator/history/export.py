from __future__ import annotations

from typing import Iterable

import pandas as pd

from .models import HistoryEntry


COLUMNS = ["expression", "result", "timestamp"]


def history_frame(entries: Iterable[HistoryEntry]) -> pd.DataFrame:
    rows = [[e.expression, e.result, e.timestamp] for e in entries]
    return pd.DataFrame(rows, columns=COLUMNS)


def history_csv(entries: Iterable[HistoryEntry]) -> str:
    return history_frame(entries).to_csv(index=False)
