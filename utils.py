import pandas as pd
from typing import Iterable
from domain import ShiftEntry

ENTRY_COLUMNS = ["Fecha", "Entrada", "Salida", "Horas"]


def entries_to_dataframe(entries: Iterable[ShiftEntry]) -> pd.DataFrame:
    """Entries in insertion order, hours formatted with two decimals."""
    rows = []
    for e in entries:
        rows.append({
            "Fecha": e.date,
            "Entrada": e.start,
            "Salida": e.end,
            "Horas": f"{e.hours_worked:.2f}",
        })
    return pd.DataFrame(rows, columns=ENTRY_COLUMNS)


def page_of(df: pd.DataFrame, page: int, page_size: int = 5) -> pd.DataFrame:
    """Rows of the 1-based ``page``; out-of-range pages are clamped."""
    pages = page_count(df, page_size)
    page = min(max(1, int(page)), pages)
    start = (page - 1) * page_size
    return df.iloc[start:start + page_size]


def page_count(df: pd.DataFrame, page_size: int = 5) -> int:
    return max(1, -(-len(df) // page_size))
