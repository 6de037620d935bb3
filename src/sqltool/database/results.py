"""Canonical query results and the normalizer that builds them."""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional


@dataclass
class NativeResult:
    """Raw outcome of one statement as reported by a driver.

    Attributes:
        rows: Result set rows (any mapping type), empty when none was produced
        rowcount: Driver-reported change count; -1 when unknown
        lastrowid: Auto-generated identifier for this statement, if any
    """

    rows: list[Mapping[str, Any]] = field(default_factory=list)
    rowcount: int = -1
    lastrowid: Optional[int] = None


@dataclass
class QueryResult:
    """Backend-independent result of one statement."""

    rows: list[dict[str, Any]] = field(default_factory=list)
    affected_rows: int = 0
    success: bool = True
    error: Optional[str] = None
    last_insert_id: Optional[int] = None

    @classmethod
    def failure(cls, error: str) -> "QueryResult":
        return cls(rows=[], affected_rows=0, success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        """Wire form: rows, affectedRows, success, and error/lastInsertId when set."""
        content: dict[str, Any] = {
            "rows": self.rows,
            "affectedRows": self.affected_rows,
            "success": self.success,
        }
        if self.error is not None:
            content["error"] = self.error
        if self.last_insert_id is not None:
            content["lastInsertId"] = self.last_insert_id
        return content


def _plain_rows(rows: Iterable[Any]) -> list[dict[str, Any]]:
    # sqlite3.Row, RealDictRow and DictCursor rows all become plain dicts
    return [dict(row) for row in rows]


def normalize_result(native: NativeResult, was_row_returning: bool) -> QueryResult:
    """Map a driver result into a QueryResult.

    Args:
        native: Driver result
        was_row_returning: Lexical classification of the statement; selects
            whether affected rows is the returned row count or the change count

    Returns:
        Successful QueryResult
    """
    rows = _plain_rows(native.rows)

    if was_row_returning:
        affected_rows = len(rows)
    else:
        affected_rows = max(native.rowcount or 0, 0)

    return QueryResult(
        rows=rows,
        affected_rows=affected_rows,
        success=True,
        last_insert_id=native.lastrowid,
    )
