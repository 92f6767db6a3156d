"""
SQL building helpers shared by the repositories.

Statements in this package are written with positional placeholders
($1, $2, ...). Values never end up inside the SQL text; they travel as bound
parameters. execute() rebinds the positional markers as SQLAlchemy bind
parameters so the same statements run on PostgreSQL and SQLite.
"""

import re
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Result
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.exceptions import InvalidInputError

_PLACEHOLDER = re.compile(r"\$(\d+)")


class PartialUpdate(NamedTuple):
    """SET clause pieces for an UPDATE statement."""

    assignments: List[str]
    values: List[Any]

    @property
    def set_clause(self) -> str:
        return ", ".join(self.assignments)

    @property
    def next_placeholder(self) -> str:
        """Placeholder for the first value bound after the SET values (usually the WHERE key)."""
        return f"${len(self.values) + 1}"


def sql_for_partial_update(
    data: Mapping[str, Any],
    js_to_sql: Optional[Mapping[str, str]] = None
) -> PartialUpdate:
    """
    Build the SET clause of a partial update.

    Args:
        data: Fields to change, keyed by application field name. Iteration
            order decides placeholder numbering.
        js_to_sql: Application field name -> column name, only for the
            names that differ. Anything not listed is used as the column name.

    Returns:
        PartialUpdate whose assignments look like '"num_employees"=$1' and
        whose values are the matching values in the same order.

    Example:
        >>> sql_for_partial_update({"numEmployees": 5, "logoUrl": "x"},
        ...                        {"numEmployees": "num_employees"})
        PartialUpdate(assignments=['"num_employees"=$1', '"logoUrl"=$2'], values=[5, 'x'])

    Placeholders $1..$N are taken by the SET values, so a caller adding a
    WHERE condition must bind its key as $N+1 (see
    PartialUpdate.next_placeholder) and pass it after the values.

    Raises:
        InvalidInputError: If data is empty
    """
    if not data:
        raise InvalidInputError("No data")

    js_to_sql = js_to_sql or {}
    assignments = [
        f'"{js_to_sql.get(name) or name}"=${idx}'
        for idx, name in enumerate(data, start=1)
    ]

    return PartialUpdate(assignments=assignments, values=list(data.values()))


def ensure_allowed_filters(filters: Mapping[str, Any], allowed: Iterable[str]) -> None:
    """
    Reject any filter name outside the allow-list.

    Raises:
        InvalidInputError: Naming every unrecognized filter
    """
    allowed = set(allowed)
    invalid = [key for key in filters if key not in allowed]

    if invalid:
        raise InvalidInputError(f"Invalid filter(s): {', '.join(invalid)}")


def ensure_updatable_fields(data: Mapping[str, Any], allowed: Iterable[str]) -> None:
    """
    Reject any field a partial update may not touch.

    Field names become column identifiers in the SET clause, so only names
    from the allow-list get that far.

    Raises:
        InvalidInputError: Naming every field outside the allow-list
    """
    allowed = set(allowed)
    invalid = [str(key) for key in data if key not in allowed]

    if invalid:
        raise InvalidInputError(f"Invalid field(s): {', '.join(invalid)}")


class WhereClause:
    """
    ANDed conditions plus their bound values.

    Conditions use "{}" where the placeholder goes, e.g. "salary >= {}";
    placeholders are numbered in the order conditions are added.
    """

    def __init__(self):
        self.conditions: List[str] = []
        self.values: List[Any] = []

    def add(self, condition: str, value: Any) -> None:
        self.values.append(value)
        self.conditions.append(condition.format(f"${len(self.values)}"))

    @property
    def sql(self) -> str:
        if not self.conditions:
            return ""
        return " WHERE " + " AND ".join(self.conditions)


def constraint_kind(error: IntegrityError) -> str:
    """
    Classify an IntegrityError by the constraint that failed.

    Works off the driver message, which names the constraint type on both
    PostgreSQL ("violates foreign key constraint") and SQLite
    ("FOREIGN KEY constraint failed").

    Returns:
        One of "unique", "foreign_key", "check", "not_null" or "unknown"
    """
    message = str(error.orig).lower()

    if "unique constraint" in message or "duplicate key" in message:
        return "unique"
    if "foreign key constraint" in message:
        return "foreign_key"
    if "check constraint" in message:
        return "check"
    if "not null constraint" in message or "not-null constraint" in message:
        return "not_null"
    return "unknown"


def execute(db: Session, sql: str, values: Sequence[Any] = (), **column_types) -> Result:
    """
    Run a statement written with $n placeholders.

    Args:
        db: Database session
        sql: SQL text; $1 refers to values[0], $2 to values[1], ...
        values: Bound values in placeholder order
        **column_types: Optional SQLAlchemy types for result columns that
            need conversion (e.g. equity=Numeric(asdecimal=True))

    Returns:
        SQLAlchemy Result
    """
    params = {}

    def _bind(match: re.Match) -> str:
        idx = int(match.group(1))
        if not 1 <= idx <= len(values):
            raise ValueError(f"Placeholder ${idx} has no bound value")
        name = f"p{idx}"
        params[name] = values[idx - 1]
        return f":{name}"

    statement = text(_PLACEHOLDER.sub(_bind, sql))
    if column_types:
        statement = statement.columns(**column_types)

    return db.execute(statement, params)
