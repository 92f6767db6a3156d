"""
CRUD operations for jobs.

Implements the Repository pattern over the jobs table with parameterized
SQL. Callers pass and receive application field names (companyHandle);
the column names (company_handle) stay inside this module.
"""

from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import Numeric
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.exceptions import InvalidInputError, NotFoundError
from jobly.core.logging_config import get_logger
from jobly.core.sql import (
    WhereClause,
    constraint_kind,
    ensure_allowed_filters,
    ensure_updatable_fields,
    execute,
    sql_for_partial_update,
)

logger = get_logger(__name__)

ALLOWED_FILTERS = ("title", "minSalary", "hasEquity")

UPDATABLE_FIELDS = ("title", "salary", "equity", "companyHandle")

JS_TO_SQL = {"companyHandle": "company_handle"}

JOB_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'

# Result conversion for NUMERIC equity (SQLite hands back floats otherwise)
EQUITY_TYPE = {"equity": Numeric(asdecimal=True)}


def format_equity(value: Any) -> Optional[str]:
    """Render a stored equity as a plain decimal string ("0.87", "0")."""
    if value is None:
        return None
    return format(Decimal(value).normalize(), "f")


def _equity_param(value: Any) -> Optional[str]:
    # Bound as text so the driver never needs native Decimal support
    if value is None:
        return None
    return str(value)


def job_from_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "title": row["title"],
        "salary": row["salary"],
        "equity": format_equity(row["equity"]),
        "companyHandle": row["companyHandle"],
    }


def job_summary_from_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Job fields shown inside a company, without the company handle."""
    return {
        "id": row["id"],
        "title": row["title"],
        "salary": row["salary"],
        "equity": format_equity(row["equity"]),
    }


class JobRepository:
    """
    Data access for jobs.

    Every method runs a single statement; writes commit on success and roll
    back before raising.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Create a job (from data), update db, return new job data.

        Args:
            data: {title, salary, equity, companyHandle}

        Returns:
            {id, title, salary, equity, companyHandle}

        Raises:
            InvalidInputError: If companyHandle does not name a company
        """
        company_handle = data["companyHandle"]

        try:
            row = execute(
                self.db,
                f"""INSERT INTO jobs
                    (title, salary, equity, company_handle)
                    VALUES ($1, $2, $3, $4)
                    RETURNING {JOB_COLUMNS}""",
                [
                    data["title"],
                    data.get("salary"),
                    _equity_param(data.get("equity")),
                    company_handle,
                ],
                **EQUITY_TYPE
            ).mappings().one()
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise self._translate(e, company_handle) from e

        return job_from_row(row)

    def find_all(self, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Find all jobs, optionally filtered.

        Args:
            filters: Any of
                title: case-insensitive substring of the title
                minSalary: inclusive lower bound on salary
                hasEquity: True keeps only jobs with equity > 0; False or
                    absent keeps every job

        Returns:
            [{id, title, salary, equity, companyHandle}, ...] ordered by id

        Raises:
            InvalidInputError: On a filter name outside the allow-list
        """
        filters = filters or {}
        ensure_allowed_filters(filters, ALLOWED_FILTERS)

        title = filters.get("title")
        min_salary = filters.get("minSalary")
        has_equity = filters.get("hasEquity")

        where = WhereClause()
        if title is not None:
            where.add("lower(title) LIKE lower({})", f"%{title}%")
        if min_salary is not None:
            where.add("salary >= {}", min_salary)
        # "true" is the query-string form older callers send
        if has_equity is True or has_equity == "true":
            where.add("equity > {}", 0)

        result = execute(
            self.db,
            f"SELECT {JOB_COLUMNS} FROM jobs{where.sql} ORDER BY id",
            where.values,
            **EQUITY_TYPE
        )
        return [job_from_row(row) for row in result.mappings()]

    def get(self, job_id: int) -> Dict[str, Any]:
        """
        Given a job id, return data about the job.

        Raises:
            NotFoundError: If no such job
        """
        row = execute(
            self.db,
            f"SELECT {JOB_COLUMNS} FROM jobs WHERE id = $1",
            [job_id],
            **EQUITY_TYPE
        ).mappings().first()

        if row is None:
            raise NotFoundError(f"No job found with id: {job_id}")

        return job_from_row(row)

    def update(self, job_id: int, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Update job data with `data`.

        This is a "partial update": only the fields present in data change.
        Data can include {title, salary, equity, companyHandle}; the API
        never forwards companyHandle, but this layer does not forbid it.

        Raises:
            InvalidInputError: If data is empty, tries to change the id or
                names any other unknown field
            NotFoundError: If no such job
        """
        if "id" in data:
            raise InvalidInputError("Job id cannot be changed")
        ensure_updatable_fields(data, UPDATABLE_FIELDS)

        if data.get("equity") is not None:
            data = {**data, "equity": _equity_param(data["equity"])}

        update = sql_for_partial_update(data, JS_TO_SQL)
        query = f"""UPDATE jobs
                    SET {update.set_clause}
                    WHERE id = {update.next_placeholder}
                    RETURNING {JOB_COLUMNS}"""

        try:
            row = execute(self.db, query, [*update.values, job_id], **EQUITY_TYPE).mappings().first()
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise self._translate(e, data.get("companyHandle")) from e

        if row is None:
            raise NotFoundError(f"No job found with id: {job_id}")

        return job_from_row(row)

    def remove(self, job_id: int) -> None:
        """
        Delete given job from database.

        Raises:
            NotFoundError: If no such job
        """
        row = execute(
            self.db,
            "DELETE FROM jobs WHERE id = $1 RETURNING id",
            [job_id]
        ).first()
        self.db.commit()

        if row is None:
            raise NotFoundError(f"No job found with id: {job_id}")

    @staticmethod
    def _translate(error: IntegrityError, company_handle: Optional[str]) -> InvalidInputError:
        kind = constraint_kind(error)
        logger.warning(f"Job write rejected by {kind} constraint: {error.orig}")

        if kind == "foreign_key":
            return InvalidInputError(f"No company: {company_handle}")
        return InvalidInputError(f"Invalid job data ({kind} constraint)")
