"""
CRUD operations for companies.

Implements the Repository pattern over the companies table with
parameterized SQL, translating between the API field names
(numEmployees, logoUrl) and the column names (num_employees, logo_url).
"""

from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.exceptions import DuplicateKeyError, InvalidInputError, NotFoundError
from jobly.core.logging_config import get_logger
from jobly.core.sql import (
    WhereClause,
    constraint_kind,
    ensure_allowed_filters,
    ensure_updatable_fields,
    execute,
    sql_for_partial_update,
)
from jobly.crud.job import EQUITY_TYPE, job_summary_from_row

logger = get_logger(__name__)

ALLOWED_FILTERS = ("name", "minEmployees", "maxEmployees")

JS_TO_SQL = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}

COMPANY_COLUMNS = 'handle, name, description, num_employees AS "numEmployees", logo_url AS "logoUrl"'

COMPANY_FIELDS = ("handle", "name", "description", "numEmployees", "logoUrl")

UPDATABLE_FIELDS = ("name", "description", "numEmployees", "logoUrl")


class CompanyRepository:
    """
    Data access for companies.

    Every method runs a single statement; writes commit on success and roll
    back before raising.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Create a company (from data), update db, return new company data.

        Args:
            data: {handle, name, description, numEmployees, logoUrl}

        Returns:
            {handle, name, description, numEmployees, logoUrl}

        Raises:
            DuplicateKeyError: If the handle (or name) is already taken
        """
        handle = data["handle"]

        duplicate = execute(
            self.db,
            "SELECT handle FROM companies WHERE handle = $1",
            [handle]
        ).first()
        if duplicate is not None:
            raise DuplicateKeyError(f"Duplicate company: {handle}")

        try:
            row = execute(
                self.db,
                f"""INSERT INTO companies
                    (handle, name, description, num_employees, logo_url)
                    VALUES ($1, $2, $3, $4, $5)
                    RETURNING {COMPANY_COLUMNS}""",
                [
                    handle,
                    data["name"],
                    data["description"],
                    data.get("numEmployees"),
                    data.get("logoUrl"),
                ]
            ).mappings().one()
            self.db.commit()
        except IntegrityError as e:
            # A concurrent insert of the same handle lands here too
            self.db.rollback()
            raise self._translate(e, handle, data["name"]) from e

        return dict(row)

    def find_all(self, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Find all companies, optionally filtered.

        Args:
            filters: Any of
                name: case-insensitive substring of the name
                minEmployees: inclusive lower bound on numEmployees
                maxEmployees: inclusive upper bound on numEmployees

        Returns:
            [{handle, name, description, numEmployees, logoUrl}, ...] ordered by name

        Raises:
            InvalidInputError: On a filter outside the allow-list, or when
                minEmployees > maxEmployees
        """
        filters = filters or {}
        ensure_allowed_filters(filters, ALLOWED_FILTERS)

        name = filters.get("name")
        min_employees = filters.get("minEmployees")
        max_employees = filters.get("maxEmployees")

        if min_employees is not None and max_employees is not None and min_employees > max_employees:
            raise InvalidInputError("minEmployees cannot be greater than maxEmployees")

        where = WhereClause()
        if name is not None:
            where.add("lower(name) LIKE lower({})", f"%{name}%")
        if min_employees is not None:
            where.add("num_employees >= {}", min_employees)
        if max_employees is not None:
            where.add("num_employees <= {}", max_employees)

        result = execute(
            self.db,
            f"SELECT {COMPANY_COLUMNS} FROM companies{where.sql} ORDER BY name",
            where.values
        )
        return [dict(row) for row in result.mappings()]

    def get(self, handle: str) -> Dict[str, Any]:
        """
        Given a company handle, return data about the company.

        Returns:
            {handle, name, description, numEmployees, logoUrl, jobs}
            where jobs is [{id, title, salary, equity}, ...] ordered by id

        Raises:
            NotFoundError: If no such company
        """
        rows = execute(
            self.db,
            """SELECT c.handle,
                      c.name,
                      c.description,
                      c.num_employees AS "numEmployees",
                      c.logo_url AS "logoUrl",
                      j.id,
                      j.title,
                      j.salary,
                      j.equity
               FROM companies AS c
               LEFT JOIN jobs AS j ON c.handle = j.company_handle
               WHERE c.handle = $1
               ORDER BY j.id""",
            [handle],
            **EQUITY_TYPE
        ).mappings().all()

        if not rows:
            raise NotFoundError(f"No company: {handle}")

        # One row per job (or a single row of NULL job columns); fold into one company
        company = {field: rows[0][field] for field in COMPANY_FIELDS}
        company["jobs"] = [job_summary_from_row(row) for row in rows if row["id"] is not None]

        return company

    def update(self, handle: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Update company data with `data`.

        This is a "partial update": only the fields present in data change.
        Data can include {name, description, numEmployees, logoUrl}.

        Returns:
            {handle, name, description, numEmployees, logoUrl}

        Raises:
            InvalidInputError: If data is empty, tries to change the handle or
                names any other unknown field
            DuplicateKeyError: If the new name is already taken
            NotFoundError: If no such company
        """
        if "handle" in data:
            raise InvalidInputError("Company handle cannot be changed")
        ensure_updatable_fields(data, UPDATABLE_FIELDS)

        update = sql_for_partial_update(data, JS_TO_SQL)
        query = f"""UPDATE companies
                    SET {update.set_clause}
                    WHERE handle = {update.next_placeholder}
                    RETURNING {COMPANY_COLUMNS}"""

        try:
            row = execute(self.db, query, [*update.values, handle]).mappings().first()
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise self._translate(e, handle, data.get("name")) from e

        if row is None:
            raise NotFoundError(f"No company: {handle}")

        return dict(row)

    def remove(self, handle: str) -> None:
        """
        Delete given company (and, by cascade, its jobs) from database.

        Raises:
            NotFoundError: If no such company
        """
        row = execute(
            self.db,
            "DELETE FROM companies WHERE handle = $1 RETURNING handle",
            [handle]
        ).first()
        self.db.commit()

        if row is None:
            raise NotFoundError(f"No company: {handle}")

    @staticmethod
    def _translate(error: IntegrityError, handle: str, name: Optional[str] = None) -> Exception:
        kind = constraint_kind(error)
        logger.warning(f"Company write for {handle} rejected by {kind} constraint: {error.orig}")

        if kind == "unique":
            # SQLite says "companies.name", PostgreSQL "companies_name_key"
            if name is not None and "name" in str(error.orig).lower():
                return DuplicateKeyError(f"Duplicate company name: {name}")
            return DuplicateKeyError(f"Duplicate company: {handle}")
        return InvalidInputError(f"Invalid company data ({kind} constraint)")
