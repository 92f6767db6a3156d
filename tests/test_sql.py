"""
Tests for the SQL building helpers.

Tests cover:
- Partial update SET clause building
- Filter and update-field allow-list checks
- WHERE clause assembly
- Positional placeholder execution
- IntegrityError classification
"""

import pytest
from sqlalchemy.exc import IntegrityError

from jobly.core.exceptions import InvalidInputError
from jobly.core.sql import (
    PartialUpdate,
    WhereClause,
    constraint_kind,
    ensure_allowed_filters,
    ensure_updatable_fields,
    execute,
    sql_for_partial_update,
)

JS_TO_SQL = {
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
}


class TestSqlForPartialUpdate:
    """Tests for sql_for_partial_update"""

    def test_maps_overridden_names(self):
        result = sql_for_partial_update(
            {"firstName": "Aliya", "lastName": "Smith", "email": "a@b.com"},
            JS_TO_SQL
        )

        assert result.assignments == ['"first_name"=$1', '"last_name"=$2', '"email"=$3']
        assert result.values == ["Aliya", "Smith", "a@b.com"]
        assert result.set_clause == '"first_name"=$1, "last_name"=$2, "email"=$3'

    def test_unlisted_names_pass_through(self):
        result = sql_for_partial_update(
            {"numEmployees": 5, "logoUrl": "x"},
            {"numEmployees": "num_employees"}
        )

        assert result == PartialUpdate(['"num_employees"=$1', '"logoUrl"=$2'], [5, "x"])

    def test_placeholders_follow_input_order(self):
        data = {"c": 3, "a": 1, "b": 2, "d": None}
        result = sql_for_partial_update(data)

        assert len(result.assignments) == len(result.values) == 4
        assert result.assignments == ['"c"=$1', '"a"=$2', '"b"=$3', '"d"=$4']
        assert result.values == [3, 1, 2, None]

    def test_next_placeholder_follows_values(self):
        result = sql_for_partial_update({"name": "x", "description": "y"})
        assert result.next_placeholder == "$3"

    def test_values_stay_out_of_sql(self):
        result = sql_for_partial_update({"name": "'; DROP TABLE companies; --"})
        assert result.set_clause == '"name"=$1'

    @pytest.mark.parametrize("overrides", [None, {}, JS_TO_SQL])
    def test_empty_data_rejected(self, overrides):
        with pytest.raises(InvalidInputError, match="No data"):
            sql_for_partial_update({}, overrides)


class TestEnsureAllowedFilters:
    """Tests for the filter allow-list check"""

    def test_allowed_filters_pass(self):
        ensure_allowed_filters({"name": "a", "minEmployees": 1}, ["name", "minEmployees", "maxEmployees"])

    def test_empty_filters_pass(self):
        ensure_allowed_filters({}, ["name"])

    def test_unknown_filter_named(self):
        with pytest.raises(InvalidInputError, match="foo"):
            ensure_allowed_filters({"foo": 1}, ["name"])

    def test_all_unknown_filters_named(self):
        with pytest.raises(InvalidInputError) as exc_info:
            ensure_allowed_filters({"foo": 1, "name": "x", "bar": 2}, ["name"])

        assert exc_info.value.message == "Invalid filter(s): foo, bar"


class TestEnsureUpdatableFields:
    """Tests for the update-field allow-list check"""

    def test_allowed_fields_pass(self):
        ensure_updatable_fields({"title": "x", "equity": 0}, ["title", "salary", "equity"])

    def test_unknown_fields_named(self):
        with pytest.raises(InvalidInputError) as exc_info:
            ensure_updatable_fields({"title": "x", "foo": 1, "bar\"": 2}, ["title"])

        assert exc_info.value.message == 'Invalid field(s): foo, bar"'


class TestWhereClause:
    """Tests for WHERE clause assembly"""

    def test_no_conditions(self):
        where = WhereClause()
        assert where.sql == ""
        assert where.values == []

    def test_conditions_numbered_in_order(self):
        where = WhereClause()
        where.add("lower(name) LIKE lower({})", "%ab%")
        where.add("num_employees >= {}", 5)
        where.add("num_employees <= {}", 10)

        assert where.sql == " WHERE lower(name) LIKE lower($1) AND num_employees >= $2 AND num_employees <= $3"
        assert where.values == ["%ab%", 5, 10]


class TestExecute:
    """Tests for running $n statements through a session"""

    def test_binds_positional_values(self, db_session):
        row = execute(db_session, "SELECT $2 AS second_value, $1 AS first_value", ["a", "b"]).mappings().one()

        assert row["first_value"] == "a"
        assert row["second_value"] == "b"

    def test_reused_placeholder(self, db_session):
        row = execute(db_session, "SELECT $1 + $1 AS doubled", [21]).mappings().one()
        assert row["doubled"] == 42

    def test_missing_value_rejected(self, db_session):
        with pytest.raises(ValueError, match=r"\$2"):
            execute(db_session, "SELECT $1, $2", ["only one"])


class TestConstraintKind:
    """Tests for IntegrityError classification"""

    @pytest.mark.parametrize("message,kind", [
        ("UNIQUE constraint failed: companies.handle", "unique"),
        ('duplicate key value violates unique constraint "companies_pkey"', "unique"),
        ("FOREIGN KEY constraint failed", "foreign_key"),
        ('insert or update on table "jobs" violates foreign key constraint', "foreign_key"),
        ("CHECK constraint failed: ck_jobs_equity", "check"),
        ("NOT NULL constraint failed: jobs.title", "not_null"),
        ('null value in column "title" violates not-null constraint', "not_null"),
        ("something else", "unknown"),
    ])
    def test_classifies_driver_messages(self, message, kind):
        error = IntegrityError("INSERT ...", {}, Exception(message))
        assert constraint_kind(error) == kind
