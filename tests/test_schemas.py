"""
Tests for request schemas and query-string filter parsing.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from jobly.core.exceptions import InvalidInputError
from jobly.schemas.common import parse_filters
from jobly.schemas.company import CompanySearchFilters, CompanyUpdateRequest
from jobly.schemas.job import JobCreateRequest, JobSearchFilters, JobUpdateRequest


class TestFilterParsing:
    """Query strings become repository filters keyed by API name"""

    def test_company_filters_coerced(self):
        filters = parse_filters(CompanySearchFilters, {"name": "net", "minEmployees": "10", "maxEmployees": "20"})
        assert filters == {"name": "net", "minEmployees": 10, "maxEmployees": 20}

    def test_absent_filters_left_out(self):
        assert parse_filters(CompanySearchFilters, {}) == {}
        assert parse_filters(JobSearchFilters, {"title": "eng"}) == {"title": "eng"}

    def test_unknown_keys_passed_through(self):
        filters = parse_filters(CompanySearchFilters, {"name": "a", "foo": "1"})
        assert filters == {"name": "a", "foo": "1"}

    @pytest.mark.parametrize("schema,key", [
        (CompanySearchFilters, "min_employees"),
        (CompanySearchFilters, "max_employees"),
        (JobSearchFilters, "min_salary"),
        (JobSearchFilters, "has_equity"),
    ])
    def test_attribute_names_are_not_filters(self, schema, key):
        with pytest.raises(InvalidInputError, match=key):
            parse_filters(schema, {key: "1"})

    def test_bad_value_is_invalid_input(self):
        with pytest.raises(InvalidInputError, match="minSalary"):
            parse_filters(JobSearchFilters, {"minSalary": "lots"})

    def test_negative_bound_is_invalid_input(self):
        with pytest.raises(InvalidInputError, match="minEmployees"):
            parse_filters(CompanySearchFilters, {"minEmployees": "-1"})

    @pytest.mark.parametrize("raw,expected", [
        ("true", True),
        ("TRUE", False),
        (" true ", False),
        ("false", False),
        ("1", False),
        ("banana", False),
    ])
    def test_has_equity_parsed_to_bool(self, raw, expected):
        assert parse_filters(JobSearchFilters, {"hasEquity": raw}) == {"hasEquity": expected}


class TestUpdateSchemas:
    """Partial update bodies"""

    def test_only_sent_fields_kept(self):
        request = CompanyUpdateRequest.model_validate({"numEmployees": 5, "logoUrl": None})
        assert request.to_data() == {"numEmployees": 5, "logoUrl": None}

    def test_empty_body_gives_empty_data(self):
        assert JobUpdateRequest.model_validate({}).to_data() == {}

    def test_company_handle_forbidden_in_job_update(self):
        with pytest.raises(ValidationError):
            JobUpdateRequest.model_validate({"companyHandle": "c2"})

    def test_handle_forbidden_in_company_update(self):
        with pytest.raises(ValidationError):
            CompanyUpdateRequest.model_validate({"handle": "c2"})


class TestCreateSchemas:
    """Create bodies"""

    def test_job_equity_is_decimal(self):
        request = JobCreateRequest.model_validate({"title": "t", "equity": 0.23, "companyHandle": "c1"})

        assert request.to_data() == {
            "title": "t",
            "salary": None,
            "equity": Decimal("0.23"),
            "companyHandle": "c1",
        }

    def test_job_equity_bounded(self):
        with pytest.raises(ValidationError):
            JobCreateRequest.model_validate({"title": "t", "equity": "1.01", "companyHandle": "c1"})
