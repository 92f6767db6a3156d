"""
Shared pieces for the API schemas.
"""

from typing import Mapping, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from jobly.core.exceptions import InvalidInputError

FiltersT = TypeVar("FiltersT", bound="SearchFilters")


class CamelModel(BaseModel):
    """
    Base schema whose JSON names are camelCase (numEmployees) while the
    Python attributes stay snake_case (num_employees).
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class SearchFilters(CamelModel):
    """
    Query-string filters.

    Unknown keys are kept (extra="allow") so the repository's allow-list
    check can reject them by name.
    """

    class Config:
        extra = "allow"

    def to_filters(self) -> dict:
        """Filters keyed by API name, without the ones left out of the query."""
        return self.model_dump(by_alias=True, exclude_none=True)


def parse_filters(schema: Type[FiltersT], params: Mapping[str, str]) -> dict:
    """
    Parse a query string into repository filters.

    Only the camelCase names are filters; the Python attribute names
    (min_employees) are rejected like any other unknown key.

    Raises:
        InvalidInputError: If a key is an attribute name rather than a
            filter name, or a recognized filter has a bad value
    """
    attribute_names = {
        name for name, field in schema.model_fields.items()
        if field.alias and field.alias != name
    }
    misnamed = [key for key in params if key in attribute_names]
    if misnamed:
        raise InvalidInputError(f"Invalid filter(s): {', '.join(misnamed)}")

    try:
        filters = schema.model_validate(dict(params))
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise InvalidInputError(f"Invalid filter value(s): {problems}") from e

    return filters.to_filters()


class DeletedResponse(BaseModel):
    """Schema for delete responses"""
    deleted: Union[int, str]
