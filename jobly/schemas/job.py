from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from jobly.schemas.common import CamelModel, SearchFilters


class JobCreateRequest(CamelModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)
    company_handle: str = Field(..., min_length=1, max_length=25)

    class Config:
        extra = "forbid"

    def to_data(self) -> dict:
        return self.model_dump(by_alias=True)


class JobUpdateRequest(CamelModel):
    """
    Schema for a partial job update.

    Neither id nor companyHandle can be sent: a job never moves to another company.
    """
    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)

    class Config:
        extra = "forbid"

    def to_data(self) -> dict:
        """Only the fields the client actually sent."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class JobSearchFilters(SearchFilters):
    """Query-string filters for GET /jobs"""
    title: Optional[str] = None
    min_salary: Optional[int] = Field(None, ge=0)
    has_equity: Optional[bool] = None

    @field_validator("has_equity", mode="before")
    @classmethod
    def parse_has_equity(cls, v):
        """Only the literal "true" turns the filter on; any other string ("TRUE" included) leaves it off"""
        if isinstance(v, str):
            return v == "true"
        return v


class JobResponse(CamelModel):
    """Schema for job response"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[str] = None
    company_handle: str


class JobEnvelope(BaseModel):
    job: JobResponse


class JobListEnvelope(BaseModel):
    jobs: List[JobResponse]
