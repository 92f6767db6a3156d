"""
Pydantic schemas for Company API requests/responses.
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from jobly.schemas.common import CamelModel, SearchFilters


class CompanyCreateRequest(CamelModel):
    """Schema for creating a new company"""
    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: str
    num_employees: Optional[int] = Field(None, ge=0)
    logo_url: Optional[str] = None

    class Config:
        extra = "forbid"

    def to_data(self) -> dict:
        return self.model_dump(by_alias=True)


class CompanyUpdateRequest(CamelModel):
    """
    Schema for a partial company update.

    handle is not accepted: a company keeps its handle for life.
    """
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0)
    logo_url: Optional[str] = None

    class Config:
        extra = "forbid"

    def to_data(self) -> dict:
        """Only the fields the client actually sent."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class CompanySearchFilters(SearchFilters):
    """Query-string filters for GET /companies"""
    name: Optional[str] = None
    min_employees: Optional[int] = Field(None, ge=0)
    max_employees: Optional[int] = Field(None, ge=0)


class CompanyResponse(CamelModel):
    """Schema for company response"""
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = None
    logo_url: Optional[str] = None


class CompanyJobSummary(CamelModel):
    """A job as listed inside its company"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[str] = None


class CompanyDetailResponse(CompanyResponse):
    """Company with its jobs, ordered by id"""
    jobs: List[CompanyJobSummary] = []


class CompanyEnvelope(BaseModel):
    company: CompanyResponse


class CompanyDetailEnvelope(BaseModel):
    company: CompanyDetailResponse


class CompanyListEnvelope(BaseModel):
    companies: List[CompanyResponse]
