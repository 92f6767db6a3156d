import logging
from fastapi import APIRouter, Depends, Request

from jobly.core.deps import get_admin_claims, get_company_repository
from jobly.crud.company import CompanyRepository
from jobly.schemas.common import DeletedResponse, parse_filters
from jobly.schemas.company import (
    CompanyCreateRequest,
    CompanyDetailEnvelope,
    CompanyEnvelope,
    CompanyListEnvelope,
    CompanySearchFilters,
    CompanyUpdateRequest,
)

router = APIRouter(prefix="/companies", tags=["Companies"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201, response_model=CompanyEnvelope)
def create_company(
    request: CompanyCreateRequest,
    repo: CompanyRepository = Depends(get_company_repository),
    admin: dict = Depends(get_admin_claims)
):
    """
    Create a company. Admin only.

    Returns 400 if the handle is already taken.
    """
    company = repo.create(request.to_data())
    logger.info(f"Created company {company['handle']} (by {admin['username']})")
    return {"company": company}


@router.get("", response_model=CompanyListEnvelope)
def list_companies(
    request: Request,
    repo: CompanyRepository = Depends(get_company_repository)
):
    """
    List companies ordered by name.

    Optional query filters:
    - name: case-insensitive substring match
    - minEmployees / maxEmployees: inclusive bounds on employee count

    Any other query parameter is rejected with 400.
    """
    filters = parse_filters(CompanySearchFilters, request.query_params)
    return {"companies": repo.find_all(filters)}


@router.get("/{handle}", response_model=CompanyDetailEnvelope)
def get_company(handle: str, repo: CompanyRepository = Depends(get_company_repository)):
    """Retrieve a company and its jobs."""
    return {"company": repo.get(handle)}


@router.patch("/{handle}", response_model=CompanyEnvelope)
def update_company(
    handle: str,
    request: CompanyUpdateRequest,
    repo: CompanyRepository = Depends(get_company_repository),
    admin: dict = Depends(get_admin_claims)
):
    """
    Partially update a company. Admin only.

    Fields: name, description, numEmployees, logoUrl. The handle cannot change.
    """
    company = repo.update(handle, request.to_data())
    logger.info(f"Updated company {handle} (by {admin['username']})")
    return {"company": company}


@router.delete("/{handle}", response_model=DeletedResponse)
def delete_company(
    handle: str,
    repo: CompanyRepository = Depends(get_company_repository),
    admin: dict = Depends(get_admin_claims)
):
    """Delete a company and its jobs. Admin only."""
    repo.remove(handle)
    logger.info(f"Deleted company {handle} (by {admin['username']})")
    return {"deleted": handle}
