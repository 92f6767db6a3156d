import logging
from fastapi import APIRouter, Depends, Request

from jobly.core.deps import get_admin_claims, get_job_repository
from jobly.crud.job import JobRepository
from jobly.schemas.common import DeletedResponse, parse_filters
from jobly.schemas.job import (
    JobCreateRequest,
    JobEnvelope,
    JobListEnvelope,
    JobSearchFilters,
    JobUpdateRequest,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201, response_model=JobEnvelope)
def create_job(
    request: JobCreateRequest,
    repo: JobRepository = Depends(get_job_repository),
    admin: dict = Depends(get_admin_claims)
):
    """
    Create a job posting for an existing company. Admin only.

    Returns 400 if companyHandle does not name a company.
    """
    job = repo.create(request.to_data())
    logger.info(f"Created job {job['id']}: {job['title']} at {job['companyHandle']}")
    return {"job": job}


@router.get("", response_model=JobListEnvelope)
def list_jobs(
    request: Request,
    repo: JobRepository = Depends(get_job_repository)
):
    """
    List jobs ordered by id.

    Optional query filters:
    - title: case-insensitive substring match
    - minSalary: inclusive lower bound on salary
    - hasEquity: "true" keeps only jobs with non-zero equity
    """
    filters = parse_filters(JobSearchFilters, request.query_params)
    return {"jobs": repo.find_all(filters)}


@router.get("/{job_id}", response_model=JobEnvelope)
def get_job(job_id: int, repo: JobRepository = Depends(get_job_repository)):
    """Retrieve a job by ID."""
    return {"job": repo.get(job_id)}


@router.patch("/{job_id}", response_model=JobEnvelope)
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    repo: JobRepository = Depends(get_job_repository),
    admin: dict = Depends(get_admin_claims)
):
    """
    Partially update a job. Admin only.

    Fields: title, salary, equity. Sending id or companyHandle is a 422.
    """
    job = repo.update(job_id, request.to_data())
    logger.info(f"Updated job {job_id} (by {admin['username']})")
    return {"job": job}


@router.delete("/{job_id}", response_model=DeletedResponse)
def delete_job(
    job_id: int,
    repo: JobRepository = Depends(get_job_repository),
    admin: dict = Depends(get_admin_claims)
):
    """Delete a job by ID. Admin only."""
    repo.remove(job_id)
    logger.info(f"Deleted job {job_id}")
    return {"deleted": job_id}
