"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern.
"""

from jobly.crud.company import CompanyRepository
from jobly.crud.job import JobRepository

__all__ = ["CompanyRepository", "JobRepository"]
