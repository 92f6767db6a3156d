"""
FastAPI dependencies for repositories and the admin token check.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.security import decode_token
from jobly.crud.company import CompanyRepository
from jobly.crud.job import JobRepository

# HTTP Bearer token scheme (Authorization: Bearer <token>)
# auto_error is off so a missing header gets the same 401 as a bad token
security = HTTPBearer(auto_error=False)


def get_company_repository(db: Session = Depends(get_db)) -> CompanyRepository:
    return CompanyRepository(db)


def get_job_repository(db: Session = Depends(get_db)) -> JobRepository:
    return JobRepository(db)


def get_token_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    Decode the Bearer token into its claims.

    Raises:
        HTTPException 401: If the token is missing, invalid or has no username
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise credentials_exception

    if payload.get("username") is None:
        raise credentials_exception

    return payload


def get_admin_claims(claims: dict = Depends(get_token_claims)) -> dict:
    """
    Require a token whose claims mark the caller as admin.

    Raises:
        HTTPException 403: If the token is valid but not an admin's
    """
    if claims.get("isAdmin") is not True:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required"
        )

    return claims
