"""Authentication helpers and FastAPI security dependency.

This module provides utilities to decode JWT tokens and a FastAPI
dependency `get_current_member_id` that validates the bearer token and
returns the member id it was issued for. Tokens are issued by the OAuth
login flow, which lives outside this backend.

Token verification raises HTTPExceptions on failure so it can be used
directly inside route dependencies. Whether the member still exists is
checked by the services, which raise `MEMBER_NOT_FOUND`.
"""

from fastapi import HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt
from .config import settings

bearer_scheme = HTTPBearer()


def decode_token(token: str):
    """Decode and verify a JWT token.

    Returns the decoded payload on success or raises an HTTPException
    with status 401 on failure.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail='token expired')
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail='invalid token')


def get_current_member_id(credentials: HTTPAuthorizationCredentials = Security(bearer_scheme)) -> int:
    """FastAPI dependency that returns the authenticated member's id."""
    payload = decode_token(credentials.credentials)
    member_id = payload.get('member_id')
    if not isinstance(member_id, int) or isinstance(member_id, bool):
        raise HTTPException(status_code=401, detail='invalid token payload')
    return member_id
