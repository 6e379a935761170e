"""
API-specific dependencies for v1 endpoints
"""
import secrets
from typing import Optional
from fastapi import Header, HTTPException, status

from leaddesk.core.config import settings


def verify_api_key(x_api_key: Optional[str] = Header(None)) -> Optional[str]:
    """
    Verify the API key from the X-API-Key header.
    Open access when no key is configured.
    """
    expected = settings.security.api_key
    if not expected:
        return x_api_key
    if not x_api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API key required"
        )
    if not secrets.compare_digest(x_api_key, expected):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid API key"
        )
    return x_api_key
