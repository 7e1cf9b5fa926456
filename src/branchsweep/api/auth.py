"""Bearer credential handling for the branchsweep API."""

from typing import Optional

from fastapi import HTTPException, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from branchsweep.config import Config
from branchsweep.core.service import BranchSweeper


# Authorization header; missing headers are reported by require_token
bearer_scheme = HTTPBearer(auto_error=False)


async def require_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> str:
    """Return the bearer token presented with the request.

    The token is handed through to the hosting API for this request only.

    Raises:
        HTTPException: If no bearer token was presented
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=401,
            detail="Missing or invalid authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


def get_sweeper(request: Request) -> BranchSweeper:
    """Return the application's sweeper, building it from config on first use."""
    sweeper = getattr(request.app.state, "sweeper", None)
    if sweeper is None:
        sweeper = BranchSweeper.from_config(Config().load_or_default())
        request.app.state.sweeper = sweeper
    return sweeper
