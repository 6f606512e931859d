"""
Admin API Routes - Maintenance Endpoints

Authentication is via Admin API Key, not user access tokens.
"""

from fastapi import APIRouter, Depends, status

from session_vault.api.error import ServerError
from session_vault.api.utils.admin_auth import verify_admin_api_key
from session_vault.app.services.unit_of_work import UnitOfWork
from session_vault.app.use_cases.sessions import (
    PurgeExpiredSessionsResponse,
    PurgeExpiredSessionsUseCase,
)
from session_vault.depends import get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/sessions/purge-expired",
    status_code=status.HTTP_200_OK,
    response_model=PurgeExpiredSessionsResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def purge_expired_sessions(uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Purge Expired Sessions

    Scheduler endpoint that deletes every session whose refresh token
    has expired.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 500 Internal Server Error: Server error
    """
    use_case = PurgeExpiredSessionsUseCase(uow)
    result = await use_case.execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value
