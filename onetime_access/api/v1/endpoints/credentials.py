"""Administrative endpoints for one-time credentials (admin JWT required)."""

from fastapi import APIRouter, Request

from onetime_access.api.v1.dependencies import AdminClaims, OneTimeAccessServiceDep
from onetime_access.core.limiter import limit_admin_writes
from onetime_access.schemas.one_time import (
    CredentialItem,
    CredentialListResponse,
    CredentialWrite,
    IssuedCredentialResponse,
    OkResponse,
)

router = APIRouter()


@router.get("", response_model=CredentialListResponse)
async def list_credentials(
    _admin: AdminClaims,
    service: OneTimeAccessServiceDep,
) -> CredentialListResponse:
    """List all credentials, newest first."""
    results = await service.list_credentials()
    return CredentialListResponse(items=[CredentialItem.from_result(r) for r in results])


@router.post("", response_model=IssuedCredentialResponse)
@limit_admin_writes
async def issue_credential(
    request: Request,
    body: CredentialWrite,
    _admin: AdminClaims,
    service: OneTimeAccessServiceDep,
) -> IssuedCredentialResponse:
    """Issue a new unconsumed credential."""
    result = await service.issue(body.username, body.password, body.duration_hours)
    return IssuedCredentialResponse.from_result(result)


@router.get("/{credential_id}", response_model=CredentialItem)
async def get_credential(
    credential_id: str,
    _admin: AdminClaims,
    service: OneTimeAccessServiceDep,
) -> CredentialItem:
    """Get one credential by id (404 if missing)."""
    return CredentialItem.from_result(await service.get_credential(credential_id))


@router.put("/{credential_id}", response_model=OkResponse)
@limit_admin_writes
async def update_credential(
    request: Request,
    credential_id: str,
    body: CredentialWrite,
    _admin: AdminClaims,
    service: OneTimeAccessServiceDep,
) -> OkResponse:
    """Overwrite username, password and duration. Consumption state is untouched."""
    await service.update(credential_id, body.username, body.password, body.duration_hours)
    return OkResponse()


@router.delete("/{credential_id}", response_model=OkResponse)
@limit_admin_writes
async def revoke_credential(
    request: Request,
    credential_id: str,
    _admin: AdminClaims,
    service: OneTimeAccessServiceDep,
) -> OkResponse:
    """Revoke (delete) a credential; its session stops validating immediately."""
    await service.revoke(credential_id)
    return OkResponse()
