"""API endpoints for the vault session and clipboard retrieval."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field, model_validator

from ..blocks import find_blocks
from ..broker import Broker
from ..logging import get_logger
from ..vault.models import Property, Secret

logger = get_logger("api.vault")

router = APIRouter(tags=["vault"])


def get_broker(request: Request) -> Broker:
    return request.app.state.broker


# --- Request/Response Models ---

class VaultUnlockRequest(BaseModel):
    """Unlock with a master password, or with a session token from `bw unlock --raw`."""
    password: Optional[str] = Field(default=None, description="Master password")
    session_token: Optional[str] = Field(default=None, description="Existing session token")

    @model_validator(mode="after")
    def _one_secret(self):
        if (self.password is None) == (self.session_token is None):
            raise ValueError("Provide exactly one of password or session_token")
        return self


class VaultSessionResponse(BaseModel):
    is_unlocked: bool
    unlocked_at: Optional[str] = None


class CopyRequest(BaseModel):
    source: str = Field(..., min_length=1, description="Vault entry identifier")
    property: Property


class CopyResponse(BaseModel):
    copied: bool
    reason: Optional[str] = None


class BlocksRequest(BaseModel):
    markdown: str


# --- Session Endpoints ---

@router.post("/vault/unlock", response_model=VaultSessionResponse)
async def unlock_vault(request: VaultUnlockRequest, broker: Broker = Depends(get_broker)):
    """
    Unlock the password manager and keep its session token in memory.

    Use /vault/lock to clear it.
    """
    if request.session_token is not None:
        broker.unlock_with_token(request.session_token)
    else:
        failure = await broker.unlock(request.password)
        if failure is not None:
            raise HTTPException(status_code=401, detail=failure.reason)

    return _session_response(broker)


@router.post("/vault/lock")
async def lock_vault(broker: Broker = Depends(get_broker)):
    """Lock the vault by clearing the session token from memory."""
    if not broker.session.is_unlocked:
        return {"message": "Vault already locked"}

    broker.lock()
    return {"message": "Vault locked"}


@router.get("/vault/session", response_model=VaultSessionResponse)
async def get_vault_session(broker: Broker = Depends(get_broker)):
    """Get the current vault session status. Never includes the token."""
    return _session_response(broker)


# --- Retrieval Endpoints ---

@router.post("/vault/copy", response_model=CopyResponse)
async def copy_credential(request: CopyRequest, broker: Broker = Depends(get_broker)):
    """Fetch one property of a vault entry and put it on the clipboard."""
    result = await broker.copy(request.source, request.property)
    if result is None:
        raise HTTPException(
            status_code=409,
            detail=f"{request.property.label} for {request.source} is already being fetched",
        )
    if isinstance(result, Secret):
        return CopyResponse(copied=True)
    return CopyResponse(copied=False, reason=result.reason)


@router.post("/blocks")
async def list_blocks(request: BlocksRequest):
    """List the password blocks declared in a markdown document."""
    return {"blocks": [block.to_dict() for block in find_blocks(request.markdown)]}


@router.get("/notices")
async def list_notices(limit: int = 20, broker: Broker = Depends(get_broker)):
    """Recent transient notices, oldest first."""
    return {"notices": [n.to_dict() for n in broker.notifier.recent(limit)]}


def _session_response(broker: Broker) -> VaultSessionResponse:
    unlocked_at = broker.session.unlocked_at
    return VaultSessionResponse(
        is_unlocked=broker.session.is_unlocked,
        unlocked_at=unlocked_at.isoformat() if unlocked_at else None,
    )
