"""API endpoints for the persisted plugin settings."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..broker import Broker
from ..config import (
    DEFAULT_BINARY_PATH,
    DEFAULT_EXEC_TIMEOUT_MS,
    DEFAULT_PASSWORD_MANAGER,
    MAX_EXEC_TIMEOUT_MS,
    MIN_EXEC_TIMEOUT_MS,
    PluginSettings,
)
from ..logging import get_logger
from ..vault.providers import PasswordManager
from .vault import get_broker

logger = get_logger("api")

router = APIRouter(prefix="/settings", tags=["settings"])


class SettingsModel(BaseModel):
    password_manager: PasswordManager = PasswordManager(DEFAULT_PASSWORD_MANAGER)
    binary_path: str = Field(default=DEFAULT_BINARY_PATH, min_length=1)
    exec_timeout_ms: int = Field(
        default=DEFAULT_EXEC_TIMEOUT_MS,
        ge=MIN_EXEC_TIMEOUT_MS,
        le=MAX_EXEC_TIMEOUT_MS,
    )


class SettingsResponse(SettingsModel):
    available_password_managers: list[str] = [m.value for m in PasswordManager]


@router.get("", response_model=SettingsResponse)
async def get_settings(broker: Broker = Depends(get_broker)):
    settings = broker.config.settings
    return SettingsResponse(
        password_manager=settings.password_manager,
        binary_path=settings.binary_path,
        exec_timeout_ms=settings.exec_timeout_ms,
    )


@router.put("", response_model=SettingsResponse)
async def update_settings(request: SettingsModel, broker: Broker = Depends(get_broker)):
    """Validate, persist and apply new settings."""
    settings = PluginSettings(
        password_manager=request.password_manager.value,
        binary_path=request.binary_path,
        exec_timeout_ms=request.exec_timeout_ms,
    )
    try:
        broker.update_settings(settings)
    except OSError as e:
        logger.error(f"Failed to save settings: {e}")
        raise HTTPException(status_code=500, detail="Failed to save settings")

    logger.info("Settings updated")
    return await get_settings(broker)
