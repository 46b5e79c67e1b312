"""
Settings for the MEKD API

Provides:
- Server configuration from environment variables
- Read-only reference for validation rules, formulas and constants
"""
import logging
import os
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from fastapi import APIRouter

from mekd.executors.estimator.formulas import get_all_constants, get_all_formulas
from mekd.executors.input_validator.validation import get_validation_rules

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173", "http://localhost:8080"]


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class ServerSettings(BaseModel):
    """API server configuration."""
    host: str = "0.0.0.0"
    port: int = Field(8080, ge=1, le=65535)
    log_level: str = "INFO"
    cors_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, v):
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "ServerSettings":
        """Read MEKD_* environment variables; unset ones keep defaults."""
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for field_name, env_name in (
            ("host", "MEKD_HOST"),
            ("port", "MEKD_PORT"),
            ("log_level", "MEKD_LOG_LEVEL"),
            ("cors_origins", "MEKD_CORS_ORIGINS"),
        ):
            if environ.get(env_name):
                values[field_name] = environ[env_name]
        return cls(**values)


# =============================================================================
# SINGLETON INSTANCE
# =============================================================================

_settings: Optional[ServerSettings] = None


def get_settings() -> ServerSettings:
    """Get singleton settings instance."""
    global _settings
    if _settings is None:
        _settings = ServerSettings.from_env()
        logger.info(f"Loaded settings: host={_settings.host} port={_settings.port} log_level={_settings.log_level}")
    return _settings


def configure_logging(level: Optional[str] = None):
    """Configure root logging for an entry point."""
    logging.basicConfig(
        level=getattr(logging, (level or get_settings().log_level).upper()),
        format=LOG_FORMAT
    )


# =============================================================================
# API ROUTER
# =============================================================================

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("")
async def get_server_settings():
    """Get current server settings."""
    return get_settings().model_dump()


@router.get("/validation-bounds")
async def get_validation_bounds():
    """Get positivity rules for reference."""
    return get_validation_rules()


@router.get("/formulas")
async def get_formulas():
    """Get formula documentation."""
    return get_all_formulas()


@router.get("/constants")
async def get_constants():
    """Get regression constants."""
    return get_all_constants()
