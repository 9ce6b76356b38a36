from enum import Enum
import configparser
from os import environ
from os.path import exists
from typing import Any, Optional
import logging

from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

_PATH = "app{suffix}.conf"
_CONFIG = None


def _to_bool(v: Any, default: bool) -> bool:
    if v in (None, "", " "):
        return default
    if isinstance(v, str):
        return v.lower() in ("yes", "true", "t", "1")
    return bool(v)


class LogLevel(str, Enum):
    debug = "debug"
    info = "info"
    warning = "warning"
    error = "error"
    critical = "critical"


class ConfigApp(BaseModel):
    loglevel: LogLevel = Field(default=LogLevel.info)


class ConfigRegistry(BaseModel):
    base_url: str
    ccn_system: str = Field(default="http://cibmtr.org/codesystem/transplant-center")
    crid_system: str = Field(default="http://cibmtr.org/identifier/CRID")
    observation_identifier_system: str = Field(default="urn:ietf:rfc:3986")
    authorization_scheme: str = Field(
        default="raw",
        description="How the caller credential is sent, can be 'raw' or 'bearer'",
    )
    timeout: int = Field(default=30)
    # Only connection errors and timeouts are retried, 1 means a single attempt
    retries: int = Field(default=1, ge=1)
    backoff: float = Field(default=0.5)
    mtls_client_cert_path: str | None = Field(default=None)
    mtls_client_key_path: str | None = Field(default=None)
    verify_ca: str | bool = Field(default=True)

    @field_validator("base_url")
    def validate_base_url(cls, v: str) -> str:
        # Trailing slashes are dropped, sub routes are always joined with one
        return v.rstrip("/")

    @field_validator("authorization_scheme")
    def validate_authorization_scheme(cls, value: Any) -> str:
        if value not in {"raw", "bearer"}:
            raise ValueError("authorization_scheme must be either 'raw' or 'bearer'")
        return str(value)

    @field_validator("timeout", mode="before")
    def validate_timeout(cls, v: Any) -> int:
        if v in (None, "", " "):
            return 30
        return int(v)

    @field_validator("retries", mode="before")
    def validate_retries(cls, v: Any) -> int:
        if v in (None, "", " "):
            return 1
        return int(v)

    @field_validator("backoff", mode="before")
    def validate_backoff(cls, v: Any) -> float:
        if v in (None, "", " "):
            return 0.5
        return float(v)

    @field_validator("verify_ca", mode="before")
    def validate_verify_ca(cls, v: Any) -> str | bool:
        if v in (None, "", " "):
            return True
        if isinstance(v, str) and v.lower() in ("yes", "true", "t", "1", "no", "false", "f", "0"):
            return _to_bool(v, True)
        return v  # type: ignore


class ConfigUvicorn(BaseModel):
    swagger_enabled: bool = Field(default=False)
    docs_url: str = Field(default="/docs")
    redoc_url: str = Field(default="/redoc")
    host: str = Field(default="127.0.0.1")
    port: Optional[int] = Field(default=8000, gt=0, lt=65535)
    reload: bool = Field(default=True)
    reload_delay: float = Field(default=1)
    reload_dirs: list[str] = Field(default=["app"])
    use_ssl: bool = Field(default=False)
    ssl_base_dir: str | None = Field(default=None)
    ssl_cert_file: str | None = Field(default=None)
    ssl_key_file: str | None = Field(default=None)

    @field_validator("host", mode="before")
    def validate_host(cls, v: Any) -> str:
        if v in (None, "", " "):
            return "127.0.0.1"
        return str(v)

    @field_validator("port", mode="before")
    def validate_port(cls, v: Any) -> int:
        if v in (None, "", " "):
            return 8000
        return int(v)

    @field_validator("swagger_enabled", "use_ssl", mode="before")
    def validate_flags(cls, v: Any) -> bool:
        return _to_bool(v, False)

    @field_validator("reload", mode="before")
    def validate_reload(cls, v: Any) -> bool:
        return _to_bool(v, True)

    @field_validator("reload_delay", mode="before")
    def validate_reload_delay(cls, v: Any) -> float:
        if v in (None, "", " "):
            return 1.0
        return float(v)

    @field_validator("reload_dirs", mode="before")
    def validate_reload_dirs(cls, v: Any) -> list[str]:
        if v in (None, "", " "):
            return ["app"]
        if isinstance(v, str):
            return [d.strip() for d in v.split(",")]
        return v  # type: ignore


class ConfigStats(BaseModel):
    enabled: bool = Field(default=False)
    host: str | None = Field(default=None)
    port: int | None = Field(default=None)
    module_name: str | None = Field(default=None)

    @field_validator("enabled", mode="before")
    def validate_enabled(cls, v: Any) -> bool:
        return _to_bool(v, False)

    @field_validator("port", mode="before")
    def validate_port(cls, v: Any) -> int | None:
        if v in (None, "", " "):
            return None
        return int(v)


class Config(BaseModel):
    app: ConfigApp
    registry: ConfigRegistry
    uvicorn: ConfigUvicorn
    stats: ConfigStats


def read_ini_file(path: str) -> Any:
    ini_data = configparser.ConfigParser()
    ini_data.read(path)

    ret = {}
    for section in ini_data.sections():
        ret[section] = dict(ini_data[section])

    return ret


def reset_config() -> None:
    global _CONFIG
    _CONFIG = None


def set_config(config: Config) -> None:
    global _CONFIG
    _CONFIG = config


def get_config(path: str | None = None) -> Config:
    global _CONFIG
    global _PATH

    if _CONFIG is not None:
        return _CONFIG

    if path is None:
        suffix = environ.get("APP_ENV", "")
        if suffix:
            suffix = f".{suffix}"
        path = _PATH.replace("{suffix}", suffix)
        logger.info(f"Reading configuration using file: {path}")

    if not exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    # INI-type files are not a standard format for pydantic, so sections are parsed first
    ini_data = read_ini_file(path)
    ini_data.setdefault("app", {})
    ini_data.setdefault("uvicorn", {})
    ini_data.setdefault("stats", {})

    try:
        _CONFIG = Config(**ini_data)
    except ValidationError as e:
        logger.error(f"Configuration validation error: {e}")
        raise e

    return _CONFIG
