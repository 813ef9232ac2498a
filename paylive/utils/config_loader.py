"""
Configuration loader for the PayLIVE connector
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT_URL = "https://i-walletlive.com/payLIVE/paymentservice.svc"
DEFAULT_NAMESPACE = "http://www.i-walletlive.com/payLIVE"

ENV_KEYS: Dict[str, str] = {
    "api_version": "PAYLIVE_API_VERSION",
    "merchant_email": "PAYLIVE_MERCHANT_EMAIL",
    "merchant_key": "PAYLIVE_MERCHANT_KEY",
    "service_type": "PAYLIVE_SERVICE_TYPE",
    "integration_mode": "PAYLIVE_INTEGRATION_MODE",
    "endpoint_url": "PAYLIVE_ENDPOINT_URL",
    "namespace": "PAYLIVE_NAMESPACE",
    "timeout_seconds": "PAYLIVE_TIMEOUT_SECONDS",
    "supports_cancellation": "PAYLIVE_SUPPORTS_CANCELLATION",
}

BOOL_FIELDS = frozenset({"integration_mode", "supports_cancellation"})


class ConfigurationError(ValueError):
    """Missing or malformed merchant configuration."""


def parse_bool(value: Any, label: str) -> bool:
    """Boolean parsing with the same rules as .NET Convert.ToBoolean on strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized == "true":
            return True
        if normalized == "false":
            return False
    raise ConfigurationError(f"{label} must be 'true' or 'false'; got {value!r}")


class PayliveSettings(BaseModel):
    """Merchant credentials plus transport settings"""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    api_version: str = Field(alias="apiVersion", min_length=1)
    merchant_email: str = Field(alias="merchantEmail", min_length=1)
    merchant_key: str = Field(alias="merchantKey", min_length=1, repr=False)
    service_type: str = Field(default="C2B", alias="serviceType", min_length=1)
    integration_mode: bool = Field(default=False, alias="integrationMode")
    endpoint_url: str = Field(default=DEFAULT_ENDPOINT_URL, alias="endpointUrl")
    namespace: str = DEFAULT_NAMESPACE
    timeout_seconds: float = Field(default=30.0, gt=0, alias="timeoutSeconds")
    supports_cancellation: bool = Field(default=False, alias="supportsCancellation")

    @field_validator("api_version", "merchant_email", "merchant_key", "service_type", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("integration_mode", "supports_cancellation", mode="before")
    @classmethod
    def _parse_bool(cls, value: Any, info: ValidationInfo) -> bool:
        return parse_bool(value, info.field_name)


def build_settings(data: Mapping[str, Any]) -> PayliveSettings:
    """
    Validate a raw mapping into PayliveSettings.

    Raises:
        ConfigurationError: If required values are missing or malformed
    """
    try:
        return PayliveSettings.model_validate(dict(data))
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        logger.error("PayLIVE configuration invalid: %s", fields)
        raise ConfigurationError(f"Invalid PayLIVE configuration ({fields}): {e}") from e


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> PayliveSettings:
    """Read settings from PAYLIVE_* environment variables (a local .env file is honoured)."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    data: Dict[str, Any] = {}
    for field_name, env_key in ENV_KEYS.items():
        value = environ.get(env_key)
        if value is None:
            continue
        # a blank flag is malformed, a blank string setting falls back to its default
        if value != "" or field_name in BOOL_FIELDS:
            data[field_name] = value
    return build_settings(data)


def settings_from_yaml(config_path: Path) -> PayliveSettings:
    """
    Load and validate PayLIVE settings from a YAML file

    The mapping may sit at the top level or under a ``paylive`` key.

    Raises:
        ConfigurationError: If the file doesn't exist or doesn't match the schema
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Config file {config_path} is not valid YAML: {e}") from e

    if not isinstance(config_data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")
    if isinstance(config_data.get("paylive"), dict):
        config_data = config_data["paylive"]

    settings = build_settings(config_data)
    logger.info("Loaded PayLIVE config from %s", config_path)
    return settings


def load_paylive_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> PayliveSettings:
    """Load settings from a YAML file when given, otherwise from the environment."""
    if config_path is not None:
        return settings_from_yaml(config_path)
    return settings_from_env(environ)
