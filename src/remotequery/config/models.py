"""Consumer configuration shared by endpoints, connections and models."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator

CONFIG_SECTION = "remotequery"


def _parse_env_flag(value: str | None, *, default: bool) -> bool:
    """
    Interpret a string environment value as a boolean.

    Parameters
    ----------
    value:
        Raw environment variable value or None.
    default:
        Value to return when the environment variable is unset.

    Returns
    -------
    bool
        Parsed boolean flag.
    """
    if value is None:
        return default
    return value.lower() not in {"0", "false", "no", "off", ""}


class ConsumerConfig(BaseModel):
    """
    Read-only defaults consulted by the endpoint resolver and connection.

    Every component receives this object explicitly; nothing reads the
    environment on its own.
    """

    base_uri: str | None = Field(
        default=None,
        description="Default base URI for endpoints that do not declare one.",
    )
    default_grammar: str = Field(
        default="rest",
        description="Registry tag of the grammar used when an endpoint declares none.",
    )
    default_connection: str = Field(
        default="default",
        description="Registry tag of the connection used when an endpoint declares none.",
    )
    default_transformer: str | None = Field(
        default=None,
        description="Optional registry tag of the response transformer.",
    )
    default_endpoint: str | None = Field(
        default=None,
        description="Registry tag of the endpoint class used by models that declare none.",
    )
    cache_enabled: bool = Field(
        default=False,
        description="Whether connection responses are cached.",
    )
    cache_default_ttl: int = Field(
        default=3600,
        description="Cache lifetime in seconds when a query does not override it.",
    )
    cache_version: str = Field(
        default="1",
        description="Version segment of every cache key; bump to invalidate all entries.",
    )
    logging_enabled: bool = Field(
        default=False,
        description="Emit a structured log line for every API call.",
    )
    timeout_seconds: float = Field(
        default=10.0,
        description="Timeout in seconds for the default HTTP transport.",
    )
    default_headers: dict[str, str] = Field(
        default_factory=dict,
        description="Extra headers sent by the default HTTP transport.",
    )

    @classmethod
    def from_env(cls) -> ConsumerConfig:
        """
        Construct a ConsumerConfig from environment variables.

        Returns
        -------
        ConsumerConfig
            Validated configuration populated from environment values.
        """
        return cls(
            base_uri=os.environ.get("REMOTEQUERY_BASE_URI") or None,
            default_grammar=os.environ.get("REMOTEQUERY_DEFAULT_GRAMMAR", "rest"),
            default_connection=os.environ.get("REMOTEQUERY_DEFAULT_CONNECTION", "default"),
            default_endpoint=os.environ.get("REMOTEQUERY_DEFAULT_ENDPOINT") or None,
            cache_enabled=_parse_env_flag(
                os.environ.get("REMOTEQUERY_CACHE_ENABLED"), default=False
            ),
            cache_default_ttl=int(os.environ.get("REMOTEQUERY_CACHE_DEFAULT_TTL", "3600")),
            cache_version=os.environ.get("REMOTEQUERY_CACHE_VERSION", "1"),
            logging_enabled=_parse_env_flag(os.environ.get("REMOTEQUERY_LOGGER"), default=False),
            timeout_seconds=float(os.environ.get("REMOTEQUERY_TIMEOUT_SEC", "10.0")),
        )

    @model_validator(mode="after")
    def _validate_limits(self) -> ConsumerConfig:
        """
        Reject negative cache lifetimes and non-positive timeouts.

        Returns
        -------
        ConsumerConfig
            The validated configuration.

        Raises
        ------
        ValueError
            When a numeric setting is out of range.
        """
        if self.cache_default_ttl < 0:
            message = "cache_default_ttl must be non-negative"
            raise ValueError(message)
        if self.timeout_seconds <= 0:
            message = "timeout_seconds must be positive"
            raise ValueError(message)
        return self


def load_config(path: Path) -> ConsumerConfig:
    """
    Load a ConsumerConfig from a YAML file.

    The document may hold the settings at top level or nested under a
    ``remotequery`` key.

    Parameters
    ----------
    path:
        YAML file to read.

    Returns
    -------
    ConsumerConfig
        Validated configuration.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the document is not a mapping.
    """
    if not path.exists():
        message = f"Config file not found: {path}"
        raise FileNotFoundError(message)
    with path.open("r", encoding="utf-8") as handle:
        document = yaml.safe_load(handle) or {}
    if not isinstance(document, dict):
        message = f"Config file must contain a mapping: {path}"
        raise ValueError(message)
    section = document.get(CONFIG_SECTION, document)
    if not isinstance(section, dict):
        message = f"'{CONFIG_SECTION}' section must be a mapping: {path}"
        raise ValueError(message)
    return ConsumerConfig.model_validate(section)
