#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration management for the gdoc2md server.

Settings come from environment variables and can be overridden by command
line arguments. The configuration is fixed once the server starts.

Environment Variables
---------------------
- GDOC2MD_HOST: interface to bind (default: 127.0.0.1)
- PORT / GDOC2MD_PORT: port to listen on (default: 50400)
- GDOC2MD_DEFAULT_DOC_ID: document served when no id is requested
- GDOC2MD_CREDENTIALS: service account key file (default: ./credentials.json)
- GDOC2MD_CACHE_TTL: seconds before cached content is refetched (default: 300)
- GDOC2MD_STATIC_DIR: directory holding index.html and assets
- GDOC2MD_LOG_LEVEL: logging level (default: INFO)

"""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from gdoc2md.constants import (
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_CREDENTIALS_PATH,
    DEFAULT_DOC_ID,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
)
from gdoc2md.exceptions import ConfigurationError
from gdoc2md.options import CloneFrozenMixin

logger = logging.getLogger(__name__)

PACKAGE_STATIC_DIR = Path(__file__).parent / "static"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ServerConfig(CloneFrozenMixin):
    """Server configuration.

    Attributes
    ----------
    host : str
        Interface to bind.
    port : int
        Port to listen on.
    default_doc_id : str
        Document served by ``/api/content`` when no ``docId`` is given.
    credentials_path : str
        Path to the service account key file.
    cache_ttl_seconds : int
        Age after which cached content is refetched.
    static_dir : Path
        Directory holding ``index.html`` and other static assets.
    log_level : str
        Logging level name.

    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    default_doc_id: str = DEFAULT_DOC_ID
    credentials_path: str = DEFAULT_CREDENTIALS_PATH
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    static_dir: Path = field(default=PACKAGE_STATIC_DIR)
    log_level: str = DEFAULT_LOG_LEVEL

    def validate(self) -> None:
        """Validate configuration values.

        Raises
        ------
        ConfigurationError
            If any value is out of range.

        """
        if not 0 < self.port < 65536:
            raise ConfigurationError(f"Invalid port: {self.port}", setting="port")
        if self.cache_ttl_seconds <= 0:
            raise ConfigurationError(
                f"Cache TTL must be positive, got {self.cache_ttl_seconds}", setting="cache_ttl_seconds"
            )
        if not self.default_doc_id:
            raise ConfigurationError("A default document id is required", setting="default_doc_id")
        _validate_log_level(self.log_level)


def _parse_int(value: Optional[str], setting: str, default: int) -> int:
    """Parse an integer setting, raising ConfigurationError on garbage."""
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"Invalid integer for {setting}: {value!r}", setting=setting, original_error=e) from e


def _validate_log_level(value: Optional[str], default: str = DEFAULT_LOG_LEVEL) -> str:
    """Validate and normalize a log level name.

    Raises
    ------
    ConfigurationError
        If value is not a valid log level

    """
    if value is None:
        return default

    normalized = value.upper().strip()
    if normalized not in VALID_LOG_LEVELS:
        raise ConfigurationError(
            f"Invalid log level: {value!r}. Must be one of: {', '.join(VALID_LOG_LEVELS)}", setting="log_level"
        )
    return normalized


def load_config_from_env() -> ServerConfig:
    """Load configuration from environment variables.

    ``PORT`` is honored for compatibility with hosting platforms; the
    prefixed ``GDOC2MD_PORT`` wins when both are set.
    """
    port_value = os.getenv("GDOC2MD_PORT") or os.getenv("PORT")
    static_dir = os.getenv("GDOC2MD_STATIC_DIR")

    return ServerConfig(
        host=os.getenv("GDOC2MD_HOST") or DEFAULT_HOST,
        port=_parse_int(port_value, "port", DEFAULT_PORT),
        default_doc_id=os.getenv("GDOC2MD_DEFAULT_DOC_ID") or DEFAULT_DOC_ID,
        credentials_path=os.getenv("GDOC2MD_CREDENTIALS") or DEFAULT_CREDENTIALS_PATH,
        cache_ttl_seconds=_parse_int(os.getenv("GDOC2MD_CACHE_TTL"), "cache_ttl_seconds", DEFAULT_CACHE_TTL_SECONDS),
        static_dir=Path(static_dir) if static_dir else PACKAGE_STATIC_DIR,
        log_level=_validate_log_level(os.getenv("GDOC2MD_LOG_LEVEL")),
    )


def load_config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Load configuration from parsed CLI arguments, using the environment as fallback.

    Only arguments that were actually given (not None) override the
    environment.
    """
    config = load_config_from_env()

    overrides = {
        "host": getattr(args, "host", None),
        "port": getattr(args, "port", None),
        "default_doc_id": getattr(args, "default_doc_id", None),
        "credentials_path": getattr(args, "credentials", None),
        "cache_ttl_seconds": getattr(args, "cache_ttl", None),
        "static_dir": getattr(args, "static_dir", None),
        "log_level": getattr(args, "log_level", None),
    }
    updated_kwargs = {key: value for key, value in overrides.items() if value is not None}

    if "static_dir" in updated_kwargs:
        updated_kwargs["static_dir"] = Path(updated_kwargs["static_dir"])
    if "log_level" in updated_kwargs:
        updated_kwargs["log_level"] = _validate_log_level(updated_kwargs["log_level"])

    if updated_kwargs:
        config = config.create_updated(**updated_kwargs)

    return config


__all__ = ["PACKAGE_STATIC_DIR", "ServerConfig", "load_config_from_args", "load_config_from_env"]
