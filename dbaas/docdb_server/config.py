"""
Configuration management for DocDB core.

All configuration is done via environment variables - no config files.
This module provides typed configuration classes with validation.

Key derivation parameters are deliberately absent: they are fixed in
auth/credentials.py because changing them invalidates stored credentials.

Invariants:
    - All settings have sensible defaults for local development
    - Secrets are never logged or exposed in error messages

How to change safely:
    - Add new settings with defaults that maintain backward compatibility
    - Deprecate settings by logging warnings but continuing to support them
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

LOG_FORMATS = ("json", "text")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class CredentialConfig:
    """Credential engine worker configuration.

    Attributes:
        max_workers: Size of a dedicated derivation thread pool
            (None uses the event loop's default executor)
        thread_name_prefix: Thread name prefix for the dedicated pool
    """

    max_workers: int | None = None
    thread_name_prefix: str = "docdb-credentials"

    @classmethod
    def from_env(cls) -> CredentialConfig:
        """Load configuration from environment variables."""
        max_workers = os.getenv("CREDENTIAL_MAX_WORKERS")
        return cls(
            max_workers=int(max_workers) if max_workers else None,
            thread_name_prefix=os.getenv("CREDENTIAL_THREAD_PREFIX", "docdb-credentials"),
        )


@dataclass(frozen=True)
class ObservabilityConfig:
    """Logging configuration.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Log format (json, text)
    """

    log_level: str = "INFO"
    log_format: str = "json"

    @classmethod
    def from_env(cls) -> ObservabilityConfig:
        """Load configuration from environment variables."""
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "json"),
        )


@dataclass
class CoreConfig:
    """Complete DocDB core configuration.

    Attributes:
        credentials: Credential engine configuration
        observability: Logging configuration
    """

    credentials: CredentialConfig = field(default_factory=CredentialConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    @classmethod
    def from_env(cls) -> CoreConfig:
        """Load complete configuration from environment variables.

        Raises:
            ValueError: If configuration is invalid.
        """
        config = cls(
            credentials=CredentialConfig.from_env(),
            observability=ObservabilityConfig.from_env(),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Validate configuration consistency.

        Raises:
            ValueError: If configuration is invalid.
        """
        if self.credentials.max_workers is not None and self.credentials.max_workers <= 0:
            raise ValueError(
                f"CREDENTIAL_MAX_WORKERS must be positive, got {self.credentials.max_workers}"
            )

        if self.observability.log_format.lower() not in LOG_FORMATS:
            raise ValueError(
                f"Invalid LOG_FORMAT '{self.observability.log_format}'. "
                f"Must be one of: {', '.join(LOG_FORMATS)}"
            )

        if self.observability.log_level.upper() not in LOG_LEVELS:
            raise ValueError(
                f"Invalid LOG_LEVEL '{self.observability.log_level}'. "
                f"Must be one of: {', '.join(LOG_LEVELS)}"
            )

    def log_config(self) -> None:
        """Log configuration."""
        logger.info(
            "Core configuration loaded",
            extra={
                "credential_max_workers": self.credentials.max_workers,
                "log_level": self.observability.log_level,
                "log_format": self.observability.log_format,
            },
        )
