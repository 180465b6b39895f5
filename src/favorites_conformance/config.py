"""Configuration module for the favorites conformance suite.

This module provides the ConformanceConfig class describing where the
favorites service lives, how long the suite waits on it, and how the
suite logs.

Example:
    Basic usage with defaults:

        >>> config = ConformanceConfig()
        >>> config.base_url
        'https://regions-test.2gis.com'

    Pointing the suite at another deployment:

        >>> config = ConformanceConfig(
        ...     base_url="https://staging.example.com/",
        ...     timeout_seconds=5,
        ... )
        >>> config.base_url
        'https://staging.example.com'

    Loading from environment:

        >>> import os
        >>> os.environ['FAVORITES_BASE_URL'] = 'http://localhost:8080'
        >>> os.environ['FAVORITES_EXPIRY_WAIT_SECONDS'] = '2.5'
        >>> config = ConformanceConfig.from_env()
"""

import os
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConformanceConfig(BaseModel):
    """Configuration for a conformance run.

    Attributes:
        base_url: Scheme and host of the favorites service. A trailing
            slash is stripped. Default is the public test deployment.
        tokens_path: Path of the session acquisition endpoint.
        favorites_path: Path of the spot creation endpoint.
        timeout_seconds: Per-request timeout. Must be in (0, 300].
        token_ttl_seconds: Server-side lifetime of a session credential,
            as observed. Default is 2 seconds.
        expiry_wait_seconds: How long the expired-credential scenario
            blocks before reusing its credential. Must be greater than
            token_ttl_seconds. Default is 3 seconds.
        log_level: Log level for the suite's structured logs.
        json_logs: Emit JSON logs when True, console logs otherwise.
        live: The suite targets a real deployment rather than an in-process
            stand-in. Scenarios documenting live-service defects are then
            reported as expected failures.

    Note:
        This class is immutable (frozen=True). Create a new instance if you
        need different settings.
    """

    base_url: str = Field(
        default="https://regions-test.2gis.com",
        description="Scheme and host of the favorites service",
    )
    tokens_path: str = Field(
        default="/v1/auth/tokens",
        description="Path of the session acquisition endpoint",
    )
    favorites_path: str = Field(
        default="/v1/favorites",
        description="Path of the spot creation endpoint",
    )
    timeout_seconds: float = Field(
        default=10.0,
        description="Per-request timeout in seconds (0-300]",
    )
    token_ttl_seconds: float = Field(
        default=2.0,
        description="Observed server-side credential lifetime in seconds",
        gt=0,
    )
    expiry_wait_seconds: float = Field(
        default=3.0,
        description="Delay before reusing a credential in the expiry scenario",
        gt=0,
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=True,
        description="Emit JSON logs when True, console logs otherwise",
    )
    live: bool = Field(
        default=False,
        description="Run against a real deployment instead of a stand-in",
    )

    model_config = {"frozen": True}

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and strip any trailing slash.

        Raises:
            ValueError: If the URL does not use http or https.

        Example:
            >>> ConformanceConfig(base_url="http://localhost:8000/").base_url
            'http://localhost:8000'
        """
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got {v!r}")
        return v.rstrip("/")

    @field_validator("tokens_path", "favorites_path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError(f"endpoint paths must start with '/', got {v!r}")
        return v

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout_seconds(cls, v: float) -> float:
        """Validate the request timeout is within range.

        Raises:
            ValueError: If the timeout is not in (0, 300].
        """
        if not (0 < v <= 300):
            raise ValueError(f"timeout_seconds must be in (0, 300], got {v}")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise ValueError("log_level must be a string")
        level = v.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {v}. "
                f"Valid levels are: {', '.join(sorted(VALID_LOG_LEVELS))}"
            )
        return level

    @model_validator(mode="after")
    def validate_expiry_wait(self) -> "ConformanceConfig":
        """Require the expiry wait to outlast the credential lifetime.

        Raises:
            ValueError: If expiry_wait_seconds <= token_ttl_seconds.
        """
        if self.expiry_wait_seconds <= self.token_ttl_seconds:
            raise ValueError(
                "expiry_wait_seconds must be greater than token_ttl_seconds "
                f"({self.expiry_wait_seconds} <= {self.token_ttl_seconds})"
            )
        return self

    @property
    def tokens_url(self) -> str:
        return f"{self.base_url}{self.tokens_path}"

    @property
    def favorites_url(self) -> str:
        return f"{self.base_url}{self.favorites_path}"

    @classmethod
    def from_env(cls, prefix: str = "FAVORITES_") -> "ConformanceConfig":
        """Create configuration from environment variables.

        Variable names are the upper-cased field names with the prefix, for
        example ``FAVORITES_BASE_URL`` or ``FAVORITES_TIMEOUT_SECONDS``.

        Args:
            prefix: Prefix for environment variable names. Default is "FAVORITES_".

        Returns:
            ConformanceConfig populated from the environment. Missing
            variables keep their defaults.

        Example:
            >>> import os
            >>> os.environ['FAVORITES_TIMEOUT_SECONDS'] = '5'
            >>> ConformanceConfig.from_env().timeout_seconds
            5.0
        """
        config_dict: dict[str, Any] = {}

        field_types = {
            "base_url": str,
            "tokens_path": str,
            "favorites_path": str,
            "timeout_seconds": float,
            "token_ttl_seconds": float,
            "expiry_wait_seconds": float,
            "log_level": str,
            "json_logs": bool,
            "live": bool,
        }

        for field_name, field_type in field_types.items():
            env_var = f"{prefix}{field_name.upper()}"
            env_value = os.environ.get(env_var)

            if env_value is not None:
                if field_type is float:
                    config_dict[field_name] = float(env_value)
                elif field_type is bool:
                    config_dict[field_name] = env_value.strip().lower() in {"1", "true", "yes", "on"}
                else:
                    config_dict[field_name] = env_value

        return cls(**config_dict)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "ConformanceConfig":
        """Create configuration from a dictionary.

        Raises:
            ValidationError: If the dictionary contains invalid values.
        """
        return cls(**config_dict)
