"""Configuration management for Timeline Walker."""

import os
from dataclasses import dataclass


@dataclass
class ClientConfig:
    """Configuration for the timeline HTTP client."""

    timeout: float = 30.0
    user_agent: str = "timeline-walker/1.0"


class Config:
    """Main configuration manager."""

    DEFAULT_TIMEOUT = 30.0
    DEFAULT_USER_AGENT = "timeline-walker/1.0"
    DEFAULT_LOG_LEVEL = "WARNING"
    LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

    def __init__(self):
        """Initialize configuration from environment variables.

        Raises:
            ValueError: If TIMELINE_TIMEOUT is not a positive number or
                LOG_LEVEL is not a logging level name
        """
        self.host = os.getenv("TIMELINE_HOST", "")
        self.user_agent = os.getenv("TIMELINE_USER_AGENT", self.DEFAULT_USER_AGENT)

        self.log_level = os.getenv("LOG_LEVEL", self.DEFAULT_LOG_LEVEL).strip().upper()
        if self.log_level not in self.LOG_LEVELS:
            raise ValueError(f"Invalid LOG_LEVEL: {self.log_level!r}")

        raw_timeout = os.getenv("TIMELINE_TIMEOUT")
        if raw_timeout is None or not raw_timeout.strip():
            self.timeout = self.DEFAULT_TIMEOUT
        else:
            try:
                self.timeout = float(raw_timeout)
            except ValueError:
                raise ValueError(f"Invalid TIMELINE_TIMEOUT: {raw_timeout!r}")
            if self.timeout <= 0:
                raise ValueError(f"TIMELINE_TIMEOUT must be positive: {raw_timeout!r}")

    def get_client_config(self) -> ClientConfig:
        """Get HTTP client configuration."""
        return ClientConfig(timeout=self.timeout, user_agent=self.user_agent)
