"""
Engine configuration.

Controls the fixed time step, the presnap/postsnap/dead-ball delays and
the default random seed. All settings can be overridden via environment
variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return int(value)


def _csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class EngineConfig:
    """Configuration for the live-play engine."""

    # Time step handed to every component (seconds)
    tick_rate: float = field(
        default_factory=lambda: float(os.getenv("SCRIMMAGE_TICK_RATE", str(1 / 60)))
    )

    # Seed for the play RNG; None draws from system entropy
    seed: Optional[int] = field(default_factory=lambda: _optional_int("SCRIMMAGE_SEED"))

    # Phase delays (seconds)
    presnap_delay: float = field(
        default_factory=lambda: float(os.getenv("SCRIMMAGE_PRESNAP_DELAY", "1.0"))
    )
    postsnap_delay: float = field(
        default_factory=lambda: float(os.getenv("SCRIMMAGE_POSTSNAP_DELAY", "1.2"))
    )
    dead_ball_delay: float = field(
        default_factory=lambda: float(os.getenv("SCRIMMAGE_DEAD_BALL_DELAY", "1.2"))
    )

    # A play still running after this many ticks is reported as stalled
    max_ticks: int = field(
        default_factory=lambda: int(os.getenv("SCRIMMAGE_MAX_TICKS", "6000"))
    )

    log_level: str = field(
        default_factory=lambda: os.getenv("SCRIMMAGE_LOG_LEVEL", "INFO").upper()
    )

    # Browser origins allowed to call the HTTP API (comma separated)
    cors_origins: list[str] = field(
        default_factory=lambda: _csv(
            os.getenv("SCRIMMAGE_CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")
        )
    )

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables."""
        return cls()

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []
        if self.tick_rate <= 0:
            errors.append("SCRIMMAGE_TICK_RATE must be positive")
        if self.presnap_delay < 0:
            errors.append("SCRIMMAGE_PRESNAP_DELAY must not be negative")
        if self.postsnap_delay <= self.presnap_delay:
            errors.append("SCRIMMAGE_POSTSNAP_DELAY must be later than SCRIMMAGE_PRESNAP_DELAY")
        if self.dead_ball_delay < 0:
            errors.append("SCRIMMAGE_DEAD_BALL_DELAY must not be negative")
        if self.max_ticks < 1:
            errors.append("SCRIMMAGE_MAX_TICKS must be at least 1")
        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"SCRIMMAGE_LOG_LEVEL is not a logging level: {self.log_level}")
        return errors


# Singleton config instance
_config: Optional[EngineConfig] = None


def get_config() -> EngineConfig:
    """Get the global engine configuration."""
    global _config
    if _config is None:
        _config = EngineConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next ``get_config`` rereads the environment.

    Useful for testing.
    """
    global _config
    _config = None
