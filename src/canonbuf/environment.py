"""Process-wide defaults for configuration and platform.

Every public helper accepts explicit ``config`` and ``platform`` arguments;
the environment only supplies the values used when those are omitted.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Optional

from .config import CanonConfig, ConfigLike, coerce_config
from .platform import DefaultPlatform, Platform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Environment:
    """Configuration and platform pair consulted by the core."""

    config: CanonConfig = field(default_factory=CanonConfig)
    platform: Platform = field(default_factory=DefaultPlatform)

    @classmethod
    def from_env(cls) -> "Environment":
        return cls(config=CanonConfig.from_env())


_CURRENT_ENVIRONMENT: Optional[Environment] = None
_ENVIRONMENT_LOCK = threading.Lock()


def get_environment() -> Environment:
    """Return the active environment, reading ``CANONBUF_*`` on first use."""

    global _CURRENT_ENVIRONMENT
    current = _CURRENT_ENVIRONMENT
    if current is not None:
        return current
    with _ENVIRONMENT_LOCK:
        if _CURRENT_ENVIRONMENT is None:
            _CURRENT_ENVIRONMENT = Environment.from_env()
            logger.debug("Initialised canonbuf environment: %s", _CURRENT_ENVIRONMENT.config)
        return _CURRENT_ENVIRONMENT


def set_environment(environment: Environment) -> Environment:
    """Install ``environment`` as the process default and return the previous one."""

    global _CURRENT_ENVIRONMENT
    with _ENVIRONMENT_LOCK:
        previous = _CURRENT_ENVIRONMENT
        _CURRENT_ENVIRONMENT = environment
    return previous if previous is not None else Environment.from_env()


def reset_environment() -> None:
    """Forget the active environment so the next lookup re-reads variables."""

    global _CURRENT_ENVIRONMENT
    with _ENVIRONMENT_LOCK:
        _CURRENT_ENVIRONMENT = None


def set_platform(platform: Platform) -> None:
    current = get_environment()
    set_environment(Environment(config=current.config, platform=platform))


def resolve_config(config: ConfigLike = None) -> CanonConfig:
    """Merge an explicit override over the environment's configuration."""

    if isinstance(config, CanonConfig):
        return config
    return coerce_config(config, base=get_environment().config)


def resolve_platform(platform: Optional[Platform] = None) -> Platform:
    return platform if platform is not None else get_environment().platform


__all__ = [
    "Environment",
    "get_environment",
    "reset_environment",
    "resolve_config",
    "resolve_platform",
    "set_environment",
    "set_platform",
]
