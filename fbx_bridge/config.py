"""
Runtime settings for fbx_bridge.

Values come from keyword arguments or, through ``BridgeConfig.from_env``, from
``FBX_BRIDGE_*`` environment variables (optionally loaded from a ``.env`` file
using python-dotenv).
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 30.0
# FBX 7.4, the SDK's FBX_2014_00_COMPATIBLE writer version.
DEFAULT_EXPORT_VERSION = "FBX201400"

ENV_SAMPLE_RATE = "FBX_BRIDGE_SAMPLE_RATE"
ENV_STRICT_REFERENCES = "FBX_BRIDGE_STRICT_REFERENCES"
ENV_EXPORT_VERSION = "FBX_BRIDGE_EXPORT_VERSION"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class BridgeConfig:
    """Settings shared by load and save calls."""

    sample_rate: float = DEFAULT_SAMPLE_RATE
    strict_references: bool = False
    export_version: str = DEFAULT_EXPORT_VERSION

    @classmethod
    def from_env(cls, env_path: "Path | str | None" = None) -> "BridgeConfig":
        """Build a config from the environment, loading ``env_path`` (or the nearest .env) first."""
        load_dotenv(env_path, override=False)
        defaults = cls()
        return cls(
            sample_rate=_read_rate(os.environ.get(ENV_SAMPLE_RATE), defaults.sample_rate),
            strict_references=_read_flag(os.environ.get(ENV_STRICT_REFERENCES), defaults.strict_references),
            export_version=os.environ.get(ENV_EXPORT_VERSION) or defaults.export_version,
        )


def _read_rate(raw: "str | None", default: float) -> float:
    if raw is None:
        return default
    try:
        rate = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number", ENV_SAMPLE_RATE, raw)
        return default
    if rate <= 0:
        logger.warning("Ignoring %s=%r: must be positive", ENV_SAMPLE_RATE, raw)
        return default
    return rate


def _read_flag(raw: "str | None", default: bool) -> bool:
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    logger.warning("Ignoring %s=%r: expected a boolean", ENV_STRICT_REFERENCES, raw)
    return default
