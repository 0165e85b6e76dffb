from __future__ import annotations

from .load import load_config
from .schema import AddonConfig, AppConfig, EnvOverrides, JellyfinConfig

__all__ = ["AddonConfig", "AppConfig", "EnvOverrides", "JellyfinConfig", "load_config"]
