"""
config/

Named parameter presets, stored as YAML next to this module.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging

import yaml

from random_walk_particles.core.parameters import SimulationParameters

logger = logging.getLogger(__name__)

PRESETS_PATH = Path(__file__).parent / "presets.yaml"


def _load_all(path: Optional[Union[str, Path]] = None) -> Dict[str, Dict[str, Any]]:
    config_path = Path(path) if path is not None else PRESETS_PATH
    with open(config_path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Preset file {config_path} must map names to parameter sets")
    return data


def available_presets(path: Optional[Union[str, Path]] = None) -> List[str]:
    """Names of all presets in the file."""
    return sorted(_load_all(path))


def load_preset(
    name: str,
    path: Optional[Union[str, Path]] = None,
    **overrides: Any
) -> SimulationParameters:
    """
    Build parameters from a named preset.

    Keyword overrides win over the file. Unknown preset names raise
    KeyError; unknown fields raise ValueError.
    """
    presets = _load_all(path)
    if name not in presets:
        raise KeyError(f"Unknown preset: {name}")

    values = dict(presets[name] or {})
    values.update({k: v for k, v in overrides.items() if v is not None})
    logger.info(f"Loaded preset '{name}'")
    return SimulationParameters.from_dict(values)


__all__ = ["PRESETS_PATH", "available_presets", "load_preset"]
