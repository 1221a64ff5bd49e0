"""
Configuration management for featrack
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from featrack.detection.feature_detector import parse_detector_type
from featrack.detection.feature_extractor import parse_descriptor_type
from featrack.errors import InvalidConfigurationError
from featrack.matching.descriptor_matcher import parse_matcher_type
from featrack.matching.match_selector import parse_selector_type

DEFAULT_CONFIG = {
    "detection": {
        "detector_type": "SHITOMASI",
        "min_response": 100,
        "max_overlap": 0.0,
        "harris_block_size": 2,
        "harris_aperture_size": 3,
        "harris_k": 0.04,
        "shi_tomasi_block_size": 4,
        "quality_level": 0.01
    },
    "description": {
        "descriptor_type": "BRISK"
    },
    "matching": {
        "matcher_type": "MAT_BF",
        "selector_type": "SEL_KNN",
        "ratio": 0.8
    },
    "logging": {
        "level": "INFO",
        "log_file": None
    }
}


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Check enum names and numeric ranges, raising InvalidConfigurationError."""
    for section in ("detection", "description", "matching"):
        if not isinstance(config.get(section), dict):
            raise InvalidConfigurationError(f"Missing configuration section '{section}'")

    detection = config["detection"]
    parse_detector_type(detection.get("detector_type"))
    parse_descriptor_type(config["description"].get("descriptor_type"))
    parse_matcher_type(config["matching"].get("matcher_type"))
    parse_selector_type(config["matching"].get("selector_type"))

    max_overlap = detection.get("max_overlap", 0.0)
    if not isinstance(max_overlap, (int, float)) or not 0.0 <= max_overlap < 1.0:
        raise InvalidConfigurationError(f"detection.max_overlap must be in [0, 1), got {max_overlap}")

    min_response = detection.get("min_response", 100)
    if not isinstance(min_response, (int, float)):
        raise InvalidConfigurationError(f"detection.min_response must be a number, got {min_response!r}")

    ratio = config["matching"].get("ratio", 0.8)
    if not isinstance(ratio, (int, float)) or not 0.0 < ratio <= 1.0:
        raise InvalidConfigurationError(f"matching.ratio must be in (0, 1], got {ratio}")

    return config


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to a YAML file. Values in the file override
            DEFAULT_CONFIG section by section. None returns the defaults.

    Returns:
        Validated configuration dictionary
    """
    if config_path is None:
        return validate_config(copy.deepcopy(DEFAULT_CONFIG))

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r') as f:
        loaded = yaml.safe_load(f) or {}

    if not isinstance(loaded, dict):
        raise InvalidConfigurationError(f"Config file {path} must contain a mapping")

    return validate_config(merge_config(DEFAULT_CONFIG, loaded))
