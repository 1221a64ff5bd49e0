"""featrack - keypoint detection and frame-to-frame descriptor matching."""

__version__ = "0.1.0"

from .core import FeatureTracker
from .config import DEFAULT_CONFIG, load_config
from .errors import FeatrackError, InsufficientCandidatesError, InvalidConfigurationError
from .detection import (
    DescriptorType,
    DetectorType,
    Features,
    Keypoint,
    KeypointSelector,
    KeypointSet,
    keypoint_overlap,
    select_keypoints,
)
from .matching import (
    DescriptorMatcher,
    Match,
    MatchCandidatePair,
    MatcherType,
    MatchSelection,
    MatchSelector,
    SelectorType,
    select_knn,
    select_nn,
)

__all__ = [
    "__version__",
    # Pipeline
    "FeatureTracker",
    "DEFAULT_CONFIG",
    "load_config",
    # Errors
    "FeatrackError",
    "InvalidConfigurationError",
    "InsufficientCandidatesError",
    # Detection
    "Keypoint",
    "KeypointSet",
    "KeypointSelector",
    "keypoint_overlap",
    "select_keypoints",
    "DetectorType",
    "DescriptorType",
    "Features",
    # Matching
    "Match",
    "MatchCandidatePair",
    "MatchSelection",
    "MatchSelector",
    "select_knn",
    "select_nn",
    "DescriptorMatcher",
    "MatcherType",
    "SelectorType",
]
