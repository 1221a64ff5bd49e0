"""Keypoint detection, non-maximum suppression and description."""

from .keypoints import Keypoint, KeypointSet, keypoint_overlap
from .nms import KeypointSelector, select_keypoints
from .corner_detector import HarrisDetector, ShiTomasiDetector, harris_response
from .feature_detector import DetectorType, LibraryDetector, create_detector
from .feature_extractor import DescriptorExtractor, DescriptorType, Features, create_extractor

__all__ = [
    'Keypoint',
    'KeypointSet',
    'keypoint_overlap',
    'KeypointSelector',
    'select_keypoints',
    'HarrisDetector',
    'ShiTomasiDetector',
    'harris_response',
    'DetectorType',
    'LibraryDetector',
    'create_detector',
    'DescriptorExtractor',
    'DescriptorType',
    'Features',
    'create_extractor',
]
