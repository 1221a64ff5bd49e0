"""Descriptor extraction for detected keypoints."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import cv2
import numpy as np

from featrack.detection.base import to_grayscale
from featrack.detection.keypoints import KeypointSet
from featrack.errors import InvalidConfigurationError


class DescriptorType(Enum):
    """Supported descriptor extractors."""

    BRISK = "BRISK"
    BRIEF = "BRIEF"
    ORB = "ORB"
    FREAK = "FREAK"
    AKAZE = "AKAZE"
    SIFT = "SIFT"

    @property
    def is_binary(self) -> bool:
        """Binary descriptors are compared with the Hamming distance."""
        return self is not DescriptorType.SIFT


@dataclass
class Features:
    """
    Keypoints of one image together with their descriptors.

    Attributes:
        keypoints: Keypoints that could be described, row i of
            ``descriptors`` belongs to ``keypoints[i]``
        descriptors: NxD descriptor matrix, or None if nothing was described
        descriptor_type: Extractor that produced the descriptors
    """

    keypoints: KeypointSet
    descriptors: Optional[np.ndarray]
    descriptor_type: DescriptorType

    def __len__(self) -> int:
        return len(self.keypoints)


class DescriptorExtractor:
    """Compute descriptors with an OpenCV extractor."""

    def __init__(self, descriptor_type: DescriptorType, extractor: cv2.Feature2D):
        self.descriptor_type = descriptor_type
        self._extractor = extractor

    @property
    def name(self) -> str:
        return self.descriptor_type.value

    def extract(self, image: np.ndarray, keypoints: KeypointSet) -> Features:
        """
        Describe keypoints in an image.

        Keypoints the extractor cannot describe, typically those too close
        to the border, are dropped from the returned Features.
        """
        if len(keypoints) == 0:
            return Features(KeypointSet(), None, self.descriptor_type)

        described, descriptors = self._extractor.compute(to_grayscale(image), keypoints.to_cv())
        if descriptors is None or described is None or len(described) == 0:
            return Features(KeypointSet(), None, self.descriptor_type)

        return Features(KeypointSet.from_cv(described), descriptors, self.descriptor_type)


def _xfeatures2d():
    contrib = getattr(cv2, "xfeatures2d", None)
    if contrib is None:
        raise InvalidConfigurationError(
            "BRIEF and FREAK descriptors need an OpenCV build with the contrib modules"
        )
    return contrib


def create_extractor(descriptor_type) -> DescriptorExtractor:
    """Build the extractor for a descriptor type (member or name)."""
    descriptor_type = parse_descriptor_type(descriptor_type)

    if descriptor_type is DescriptorType.BRISK:
        threshold = 30        # FAST/AGAST detection threshold score
        octaves = 3           # detection octaves, 0 for single scale
        pattern_scale = 1.0   # scale applied to the sampling pattern
        extractor = cv2.BRISK_create(threshold, octaves, pattern_scale)
    elif descriptor_type is DescriptorType.BRIEF:
        extractor = _xfeatures2d().BriefDescriptorExtractor_create()
    elif descriptor_type is DescriptorType.ORB:
        extractor = cv2.ORB_create()
    elif descriptor_type is DescriptorType.FREAK:
        extractor = _xfeatures2d().FREAK_create()
    elif descriptor_type is DescriptorType.AKAZE:
        extractor = cv2.AKAZE_create()
    else:
        extractor = cv2.SIFT_create()

    return DescriptorExtractor(descriptor_type, extractor)


def parse_descriptor_type(value) -> DescriptorType:
    """Resolve a DescriptorType from a member or a name such as ``"ORB"``."""
    if isinstance(value, DescriptorType):
        return value
    try:
        return DescriptorType(str(value).upper())
    except ValueError:
        valid = ", ".join(t.value for t in DescriptorType)
        raise InvalidConfigurationError(
            f"Unknown descriptor type {value!r}, expected one of: {valid}"
        ) from None
