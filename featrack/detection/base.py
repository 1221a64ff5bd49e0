"""Capability interface shared by all keypoint detectors."""

from abc import ABC, abstractmethod

import cv2
import numpy as np

from featrack.detection.keypoints import KeypointSet


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Return a single channel view of a BGR or grayscale image."""
    if image.ndim == 3 and image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    if image.ndim == 3 and image.shape[2] == 1:
        return image[:, :, 0]
    return image


class BaseDetector(ABC):
    """Base interface for keypoint detectors."""

    @abstractmethod
    def detect(self, image: np.ndarray) -> KeypointSet:
        """Detect keypoints in a grayscale or BGR image."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Detector name"""
