"""Classic corner detectors: Harris with NMS and Shi-Tomasi."""

import cv2
import numpy as np

from featrack.detection.base import BaseDetector, to_grayscale
from featrack.detection.keypoints import Keypoint, KeypointSet
from featrack.detection.nms import KeypointSelector
from featrack.errors import InvalidConfigurationError


def harris_response(image: np.ndarray, block_size: int = 2, aperture_size: int = 3,
                    k: float = 0.04) -> np.ndarray:
    """
    Compute the Harris corner response, min-max normalized to 0..255.

    Args:
        image: Grayscale or BGR image
        block_size: Neighbourhood size considered for each pixel
        aperture_size: Sobel aperture, must be odd
        k: Harris free parameter, usually 0.04 to 0.06

    Returns:
        float32 surface with the same height and width as the image
    """
    gray = np.float32(to_grayscale(image))
    dst = cv2.cornerHarris(gray, block_size, aperture_size, k, borderType=cv2.BORDER_DEFAULT)
    return cv2.normalize(dst, None, 0, 255, cv2.NORM_MINMAX, cv2.CV_32F)


class HarrisDetector(BaseDetector):
    """Harris corners thresholded and deduplicated by greedy NMS."""

    def __init__(self, block_size: int = 2, aperture_size: int = 3, k: float = 0.04,
                 min_response: float = 100, max_overlap: float = 0.0):
        if aperture_size % 2 == 0 or not 1 <= aperture_size <= 31:
            raise InvalidConfigurationError(
                f"aperture_size must be odd and in [1, 31], got {aperture_size}"
            )
        self.block_size = block_size
        self.aperture_size = aperture_size
        self.k = k
        self.selector = KeypointSelector(
            min_response=min_response,
            max_overlap=max_overlap,
            keypoint_size=2 * aperture_size,
        )

    @property
    def name(self) -> str:
        return "HARRIS"

    def detect(self, image: np.ndarray) -> KeypointSet:
        surface = harris_response(image, self.block_size, self.aperture_size, self.k)
        return self.selector.select(surface)


class ShiTomasiDetector(BaseDetector):
    """Shi-Tomasi corners via ``goodFeaturesToTrack``."""

    def __init__(self, block_size: int = 4, max_overlap: float = 0.0,
                 quality_level: float = 0.01, k: float = 0.04):
        """
        Initialize Shi-Tomasi detector.

        Args:
            block_size: Averaging block for the derivative covariation matrix,
                also used as keypoint size
            max_overlap: Permitted overlap, shrinks the minimum corner distance
            quality_level: Minimal accepted corner quality relative to the best
            k: Harris parameter, unused unless the Harris measure is enabled
        """
        if not 0.0 <= max_overlap < 1.0:
            raise InvalidConfigurationError(f"max_overlap must be in [0, 1), got {max_overlap}")
        self.block_size = block_size
        self.max_overlap = max_overlap
        self.quality_level = quality_level
        self.k = k

    @property
    def name(self) -> str:
        return "SHITOMASI"

    @property
    def min_distance(self) -> float:
        return (1.0 - self.max_overlap) * self.block_size

    def detect(self, image: np.ndarray) -> KeypointSet:
        gray = to_grayscale(image)
        max_corners = int(gray.shape[0] * gray.shape[1] / max(1.0, self.min_distance))

        corners = cv2.goodFeaturesToTrack(
            gray,
            max_corners,
            self.quality_level,
            self.min_distance,
            mask=None,
            blockSize=self.block_size,
            useHarrisDetector=False,
            k=self.k,
        )

        if corners is None:
            return KeypointSet()

        return KeypointSet(
            Keypoint(position=(float(x), float(y)), scale=float(self.block_size))
            for corner in corners for x, y in corner
        )
