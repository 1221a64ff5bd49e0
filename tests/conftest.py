"""Shared test images."""

import cv2
import numpy as np
import pytest


@pytest.fixture
def checkerboard() -> np.ndarray:
    """160x160 grayscale checkerboard with 20px squares."""
    tiles = (np.indices((8, 8)).sum(axis=0) % 2).astype(np.uint8) * 255
    return cv2.resize(tiles, (160, 160), interpolation=cv2.INTER_NEAREST)


@pytest.fixture
def textured_image() -> np.ndarray:
    """240x320 grayscale image of random 8px blocks."""
    rng = np.random.default_rng(7)
    blocks = rng.integers(0, 256, (30, 40), dtype=np.uint8)
    image = cv2.resize(blocks, (320, 240), interpolation=cv2.INTER_NEAREST)
    return cv2.GaussianBlur(image, (3, 3), 0)


@pytest.fixture
def shifted_image(textured_image) -> np.ndarray:
    """textured_image translated 4px to the right."""
    return np.roll(textured_image, 4, axis=1)
