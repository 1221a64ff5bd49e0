"""I/O handling for images and JSON output."""

import cv2
import json
import numpy as np
from pathlib import Path
from typing import Any, Dict, List, Union


class JSONWriter:
    """Write tracking results to JSON."""

    @staticmethod
    def save_results(output: Union[Dict, List], output_path: str, indent: int = 2):
        """Save results to JSON file."""
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump(output, f, indent=indent)

    @staticmethod
    def load_results(input_path: str) -> Any:
        """Load results from JSON file."""
        with open(input_path, 'r') as f:
            return json.load(f)


def save_image(image: np.ndarray, output_path: str):
    """Save image to file."""
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    cv2.imwrite(output_path, image)


def load_image(image_path: str, grayscale: bool = True) -> np.ndarray:
    """Load image from file, as grayscale unless asked otherwise."""
    if not Path(image_path).exists():
        raise FileNotFoundError(f"Image not found: {image_path}")
    flag = cv2.IMREAD_GRAYSCALE if grayscale else cv2.IMREAD_COLOR
    image = cv2.imread(str(image_path), flag)
    if image is None:
        raise ValueError(f"Failed to decode image {image_path}")
    return image


def list_images(image_dir: str, pattern: str = '*.png') -> List[Path]:
    """Sorted image paths in a directory."""
    return sorted(Path(image_dir).glob(pattern))
