"""
Headless two-image matching - no GUI windows, just saves results
"""

import sys
from pathlib import Path

from featrack.config import load_config
from featrack.core import FeatureTracker
from featrack.utils.io_handler import JSONWriter, load_image, save_image
from featrack.utils.logger import setup_logger
from featrack.utils.visualization import draw_matches


def main():
    """Match keypoints of two images and save a side-by-side drawing."""

    if len(sys.argv) < 3:
        print("Usage: python match_pair.py <source_image> <reference_image> [config.yaml]")
        print("\nExample:")
        print("  python match_pair.py images/0000.png images/0001.png")
        sys.exit(1)

    source_path, reference_path = sys.argv[1], sys.argv[2]
    config = load_config(sys.argv[3] if len(sys.argv) > 3 else None)
    logger = setup_logger('featrack', config['logging']['level'], config['logging']['log_file'])

    try:
        source_image = load_image(source_path)
        reference_image = load_image(reference_path)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        sys.exit(1)

    tracker = FeatureTracker(config)
    result = tracker.process_pair(source_image, reference_image)

    logger.info(f"Source keypoints:    {result['source_keypoints']}")
    logger.info(f"Reference keypoints: {result['reference_keypoints']}")
    logger.info(f"Matches:             {result['matches']} ({result['removed']} removed)")

    output_dir = Path("output")
    drawing = draw_matches(
        source_image, result['source'].keypoints,
        reference_image, result['reference'].keypoints,
        result['selection'].matches,
    )
    save_image(drawing, str(output_dir / f"{Path(source_path).stem}_matches.png"))

    JSONWriter.save_results({
        'source': source_path,
        'reference': reference_path,
        'source_keypoints': result['source_keypoints'],
        'reference_keypoints': result['reference_keypoints'],
        'matches': result['matches'],
        'removed': result['removed'],
        'timing': result['timing'],
    }, str(output_dir / f"{Path(source_path).stem}_matches.json"))
    logger.info(f"Results saved to {output_dir}/")


if __name__ == "__main__":
    main()
