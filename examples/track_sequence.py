"""Track keypoints through a directory of frames."""

import sys

from featrack.config import load_config
from featrack.core import FeatureTracker
from featrack.utils.io_handler import JSONWriter, list_images, load_image
from featrack.utils.logger import create_session_log_file, setup_logger


def load_frames(frame_files, logger):
    """Yield grayscale frames, skipping files that cannot be read."""
    for frame_path in frame_files:
        try:
            yield load_image(str(frame_path))
        except ValueError:
            logger.warning(f"Could not load {frame_path}")


def main():
    """Match every frame of a sequence against its predecessor."""
    if len(sys.argv) < 2:
        print("Usage: python track_sequence.py <frames_dir> [config.yaml]")
        sys.exit(1)

    config = load_config(sys.argv[2] if len(sys.argv) > 2 else None)
    log_file = config['logging']['log_file'] or create_session_log_file()
    logger = setup_logger('featrack', config['logging']['level'], log_file)

    frame_files = list_images(sys.argv[1])
    logger.info(f"Tracking {len(frame_files)} frames...")

    tracker = FeatureTracker(config)
    results = []
    for result in tracker.track(load_frames(frame_files, logger)):
        results.append({
            'frame_index': result['frame_index'],
            'source_keypoints': result['source_keypoints'],
            'reference_keypoints': result['reference_keypoints'],
            'matches': result['matches'],
            'removed': result['removed'],
            'timing': result['timing'],
        })

    JSONWriter.save_results(results, "output/track_results.json")
    logger.info("Tracking complete!")


if __name__ == "__main__":
    main()
