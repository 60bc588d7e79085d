import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple

from .geometry import Rect

logger = logging.getLogger(__name__)


def _parse_rect(entry: Any, frame_idx: int) -> Rect:
    if isinstance(entry, dict):
        try:
            values = [entry['x'], entry['y'], entry['width'], entry['height']]
        except KeyError as e:
            raise ValueError(f"Frame {frame_idx}: detection missing {e}") from e
    else:
        values = entry

    if not isinstance(values, (list, tuple)) or len(values) != 4:
        raise ValueError(f"Frame {frame_idx}: detection must be [x, y, w, h], got {entry!r}")

    try:
        return Rect(*(float(v) for v in values))
    except (TypeError, ValueError) as e:
        raise ValueError(f"Frame {frame_idx}: invalid detection {entry!r}") from e


def load_detections(path: str) -> Tuple[Optional[Tuple[int, int]], List[List[Rect]]]:
    """
    Lee detecciones grabadas por frame.

    Formato: {"source": {"width": W, "height": H}, "frames": [[[x, y, w, h], ...], ...]}
    o directamente la lista de frames.
    """
    track_file = Path(path)
    if not track_file.exists():
        raise FileNotFoundError(f"Detections file not found: {path}")

    with open(track_file, 'r', encoding='utf-8') as f:
        data = json.load(f)

    source_size = None
    if isinstance(data, dict):
        source = data.get('source')
        if source is not None:
            source_size = (int(source['width']), int(source['height']))
        frames_data = data.get('frames')
    else:
        frames_data = data

    if not isinstance(frames_data, list):
        raise ValueError(f"Detections file has no frame list: {path}")

    frames = []
    for frame_idx, detections in enumerate(frames_data):
        if detections is None:
            detections = []
        if not isinstance(detections, list):
            raise ValueError(f"Frame {frame_idx}: expected a list of detections")
        frames.append([_parse_rect(entry, frame_idx) for entry in detections])

    logger.info(f"Loaded {len(frames)} frames of detections from {path}")
    return source_size, frames
