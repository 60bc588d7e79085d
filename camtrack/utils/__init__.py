from .geometry import Rect, EMPTY_RECT, rect_bound
from .config_loader import load_config, merge_configs
from .track_io import load_detections
from .image_processing import crop_transform, apply_framing

__all__ = ['Rect', 'EMPTY_RECT', 'rect_bound', 'load_config', 'merge_configs',
           'load_detections', 'crop_transform', 'apply_framing']
