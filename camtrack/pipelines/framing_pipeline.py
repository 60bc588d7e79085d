import json
import logging
import time
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

import numpy as np
from tqdm import tqdm

from camtrack.camera import FramingTracker, TuningParameters
from camtrack.utils.geometry import Rect, rect_bound
from camtrack.utils.image_processing import apply_framing

logger = logging.getLogger(__name__)


@dataclass
class FramingResult:
    frame_idx: int
    window: Rect
    smoothed: Rect
    observed: Optional[Rect]
    held: bool
    output: Optional[np.ndarray] = None

    def to_record(self) -> Dict[str, Any]:
        return {
            'frame': self.frame_idx,
            'observed': self.observed.to_list() if self.observed is not None else None,
            'smoothed': self.smoothed.to_list(),
            'window': self.window.to_list(),
            'held': self.held
        }


class FramingPipeline:
    """
    Bucle por frame: detecciones -> caja envolvente -> tracker -> ventana.

    Los frames sin detecciones no llaman a observe, así que los filtros se
    quedan quietos. Una ventana degenerada se sustituye por la última válida.
    """

    def __init__(self, config: Dict[str, Any]):
        self.config = config

        source = config['source']
        output = config['output']
        self.source_bounds = Rect(0.0, 0.0, float(source['width']), float(source['height']))
        self.output_width = int(output['width'])
        self.output_height = int(output['height'])

        detector_cfg = config.get('detector', {})
        self.prescale = 2 ** int(detector_cfg.get('prescale_levels', 0))
        self.log_interval_s = float(config.get('log_interval_s', 1.0))

        self.params = TuningParameters.from_config(config.get('tuning', {}))
        self.tracker = FramingTracker(
            self.source_bounds,
            self.output_width / self.output_height,
            self.params
        )
        self.last_valid = self.tracker.read_unscaled()

        self.frame_idx = 0
        self._interval_frames = 0
        self._interval_start = time.monotonic()
        self.stats = {
            'total_frames': 0,
            'observed_frames': 0,
            'empty_frames': 0,
            'degenerate_frames': 0,
            'processing_times': deque(maxlen=1000)
        }

        logger.info(
            f"FramingPipeline initialized: source={self.source_bounds}, "
            f"output={self.output_width}x{self.output_height}, prescale={self.prescale}"
        )
        logger.info(f"Tuning: {self.params}")

    def process_frame(
        self,
        detections: Sequence[Rect],
        image: Optional[np.ndarray] = None
    ) -> FramingResult:
        frame_start = time.perf_counter()

        observed = None
        if detections:
            observed = rect_bound(detections)
            if self.prescale != 1:
                observed = observed.scaled(self.prescale)
            self.tracker.observe(observed)
            self.stats['observed_frames'] += 1
        else:
            self.stats['empty_frames'] += 1

        window = self.tracker.current_crop()
        held = window.is_empty()
        if held:
            self.stats['degenerate_frames'] += 1
            logger.warning(f"Frame {self.frame_idx}: degenerate framing, holding {self.last_valid}")
            window = self.last_valid
        else:
            self.last_valid = window

        result = FramingResult(
            frame_idx=self.frame_idx,
            window=window,
            smoothed=self.tracker.read_unscaled(),
            observed=observed,
            held=held
        )
        if image is not None:
            result.output = apply_framing(image, window, self.output_width, self.output_height)

        self.stats['total_frames'] += 1
        self.stats['processing_times'].append((time.perf_counter() - frame_start) * 1000)
        self.frame_idx += 1
        self._log_interval(result)

        return result

    def _log_interval(self, result: FramingResult):
        self._interval_frames += 1
        now = time.monotonic()
        elapsed = now - self._interval_start
        if elapsed >= self.log_interval_s:
            fps = self._interval_frames / elapsed
            logger.info(f"FPS: {fps:.0f}")
            logger.info(f"ROI: {result.smoothed}")
            self._interval_frames = 0
            self._interval_start = now

    def process_sequence(self, frames: Iterable[Sequence[Rect]], total: Optional[int] = None) -> List[Dict[str, Any]]:
        if total is None and hasattr(frames, '__len__'):
            total = len(frames)

        records = []
        pbar = tqdm(
            total=total,
            desc="Framing",
            unit="frame",
            ncols=100,
            disable=self.config.get('quiet', False)
        )
        try:
            for detections in frames:
                records.append(self.process_frame(detections).to_record())
                pbar.update(1)
        finally:
            pbar.close()

        self._log_final_statistics()
        return records

    def get_stats(self) -> dict:
        stats = {k: v for k, v in self.stats.items() if k != 'processing_times'}
        times = self.stats['processing_times']
        stats['avg_processing_ms'] = float(np.mean(times)) if times else 0.0
        stats['tracker'] = self.tracker.get_stats()
        return stats

    def save_results(self, records: List[Dict[str, Any]], output_path: str):
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        stats = self.get_stats()
        total = stats['total_frames']
        metadata = {
            'source': {'width': self.source_bounds.width, 'height': self.source_bounds.height},
            'output': {'width': self.output_width, 'height': self.output_height},
            'tuning': self.params.snapshot(),
            'total_frames': total,
            'observed_frames': stats['observed_frames'],
            'degenerate_frames': stats['degenerate_frames'],
            'observation_rate': stats['observed_frames'] / total if total > 0 else 0
        }

        with open(output_path, 'w') as f:
            json.dump({'metadata': metadata, 'framing': records}, f, indent=2)
        logger.info(f"Framing data saved to: {output_path}")

    def _log_final_statistics(self):
        stats = self.get_stats()
        logger.info("=" * 60)
        logger.info("FRAMING COMPLETE")
        logger.info("=" * 60)
        logger.info(f"Total frames: {stats['total_frames']}")
        logger.info(f"Observed frames: {stats['observed_frames']}")
        logger.info(f"Frames without detections: {stats['empty_frames']}")
        logger.info(f"Degenerate frames: {stats['degenerate_frames']}")
        logger.info(f"Avg processing time: {stats['avg_processing_ms']:.3f}ms/frame")
        logger.info("=" * 60)
