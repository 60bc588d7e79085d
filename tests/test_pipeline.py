import json

import numpy as np
import pytest

from camtrack.pipelines import FramingPipeline
from camtrack.utils.geometry import Rect


def _config(**tuning):
    values = dict(lpf_rate=1.0, max_velocity=1e9, max_acceleration=1e9, zoom_factor=1.0, vertical_anchor=0.5)
    values.update(tuning)
    return {
        'source': {'width': 1440, 'height': 1080},
        'output': {'width': 640, 'height': 480},
        'detector': {'prescale_levels': 0},
        'tuning': values,
        'quiet': True
    }


def test_frames_without_detections_hold_window():
    pipeline = FramingPipeline(_config(lpf_rate=0.3))
    first = pipeline.process_frame([Rect(600.0, 400.0, 200.0, 200.0)])
    held = [pipeline.process_frame([]) for _ in range(5)]

    assert all(result.window == first.window for result in held)
    assert all(result.observed is None for result in held)
    stats = pipeline.get_stats()
    assert stats['observed_frames'] == 1
    assert stats['empty_frames'] == 5
    assert stats['tracker']['observations'] == 1


def test_multiple_detections_are_merged():
    pipeline = FramingPipeline(_config())
    result = pipeline.process_frame([
        Rect(500.0, 400.0, 100.0, 100.0),
        Rect(800.0, 450.0, 100.0, 150.0),
    ])

    assert result.observed == Rect(500.0, 400.0, 400.0, 200.0)
    assert result.window.center_x == pytest.approx(700.0)
    assert result.window.center_y == pytest.approx(500.0)
    assert result.window.area == pytest.approx(80000.0)


def test_detector_prescale_is_undone():
    config = _config()
    config['detector']['prescale_levels'] = 1
    pipeline = FramingPipeline(config)

    result = pipeline.process_frame([Rect(300.0, 200.0, 100.0, 100.0)])
    assert result.observed == Rect(600.0, 400.0, 200.0, 200.0)


def test_degenerate_window_holds_last_valid():
    pipeline = FramingPipeline(_config())
    first = pipeline.process_frame([])
    assert not first.held

    # Detección completamente fuera de la imagen: la ventana colapsa.
    result = pipeline.process_frame([Rect(3000.0, 500.0, 100.0, 100.0)])
    assert result.held
    assert result.window == first.window
    assert pipeline.get_stats()['degenerate_frames'] == 1


def test_window_is_aspect_locked_and_inside_source():
    pipeline = FramingPipeline(_config(lpf_rate=0.2, max_velocity=30.0, max_acceleration=3.0, zoom_factor=6.0))
    rng = np.random.default_rng(3)

    for _ in range(200):
        if rng.random() < 0.7:
            x, y = rng.uniform(0, 1300, size=2)
            detections = [Rect(float(x), float(y), 80.0, 80.0)]
        else:
            detections = []
        window = pipeline.process_frame(detections).window
        assert pipeline.source_bounds.contains(window)
        assert window.width / window.height == pytest.approx(640 / 480, rel=1e-6)


def test_image_is_cropped_to_output_size():
    pipeline = FramingPipeline(_config())
    image = np.zeros((1080, 1440, 3), dtype=np.uint8)
    result = pipeline.process_frame([Rect(600.0, 400.0, 200.0, 200.0)], image=image)

    assert result.output is not None
    assert result.output.shape == (480, 640, 3)


def test_process_sequence_and_save(tmp_path):
    pipeline = FramingPipeline(_config(lpf_rate=0.5))
    frames = [
        [Rect(600.0, 400.0, 200.0, 200.0)],
        [],
        [Rect(610.0, 405.0, 200.0, 200.0), Rect(700.0, 420.0, 50.0, 50.0)],
    ]
    records = pipeline.process_sequence(frames)

    assert [r['frame'] for r in records] == [0, 1, 2]
    assert records[1]['observed'] is None
    assert len(records[0]['window']) == 4

    output_path = tmp_path / 'out' / 'framing.json'
    pipeline.save_results(records, str(output_path))

    with open(output_path) as f:
        data = json.load(f)
    assert data['metadata']['total_frames'] == 3
    assert data['metadata']['observed_frames'] == 2
    assert data['metadata']['output'] == {'width': 640, 'height': 480}
    assert data['metadata']['tuning']['lpf_rate'] == 0.5
    assert len(data['framing']) == 3


def test_zero_size_detection_does_not_abort_replay():
    pipeline = FramingPipeline(_config())
    records = pipeline.process_sequence([
        [Rect(600.0, 400.0, 0.0, 0.0)],
        [],
        [Rect(600.0, 400.0, 200.0, 200.0)],
    ])

    assert len(records) == 3
    assert records[0]['held']
    assert pipeline.tracker.area.read() >= 0.0
    assert not records[2]['held']
    assert pipeline.get_stats()['observed_frames'] == 2
