"""
Parámetros de ajuste en vivo de la cámara virtual.

Un único objeto compartido por los filtros y el tracker. Puede modificarse
desde otro hilo (p.ej. una interfaz de ajuste) mientras el bucle de frames
corre: cada escritura es una asignación de un float bajo lock y cada lectura
ve el valor completo.
"""

import logging
import math
import threading
from typing import Any, Callable, Dict, Mapping, Tuple

logger = logging.getLogger(__name__)

PARAMETER_NAMES = (
    'lpf_rate',
    'max_velocity',
    'max_acceleration',
    'zoom_factor',
    'vertical_anchor',
)

# (max_position, default_position, position -> value)
SLIDERS: Dict[str, Tuple[int, int, Callable[[int], float]]] = {
    'lpf_rate': (50, 20, lambda pos: 10 ** (pos / -10.0)),
    'max_velocity': (20, 10, lambda pos: pos / 10.0),
    'max_acceleration': (200, 75, lambda pos: pos / 1000.0),
    'zoom_factor': (150, 59, lambda pos: (pos + 1) / 10.0),
    'vertical_anchor': (120, 40, lambda pos: pos / 120.0),
}


def slider_value(name: str, position: int) -> float:
    if name not in SLIDERS:
        raise KeyError(f"Unknown slider: {name}")

    max_position, _, mapping = SLIDERS[name]
    if not 0 <= position <= max_position:
        raise ValueError(f"Slider {name} position {position} outside 0..{max_position}")
    return float(mapping(position))


def _validate(name: str, value: float) -> float:
    value = float(value)
    if math.isnan(value):
        raise ValueError(f"{name} must not be NaN")

    if name == 'lpf_rate':
        ok = 0.0 < value <= 1.0
    elif name in ('max_velocity', 'max_acceleration'):
        ok = value >= 0.0
    elif name == 'zoom_factor':
        ok = 0.0 < value < math.inf
    else:
        ok = 0.0 <= value <= 1.0

    if not ok:
        raise ValueError(f"{name}={value} out of range")
    return value


class TuningParameters:

    def __init__(
        self,
        lpf_rate: float = 0.01,
        max_velocity: float = 1.0,
        max_acceleration: float = 0.075,
        zoom_factor: float = 6.0,
        vertical_anchor: float = 40 / 120
    ):
        self._lock = threading.Lock()
        self.lpf_rate = _validate('lpf_rate', lpf_rate)
        self.max_velocity = _validate('max_velocity', max_velocity)
        self.max_acceleration = _validate('max_acceleration', max_acceleration)
        self.zoom_factor = _validate('zoom_factor', zoom_factor)
        self.vertical_anchor = _validate('vertical_anchor', vertical_anchor)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'TuningParameters':
        unknown = set(config) - set(PARAMETER_NAMES)
        if unknown:
            raise KeyError(f"Unknown tuning parameters: {sorted(unknown)}")
        return cls(**{name: config[name] for name in PARAMETER_NAMES if name in config})

    @classmethod
    def from_sliders(cls) -> 'TuningParameters':
        """Posiciones iniciales de los sliders del operador."""
        return cls(**{name: slider_value(name, SLIDERS[name][1]) for name in PARAMETER_NAMES})

    def set_parameter(self, name: str, value: float):
        if name not in PARAMETER_NAMES:
            raise KeyError(f"Unknown tuning parameter: {name}")

        value = _validate(name, value)
        with self._lock:
            setattr(self, name, value)
        logger.debug(f"Tuning {name} -> {value:.6g}")

    def set_from_slider(self, name: str, position: int):
        self.set_parameter(name, slider_value(name, position))

    def update(self, **values: float):
        for name, value in values.items():
            self.set_parameter(name, value)

    def snapshot(self) -> Dict[str, float]:
        with self._lock:
            return {name: getattr(self, name) for name in PARAMETER_NAMES}

    def __repr__(self) -> str:
        values = ', '.join(f"{k}={v:.6g}" for k, v in self.snapshot().items())
        return f"TuningParameters({values})"
