"""
Módulo de Cámara Virtual para encuadre automático.
Incluye los filtros de suavizado y el tracker de la ventana de encuadre.
"""

from .filters import ScalarFilter, LowPassFilter, BoundedAccelFilter, ComposedFilter, smooth_mover
from .framing import FramingTracker
from .tuning import TuningParameters, SLIDERS, slider_value

__all__ = [
    'ScalarFilter', 'LowPassFilter', 'BoundedAccelFilter', 'ComposedFilter', 'smooth_mover',
    'FramingTracker', 'TuningParameters', 'SLIDERS', 'slider_value'
]
