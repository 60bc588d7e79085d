"""
Ventana de encuadre suavizada para la cámara virtual.

Convierte la secuencia ruidosa e intermitente de detecciones en un
rectángulo estable:
- Centro: aceleración acotada + paso bajo (sin saltos, sin temblores)
- Tamaño: paso bajo sobre el área encerrada
- Límites seguros: nunca sale de la imagen fuente
- Aspecto fijo: siempre el de la salida
"""

import logging
import math
from typing import Optional

from .filters import ComposedFilter, BoundedAccelFilter, LowPassFilter, smooth_mover
from .tuning import TuningParameters
from ..utils.geometry import EMPTY_RECT, Rect

logger = logging.getLogger(__name__)


class FramingTracker:

    def __init__(
        self,
        source_bounds: Rect,
        aspect: float,
        params: Optional[TuningParameters] = None
    ):
        if source_bounds.is_empty():
            raise ValueError(f"Source bounds must not be empty: {source_bounds}")
        if not aspect > 0:
            raise ValueError(f"Aspect ratio must be positive: {aspect}")

        self._bounds = source_bounds
        self._aspect = float(aspect)
        self.params = params if params is not None else TuningParameters()

        # Arranca en la imagen completa para evitar un salto desde cero.
        self.center_x: ComposedFilter[BoundedAccelFilter, LowPassFilter] = smooth_mover(
            source_bounds.center_x, self.params
        )
        self.center_y: ComposedFilter[BoundedAccelFilter, LowPassFilter] = smooth_mover(
            source_bounds.center_y, self.params
        )
        self.area = LowPassFilter(source_bounds.area, self.params)

        self.stats = {
            'observations': 0,
        }

        logger.info(f"FramingTracker initialized: bounds={source_bounds}, aspect={self._aspect:.4f}")

    @property
    def source_bounds(self) -> Rect:
        return self._bounds

    @property
    def aspect(self) -> float:
        return self._aspect

    def observe(self, rect: Rect):
        self.center_x.push(rect.center_x)
        self.center_y.push(rect.center_y)
        # Detecciones de tamaño nulo o invertido aportan área 0.
        self.area.push(max(0.0, rect.width * rect.height))
        self.stats['observations'] += 1

        logger.debug(
            f"Observed {rect} -> center=({self.center_x.read():.1f}, {self.center_y.read():.1f}) "
            f"area={self.area.read():.0f}"
        )

    def frame(self, scale_factor: float, vertical_anchor: float) -> Rect:
        """
        Ventana de encuadre para el estado actual de los filtros.

        `scale_factor` multiplica el área suavizada (zoom). `vertical_anchor`
        es la fracción de la altura que queda por encima del centro seguido:
        0 lo deja en el borde superior, 0.5 centrado y 1 en el inferior.

        Se recorta a los límites de la fuente encogiendo desde ambos lados
        para conservar el aspecto. Si el recorte deja un tamaño no positivo
        devuelve EMPTY_RECT.
        """
        if not scale_factor > 0:
            raise ValueError(f"Scale factor must be positive: {scale_factor}")
        if not 0.0 <= vertical_anchor <= 1.0:
            raise ValueError(f"Vertical anchor must be in [0, 1]: {vertical_anchor}")

        aspect = self._aspect
        bounds = self._bounds

        size = self.area.read() * scale_factor
        height = math.sqrt(size / aspect)
        width = aspect * height
        x = self.center_x.read() - width / 2
        y = self.center_y.read() - height * vertical_anchor

        # Cada borde usa las dimensiones ya corregidas por los anteriores.
        if x < bounds.x:
            delta = bounds.x - x
            width -= 2 * delta
            height -= 2 * delta / aspect
            x = bounds.x
        if y < bounds.y:
            delta = bounds.y - y
            height -= 2 * delta
            width -= 2 * delta * aspect
            y = bounds.y
        right = x + width
        if right > bounds.right:
            delta = right - bounds.right
            width -= 2 * delta
            height -= 2 * delta / aspect
            x += delta
            y += delta / aspect
        bottom = y + height
        if bottom > bounds.bottom:
            delta = bottom - bounds.bottom
            height -= 2 * delta
            width -= 2 * delta * aspect
            y += delta
            x += delta * aspect

        if width <= 0 or height <= 0:
            logger.debug(f"Degenerate framing: {width:.1f}x{height:.1f}+{x:.1f}+{y:.1f}")
            return EMPTY_RECT

        return Rect(x, y, width, height)

    def read_unscaled(self) -> Rect:
        """Rectángulo suavizado sin zoom, útil para overlays de depuración."""
        return self.frame(1.0, 0.5)

    def current_crop(self) -> Rect:
        return self.frame(self.params.zoom_factor, self.params.vertical_anchor)

    def get_stats(self) -> dict:
        return self.stats.copy()
