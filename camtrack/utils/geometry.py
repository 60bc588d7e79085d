"""
Rectángulos en coordenadas de la imagen fuente.

Todas las observaciones del detector y todas las ventanas de encuadre viven
en el mismo espacio de coordenadas (píxeles de la cámara, en float).
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_xyxy(cls, x1: float, y1: float, x2: float, y2: float) -> 'Rect':
        return cls(float(x1), float(y1), float(x2 - x1), float(y2 - y1))

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def aspect(self) -> float:
        return self.width / self.height if self.height else 0.0

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def union(self, other: 'Rect') -> 'Rect':
        return Rect.from_xyxy(
            min(self.x, other.x),
            min(self.y, other.y),
            max(self.right, other.right),
            max(self.bottom, other.bottom)
        )

    def contains(self, other: 'Rect', tol: float = 1e-6) -> bool:
        return (
            other.x >= self.x - tol
            and other.y >= self.y - tol
            and other.right <= self.right + tol
            and other.bottom <= self.bottom + tol
        )

    def scaled(self, factor: float) -> 'Rect':
        """Escala posición y tamaño (p.ej. deshacer el pyrDown del detector)."""
        return Rect(self.x * factor, self.y * factor, self.width * factor, self.height * factor)

    def to_xyxy(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.right, self.bottom)

    def to_list(self) -> List[float]:
        return [float(self.x), float(self.y), float(self.width), float(self.height)]

    def __str__(self) -> str:
        return f"{self.width:.1f}x{self.height:.1f}+{self.x:.1f}+{self.y:.1f}"


EMPTY_RECT = Rect(0.0, 0.0, 0.0, 0.0)


def rect_bound(rects: Iterable[Rect]) -> Rect:
    """
    Caja envolvente mínima de todas las detecciones del frame.

    El llamador decide si hubo detecciones: pasar una colección vacía es un
    error de programación.
    """
    rects = list(rects)
    if not rects:
        raise ValueError("rect_bound requires at least one rectangle")

    bound = rects[0]
    for rect in rects[1:]:
        bound = bound.union(rect)
    return bound
