"""
Filtros escalares para suavizar el movimiento de la cámara virtual.

Todos comparten la misma interfaz mínima (read / push) y leen sus
parámetros de un TuningParameters compartido en cada push, de modo que un
ajuste en vivo afecta al siguiente paso de suavizado.
"""

import logging
from typing import Generic, Protocol, TypeVar

from .tuning import TuningParameters

logger = logging.getLogger(__name__)


class ScalarFilter(Protocol):

    def read(self) -> float:
        ...

    def push(self, target: float) -> None:
        ...


class LowPassFilter:
    """
    Filtro paso bajo exponencial simple.
    s_i = alpha * target + (1 - alpha) * s_{i-1}

    alpha = 1 sigue al objetivo sin suavizado; valores menores convergen más
    despacio.
    """
    __slots__ = ('params', 's')

    def __init__(self, initial: float, params: TuningParameters):
        self.params = params
        self.s = float(initial)

    def read(self) -> float:
        return self.s

    def push(self, target: float) -> None:
        alpha = self.params.lpf_rate
        self.s = self.s * (1.0 - alpha) + target * alpha

    def __float__(self) -> float:
        return self.s


class BoundedAccelFilter:
    """
    Aceleración constante y velocidad acotada.

    Al final del recorrido la velocidad puede bajar más de lo que permite la
    aceleración para aterrizar exactamente en el objetivo sin pasarse.
    """
    __slots__ = ('params', 's', 'velocity')

    def __init__(self, initial: float, params: TuningParameters):
        self.params = params
        self.s = float(initial)
        self.velocity = 0.0

    def read(self) -> float:
        return self.s

    def push(self, target: float) -> None:
        max_vel = self.params.max_velocity
        accel = self.params.max_acceleration

        if target < self.s:
            self.velocity = min(self.velocity - accel, max_vel)
            if self.velocity < -max_vel:
                self.velocity = -max_vel
            if self.s + self.velocity < target:
                self.velocity = target - self.s
            self.s += self.velocity
        elif target > self.s:
            self.velocity = max(self.velocity + accel, -max_vel)
            if self.velocity > max_vel:
                self.velocity = max_vel
            if self.s + self.velocity > target:
                self.velocity = target - self.s
            self.s += self.velocity
        else:
            # Objetivo alcanzado: la velocidad residual se conserva, sólo acotada.
            self.velocity = max(-max_vel, min(self.velocity, max_vel))

    def __float__(self) -> float:
        return self.s


Outer = TypeVar('Outer', bound=ScalarFilter)
Inner = TypeVar('Inner', bound=ScalarFilter)


class ComposedFilter(Generic[Outer, Inner]):
    """
    Encadena dos filtros: el objetivo entra en `outer` y el valor actual de
    `outer` alimenta a `inner`. La salida es la de `inner`.
    """
    __slots__ = ('outer', 'inner')

    def __init__(self, outer: Outer, inner: Inner):
        self.outer = outer
        self.inner = inner

    def read(self) -> float:
        return self.inner.read()

    def push(self, target: float) -> None:
        self.outer.push(target)
        self.inner.push(self.outer.read())

    def __float__(self) -> float:
        return self.read()


def smooth_mover(initial: float, params: TuningParameters) -> 'ComposedFilter[BoundedAccelFilter, LowPassFilter]':
    """Aceleración acotada primero y paso bajo encima, ambos desde `initial`."""
    return ComposedFilter(
        BoundedAccelFilter(initial, params),
        LowPassFilter(initial, params)
    )
