"""
merit.py

Функція якості (merit function) φ та адаптер обчислення пробного кроку.

Ідея:
    - φ(λ) вимірює "якість" кроку λ: x_new = x_old + λ d;
    - стандартна функція якості - SumOfSquares: φ = 1/2 ‖F(x)‖²;
    - користувач може передати власну функцію якості (будь-який об'єкт
      з методами compute_f(group) та compute_slope(direction, group))
      або власну норму для умови Ared/Pred (об'єкт з методом norm(group)).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .functions import ArrayLike
from .group import Group
from .slope import Slope


class MeritFunction(ABC):
    """
    Інтерфейс функції якості.

    compute_f(group)                 -> φ у стані group;
    compute_slope(direction, group)  -> φ'(0) вздовж direction з точки group.
    """

    name: str = "merit"

    @abstractmethod
    def compute_f(self, group: Group) -> float:
        raise NotImplementedError

    @abstractmethod
    def compute_slope(self, direction: ArrayLike, group: Group) -> float:
        raise NotImplementedError


class SumOfSquares(MeritFunction):
    """φ(x) = 1/2 ‖F(x)‖², нахил F^T J d (див. core/slope.py)."""

    name = "sum_of_squares"

    def __init__(self, slope: Optional[Slope] = None) -> None:
        self.slope = slope or Slope()

    def compute_f(self, group: Group) -> float:
        if not group.is_f():
            group.compute_f()
        norm_f = group.get_norm_f()
        return 0.5 * norm_f * norm_f

    def compute_slope(self, direction: ArrayLike, group: Group) -> float:
        return self.slope.compute_slope(direction, group)


class UserNorm(ABC):
    """Користувацька норма для умови Ared/Pred."""

    @abstractmethod
    def norm(self, group: Group) -> float:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Адаптер: пробний крок + обчислення φ
# ---------------------------------------------------------------------------

def update_group(
    new_group: Group,
    old_group: Group,
    direction: ArrayLike,
    step: float,
) -> None:
    """
    x_new = x_old + step * d, далі F(x_new).

    Помилка обчислення F (наприклад, GroupEvaluationError) не
    перехоплюється: вона передається викликачу.
    """
    new_group.compute_x(old_group, direction, step)
    new_group.compute_f()


def compute_phi(
    merit: MeritFunction,
    new_group: Group,
    old_group: Group,
    direction: ArrayLike,
    step: float,
) -> float:
    """Оновити new_group до кроку step та повернути φ(step)."""
    update_group(new_group, old_group, direction, step)
    return float(merit.compute_f(new_group))


__all__ = [
    "MeritFunction",
    "SumOfSquares",
    "UserNorm",
    "update_group",
    "compute_phi",
]
