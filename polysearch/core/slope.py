"""
slope.py

Обчислення нахилу φ'(0) стандартної функції якості
    φ(λ) = 1/2 ‖F(x_old + λ d)‖²
вздовж напрямку d.

Аналітично:
    φ'(0) = F(x_old)^T J(x_old) d.

Якщо група не вміє застосовувати Якобіан, використовується
одностороння різниця:
    φ'(0) ≈ F(x)^T (F(x + δ d) - F(x)) / δ.
"""

from __future__ import annotations

import logging

import numpy as np

from .functions import ArrayLike
from .group import Group

logger = logging.getLogger(__name__)


class Slope:
    """
    Утиліта обчислення нахилу φ'(0).

    Attributes
    ----------
    perturbation : float
        Крок δ для різницевої формули (default: 1e-6).
    """

    def __init__(self, perturbation: float = 1.0e-6) -> None:
        self.perturbation = float(perturbation)

    def compute_slope(self, direction: ArrayLike, group: Group) -> float:
        """F(x)^T J d; якщо Якобіан недоступний - різницева формула."""
        if not group.is_f():
            group.compute_f()
        try:
            jd = group.apply_jacobian(direction)
        except NotImplementedError:
            return self.compute_slope_without_jacobian(direction, group)
        return float(np.dot(group.get_f(), jd))

    def compute_slope_without_jacobian(
        self, direction: ArrayLike, group: Group
    ) -> float:
        """F(x)^T (F(x + δ d) - F(x)) / δ."""
        if not group.is_f():
            group.compute_f()

        delta = self.perturbation
        perturbed = group.clone()
        perturbed.compute_x(group, direction, delta)
        perturbed.compute_f()

        f_old = group.get_f()
        slope = float(np.dot(f_old, perturbed.get_f() - f_old)) / delta
        logger.debug("Нахил без Якобіана (δ = %g): %e", delta, slope)
        return slope


__all__ = ["Slope"]
