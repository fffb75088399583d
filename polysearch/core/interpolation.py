"""
interpolation.py

Поліноміальні моделі функції якості φ(λ) та вибір наступного кроку.

Позначення:
    φ0 = φ(0), g0 = φ'(0),
    (λ1, φ1) - остання пробна точка, (λ2, φ2) - передостання.

Моделі:
    - Quadratic  : парабола через φ(0), φ'(0), φ(λ1):
                       λ = -g0 λ1² / (2 [φ1 - φ0 - g0 λ1]);
    - Cubic      : кубіка через φ(0), φ'(0), φ(λ1), φ(λ2):
                       λ = (-b + sqrt(b² - 3 a g0)) / (3a);
                   на першому кроці інтерполяції - квадратична модель;
    - Quadratic3 : парабола через φ(0), φ(λ1), φ(λ2) без похідної;
                   на першому кроці λ = λ0 / 2.

Кожен новий крок обмежується відносно попереднього:
    γ_min λ1 <= λ <= γ_max λ1.
"""

from __future__ import annotations

from math import isfinite, sqrt
from typing import List, Tuple

import numpy as np

from .options import (
    INTERPOLATION_CUBIC,
    INTERPOLATION_QUADRATIC,
    INTERPOLATION_QUADRATIC3,
    INTERPOLATION_TYPES,
)

_EPS = float(np.finfo(float).eps)


class PredictorFailure(ArithmeticError):
    """Чисельна невдача моделі: від'ємний дискримінант, вироджений знаменник."""


# ---------------------------------------------------------------------------
# Формули кроку
# ---------------------------------------------------------------------------

def quadratic_step(phi0: float, slope0: float, step1: float, phi1: float) -> float:
    """Мінімум параболи через φ(0), φ'(0) та φ(λ1)."""
    denom = 2.0 * (phi1 - phi0 - slope0 * step1)
    if denom == 0.0:
        raise PredictorFailure("Квадратична модель вироджена (нульовий знаменник).")
    step = -slope0 * step1 * step1 / denom
    if not isfinite(step):
        raise PredictorFailure(f"Квадратична модель дала нескінченний крок: {step}.")
    return step


def cubic_coefficients(
    phi0: float,
    slope0: float,
    step1: float,
    phi1: float,
    step2: float,
    phi2: float,
) -> Tuple[float, float]:
    """Коефіцієнти a, b кубіки p(λ) = a λ³ + b λ² + φ'(0) λ + φ(0)."""
    if step1 == step2:
        raise PredictorFailure("Кубічна модель: два однакові кроки.")
    term1 = (phi1 - phi0 - slope0 * step1) / (step1 * step1)
    term2 = (phi2 - phi0 - slope0 * step2) / (step2 * step2)
    a = (term1 - term2) / (step1 - step2)
    b = (-step2 * term1 + step1 * term2) / (step1 - step2)
    return a, b


def cubic_step(
    phi0: float,
    slope0: float,
    step1: float,
    phi1: float,
    step2: float,
    phi2: float,
) -> float:
    """
    Мінімум кубіки через φ(0), φ'(0), φ(λ1), φ(λ2).

    При b > 0 використовується еквівалентна стійка форма
        λ = -φ'(0) / (b + sqrt(disc)),
    яка коректна і при a = 0.
    """
    a, b = cubic_coefficients(phi0, slope0, step1, phi1, step2, phi2)
    disc = b * b - 3.0 * a * slope0
    if disc < 0.0:
        raise PredictorFailure(f"Кубічна модель: від'ємний дискримінант ({disc}).")

    if b > 0.0:
        step = -slope0 / (b + sqrt(disc))
    elif a == 0.0:
        raise PredictorFailure("Кубічна модель вироджена (a = 0, b <= 0).")
    else:
        step = (-b + sqrt(disc)) / (3.0 * a)

    if not isfinite(step):
        raise PredictorFailure(f"Кубічна модель дала нескінченний крок: {step}.")
    return step


def quadratic3_step(
    phi0: float,
    step1: float,
    phi1: float,
    step2: float,
    phi2: float,
) -> float:
    """Мінімум параболи через φ(0), φ(λ1), φ(λ2) (без похідної)."""
    d1 = phi1 - phi0
    d2 = phi2 - phi0
    numer = step1 * step1 * d2 - step2 * step2 * d1
    denom = step2 * d1 - step1 * d2

    # Три точки майже на одній прямій
    scale = abs(step2 * d1) + abs(step1 * d2)
    if scale == 0.0 or abs(denom) <= 16.0 * _EPS * scale:
        raise PredictorFailure("Модель Quadratic3 вироджена (точки колінеарні).")

    step = -0.5 * numer / denom
    if not isfinite(step):
        raise PredictorFailure(f"Модель Quadratic3 дала нескінченний крок: {step}.")
    return step


def clamp_step(
    step: float,
    prev_step: float,
    min_factor: float,
    max_factor: float,
) -> float:
    """Обмежити крок: γ_min λ_prev <= λ <= γ_max λ_prev."""
    lower = min_factor * prev_step
    upper = max_factor * prev_step
    if step < lower:
        return lower
    if step > upper:
        return upper
    return step


# ---------------------------------------------------------------------------
# Стан моделі між внутрішніми ітераціями
# ---------------------------------------------------------------------------

class StepPredictor:
    """
    Вибір наступного кроку за історією пробних точок.

    Використання:
        predictor = StepPredictor(INTERPOLATION_CUBIC, phi0, slope0)
        raw = predictor.next_step(step, phi)   # (λ_{k-1}, φ(λ_{k-1})) -> λ_k

    Зберігаються лише дві останні пробні точки.
    """

    def __init__(
        self,
        interpolation_type: str,
        phi0: float,
        slope0: float,
    ) -> None:
        if interpolation_type not in INTERPOLATION_TYPES:
            raise ValueError(f"Невідомий тип інтерполяції: {interpolation_type!r}.")
        self.interpolation_type = interpolation_type
        self.phi0 = float(phi0)
        self.slope0 = float(slope0)
        self.samples: List[Tuple[float, float]] = []
        self.n_predictions = 0

    def _record(self, step: float, phi: float) -> None:
        self.samples.append((float(step), float(phi)))
        if len(self.samples) > 2:
            del self.samples[0]

    def next_step(self, step: float, phi: float) -> float:
        """
        Запам'ятати пробну точку (step, phi) та повернути наступний
        (ще не обмежений) крок. Чисельна невдача - PredictorFailure.
        """
        self._record(step, phi)
        first = self.n_predictions == 0
        self.n_predictions += 1

        step1, phi1 = self.samples[-1]

        if self.interpolation_type == INTERPOLATION_QUADRATIC3:
            if first:
                return 0.5 * step1
            step2, phi2 = self.samples[-2]
            return quadratic3_step(self.phi0, step1, phi1, step2, phi2)

        if first or self.interpolation_type == INTERPOLATION_QUADRATIC:
            return quadratic_step(self.phi0, self.slope0, step1, phi1)

        # INTERPOLATION_CUBIC
        step2, phi2 = self.samples[-2]
        return cubic_step(self.phi0, self.slope0, step1, phi1, step2, phi2)


__all__ = [
    "PredictorFailure",
    "quadratic_step",
    "cubic_coefficients",
    "cubic_step",
    "quadratic3_step",
    "clamp_step",
    "StepPredictor",
    "INTERPOLATION_QUADRATIC",
    "INTERPOLATION_CUBIC",
    "INTERPOLATION_QUADRATIC3",
]
