"""
functions.py

Тестові нелінійні системи F(x) = 0, їх Якобіани та стартові точки.
Формат:
    - усі функції працюють з вектором x: numpy.ndarray форми (n,);
    - residual повертає вектор F(x) форми (n,);
    - jacobian повертає матрицю J(x) форми (n, n);
    - є реєстр SYSTEMS для зручного вибору системи в движку/тестах.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

import numpy as np

ArrayLike = np.ndarray
ResidualFunction = Callable[[ArrayLike], ArrayLike]
JacobianFunction = Callable[[ArrayLike], ArrayLike]


# ---------------------------------------------------------------------------
# Чисельний Якобіан (центральні різниці)
# ---------------------------------------------------------------------------

def numerical_jacobian(
    residual: ResidualFunction,
    x: ArrayLike,
    h: float = 1e-7,
) -> ArrayLike:
    """
    Чисельний Якобіан за центральною різницею.

    ∂F_i/∂x_j ≈ (F_i(x + h e_j) - F_i(x - h e_j)) / (2h)
    """
    x = np.asarray(x, dtype=float)
    n = len(x)
    f0 = np.asarray(residual(x), dtype=float)
    J = np.zeros((len(f0), n), dtype=float)

    for j in range(n):
        x_fwd = x.copy()
        x_bwd = x.copy()
        x_fwd[j] += h
        x_bwd[j] -= h
        J[:, j] = (
            np.asarray(residual(x_fwd), dtype=float)
            - np.asarray(residual(x_bwd), dtype=float)
        ) / (2.0 * h)

    return J


# ---------------------------------------------------------------------------
# Системи
# ---------------------------------------------------------------------------

def dennis_schnabel(x: ArrayLike) -> ArrayLike:
    """
    F1 = x1^2 + x2^2 - 2
    F2 = exp(x1 - 1) + x2^3 - 2

    Розв'язок: x* = (1, 1).
    """
    x1, x2 = x
    return np.array([x1 ** 2 + x2 ** 2 - 2.0, np.exp(x1 - 1.0) + x2 ** 3 - 2.0])


def jac_dennis_schnabel(x: ArrayLike) -> ArrayLike:
    x1, x2 = x
    return np.array([[2.0 * x1, 2.0 * x2], [np.exp(x1 - 1.0), 3.0 * x2 ** 2]])


def rosenbrock(x: ArrayLike) -> ArrayLike:
    """
    Форма Розенброка через нев'язку:
        F1 = 10 (x2 - x1^2)
        F2 = 1 - x1

    Розв'язок: x* = (1, 1).
    """
    x1, x2 = x
    return np.array([10.0 * (x2 - x1 ** 2), 1.0 - x1])


def jac_rosenbrock(x: ArrayLike) -> ArrayLike:
    x1, _ = x
    return np.array([[-20.0 * x1, 10.0], [-1.0, 0.0]])


def freudenstein_roth(x: ArrayLike) -> ArrayLike:
    """
    F1 = -13 + x1 + ((5 - x2) x2 - 2) x2
    F2 = -29 + x1 + ((x2 + 1) x2 - 14) x2

    Розв'язок: x* = (5, 4); є також локальний мінімум ‖F‖ поблизу (11.41, -0.8968).
    """
    x1, x2 = x
    return np.array([
        -13.0 + x1 + ((5.0 - x2) * x2 - 2.0) * x2,
        -29.0 + x1 + ((x2 + 1.0) * x2 - 14.0) * x2,
    ])


def jac_freudenstein_roth(x: ArrayLike) -> ArrayLike:
    _, x2 = x
    return np.array([
        [1.0, 10.0 * x2 - 3.0 * x2 ** 2 - 2.0],
        [1.0, 3.0 * x2 ** 2 + 2.0 * x2 - 14.0],
    ])


def powell_badly_scaled(x: ArrayLike) -> ArrayLike:
    """
    F1 = 10^4 x1 x2 - 1
    F2 = exp(-x1) + exp(-x2) - 1.0001
    """
    x1, x2 = x
    return np.array([1.0e4 * x1 * x2 - 1.0, np.exp(-x1) + np.exp(-x2) - 1.0001])


def jac_powell_badly_scaled(x: ArrayLike) -> ArrayLike:
    x1, x2 = x
    return np.array([[1.0e4 * x2, 1.0e4 * x1], [-np.exp(-x1), -np.exp(-x2)]])


_LINEAR_A = np.array([[4.0, 1.0, 0.0], [1.0, 3.0, 1.0], [0.0, 1.0, 2.0]])
_LINEAR_B = np.array([1.0, 2.0, 3.0])


def linear(x: ArrayLike) -> ArrayLike:
    """F(x) = A x - b, A симетрична додатно визначена."""
    return _LINEAR_A @ np.asarray(x, dtype=float) - _LINEAR_B


def jac_linear(x: ArrayLike) -> ArrayLike:
    return _LINEAR_A.copy()


# ---------------------------------------------------------------------------
# Реєстр систем для вибору в движку / тестах
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TestSystem:
    key: str
    name: str
    residual: ResidualFunction
    jacobian: JacobianFunction
    x0: tuple
    solution: Optional[tuple] = None

    # pytest не повинен збирати цей клас як тест
    __test__ = False


SYSTEMS: Dict[str, TestSystem] = {
    "dennis_schnabel": TestSystem(
        key="dennis_schnabel",
        name="x1^2 + x2^2 = 2, exp(x1 - 1) + x2^3 = 2",
        residual=dennis_schnabel,
        jacobian=jac_dennis_schnabel,
        x0=(2.0, 0.5),
        solution=(1.0, 1.0),
    ),
    "rosenbrock": TestSystem(
        key="rosenbrock",
        name="10 (x2 - x1^2) = 0, 1 - x1 = 0",
        residual=rosenbrock,
        jacobian=jac_rosenbrock,
        x0=(-1.2, 1.0),
        solution=(1.0, 1.0),
    ),
    "freudenstein_roth": TestSystem(
        key="freudenstein_roth",
        name="Freudenstein-Roth",
        residual=freudenstein_roth,
        jacobian=jac_freudenstein_roth,
        x0=(0.5, -2.0),
        solution=(5.0, 4.0),
    ),
    "powell_badly_scaled": TestSystem(
        key="powell_badly_scaled",
        name="Powell badly scaled",
        residual=powell_badly_scaled,
        jacobian=jac_powell_badly_scaled,
        x0=(0.0, 1.0),
        solution=None,
    ),
    "linear": TestSystem(
        key="linear",
        name="A x = b (3x3)",
        residual=linear,
        jacobian=jac_linear,
        x0=(0.0, 0.0, 0.0),
        solution=tuple(np.linalg.solve(_LINEAR_A, _LINEAR_B).tolist()),
    ),
}

__all__ = [
    "ArrayLike",
    "ResidualFunction",
    "JacobianFunction",
    "numerical_jacobian",
    "dennis_schnabel", "jac_dennis_schnabel",
    "rosenbrock", "jac_rosenbrock",
    "freudenstein_roth", "jac_freudenstein_roth",
    "powell_badly_scaled", "jac_powell_badly_scaled",
    "linear", "jac_linear",
    "TestSystem",
    "SYSTEMS",
]
