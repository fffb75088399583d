"""
group.py

Абстракція "групи" - поточного стану нелінійної задачі F(x) = 0.

Група зберігає:
    - вектор змінних x;
    - нев'язку F(x) (обчислюється на вимогу через compute_f());
    - (опційно) дію Якобіана J(x) на вектор.

Line search працює тільки через цей інтерфейс, тому може використовуватись
з будь-яким представленням векторів, яке реалізує Group.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from .functions import ArrayLike, JacobianFunction, ResidualFunction


class GroupEvaluationError(RuntimeError):
    """Не вдалося обчислити нев'язку F(x) у заданій точці."""


class Group(ABC):
    """
    Абстрактний стан нелінійної задачі.

    Мінімальний набір операцій, потрібний line search:
        get_x(), set_x(x), compute_x(old, d, λ),
        compute_f(), get_f(), get_norm_f(),
        apply_jacobian(v), clone().
    """

    @abstractmethod
    def get_x(self) -> np.ndarray:
        raise NotImplementedError

    @abstractmethod
    def set_x(self, x: ArrayLike) -> None:
        """Встановити x; похідні величини (F) стають недійсними."""
        raise NotImplementedError

    def compute_x(self, old: "Group", direction: ArrayLike, step: float) -> None:
        """x = x_old + step * direction."""
        self.set_x(old.get_x() + step * np.asarray(direction, dtype=float))

    @abstractmethod
    def compute_f(self) -> None:
        """Обчислити F(x). Помилка обчислення піднімає виняток."""
        raise NotImplementedError

    @abstractmethod
    def is_f(self) -> bool:
        """Чи F(x) вже обчислена для поточного x."""
        raise NotImplementedError

    @abstractmethod
    def get_f(self) -> np.ndarray:
        raise NotImplementedError

    def get_norm_f(self) -> float:
        return float(np.linalg.norm(self.get_f(), ord=2))

    def apply_jacobian(self, v: ArrayLike) -> np.ndarray:
        """
        Обчислити J(x) v.

        За замовчуванням Якобіан недоступний - піднімається
        NotImplementedError, і обчислення нахилу переходить на
        різницеву формулу (див. core/slope.py).
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} не підтримує дію Якобіана."
        )

    @abstractmethod
    def clone(self) -> "Group":
        raise NotImplementedError


class VectorGroup(Group):
    """
    Група на numpy-векторах.

    Parameters
    ----------
    residual : ResidualFunction
        F: R^n -> R^n.
    x : ArrayLike
        Початкове значення x.
    jacobian : Optional[JacobianFunction]
        J: R^n -> R^{n x n}. Якщо None, apply_jacobian() недоступний.
    """

    def __init__(
        self,
        residual: ResidualFunction,
        x: ArrayLike,
        jacobian: Optional[JacobianFunction] = None,
    ) -> None:
        self.residual = residual
        self.jacobian = jacobian
        self._x = np.array(x, dtype=float)
        self._f: Optional[np.ndarray] = None
        self._jac: Optional[np.ndarray] = None

        # Лічильники обчислень F та J
        self.residual_evals: int = 0
        self.jacobian_evals: int = 0

    def get_x(self) -> np.ndarray:
        return self._x

    def set_x(self, x: ArrayLike) -> None:
        self._x = np.array(x, dtype=float)
        self._f = None
        self._jac = None

    def compute_f(self) -> None:
        if self._f is not None:
            return
        self.residual_evals += 1
        f = np.asarray(self.residual(self._x.copy()), dtype=float)
        if f.shape != self._x.shape:
            raise GroupEvaluationError(
                f"Нев'язка має форму {f.shape}, очікувалось {self._x.shape}."
            )
        if not np.all(np.isfinite(f)):
            raise GroupEvaluationError(
                f"Нев'язка не є скінченною в точці x={self._x.tolist()}."
            )
        self._f = f

    def is_f(self) -> bool:
        return self._f is not None

    def get_f(self) -> np.ndarray:
        if self._f is None:
            raise RuntimeError("F(x) ще не обчислена, викличте compute_f().")
        return self._f

    def get_jacobian(self) -> np.ndarray:
        if self.jacobian is None:
            raise NotImplementedError("VectorGroup створено без Якобіана.")
        if self._jac is None:
            self.jacobian_evals += 1
            self._jac = np.asarray(self.jacobian(self._x.copy()), dtype=float)
        return self._jac

    def apply_jacobian(self, v: ArrayLike) -> np.ndarray:
        return self.get_jacobian() @ np.asarray(v, dtype=float)

    def clone(self) -> "VectorGroup":
        other = VectorGroup(self.residual, self._x, self.jacobian)
        other._f = None if self._f is None else self._f.copy()
        other._jac = None if self._jac is None else self._jac.copy()
        return other


__all__ = [
    "Group",
    "GroupEvaluationError",
    "VectorGroup",
]
