"""
newton.py

Метод Ньютона для нелінійних систем F(x) = 0 з поліноміальним
лінійним пошуком.

Ідея:
    x_{k+1} = x_k + λ_k * d_k,
    де d_k розв'язує систему:
        J_k * d_k = -F_k,
    J_k = J(x_k), F_k = F(x_k).

    Для глобальної збіжності:
        - використовуємо регуляризацію Якобіана (J_k^T J_k + μ I) у разі
          виродженої системи;
        - крок λ_k обирає PolynomialLineSearch (core/polynomial.py).

NewtonSolver також є контекстом для line search (SolverContext):
він віддає попередній стан, номер нелінійної ітерації та forcing term η.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import numpy as np

from .functions import ArrayLike, JacobianFunction, ResidualFunction, numerical_jacobian
from .group import Group, VectorGroup
from .polynomial import PolynomialLineSearch
from .solver_context import SolverContext

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Результат одного кроку Ньютона
# ---------------------------------------------------------------------------

@dataclass
class StepResult:
    """
    Результат одного кроку.

    Атрибути:
        x_new     - нова точка x_{k+1}
        norm_f    - ‖F(x_{k+1})‖
        phi       - φ(x_{k+1}) = значення функції якості
        step_norm - норма кроку ‖x_{k+1} - x_k‖
        meta      - додаткова інформація (λ, напрямок, line search, ...)
    """
    x_new: np.ndarray
    norm_f: float
    phi: float
    step_norm: float
    meta: Dict[str, Any] = field(default_factory=dict)


class NewtonSolver(SolverContext):
    """
    Ньютонівський розв'язувач з поліноміальним line search.

    Налаштування (options):
        reg_lambda        : початковий множник μ для регуляризації (default: 1e-8)
        max_reg_scale     : максимальний масштаб для μ (default: 1e8)
        forcing_term      : η, що передається в умову Ared/Pred (default: 0.0)

    Параметри line search передаються словником line_search_params
    (назви як у PolynomialOptions.from_parameters) або готовим об'єктом
    line_search.
    """

    def __init__(
        self,
        residual: ResidualFunction,
        jacobian: Optional[JacobianFunction] = None,
        options: Optional[Dict[str, Any]] = None,
        line_search_params: Optional[Mapping[str, Any]] = None,
        line_search: Optional[PolynomialLineSearch] = None,
        name: Optional[str] = None,
    ) -> None:
        self.residual = residual
        self._jacobian = jacobian
        self.options: Dict[str, Any] = options or {}
        self.line_search = line_search or PolynomialLineSearch(line_search_params)
        self.name: str = name or "Newton + polynomial line search"

        self._group: Optional[Group] = None
        self._previous: Optional[Group] = None
        self._trial: Optional[Group] = None
        self._iteration: int = 0

    # ------------------------------------------------------------------
    # SolverContext
    # ------------------------------------------------------------------

    def get_previous_solution_group(self) -> Group:
        if self._previous is None:
            raise RuntimeError("NewtonSolver: стан не ініціалізовано, викличте initialize().")
        return self._previous

    def get_num_iterations(self) -> int:
        return self._iteration

    def get_forcing_term(self) -> float:
        return float(self.options.get("forcing_term", 0.0))

    # ------------------------------------------------------------------
    # Життєвий цикл
    # ------------------------------------------------------------------

    def jacobian(self, x: ArrayLike) -> np.ndarray:
        """Аналітичний Якобіан, або чисельний, якщо його не передано."""
        if self._jacobian is not None:
            return np.asarray(self._jacobian(x), dtype=float)
        return numerical_jacobian(self.residual, x)

    def initialize(self, x0: ArrayLike) -> None:
        """Скинути стан та обчислити F(x0)."""
        self._group = VectorGroup(self.residual, x0, self.jacobian)
        self._group.compute_f()
        self._previous = self._group.clone()
        self._trial = self._group.clone()
        self._iteration = 0

    @property
    def group(self) -> Group:
        if self._group is None:
            raise RuntimeError("NewtonSolver: стан не ініціалізовано, викличте initialize().")
        return self._group

    # ------------------------------------------------------------------
    # Напрямок Ньютона
    # ------------------------------------------------------------------

    def _compute_newton_direction(
        self,
        f_k: np.ndarray,
        J_k: np.ndarray,
        reg_lambda: float,
        max_reg_scale: float,
    ) -> tuple[np.ndarray, float, bool]:
        """
        Обчислити напрямок Ньютона d_k.

        Повертає:
            d_k          - знайдений напрямок
            used_lambda  - фактичне μ (0.0, якщо регуляризація не знадобилась)
            regularized  - True, якщо довелося розв'язувати регуляризовану систему
        """
        try:
            d_k = -np.linalg.solve(J_k, f_k)
            if np.all(np.isfinite(d_k)):
                return d_k, 0.0, False
        except np.linalg.LinAlgError:
            pass

        # Вироджений Якобіан: (J^T J + μ I) d = -J^T F
        n = J_k.shape[1]
        I = np.eye(n, dtype=float)
        JtJ = J_k.T @ J_k
        g_k = J_k.T @ f_k

        lam = reg_lambda
        while lam <= reg_lambda * max_reg_scale:
            try:
                d_k = -np.linalg.solve(JtJ + lam * I, g_k)
                if np.all(np.isfinite(d_k)):
                    return d_k, lam, True
            except np.linalg.LinAlgError:
                pass
            lam *= 10.0

        # Регуляризація не допомогла - напрямок найшвидшого спуску для φ
        return -g_k, lam, True

    # ------------------------------------------------------------------
    # Один крок
    # ------------------------------------------------------------------

    def step(self) -> StepResult:
        """Один крок Ньютона з поточного стану."""
        reg_lambda = float(self.options.get("reg_lambda", 1e-8))
        max_reg_scale = float(self.options.get("max_reg_scale", 1e8))

        group = self.group
        x_k = group.get_x().copy()
        f_k = group.get_f()
        J_k = self.jacobian(x_k)

        d_k, used_lambda, regularized = self._compute_newton_direction(
            f_k, J_k, reg_lambda, max_reg_scale
        )

        # Попередній стан для line search = поточний
        self._previous = group.clone()

        ls_result = self.line_search.compute(self._trial, d_k, self)

        # Прийнятий пробний стан стає поточним
        self._group, self._trial = ls_result.group, group
        self._iteration += 1

        x_new = self._group.get_x().copy()
        norm_f = self._group.get_norm_f()
        step_norm = float(np.linalg.norm(x_new - x_k, ord=2))

        logger.debug(
            "Ньютон k=%d: λ = %e, ‖F‖ = %e, ‖Δx‖ = %e%s",
            self._iteration,
            ls_result.step,
            norm_f,
            step_norm,
            "" if ls_result.success else " (recovery)",
        )

        meta: Dict[str, Any] = {
            "step": ls_result.step,
            "direction": d_k,
            "lambda": used_lambda,
            "regularized": regularized,
            "iteration": self._iteration - 1,
            "line_search_success": ls_result.success,
            "line_search_iterations": ls_result.iterations,
            "line_search_meta": ls_result.meta,
        }

        return StepResult(
            x_new=x_new,
            norm_f=norm_f,
            phi=ls_result.phi_value,
            step_norm=step_norm,
            meta=meta,
        )


__all__ = [
    "StepResult",
    "NewtonSolver",
]
