"""
engine.py

Ітераційний двигун для запуску NewtonSolver.

Функціонал:
    - виконує цикл x_{k+1} = step(x_k);
    - формує трасу ітерацій (для таблиць і графіків);
    - фіксує причину зупинки (‖F‖, норма кроку, max_iter);
    - збирає лічильники лінійного пошуку;
    - підтримує callback на кожній ітерації.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import numpy as np

from .functions import ArrayLike
from .iteration_result import IterationResult
from .newton import NewtonSolver, StepResult

logger = logging.getLogger(__name__)


@dataclass
class SolverRunResult:
    """
    Підсумок одного запуску розв'язувача.

    Атрибути:
        method_name         - назва розв'язувача (NewtonSolver.name).
        iterations          - список IterationResult (траса процесу).
        x_star              - знайдений розв'язок (остання точка траси).
        norm_f              - ‖F(x_star)‖.
        n_iter              - кількість виконаних ітерацій (без k=0).
        converged           - True, якщо досягнуто ‖F‖ <= tol_f.
        stopped_by          - причина зупинки ("norm_f", "step_norm", "max_iter").
        failed_line_searches - кількість ітерацій з recovery-кроком.
        line_search_counters - лічильники line search (as_dict()).
    """
    method_name: str
    iterations: List[IterationResult]
    x_star: np.ndarray
    norm_f: float
    n_iter: int
    converged: bool
    stopped_by: str
    failed_line_searches: int
    line_search_counters: Dict[str, int]


# Тип callback'а для логів/графіків
IterationCallback = Callable[[IterationResult], None]


class SolverEngine:
    """
    Движок, який керує ітераційним процесом для заданого NewtonSolver.

    Налаштування за замовчуванням (можуть бути переозначені у run()):
        tol_f     : поріг для ‖F(x)‖ (default: 1e-10)
        tol_step  : поріг для норми кроку (default: 1e-14)
        max_iter  : максимальна кількість ітерацій (default: 100)
    """

    def __init__(
        self,
        tol_f: float = 1e-10,
        tol_step: float = 1e-14,
        max_iter: int = 100,
    ) -> None:
        self.tol_f_default = tol_f
        self.tol_step_default = tol_step
        self.max_iter_default = max_iter

    def run(
        self,
        solver: NewtonSolver,
        x0: ArrayLike,
        max_iter: Optional[int] = None,
        tol_f: Optional[float] = None,
        tol_step: Optional[float] = None,
        callback: Optional[IterationCallback] = None,
    ) -> SolverRunResult:
        """Запустити процес розв'язання."""
        x0 = np.asarray(x0, dtype=float)

        max_iter = max_iter if max_iter is not None else self.max_iter_default
        tol_f = tol_f if tol_f is not None else self.tol_f_default
        tol_step = tol_step if tol_step is not None else self.tol_step_default

        solver.line_search.counters.reset()
        solver.initialize(x0)

        iterations: List[IterationResult] = []

        # Початкова точка (k = 0)
        norm_f0 = solver.group.get_norm_f()
        rec0 = IterationResult(
            index=0,
            x=x0.copy(),
            norm_f=norm_f0,
            phi=0.5 * norm_f0 * norm_f0,
            step_norm=0.0,
            meta={"initial": True},
        )
        iterations.append(rec0)
        if callback is not None:
            callback(rec0)

        stopped_by = "max_iter"
        failed_line_searches = 0

        if norm_f0 <= tol_f:
            stopped_by = "norm_f"
        else:
            for k in range(1, max_iter + 1):
                step_res: StepResult = solver.step()
                meta = dict(step_res.meta or {})
                if not meta.get("line_search_success", True):
                    failed_line_searches += 1

                rec = IterationResult(
                    index=k,
                    x=step_res.x_new.copy(),
                    norm_f=step_res.norm_f,
                    phi=step_res.phi,
                    step_norm=float(step_res.step_norm),
                    meta=meta,
                )
                iterations.append(rec)
                logger.debug(
                    "k=%d: ‖F‖ = %e, ‖Δx‖ = %e", k, rec.norm_f, rec.step_norm
                )

                if callback is not None:
                    callback(rec)

                if step_res.norm_f <= tol_f:
                    stopped_by = "norm_f"
                    break

                if step_res.step_norm < tol_step:
                    stopped_by = "step_norm"
                    break

        last_rec = iterations[-1]
        logger.info(
            "%s: зупинка (%s) після %d ітерацій, ‖F‖ = %e",
            solver.name,
            stopped_by,
            len(iterations) - 1,
            last_rec.norm_f,
        )

        return SolverRunResult(
            method_name=solver.name,
            iterations=iterations,
            x_star=last_rec.x.copy(),
            norm_f=float(last_rec.norm_f),
            n_iter=len(iterations) - 1,
            converged=stopped_by == "norm_f",
            stopped_by=stopped_by,
            failed_line_searches=failed_line_searches,
            line_search_counters=solver.line_search.counters.as_dict(),
        )


__all__ = [
    "IterationResult",
    "SolverRunResult",
    "SolverEngine",
]
