"""
polynomial.py

Поліноміальний лінійний пошук (quadratic / cubic / quadratic3) для
нелінійного розв'язувача.

Мета - знайти крок λ для x_new = x_old + λ d, мінімізуючи функцію якості
    φ(λ) = 1/2 ‖F(x_old + λ d)‖²
(або користувацьку, див. core/merit.py).

Алгоритм:
    1) обчислюємо φ(0) та φ'(0) один раз;
    2) пробуємо крок за замовчуванням λ0 ("Default Step");
    3) якщо крок не прийнято (core/convergence.py) - послідовно
       мінімізуємо поліноміальні моделі φ (core/interpolation.py),
       обмежуючи кожен новий крок межами γ_min λ_{k-1} .. γ_max λ_{k-1};
    4) пошук зазнає невдачі, якщо:
         - кількість внутрішніх ітерацій перевищила "Max Iters";
         - крок став меншим за "Minimum Step";
         - модель зазнала чисельної невдачі;
       тоді береться recovery-крок ("Recovery Step Type"), стан
       перераховується для нього, а результат позначається як невдалий.

Посилання:
    - C.T. Kelley, "Iterative Methods for Linear and Nonlinear Equations",
      SIAM, 1995, розд. 8.3.1;
    - J. E. Dennis Jr., R. B. Schnabel, "Numerical Methods for Unconstrained
      Optimization and Nonlinear Equations", розд. 6.3.2;
    - J. Nocedal, S. J. Wright, "Numerical Optimization", розд. 3.4.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, MutableMapping, Optional

import numpy as np

from .convergence import check_convergence, compute_value
from .counters import LineSearchCounters
from .functions import ArrayLike
from .group import Group
from .interpolation import PredictorFailure, StepPredictor, clamp_step
from .merit import MeritFunction, SumOfSquares, compute_phi
from .options import RECOVERY_CONSTANT, PolynomialOptions
from .solver_context import SolverContext

logger = logging.getLogger(__name__)

STOPPED_SUFFICIENT_DECREASE = "sufficient_decrease"
STOPPED_MAX_ITERS = "max_iters"
STOPPED_MIN_STEP = "min_step"
STOPPED_PREDICTOR_FAILURE = "predictor_failure"


# ---------------------------------------------------------------------------
# Результат одного виклику line search
# ---------------------------------------------------------------------------

@dataclass
class LineSearchResult:
    """
    Результат роботи PolynomialLineSearch.compute().

    Атрибути:
        step        - прийнятий (або recovery) крок λ > 0;
        group       - стан x_old + λ d з обчисленою F (той самий об'єкт,
                      що передано як new_group);
        success     - False, якщо використано recovery-крок;
        iterations  - кількість внутрішніх ітерацій (пробних кроків);
        phi_value   - φ(λ) у поверненому стані;
        meta        - службова інформація (історія кроків, причина зупинки, ...).
    """
    step: float
    group: Group
    success: bool
    iterations: int
    phi_value: float
    meta: Dict[str, Any] = field(default_factory=dict)


class PolynomialLineSearch:
    """
    Поліноміальний line search.

    Використання:
        ls = PolynomialLineSearch({"Interpolation Type": "Quadratic"})
        res = ls.compute(trial_group, direction, solver)
        if not res.success:
            ...  # крок все одно придатний, але це recovery-крок

    Один екземпляр - на один запуск нелінійного розв'язувача; екземпляр
    містить лічильники і не призначений для одночасних викликів.
    """

    def __init__(
        self,
        params: Optional[Mapping[str, Any]] = None,
        options: Optional[PolynomialOptions] = None,
    ) -> None:
        self.counters = LineSearchCounters()
        self.reset(params, options)

    # ------------------------------------------------------------------
    # Налаштування
    # ------------------------------------------------------------------

    def reset(
        self,
        params: Optional[Mapping[str, Any]] = None,
        options: Optional[PolynomialOptions] = None,
    ) -> None:
        """
        Перечитати параметри та обнулити лічильники.

        Якщо params - змінюваний словник і "Use Counters" = True, то після
        кожного виклику compute() в params["Output"] записуються лічильники.
        """
        if options is None:
            options = PolynomialOptions.from_parameters(params)
        self._options = options
        self._params: Optional[MutableMapping[str, Any]] = (
            params if isinstance(params, MutableMapping) else None
        )
        self._merit: MeritFunction = options.merit_function or SumOfSquares()
        self.counters.reset()

    @property
    def options(self) -> PolynomialOptions:
        return self._options

    @property
    def merit_function(self) -> MeritFunction:
        return self._merit

    # ------------------------------------------------------------------
    # Головний публічний метод
    # ------------------------------------------------------------------

    def compute(
        self,
        new_group: Group,
        direction: ArrayLike,
        solver: SolverContext,
    ) -> LineSearchResult:
        """
        Знайти крок λ вздовж direction з точки solver.get_previous_solution_group().

        new_group - робочий стан, який перезаписується на кожній пробі;
        після повернення він містить x_old + λ d.

        Помилки обчислення F (GroupEvaluationError тощо) передаються викликачу.
        """
        opts = self._options
        merit = self._merit
        use_counters = opts.use_counters
        direction = np.asarray(direction, dtype=float)

        if use_counters:
            self.counters.increment_num_line_searches()

        old_group = solver.get_previous_solution_group()
        n_nonlinear_iters = int(solver.get_num_iterations())
        eta = float(solver.get_forcing_term())

        self._print_opening_remarks()

        old_phi = float(merit.compute_f(old_group))
        old_value = compute_value(opts, old_group, old_phi)
        old_slope = float(merit.compute_slope(direction, old_group))
        if old_slope >= 0.0:
            self._print_bad_slope_warning(old_slope)

        # --- Крок за замовчуванням -----------------------------------------
        n_iters = 1
        step = opts.default_step
        new_phi = compute_phi(merit, new_group, old_group, direction, step)
        new_value = compute_value(opts, new_group, new_phi)
        trials = [(step, new_phi)]

        is_converged = check_convergence(
            opts, new_value, old_value, old_slope, step, eta,
            n_iters, n_nonlinear_iters,
        )

        non_trivial = not is_converged
        if use_counters and non_trivial:
            self.counters.increment_num_non_trivial_line_searches()

        # --- Інтерполяція ---------------------------------------------------
        predictor = StepPredictor(opts.interpolation_type, old_phi, old_slope)
        is_failed = False
        stopped_by = STOPPED_SUFFICIENT_DECREASE
        last_computed_step = step

        while not is_converged and not is_failed:
            self._print_step(n_iters, step, old_phi, new_phi)

            if n_iters > opts.max_iters:
                is_failed = True
                stopped_by = STOPPED_MAX_ITERS
                break

            prev_step = step
            try:
                raw_step = predictor.next_step(step, new_phi)
            except PredictorFailure as exc:
                logger.debug("Модель кроку: %s", exc)
                is_failed = True
                stopped_by = STOPPED_PREDICTOR_FAILURE
                break

            step = clamp_step(
                raw_step, prev_step, opts.min_bounds_factor, opts.max_bounds_factor
            )
            last_computed_step = step

            if step < opts.min_step:
                is_failed = True
                stopped_by = STOPPED_MIN_STEP
                break

            new_phi = compute_phi(merit, new_group, old_group, direction, step)
            new_value = compute_value(opts, new_group, new_phi)
            trials.append((step, new_phi))
            n_iters += 1

            is_converged = check_convergence(
                opts, new_value, old_value, old_slope, step, eta,
                n_iters, n_nonlinear_iters,
            )

        # --- Recovery ---------------------------------------------------------
        if is_failed:
            if use_counters:
                self.counters.increment_num_failed_line_searches()

            if opts.recovery_step_type == RECOVERY_CONSTANT:
                step = opts.recovery_step
            else:
                step = last_computed_step

            new_phi = compute_phi(merit, new_group, old_group, direction, step)
            logger.info(
                "Лінійний пошук не вдався (%s), recovery-крок λ = %e.",
                stopped_by,
                step,
            )

        self._print_step(n_iters, step, old_phi, new_phi, final=True)

        if use_counters:
            self.counters.increment_num_iterations(n_iters)
            if self._params is not None:
                self.counters.set_values(self._params)

        meta: Dict[str, Any] = {
            "stopped_by": stopped_by,
            "interpolation_type": opts.interpolation_type,
            "sufficient_decrease_condition": opts.sufficient_decrease_condition,
            "phi0": old_phi,
            "slope0": old_slope,
            "descent_direction": old_slope < 0.0,
            "non_trivial": non_trivial,
            "trials": trials,
            "last_computed_step": last_computed_step,
            "recovery_step_type": opts.recovery_step_type if is_failed else None,
        }

        return LineSearchResult(
            step=float(step),
            group=new_group,
            success=not is_failed,
            iterations=n_iters,
            phi_value=float(new_phi),
            meta=meta,
        )

    # ------------------------------------------------------------------
    # Друк
    # ------------------------------------------------------------------

    def _print_opening_remarks(self) -> None:
        logger.debug(
            "-- Polynomial Line Search (%s, %s) --",
            self._options.interpolation_type,
            self._options.sufficient_decrease_condition,
        )

    def _print_bad_slope_warning(self, slope: float) -> None:
        logger.warning(
            "Нахил φ'(0) = %e невід'ємний: напрямок не є напрямком спуску, "
            "збіжність малоймовірна.",
            slope,
        )

    def _print_step(
        self,
        n_iters: int,
        step: float,
        old_phi: float,
        new_phi: float,
        final: bool = False,
    ) -> None:
        logger.debug(
            "%d: step = %e orig f = %e new f = %e%s",
            n_iters,
            step,
            old_phi,
            new_phi,
            " (final)" if final else "",
        )


__all__ = [
    "LineSearchResult",
    "PolynomialLineSearch",
    "STOPPED_SUFFICIENT_DECREASE",
    "STOPPED_MAX_ITERS",
    "STOPPED_MIN_STEP",
    "STOPPED_PREDICTOR_FAILURE",
]
