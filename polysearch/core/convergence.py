"""
convergence.py

Критерій прийняття пробного кроку λ.

Порядок перевірок (перша, що спрацювала, визначає результат):
    1) "Force Interpolation" і nIters == 1  -> крок відхилено;
    2) відносне зростання: якщо дозволено (max_increase_iter > 0),
       nNonlinearIters <= max_increase_iter і newValue / oldValue
       менше за "Allowed Relative Increase" -> крок прийнято;
    3) умова достатнього спадання:
       - Armijo-Goldstein : φ(λ) <= φ(0) + α λ φ'(0);
       - Ared/Pred        : ‖F(x_old + λ d)‖ <= ‖F(x_old)‖ (1 - α (1 - η));
       - None             : завжди прийнято.
"""

from __future__ import annotations

from .group import Group
from .options import (
    PolynomialOptions,
    SUFFICIENT_DECREASE_ARED_PRED,
    SUFFICIENT_DECREASE_ARMIJO_GOLDSTEIN,
)


def compute_value(options: PolynomialOptions, group: Group, phi: float) -> float:
    """
    Величина, яку порівнює критерій спадання.

    Для Ared/Pred - норма нев'язки (або користувацька норма),
    для інших умов - саме φ.
    """
    if options.sufficient_decrease_condition == SUFFICIENT_DECREASE_ARED_PRED:
        if options.user_norm is not None:
            return float(options.user_norm.norm(group))
        return group.get_norm_f()
    return float(phi)


def check_convergence(
    options: PolynomialOptions,
    new_value: float,
    old_value: float,
    old_slope: float,
    step: float,
    eta: float,
    n_iters: int,
    n_nonlinear_iters: int,
) -> bool:
    """Повертає True, якщо пробний крок приймається."""
    if options.force_interpolation and n_iters == 1:
        return False

    if (
        options.allow_increase
        and n_nonlinear_iters <= options.max_increase_iter
        and old_value != 0.0
    ):
        relative_increase = new_value / old_value
        if relative_increase < options.allowed_relative_increase:
            return True

    alpha = options.alpha_factor
    condition = options.sufficient_decrease_condition

    if condition == SUFFICIENT_DECREASE_ARMIJO_GOLDSTEIN:
        return new_value <= old_value + alpha * step * old_slope

    if condition == SUFFICIENT_DECREASE_ARED_PRED:
        return new_value <= old_value * (1.0 - alpha * (1.0 - eta))

    # SUFFICIENT_DECREASE_NONE
    return True


__all__ = [
    "compute_value",
    "check_convergence",
]
