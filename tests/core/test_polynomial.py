import logging

import numpy as np
import pytest

from polysearch.core.counters import (
    OUTPUT_FAILED,
    OUTPUT_INNER_ITERATIONS,
    OUTPUT_NON_TRIVIAL,
    OUTPUT_TOTAL_CALLS,
)
from polysearch.core.group import GroupEvaluationError, VectorGroup
from polysearch.core.merit import UserNorm
from polysearch.core.options import INTERPOLATION_TYPES, PolynomialOptions
from polysearch.core.polynomial import (
    STOPPED_MAX_ITERS,
    STOPPED_MIN_STEP,
    STOPPED_PREDICTOR_FAILURE,
    STOPPED_SUFFICIENT_DECREASE,
    PolynomialLineSearch,
)

from conftest import StaticSolver


def decreasing(lam):
    # φ(0)=10, φ(1)=9
    return 10.0 - lam


def parabola(lam):
    # φ(0)=10, φ'(0)=-2, φ(1)=11, мінімум моделі у 1/3
    return 10.0 - 2.0 * lam + 3.0 * lam * lam


def always_worse(lam):
    # φ(λ) = 10 + λ при заявленому φ'(0) = -2: кожен крок λ_k = λ_{k-1} / 3
    return 10.0 + lam


def test_default_step_accepted_without_interpolation(run_scripted):
    result, search = run_scripted(decreasing, -2.0)

    assert result.success is True
    assert result.step == 1.0
    assert result.iterations == 1
    assert result.phi_value == 9.0
    assert result.meta["stopped_by"] == STOPPED_SUFFICIENT_DECREASE
    assert result.meta["non_trivial"] is False
    assert result.group.get_x()[0] == pytest.approx(1.0)


def test_quadratic_interpolation_scenario(run_scripted):
    result, _ = run_scripted(parabola, -2.0, {"Interpolation Type": "Quadratic"})

    assert result.success is True
    assert result.meta["trials"][0] == (1.0, 11.0)
    assert result.meta["trials"][1][0] == pytest.approx(1.0 / 3.0)
    assert result.step == pytest.approx(1.0 / 3.0)
    assert result.iterations == 2
    assert result.meta["non_trivial"] is True
    assert result.group.get_x()[0] == pytest.approx(1.0 / 3.0)


def test_force_interpolation_never_accepts_first_trial(run_scripted):
    result, _ = run_scripted(decreasing, -2.0, {"Force Interpolation": True})

    assert result.iterations >= 2
    assert result.meta["non_trivial"] is True
    assert result.step < 1.0
    assert result.success is True


def test_min_step_failure_uses_constant_recovery(run_scripted):
    params = {"Minimum Step": 0.01, "Interpolation Type": "Quadratic"}
    result, search = run_scripted(always_worse, -2.0, params)

    assert result.success is False
    assert result.meta["stopped_by"] == STOPPED_MIN_STEP
    # 1, 1/3, 1/9, 1/27, 1/81 оцінено; 1/243 < 0.01
    assert [s for s, _ in result.meta["trials"]] == pytest.approx(
        [1.0, 1 / 3, 1 / 9, 1 / 27, 1 / 81]
    )
    assert result.iterations == 5
    assert result.step == 1.0
    assert result.group.get_x()[0] == pytest.approx(1.0)
    assert result.phi_value == pytest.approx(always_worse(1.0))


def test_constant_recovery_uses_configured_value(run_scripted):
    params = {
        "Minimum Step": 0.01,
        "Interpolation Type": "Quadratic",
        "Recovery Step": 0.05,
    }
    result, _ = run_scripted(always_worse, -2.0, params)

    assert result.success is False
    assert result.step == 0.05
    assert result.group.get_x()[0] == pytest.approx(0.05)
    assert result.phi_value == pytest.approx(always_worse(0.05))


def test_last_computed_step_recovery(run_scripted):
    params = {
        "Minimum Step": 0.01,
        "Interpolation Type": "Quadratic",
        "Recovery Step Type": "Last Computed Step",
    }
    result, _ = run_scripted(always_worse, -2.0, params)

    assert result.success is False
    assert result.step == pytest.approx(1.0 / 243.0)
    assert result.meta["last_computed_step"] == pytest.approx(1.0 / 243.0)
    assert result.group.get_x()[0] == pytest.approx(1.0 / 243.0)
    assert result.phi_value == pytest.approx(always_worse(1.0 / 243.0))


def test_max_iters_failure(run_scripted):
    params = {"Max Iters": 2, "Interpolation Type": "Quadratic"}
    result, search = run_scripted(always_worse, -2.0, params)

    assert result.success is False
    assert result.meta["stopped_by"] == STOPPED_MAX_ITERS
    # не більше Max Iters + 1 пробних кроків
    assert len(result.meta["trials"]) == 3
    assert result.iterations == 3
    assert search.counters.num_iterations == 3


def test_predictor_failure_triggers_recovery(run_scripted, caplog):
    # φ'(0) > 0: квадратична модель вироджена (φ(1) - φ(0) - φ'(0) = 0)
    with caplog.at_level(logging.WARNING, logger="polysearch.core.polynomial"):
        result, search = run_scripted(
            lambda lam: 10.0 + lam, 1.0, {"Recovery Step": 0.5}
        )

    assert result.success is False
    assert result.meta["stopped_by"] == STOPPED_PREDICTOR_FAILURE
    assert result.meta["descent_direction"] is False
    assert result.step == 0.5
    assert any("невід'ємний" in rec.getMessage() for rec in caplog.records)
    assert search.counters.num_failed_line_searches == 1


def test_cubic_negative_discriminant_is_failure(run_scripted):
    # φ(λ) = 10 + λ + λ³, φ'(0) = 1: квадратичний крок обмежується до 0.1,
    # далі кубіка через λ = 0.1 і λ = 1 має a = 1, b = 0, disc = -3.
    result, _ = run_scripted(lambda lam: 10.0 + lam + lam ** 3, 1.0)

    assert result.success is False
    assert result.meta["stopped_by"] == STOPPED_PREDICTOR_FAILURE
    assert [s for s, _ in result.meta["trials"]] == pytest.approx([1.0, 0.1])
    assert result.step == 1.0


@pytest.mark.parametrize("interpolation", INTERPOLATION_TYPES)
@pytest.mark.parametrize("recovery", ["Constant", "Last Computed Step"])
@pytest.mark.parametrize(
    "phi, slope",
    [
        (decreasing, -2.0),
        (parabola, -2.0),
        (always_worse, -2.0),
        (lambda lam: 10.0 + lam, 1.0),
        (lambda lam: 10.0 * np.cos(8.0 * lam) + lam, -0.5),
    ],
)
def test_step_is_always_positive(run_scripted, interpolation, recovery, phi, slope):
    params = {
        "Interpolation Type": interpolation,
        "Recovery Step Type": recovery,
        "Minimum Step": 1e-6,
        "Max Iters": 20,
    }
    result, search = run_scripted(phi, slope, params)

    assert result.step > 0.0
    assert all(step > 0.0 for step, _ in result.meta["trials"])
    assert len(result.meta["trials"]) <= 21
    assert result.group.get_x()[0] == pytest.approx(result.step)


@pytest.mark.parametrize("interpolation", INTERPOLATION_TYPES)
def test_successive_trials_respect_bounds(run_scripted, interpolation):
    params = {
        "Interpolation Type": interpolation,
        "Min Bounds Factor": 0.2,
        "Max Bounds Factor": 0.6,
        "Minimum Step": 1e-8,
    }
    result, _ = run_scripted(lambda lam: 10.0 + 40.0 * lam ** 4, -2.0, params)

    steps = [s for s, _ in result.meta["trials"]]
    for prev, curr in zip(steps, steps[1:]):
        assert 0.2 * prev * (1 - 1e-12) <= curr <= 0.6 * prev * (1 + 1e-12)


def test_quadratic3_second_trial_is_half_default(run_scripted):
    result, _ = run_scripted(always_worse, -2.0, {"Interpolation Type": "Quadratic3"})
    assert result.meta["trials"][1][0] == pytest.approx(0.5)


def test_counters_accumulate_over_calls(run_scripted):
    params = {
        "Interpolation Type": "Quadratic",
        "Minimum Step": 0.01,
    }
    _, search = run_scripted(decreasing, -2.0, params)          # 1 ітерація
    run_scripted(parabola, -2.0, search=search)                 # 2 ітерації
    run_scripted(always_worse, -2.0, search=search)             # 5 ітерацій, невдача
    run_scripted(decreasing, -2.0, search=search)               # 1 ітерація

    counters = search.counters
    assert counters.num_line_searches == 4
    assert counters.num_non_trivial_line_searches == 2
    assert counters.num_failed_line_searches == 1
    assert counters.num_iterations == 9

    assert params["Output"] == {
        OUTPUT_TOTAL_CALLS: 4,
        OUTPUT_NON_TRIVIAL: 2,
        OUTPUT_FAILED: 1,
        OUTPUT_INNER_ITERATIONS: 9,
    }


def test_counters_disabled(run_scripted):
    params = {"Use Counters": False}
    _, search = run_scripted(parabola, -2.0, params)
    assert search.counters.num_line_searches == 0
    assert "Output" not in params


def test_reset_clears_counters(run_scripted):
    _, search = run_scripted(parabola, -2.0)
    assert search.counters.num_line_searches == 1
    search.reset({"Interpolation Type": "Quadratic3"})
    assert search.counters.num_line_searches == 0
    assert search.options.interpolation_type == "Quadratic3"


def test_construct_from_options_object():
    opts = PolynomialOptions(interpolation_type="Quadratic", max_iters=5)
    search = PolynomialLineSearch(options=opts)
    assert search.options is opts


def test_default_merit_with_real_residual():
    # F(x) = x - 2, напрямок Ньютона d = 2: повний крок - точний розв'язок
    old = VectorGroup(lambda x: x - 2.0, [0.0], lambda x: np.eye(1))
    old.compute_f()
    search = PolynomialLineSearch()
    result = search.compute(old.clone(), np.array([2.0]), StaticSolver(old))

    assert result.success is True
    assert result.step == 1.0
    assert result.meta["phi0"] == pytest.approx(2.0)
    assert result.meta["slope0"] == pytest.approx(-4.0)
    assert result.group.get_norm_f() == pytest.approx(0.0)


class HugeNorm(UserNorm):
    def norm(self, group):
        return 1e6 + group.get_norm_f()


def test_ared_pred_with_user_norm_fails_to_recovery():
    old = VectorGroup(lambda x: x - 2.0, [0.0], lambda x: np.eye(1))
    old.compute_f()
    search = PolynomialLineSearch({
        "Sufficient Decrease Condition": "Ared/Pred",
        "User Defined Norm": HugeNorm(),
        "Max Iters": 3,
        "Recovery Step": 0.5,
    })
    result = search.compute(old.clone(), np.array([2.0]), StaticSolver(old, eta=0.1))

    assert result.success is False
    assert result.step == 0.5
    assert result.group.get_x()[0] == pytest.approx(1.0)


def test_evaluation_failure_propagates():
    def residual(x):
        return np.array([np.nan]) if x[0] > 0.5 else x - 2.0

    old = VectorGroup(residual, [0.0], lambda x: np.eye(1))
    old.compute_f()
    search = PolynomialLineSearch()
    with pytest.raises(GroupEvaluationError):
        search.compute(old.clone(), np.array([2.0]), StaticSolver(old))
