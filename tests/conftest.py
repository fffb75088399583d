"""Спільні фікстури: скриптована функція якості та статичний контекст розв'язувача."""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from polysearch.core.group import VectorGroup
from polysearch.core.merit import MeritFunction
from polysearch.core.polynomial import PolynomialLineSearch
from polysearch.core.solver_context import SolverContext


class ScriptedMerit(MeritFunction):
    """
    φ задається як функція кроку: група одновимірна, x_old = 0, d = 1,
    тому x_new = λ.
    """

    name = "scripted"

    def __init__(self, phi, slope: float) -> None:
        self.phi = phi
        self.slope = slope
        self.evaluated_steps = []

    def compute_f(self, group) -> float:
        step = float(group.get_x()[0])
        self.evaluated_steps.append(step)
        return float(self.phi(step))

    def compute_slope(self, direction, group) -> float:
        return self.slope


class StaticSolver(SolverContext):
    def __init__(self, group, n_iterations: int = 0, eta: float = 0.0) -> None:
        self.group = group
        self.n_iterations = n_iterations
        self.eta = eta

    def get_previous_solution_group(self):
        return self.group

    def get_num_iterations(self) -> int:
        return self.n_iterations

    def get_forcing_term(self) -> float:
        return self.eta


def origin_group() -> VectorGroup:
    group = VectorGroup(lambda x: x, [0.0])
    group.compute_f()
    return group


@pytest.fixture
def run_scripted():
    """
    run_scripted(phi, slope, params=None, n_iterations=0, search=None)
        -> (LineSearchResult, PolynomialLineSearch)
    """

    def _run(phi, slope, params=None, n_iterations=0, search=None):
        if search is None:
            params = {} if params is None else params
            params["User Defined Merit Function"] = ScriptedMerit(phi, slope)
            search = PolynomialLineSearch(params)
        else:
            search.merit_function.phi = phi
            search.merit_function.slope = slope
        old = origin_group()
        solver = StaticSolver(old, n_iterations=n_iterations)
        result = search.compute(old.clone(), np.array([1.0]), solver)
        return result, search

    return _run
