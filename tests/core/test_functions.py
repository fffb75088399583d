import numpy as np
import pytest

from polysearch.core.functions import SYSTEMS, numerical_jacobian


@pytest.mark.parametrize("key", sorted(SYSTEMS))
def test_analytic_jacobian_matches_numerical(key):
    system = SYSTEMS[key]
    x0 = np.asarray(system.x0, dtype=float)
    np.testing.assert_allclose(
        system.jacobian(x0),
        numerical_jacobian(system.residual, x0),
        rtol=1e-5,
        atol=1e-5,
    )


@pytest.mark.parametrize(
    "key", sorted(k for k, s in SYSTEMS.items() if s.solution is not None)
)
def test_solution_is_root(key):
    system = SYSTEMS[key]
    f = system.residual(np.asarray(system.solution, dtype=float))
    np.testing.assert_allclose(f, 0.0, atol=1e-10)
