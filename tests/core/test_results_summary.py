import numpy as np

from polysearch.core.counters import OUTPUT_INNER_ITERATIONS, OUTPUT_NON_TRIVIAL
from polysearch.core.engine import SolverRunResult
from polysearch.core.results_summary import ResultsSummary


def make_run(name, norm_f, n_iter=3):
    return SolverRunResult(
        method_name=name,
        iterations=[],
        x_star=np.array([1.0, 1.0]),
        norm_f=norm_f,
        n_iter=n_iter,
        converged=norm_f <= 1e-10,
        stopped_by="norm_f" if norm_f <= 1e-10 else "max_iter",
        failed_line_searches=0,
        line_search_counters={OUTPUT_NON_TRIVIAL: 2, OUTPUT_INNER_ITERATIONS: 7},
    )


def test_as_rows():
    summary = ResultsSummary()
    summary.add_run(make_run("cubic", 1e-12))

    (row,) = summary.as_rows()
    assert row["method"] == "cubic"
    assert row["x_star"] == [1.0, 1.0]
    assert row["converged"] is True
    assert row["non_trivial_line_searches"] == 2
    assert row["line_search_inner_iterations"] == 7


def test_best_by_norm():
    summary = ResultsSummary()
    assert summary.best_by_norm() is None

    summary.add_run(make_run("quadratic", 1e-3))
    best = make_run("cubic", 1e-12)
    summary.add_run(best)
    summary.add_run(make_run("quadratic3", 1e-6))
    assert summary.best_by_norm() is best


def test_to_dataframe():
    summary = ResultsSummary([make_run("a", 1.0), make_run("b", 1e-12)])
    df = summary.to_dataframe()

    assert list(df["method"]) == ["a", "b"]
    assert {"norm_f", "n_iter", "stopped_by", "failed_line_searches"} <= set(df.columns)
