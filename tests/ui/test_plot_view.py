import numpy as np

from polysearch.core.engine import SolverEngine
from polysearch.core.functions import SYSTEMS
from polysearch.core.iteration_result import IterationResult
from polysearch.core.newton import NewtonSolver
from polysearch.ui.plot_view import PlotView


def rosenbrock_run():
    system = SYSTEMS["rosenbrock"]
    solver = NewtonSolver(system.residual, system.jacobian)
    captured = []
    original = solver.line_search.compute

    def compute(*args, **kwargs):
        result = original(*args, **kwargs)
        captured.append(result)
        return result

    solver.line_search.compute = compute
    run = SolverEngine().run(solver, system.x0)
    return run, captured


def test_plot_and_save(tmp_path):
    run, results = rosenbrock_run()
    view = PlotView()
    view.plot_norm_history(run.iterations)
    view.plot_line_search(results[0], alpha=1e-4)

    assert len(view.ax_norm.lines) == 1
    assert len(view.ax_line_search.collections) >= 2

    path = tmp_path / "run.png"
    view.save(str(path))
    assert path.exists() and path.stat().st_size > 0


def test_recovery_iterations_are_marked():
    iterations = [
        IterationResult(0, np.zeros(1), 1.0, 0.5, 0.0, {"initial": True}),
        IterationResult(1, np.zeros(1), 0.9, 0.405, 0.1, {"line_search_success": False}),
        IterationResult(2, np.zeros(1), 0.0, 0.0, 0.1, {"line_search_success": True}),
    ]
    view = PlotView()
    view.plot_norm_history(iterations)

    assert view.ax_norm.get_legend() is not None
    # нульова норма: лінійна шкала
    assert view.ax_norm.get_yscale() == "linear"


def test_positive_norms_use_log_scale():
    iterations = [
        IterationResult(k, np.zeros(1), 10.0 ** -k, 0.0, 0.0, {}) for k in range(4)
    ]
    view = PlotView()
    view.plot_norm_history(iterations)
    assert view.ax_norm.get_yscale() == "log"


def test_empty_history_and_placeholder():
    view = PlotView()
    view.plot_norm_history([])
    view.show_placeholder()
    assert view.ax_norm.get_title() == "‖F(x_k)‖"
