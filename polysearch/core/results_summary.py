"""
results_summary.py

Зведена таблиця результатів кількох запусків розв'язувача
(наприклад, одна система з різними типами інтерполяції).

Працює поверх об'єктів, які мають інтерфейс як SolverRunResult:
    - method_name
    - x_star
    - norm_f
    - n_iter
    - converged
    - stopped_by
    - failed_line_searches
    - line_search_counters
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from .counters import OUTPUT_INNER_ITERATIONS, OUTPUT_NON_TRIVIAL


@dataclass
class ResultsSummary:
    """
    Зведення результатів кількох запусків.

    Приклад використання:
        summary = ResultsSummary()
        summary.add_run(run_cubic)
        summary.add_run(run_quadratic)
        rows = summary.as_rows()  # для pandas / CSV
    """
    runs: List[Any] = field(default_factory=list)

    def add_run(self, run: Any) -> None:
        """Додати результат одного запуску до зведення."""
        self.runs.append(run)

    # ------------------------------------------------------------------
    # Перетворення в "табличний" вигляд
    # ------------------------------------------------------------------

    def as_rows(self) -> List[Dict[str, Any]]:
        """
        Повернути список dict-рядків.

        Поля рядка:
            - method
            - x_star
            - norm_f
            - n_iter
            - converged
            - stopped_by
            - failed_line_searches
            - non_trivial_line_searches
            - line_search_inner_iterations
        """
        rows: List[Dict[str, Any]] = []

        for run in self.runs:
            x_star = getattr(run, "x_star", None)
            norm_f = getattr(run, "norm_f", None)
            n_iter = getattr(run, "n_iter", None)
            counters = getattr(run, "line_search_counters", None) or {}

            if isinstance(x_star, np.ndarray):
                x_star = x_star.tolist()

            rows.append(
                {
                    "method": getattr(run, "method_name", "<unknown>"),
                    "x_star": x_star,
                    "norm_f": float(norm_f) if norm_f is not None else None,
                    "n_iter": int(n_iter) if n_iter is not None else None,
                    "converged": getattr(run, "converged", None),
                    "stopped_by": getattr(run, "stopped_by", None),
                    "failed_line_searches": getattr(run, "failed_line_searches", None),
                    "non_trivial_line_searches": counters.get(OUTPUT_NON_TRIVIAL),
                    "line_search_inner_iterations": counters.get(OUTPUT_INNER_ITERATIONS),
                }
            )

        return rows

    # ------------------------------------------------------------------
    # Вибір "найкращого" запуску
    # ------------------------------------------------------------------

    def best_by_norm(self) -> Optional[Any]:
        """
        Повернути run з найменшою ‖F(x_star)‖.
        Якщо список порожній або norm_f не визначені — повертає None.
        """
        best_run = None
        best_norm = None

        for run in self.runs:
            norm_f = getattr(run, "norm_f", None)
            if norm_f is None:
                continue
            value = float(norm_f)
            if best_norm is None or value < best_norm:
                best_norm = value
                best_run = run

        return best_run

    # ------------------------------------------------------------------
    # pandas.DataFrame
    # ------------------------------------------------------------------

    def to_dataframe(self):
        """Повернути pandas.DataFrame зі зведеною таблицею."""
        import pandas as pd

        return pd.DataFrame(self.as_rows())


__all__ = ["ResultsSummary"]
