"""
counters.py

Лічильники викликів лінійного пошуку.

Лічильники належать одному екземпляру line search і змінюються лише в
PolynomialLineSearch.compute(). Викликач може прочитати їх (as_dict)
або записати під-словник "Output" у свій словник параметрів (set_values).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, MutableMapping

OUTPUT_TOTAL_CALLS = "Total Number of Line Search Calls"
OUTPUT_NON_TRIVIAL = "Total Number of Non-trivial Line Searches"
OUTPUT_FAILED = "Total Number of Failed Line Searches"
OUTPUT_INNER_ITERATIONS = "Total Number of Line Search Inner Iterations"


@dataclass
class LineSearchCounters:
    """
    Атрибути:
        num_line_searches             - всього викликів compute();
        num_non_trivial_line_searches - викликів, де крок за замовчуванням
                                        не прийнято (була інтерполяція);
        num_failed_line_searches      - викликів, що завершились recovery-кроком;
        num_iterations                - сума внутрішніх ітерацій усіх викликів.
    """
    num_line_searches: int = 0
    num_non_trivial_line_searches: int = 0
    num_failed_line_searches: int = 0
    num_iterations: int = 0

    def reset(self) -> None:
        self.num_line_searches = 0
        self.num_non_trivial_line_searches = 0
        self.num_failed_line_searches = 0
        self.num_iterations = 0

    def increment_num_line_searches(self, n: int = 1) -> None:
        self.num_line_searches += n

    def increment_num_non_trivial_line_searches(self, n: int = 1) -> None:
        self.num_non_trivial_line_searches += n

    def increment_num_failed_line_searches(self, n: int = 1) -> None:
        self.num_failed_line_searches += n

    def increment_num_iterations(self, n: int = 1) -> None:
        self.num_iterations += n

    def as_dict(self) -> Dict[str, int]:
        return {
            OUTPUT_TOTAL_CALLS: self.num_line_searches,
            OUTPUT_NON_TRIVIAL: self.num_non_trivial_line_searches,
            OUTPUT_FAILED: self.num_failed_line_searches,
            OUTPUT_INNER_ITERATIONS: self.num_iterations,
        }

    def set_values(self, params: MutableMapping[str, Any]) -> None:
        """Записати поточні значення у params["Output"]."""
        output = params.setdefault("Output", {})
        output.update(self.as_dict())


__all__ = [
    "LineSearchCounters",
    "OUTPUT_TOTAL_CALLS",
    "OUTPUT_NON_TRIVIAL",
    "OUTPUT_FAILED",
    "OUTPUT_INNER_ITERATIONS",
]
