"""
iteration_result.py

Структура даних для представлення результатів окремих нелінійних ітерацій.
Використовується як у движку, так і в графіках (ui/plot_view.py).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

import numpy as np


@dataclass
class IterationResult:
    """
    Опис однієї ітерації.

    Атрибути:
        index      - номер ітерації (0, 1, 2, ...)
        x          - значення вектора змінних x_k
        norm_f     - ‖F(x_k)‖
        phi        - значення функції якості у x_k
        step_norm  - норма кроку ‖x_k - x_{k-1}‖ (для k=0 = 0.0)
        meta       - довільна додаткова інформація (λ, line search, ...)
    """
    index: int
    x: np.ndarray
    norm_f: float
    phi: float
    step_norm: float
    meta: Dict[str, Any] = field(default_factory=dict)


__all__ = [
    "IterationResult",
]
