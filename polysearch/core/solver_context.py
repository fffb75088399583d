"""
solver_context.py

Те, що line search читає із зовнішнього нелінійного розв'язувача.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .group import Group


class SolverContext(ABC):
    """
    Інтерфейс зовнішнього розв'язувача (лише читання).

    get_previous_solution_group() - стан x_old, з якого робиться крок;
    get_num_iterations()          - кількість виконаних нелінійних ітерацій;
    get_forcing_term()            - η останнього обчислення напрямку
                                    (потрібен лише для Ared/Pred).
    """

    @abstractmethod
    def get_previous_solution_group(self) -> Group:
        raise NotImplementedError

    @abstractmethod
    def get_num_iterations(self) -> int:
        raise NotImplementedError

    def get_forcing_term(self) -> float:
        return 0.0


__all__ = ["SolverContext"]
