"""
polysearch

Поліноміальний лінійний пошук (quadratic / cubic / quadratic3) для
ньютонівських розв'язувачів нелінійних систем.
"""

import logging

from .core.options import LineSearchConfigError, PolynomialOptions
from .core.polynomial import LineSearchResult, PolynomialLineSearch

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "LineSearchConfigError",
    "LineSearchResult",
    "PolynomialLineSearch",
    "PolynomialOptions",
]
