"""Чисельне ядро: групи, функція якості, моделі кроку, line search, Ньютон."""
