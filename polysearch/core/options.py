"""
options.py

Налаштування поліноміального лінійного пошуку.

Ідея:
    - параметри задаються плоским словником з "людськими" назвами
      ("Default Step", "Interpolation Type", ...), як у параметрах
      нелінійного розв'язувача;
    - PolynomialOptions.from_parameters(...) один раз читає й перевіряє
      словник і повертає незмінний об'єкт налаштувань;
    - далі драйвер line search працює лише з полями цього об'єкта,
      без повторних пошуків/приведень типів.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


class LineSearchConfigError(ValueError):
    """Некоректне значення параметра лінійного пошуку."""


# ---------------------------------------------------------------------------
# Константи / "enum" для назв параметрів
# ---------------------------------------------------------------------------

INTERPOLATION_QUADRATIC = "Quadratic"
INTERPOLATION_CUBIC = "Cubic"
INTERPOLATION_QUADRATIC3 = "Quadratic3"

SUFFICIENT_DECREASE_ARMIJO_GOLDSTEIN = "Armijo-Goldstein"
SUFFICIENT_DECREASE_ARED_PRED = "Ared/Pred"
SUFFICIENT_DECREASE_NONE = "None"

RECOVERY_CONSTANT = "Constant"
RECOVERY_LAST_COMPUTED_STEP = "Last Computed Step"

INTERPOLATION_TYPES = (
    INTERPOLATION_QUADRATIC,
    INTERPOLATION_CUBIC,
    INTERPOLATION_QUADRATIC3,
)
SUFFICIENT_DECREASE_CONDITIONS = (
    SUFFICIENT_DECREASE_ARMIJO_GOLDSTEIN,
    SUFFICIENT_DECREASE_ARED_PRED,
    SUFFICIENT_DECREASE_NONE,
)
RECOVERY_STEP_TYPES = (
    RECOVERY_CONSTANT,
    RECOVERY_LAST_COMPUTED_STEP,
)

# Альтернативні написання, які теж приймаються
_RECOVERY_ALIASES = {
    "LastComputedStep": RECOVERY_LAST_COMPUTED_STEP,
}
_DECREASE_ALIASES = {
    "ArmijoGoldstein": SUFFICIENT_DECREASE_ARMIJO_GOLDSTEIN,
    "AredPred": SUFFICIENT_DECREASE_ARED_PRED,
}


@dataclass(frozen=True)
class PolynomialOptions:
    """
    Незмінні налаштування поліноміального line search.

    Атрибути (у дужках - назва параметра у словнику та значення за замовчуванням):
        default_step              ("Default Step", 1.0)   - λ_0, перша спроба;
        max_iters                 ("Max Iters", 100)      - ліміт внутрішніх ітерацій;
        min_step                  ("Minimum Step", 1e-12) - мінімально допустимий λ;
        recovery_step_type        ("Recovery Step Type", "Constant");
        recovery_step             ("Recovery Step", = default_step);
        interpolation_type        ("Interpolation Type", "Cubic");
        min_bounds_factor         ("Min Bounds Factor", 0.1) - γ_min;
        max_bounds_factor         ("Max Bounds Factor", 0.5) - γ_max;
        sufficient_decrease_condition
                                  ("Sufficient Decrease Condition", "Armijo-Goldstein");
        alpha_factor              ("Alpha Factor", 1e-4);
        force_interpolation       ("Force Interpolation", False);
        use_counters              ("Use Counters", True);
        max_increase_iter         ("Maximum Iteration for Increase", 0);
        allowed_relative_increase ("Allowed Relative Increase", 100.0);
        merit_function            ("User Defined Merit Function", None);
        user_norm                 ("User Defined Norm", None).
    """
    default_step: float = 1.0
    max_iters: int = 100
    min_step: float = 1.0e-12
    recovery_step_type: str = RECOVERY_CONSTANT
    recovery_step: Optional[float] = None
    interpolation_type: str = INTERPOLATION_CUBIC
    min_bounds_factor: float = 0.1
    max_bounds_factor: float = 0.5
    sufficient_decrease_condition: str = SUFFICIENT_DECREASE_ARMIJO_GOLDSTEIN
    alpha_factor: float = 1.0e-4
    force_interpolation: bool = False
    use_counters: bool = True
    max_increase_iter: int = 0
    allowed_relative_increase: float = 100.0
    merit_function: Any = None
    user_norm: Any = None

    def __post_init__(self) -> None:
        if self.recovery_step is None:
            object.__setattr__(self, "recovery_step", self.default_step)
        self._validate()

    # ------------------------------------------------------------------
    # Похідні значення
    # ------------------------------------------------------------------

    @property
    def allow_increase(self) -> bool:
        """Чи дозволено відносне зростання (лише при max_increase_iter > 0)."""
        return self.max_increase_iter > 0

    # ------------------------------------------------------------------
    # Побудова зі словника параметрів
    # ------------------------------------------------------------------

    @classmethod
    def from_parameters(
        cls, params: Optional[Mapping[str, Any]] = None
    ) -> "PolynomialOptions":
        """
        Прочитати та перевірити параметри з плоского словника.

        Невідомі ключі ігноруються (зокрема під-словник "Output",
        який записують лічильники).
        """
        params = params or {}

        default_step = _as_float(params, "Default Step", 1.0)
        recovery_type = _as_choice(
            params,
            "Recovery Step Type",
            RECOVERY_CONSTANT,
            RECOVERY_STEP_TYPES,
            _RECOVERY_ALIASES,
        )

        return cls(
            default_step=default_step,
            max_iters=_as_int(params, "Max Iters", 100),
            min_step=_as_float(params, "Minimum Step", 1.0e-12),
            recovery_step_type=recovery_type,
            recovery_step=_as_float(params, "Recovery Step", default_step),
            interpolation_type=_as_choice(
                params,
                "Interpolation Type",
                INTERPOLATION_CUBIC,
                INTERPOLATION_TYPES,
            ),
            min_bounds_factor=_as_float(params, "Min Bounds Factor", 0.1),
            max_bounds_factor=_as_float(params, "Max Bounds Factor", 0.5),
            sufficient_decrease_condition=_as_choice(
                params,
                "Sufficient Decrease Condition",
                SUFFICIENT_DECREASE_ARMIJO_GOLDSTEIN,
                SUFFICIENT_DECREASE_CONDITIONS,
                _DECREASE_ALIASES,
            ),
            alpha_factor=_as_float(params, "Alpha Factor", 1.0e-4),
            force_interpolation=_as_bool(params, "Force Interpolation", False),
            use_counters=_as_bool(params, "Use Counters", True),
            max_increase_iter=_as_int(params, "Maximum Iteration for Increase", 0),
            allowed_relative_increase=_as_float(
                params, "Allowed Relative Increase", 100.0
            ),
            merit_function=params.get("User Defined Merit Function"),
            user_norm=params.get("User Defined Norm"),
        )

    # ------------------------------------------------------------------
    # Перевірка
    # ------------------------------------------------------------------

    def _validate(self) -> None:
        if not self.default_step > 0.0:
            raise LineSearchConfigError(
                f"'Default Step' має бути > 0, отримано {self.default_step!r}."
            )
        if not self.recovery_step > 0.0:
            raise LineSearchConfigError(
                f"'Recovery Step' має бути > 0, отримано {self.recovery_step!r}."
            )
        if not self.min_step >= 0.0:
            raise LineSearchConfigError(
                f"'Minimum Step' має бути >= 0, отримано {self.min_step!r}."
            )
        if self.max_iters < 1:
            raise LineSearchConfigError(
                f"'Max Iters' має бути >= 1, отримано {self.max_iters!r}."
            )
        if not self.min_bounds_factor > 0.0:
            raise LineSearchConfigError(
                "'Min Bounds Factor' має бути > 0, "
                f"отримано {self.min_bounds_factor!r}."
            )
        if self.min_bounds_factor > self.max_bounds_factor:
            raise LineSearchConfigError(
                "'Min Bounds Factor' не може перевищувати 'Max Bounds Factor' "
                f"({self.min_bounds_factor!r} > {self.max_bounds_factor!r})."
            )
        if not 0.0 < self.alpha_factor < 1.0:
            raise LineSearchConfigError(
                f"'Alpha Factor' має лежати в (0, 1), отримано {self.alpha_factor!r}."
            )
        if not self.allowed_relative_increase > 0.0:
            raise LineSearchConfigError(
                "'Allowed Relative Increase' має бути > 0, "
                f"отримано {self.allowed_relative_increase!r}."
            )
        if self.max_increase_iter < 0:
            raise LineSearchConfigError(
                "'Maximum Iteration for Increase' має бути >= 0, "
                f"отримано {self.max_increase_iter!r}."
            )
        if self.interpolation_type not in INTERPOLATION_TYPES:
            raise LineSearchConfigError(
                f"Невідомий 'Interpolation Type': {self.interpolation_type!r}."
            )
        if self.sufficient_decrease_condition not in SUFFICIENT_DECREASE_CONDITIONS:
            raise LineSearchConfigError(
                "Невідома 'Sufficient Decrease Condition': "
                f"{self.sufficient_decrease_condition!r}."
            )
        if self.recovery_step_type not in RECOVERY_STEP_TYPES:
            raise LineSearchConfigError(
                f"Невідомий 'Recovery Step Type': {self.recovery_step_type!r}."
            )
        if self.merit_function is not None:
            for attr in ("compute_f", "compute_slope"):
                if not callable(getattr(self.merit_function, attr, None)):
                    raise LineSearchConfigError(
                        "'User Defined Merit Function' повинна мати метод "
                        f"{attr}()."
                    )
        if self.user_norm is not None and not callable(
            getattr(self.user_norm, "norm", None)
        ):
            raise LineSearchConfigError(
                "'User Defined Norm' повинна мати метод norm()."
            )


# ---------------------------------------------------------------------------
# Допоміжні функції читання параметрів
# ---------------------------------------------------------------------------

def _as_float(params: Mapping[str, Any], key: str, default: float) -> float:
    value = params.get(key, default)
    if isinstance(value, bool):
        raise LineSearchConfigError(f"'{key}' має бути числом, отримано {value!r}.")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise LineSearchConfigError(
            f"'{key}' має бути числом, отримано {value!r}."
        ) from exc


def _as_int(params: Mapping[str, Any], key: str, default: int) -> int:
    value = params.get(key, default)
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise LineSearchConfigError(
            f"'{key}' має бути цілим числом, отримано {value!r}."
        )
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise LineSearchConfigError(
            f"'{key}' має бути цілим числом, отримано {value!r}."
        ) from exc


def _as_bool(params: Mapping[str, Any], key: str, default: bool) -> bool:
    value = params.get(key, default)
    if not isinstance(value, bool):
        raise LineSearchConfigError(
            f"'{key}' має бути bool, отримано {value!r}."
        )
    return value


def _as_choice(
    params: Mapping[str, Any],
    key: str,
    default: str,
    choices: tuple,
    aliases: Optional[Mapping[str, str]] = None,
) -> str:
    value = params.get(key, default)
    if aliases and value in aliases:
        value = aliases[value]
    if value not in choices:
        raise LineSearchConfigError(
            f"Невідоме значення '{key}': {value!r}. "
            f"Допустимі: {', '.join(choices)}."
        )
    return value


__all__ = [
    "LineSearchConfigError",
    "PolynomialOptions",
    "INTERPOLATION_QUADRATIC",
    "INTERPOLATION_CUBIC",
    "INTERPOLATION_QUADRATIC3",
    "INTERPOLATION_TYPES",
    "SUFFICIENT_DECREASE_ARMIJO_GOLDSTEIN",
    "SUFFICIENT_DECREASE_ARED_PRED",
    "SUFFICIENT_DECREASE_NONE",
    "SUFFICIENT_DECREASE_CONDITIONS",
    "RECOVERY_CONSTANT",
    "RECOVERY_LAST_COMPUTED_STEP",
    "RECOVERY_STEP_TYPES",
]
