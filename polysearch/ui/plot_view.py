"""
Графіки процесу розв'язання в компактному темному стилі.

Два графіки на одній фігурі:
    - ‖F(x_k)‖ по нелінійних ітераціях (логарифмічна шкала);
    - пробні точки (λ, φ(λ)) одного виклику лінійного пошуку,
      пряма Арміхо φ(0) + α λ φ'(0) та прийнятий крок.

Фігура будується через matplotlib.figure.Figure без pyplot,
тому працює і без графічного середовища.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np
from matplotlib.figure import Figure

from polysearch.core.iteration_result import IterationResult
from polysearch.core.polynomial import LineSearchResult

_CANVAS_BG = "#1f232b"
_ACCENT = "#4fa3ff"
_ACCEPTED = "#6fd08c"
_FAILED = "#ff6b6b"
_TEXT = "#e6e6e6"
_MUTED = "#8a8f98"


def _style_axes(ax) -> None:
    ax.set_facecolor(_CANVAS_BG)
    ax.tick_params(colors=_MUTED)
    for spine in ax.spines.values():
        spine.set_color(_MUTED)
    ax.title.set_color(_TEXT)
    ax.xaxis.label.set_color(_TEXT)
    ax.yaxis.label.set_color(_TEXT)
    ax.grid(True, color=_MUTED, alpha=0.25)


class PlotView:
    """
    Дві панелі: "norm" (‖F‖ по ітераціях) і "line_search" (φ(λ)).

    Використання:
        view = PlotView()
        view.plot_norm_history(run.iterations)
        view.plot_line_search(ls_result, alpha=1e-4)
        view.save("run.png")
    """

    def __init__(self, figsize: Sequence[float] = (10.0, 4.0)) -> None:
        self.figure = Figure(figsize=tuple(figsize), facecolor=_CANVAS_BG)
        self.ax_norm = self.figure.add_subplot(1, 2, 1)
        self.ax_line_search = self.figure.add_subplot(1, 2, 2)
        self.show_placeholder()

    def show_placeholder(self) -> None:
        for ax, title in (
            (self.ax_norm, "‖F(x_k)‖"),
            (self.ax_line_search, "φ(λ)"),
        ):
            ax.clear()
            _style_axes(ax)
            ax.set_title(title)
            ax.text(
                0.5, 0.5, "немає даних",
                ha="center", va="center", color=_MUTED,
                transform=ax.transAxes,
            )

    # ------------------------------------------------------------------
    # ‖F‖ по ітераціях
    # ------------------------------------------------------------------

    def plot_norm_history(self, iterations: List[IterationResult]) -> None:
        ax = self.ax_norm
        ax.clear()
        _style_axes(ax)
        ax.set_title("‖F(x_k)‖")
        ax.set_xlabel("k")

        if not iterations:
            return

        ks = [rec.index for rec in iterations]
        norms = np.array([rec.norm_f for rec in iterations], dtype=float)
        ax.plot(ks, norms, color=_ACCENT, marker="o", markersize=3, linewidth=1.2)

        # Ітерації з recovery-кроком
        failed = [
            (rec.index, rec.norm_f)
            for rec in iterations
            if rec.meta.get("line_search_success") is False
        ]
        if failed:
            fx, fy = zip(*failed)
            ax.scatter(fx, fy, color=_FAILED, zorder=3, label="recovery")
            ax.legend(facecolor=_CANVAS_BG, labelcolor=_TEXT)

        if np.all(norms > 0.0):
            ax.set_yscale("log")

    # ------------------------------------------------------------------
    # Один виклик line search
    # ------------------------------------------------------------------

    def plot_line_search(
        self,
        result: LineSearchResult,
        alpha: Optional[float] = None,
    ) -> None:
        ax = self.ax_line_search
        ax.clear()
        _style_axes(ax)
        ax.set_title(f"φ(λ), {result.meta.get('interpolation_type', '')}")
        ax.set_xlabel("λ")

        trials = result.meta.get("trials", [])
        phi0 = result.meta.get("phi0")
        slope0 = result.meta.get("slope0")

        if trials:
            steps, phis = zip(*trials)
            ax.scatter(steps, phis, color=_ACCENT, zorder=2, label="спроби")
            for i, (s, p) in enumerate(trials):
                ax.annotate(str(i), (s, p), color=_MUTED, fontsize=7)
            lam_max = max(max(steps), result.step)
        else:
            lam_max = result.step

        if phi0 is not None:
            ax.scatter([0.0], [phi0], color=_TEXT, zorder=2, label="φ(0)")
            if alpha is not None and slope0 is not None:
                grid = np.linspace(0.0, lam_max, 50)
                ax.plot(
                    grid, phi0 + alpha * grid * slope0,
                    color=_MUTED, linestyle="--", linewidth=1.0, label="Арміхо",
                )

        color = _ACCEPTED if result.success else _FAILED
        ax.scatter(
            [result.step], [result.phi_value],
            color=color, marker="*", s=120, zorder=3,
            label="прийнято" if result.success else "recovery",
        )
        ax.legend(facecolor=_CANVAS_BG, labelcolor=_TEXT)

    def save(self, path: str, dpi: int = 120) -> None:
        self.figure.savefig(path, dpi=dpi, facecolor=self.figure.get_facecolor())


__all__ = ["PlotView"]
