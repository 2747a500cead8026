from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from playstore_dashboard.charts.base import ChartResult
from playstore_dashboard.config import ChartColorsConfig, ChartsConfig
from playstore_dashboard.viz.common import new_figure, save_figure

LOGGER = logging.getLogger(__name__)


def _color(colors: ChartColorsConfig, key: str | None) -> str:
    return getattr(colors, key or "primary", colors.primary)


def _annotate_bars(bars, labels: Sequence[str], horizontal: bool) -> None:
    for bar, label in zip(bars, labels):
        if horizontal:
            plt.text(bar.get_width(), bar.get_y() + bar.get_height() / 2, f" {label}", va="center")
        else:
            plt.text(
                bar.get_x() + bar.get_width() / 2,
                bar.get_height(),
                label,
                ha="center",
                va="bottom",
            )


def render_chart(
    result: ChartResult,
    output_path: Path,
    colors: ChartColorsConfig | None = None,
    width_px: int = 1280,
    height_px: int = 360,
) -> Path | None:
    """Draw an ``ok`` chart result to ``output_path``; other statuses draw nothing."""
    if not result.ok or result.data.empty:
        return None

    palette = colors or ChartColorsConfig()
    layout = result.layout
    data = result.data
    kind = layout.get("kind", "bar")
    color = _color(palette, layout.get("color"))
    labels = data[layout["text"]].astype(str).tolist() if layout.get("text") else None

    new_figure(width_px, height_px)
    if kind == "barh":
        bars = plt.barh(data[layout["y"]].astype(str), data[layout["x"]], color=color)
        if labels:
            _annotate_bars(bars, labels, horizontal=True)
    elif kind == "bar":
        x = np.arange(len(data), dtype=float)
        bars = plt.bar(x, data[layout["y"]], color=color)
        plt.xticks(x, data[layout["x"]].astype(str).tolist(), rotation=45, ha="right")
        if labels:
            _annotate_bars(bars, labels, horizontal=False)
    elif kind == "area":
        plt.plot(data[layout["x"]], data[layout["y"]], marker="o", color=color)
        plt.fill_between(data[layout["x"]], data[layout["y"]], color=color, alpha=0.3)
    elif kind == "scatter_trend":
        plt.scatter(data[layout["x"]], data[layout["y"]], s=12, alpha=0.7, color=color)
        plt.plot(
            layout["trend_x"],
            layout["trend_y"],
            color=_color(palette, layout.get("trend_color")),
            linewidth=2,
        )
        if layout.get("annotation"):
            plt.annotate(layout["annotation"], xy=(0.02, 0.95), xycoords="axes fraction")
    else:
        plt.close()
        raise ValueError(f"Unsupported chart kind: {kind}")

    if layout.get("x_scale"):
        plt.xscale(layout["x_scale"])
    if layout.get("y_scale"):
        plt.yscale(layout["y_scale"])
    plt.title(result.title)
    plt.xlabel(layout.get("x_title", ""))
    plt.ylabel(layout.get("y_title", ""))
    return save_figure(output_path)


def render_all_charts(
    results: Sequence[ChartResult],
    figures_dir: Path,
    config: ChartsConfig | None = None,
    figures_format: str = "png",
    sleep: Callable[[float], None] = time.sleep,
) -> dict[str, Path]:
    """Render each drawable chart, pausing ``render_delay_ms`` between figures."""
    charts_config = config or ChartsConfig()
    delay_seconds = charts_config.render_delay_ms / 1000.0
    written: dict[str, Path] = {}
    for index, result in enumerate(results):
        if index and delay_seconds:
            sleep(delay_seconds)
        try:
            path = render_chart(
                result,
                figures_dir / f"{result.chart}.{figures_format}",
                colors=charts_config.colors,
                width_px=charts_config.width_px,
                height_px=charts_config.default_height_px,
            )
        except Exception:  # pragma: no cover
            plt.close("all")
            LOGGER.exception("Failed rendering chart %s", result.chart)
            continue
        if path is not None:
            written[result.chart] = path
    return written
