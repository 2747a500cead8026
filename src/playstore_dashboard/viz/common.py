from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt

DPI = 100


def new_figure(width_px: int, height_px: int) -> None:
    plt.figure(figsize=(width_px / DPI, height_px / DPI), dpi=DPI)


def save_figure(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(path, dpi=DPI)
    plt.close()
    return path
