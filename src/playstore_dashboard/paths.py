from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

OUTPUT_SUBDIRS = ("tables", "figures", "summary", "exports")


@dataclass(frozen=True)
class OutputPaths:
    root: Path
    tables: Path
    figures: Path
    summary: Path
    exports: Path

    def table_path(self, name: str, tables_format: str) -> Path:
        return self.tables / f"{name}.{tables_format}"

    def summary_path(self, name: str) -> Path:
        return self.summary / f"{name}.json"


def build_output_paths(out_dir: Path) -> OutputPaths:
    """Lay out one dashboard run under ``out_dir``, creating every directory."""
    paths = OutputPaths(root=out_dir, **{name: out_dir / name for name in OUTPUT_SUBDIRS})
    out_dir.mkdir(parents=True, exist_ok=True)
    for name in OUTPUT_SUBDIRS:
        getattr(paths, name).mkdir(parents=True, exist_ok=True)
    return paths
