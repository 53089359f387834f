# cloudlayout/core/reporting.py
"""
Create reports/<run_name>/ and write layout.json (placements + metrics) and run_metadata.json.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from cloudlayout.core.config import (
    GLYPH_MARGIN_PX,
    LINE_HEIGHT_RATIO,
    MASK_FIT_RATIO,
    REPORTS_DIR,
    SHRINK_FACTOR,
    SPIRAL_POINTS_PER_RING,
)
from cloudlayout.core.types import LayoutConfig, LayoutSummary, PlacedItem

SCHEMA_VERSION = "1.0"


def placed_item_to_dict(item: PlacedItem) -> dict:
    return {
        "text": item.text,
        "weight": item.weight,
        "font_size": item.font_size,
        "color": item.color,
        "rotation_deg": item.rotation,
        "top_left": {"x": float(item.x), "y": float(item.y)},
        "size": {"width": float(item.width), "height": float(item.height)},
        "center": {"x": float(item.center_x), "y": float(item.center_y)},
        "cell_count": len(item.cells),
    }


def config_to_dict(config: LayoutConfig) -> dict:
    """Serializable config snapshot (callbacks omitted)."""
    return {
        "width": config.width,
        "height": config.height,
        "min_font_size": config.min_font_size,
        "max_font_size": config.max_font_size,
        "font_family": config.font_family,
        "font_weight": config.font_weight,
        "colors": list(config.colors),
        "rotate": config.rotate,
        "rotate_angles": list(config.rotate_angles),
        "grid_size": config.grid_size,
        "mask_shape": config.mask_shape,
        "mask_size": config.mask_size,
        "shrink_to_fit": config.shrink_to_fit,
        "max_shrink_attempts": config.max_shrink_attempts,
        "background_color": config.background_color,
        "seed": config.seed,
    }


def layout_to_dict(summary: LayoutSummary, config: LayoutConfig, warnings: list[str] | None = None) -> dict:
    """Exact structure for layout.json."""
    ngx, ngy = config.grid_dims
    occupied_cells = sum(len(p.cells) for p in summary.placed)
    return {
        "schema_version": SCHEMA_VERSION,
        "surface": {"width": config.width, "height": config.height, "grid_size": config.grid_size},
        "config": config_to_dict(config),
        "placements": [placed_item_to_dict(p) for p in summary.placed],
        "dropped": [{"text": w.text, "weight": w.weight} for w in summary.dropped],
        "metrics": {
            "n_items": summary.n_items,
            "placed_count": summary.placed_count,
            "dropped_count": summary.dropped_count,
            "occupied_cell_ratio": occupied_cells / max(1, ngx * ngy),
        },
        "warnings": list(warnings or []),
    }


def run_metadata_dict(
    run_name: str,
    words_source: str,
    config: LayoutConfig,
) -> dict:
    """Timestamp and config snapshot for run_metadata.json."""
    return {
        "run_name": run_name,
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "words_source": words_source,
        "seed": config.seed,
        "config": {
            "SHRINK_FACTOR": SHRINK_FACTOR,
            "GLYPH_MARGIN_PX": GLYPH_MARGIN_PX,
            "LINE_HEIGHT_RATIO": LINE_HEIGHT_RATIO,
            "MASK_FIT_RATIO": MASK_FIT_RATIO,
            "SPIRAL_POINTS_PER_RING": SPIRAL_POINTS_PER_RING,
            "layout": config_to_dict(config),
        },
    }


def ensure_report_dir(
    repo_root: Path,
    run_name: str,
    output_dir: str | None = None,
) -> Path:
    """Create output_dir/<run_name>/ under repo_root; return path. Default output_dir from config."""
    base = output_dir if output_dir is not None else REPORTS_DIR
    out = (repo_root / base).resolve() / run_name
    out.mkdir(parents=True, exist_ok=True)
    return out


def write_layout_json(
    report_dir: Path,
    summary: LayoutSummary,
    config: LayoutConfig,
    warnings: list[str] | None = None,
) -> Path:
    """Write layout.json to report_dir. Returns path to file."""
    path = report_dir / "layout.json"
    data = layout_to_dict(summary, config, warnings)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def write_run_metadata_json(
    report_dir: Path,
    run_name: str,
    words_source: str,
    config: LayoutConfig,
) -> Path:
    """Write run_metadata.json to report_dir."""
    path = report_dir / "run_metadata.json"
    data = run_metadata_dict(run_name, words_source, config)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path
