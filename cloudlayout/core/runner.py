# cloudlayout/core/runner.py
"""
CLI entrypoint: load words, run the layout, export the image, write debug overlay and reports.
Example: python -m cloudlayout.core.runner --words "python:10,data:6,cloud:3" --mask heart
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from cloudlayout.core.config import (
    DEFAULT_EXPORT_FORMAT,
    DEFAULT_FONT_FAMILY,
    DEFAULT_GRID_SIZE,
    DEFAULT_HEIGHT_PX,
    DEFAULT_MASK_SIZE,
    DEFAULT_MAX_FONT_SIZE,
    DEFAULT_MIN_FONT_SIZE,
    DEFAULT_WIDTH_PX,
    LOG_LEVEL,
    REPORTS_DIR,
    SEED,
)
from cloudlayout.core.engine import WordCloudEngine
from cloudlayout.core.error_codes import NO_DATA, RUN_FAILED, user_message
from cloudlayout.core.io import load_words, parse_words_text
from cloudlayout.core.render import render_debug
from cloudlayout.core.reporting import ensure_report_dir, write_layout_json, write_run_metadata_json
from cloudlayout.core.types import LayoutConfig
from cloudlayout.core.validate import layout_warnings

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Word-cloud layout.")
    p.add_argument("--words", type=str, default="", help="Inline words: 'python:10,data:5' or a JSON list")
    p.add_argument("--words-file", type=str, default=None, dest="words_file", help="Words file (.json / .csv / text)")
    p.add_argument("--width", type=int, default=DEFAULT_WIDTH_PX, help="Surface width (px)")
    p.add_argument("--height", type=int, default=DEFAULT_HEIGHT_PX, help="Surface height (px)")
    p.add_argument("--min-font-size", type=int, default=DEFAULT_MIN_FONT_SIZE, dest="min_font_size")
    p.add_argument("--max-font-size", type=int, default=DEFAULT_MAX_FONT_SIZE, dest="max_font_size")
    p.add_argument("--font-family", type=str, default=DEFAULT_FONT_FAMILY, dest="font_family")
    p.add_argument("--grid-size", type=int, default=DEFAULT_GRID_SIZE, dest="grid_size", help="Collision cell size (px)")
    p.add_argument("--mask", type=str, default=None, help="circle, heart, cloud, star, or any glyph text")
    p.add_argument("--mask-size", type=int, default=DEFAULT_MASK_SIZE, dest="mask_size")
    p.add_argument("--no-rotate", action="store_false", dest="rotate", help="Disable rotation")
    p.add_argument("--no-shrink", action="store_false", dest="shrink_to_fit", help="Disable shrink-to-fit")
    p.add_argument("--background", type=str, default=None, help="Background colour (default transparent)")
    p.add_argument("--seed", type=int, default=SEED, help="Random seed")
    p.add_argument("--format", type=str, default=DEFAULT_EXPORT_FORMAT, dest="fmt", help="Image format")
    p.add_argument("--run-name", type=str, default="run", dest="run_name", help="Reports subdir name")
    p.add_argument("--output-dir", type=str, default=REPORTS_DIR, dest="output_dir", help="Output directory (repo-relative)")
    p.add_argument("--repo-root", type=str, default=None, dest="repo_root", help="Repo root (default: cwd)")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))
    args = _parse_args(argv)
    repo_root = Path(args.repo_root).resolve() if args.repo_root else Path.cwd().resolve()

    try:
        if args.words_file:
            words = load_words(args.words_file, repo_root=repo_root)
            source = args.words_file
        else:
            words = parse_words_text(args.words)
            source = "inline"
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"{user_message(RUN_FAILED)} ({e})")
        raise
    if not words:
        logger.warning(user_message(NO_DATA))

    config = LayoutConfig(
        width=args.width,
        height=args.height,
        min_font_size=args.min_font_size,
        max_font_size=args.max_font_size,
        font_family=args.font_family,
        rotate=args.rotate,
        grid_size=args.grid_size,
        mask_shape=args.mask,
        mask_size=args.mask_size,
        shrink_to_fit=args.shrink_to_fit,
        background_color=args.background,
        seed=args.seed,
    )
    engine = WordCloudEngine(config, words)
    try:
        summary = engine.last_summary
        report_dir = ensure_report_dir(repo_root, args.run_name, output_dir=args.output_dir)
        image_path = engine.download(report_dir / f"wordcloud.{args.fmt.lower().lstrip('.')}")
        warnings = layout_warnings(summary, config, engine.eligible)
        for w in warnings:
            logger.warning(w)
        layout_path = write_layout_json(report_dir, summary, config, warnings)
        meta_path = write_run_metadata_json(report_dir, args.run_name, source, config)
        outputs = [image_path, layout_path, meta_path]
        if engine.grid is not None and engine.eligible is not None:
            debug_path = report_dir / "debug.png"
            render_debug(engine.eligible, engine.grid.snapshot(), summary.placed, config, debug_path)
            outputs.append(debug_path)
    finally:
        engine.destroy()

    for p in outputs:
        print(p)
    print(f"Placed {summary.placed_count}/{summary.n_items} words ({summary.dropped_count} dropped)")


if __name__ == "__main__":
    main()
