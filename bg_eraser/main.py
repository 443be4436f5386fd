import argparse
import logging
import sys
from pathlib import Path

from .core.image_handler import DEFAULT_OUTPUT_NAME, InvalidImageError, load_image_with_alpha, save_png
from .core.pixel_buffer import PixelBuffer
from .core.session import EditorSession
from .utils.config import AppConfig
from .utils.helpers import parse_point
from .utils.validators import DEFAULT_TOLERANCE, clamp_tolerance

logger = logging.getLogger(__name__)


def erase_regions(img, points: list[tuple[int, int]], tolerance: int, history_capacity: int):
    """Apply one flood erase per point, in order, and return the resulting buffer and pixel count."""
    session = EditorSession(history_capacity=history_capacity, default_tolerance=tolerance)
    session.load_image(PixelBuffer.from_image(img))
    total = 0
    for x, y in points:
        if not (0 <= x < img.width and 0 <= y < img.height):
            logger.warning("Point (%d, %d) is outside the %dx%d image, skipped", x, y, img.width, img.height)
            continue
        total += session.select_at(x, y, tolerance)
    return session.export_buffer(), total


def run_cli_single(args, points, tolerance, history_capacity):
    input_path = Path(args.input)
    output_path = Path(args.output) if args.output else input_path.with_name(DEFAULT_OUTPUT_NAME)
    try:
        img = load_image_with_alpha(input_path, max_edit_dimension=args.max_dim)
    except (FileNotFoundError, InvalidImageError) as e:
        print(f"Error: Failed to load image: {e}")
        sys.exit(1)

    result, cleared = erase_regions(img, points, tolerance, history_capacity)

    try:
        save_png(result.to_image(), output_path)
    except OSError as e:
        print(f"Error: Failed to save PNG: {e}")
        sys.exit(1)
    print(f"Erased {cleared} pixels ({result.count_transparent()} transparent in total) -> {output_path}")


def run_cli_batch(args, points, tolerance, history_capacity):
    in_dir = Path(args.input_dir)
    out_dir = Path(args.out_dir) if args.out_dir else in_dir / "erased_output"
    pattern = args.pattern or "*.png"
    if not in_dir.exists():
        print(f"Error: Input directory not found: {in_dir}")
        sys.exit(1)
    out_dir.mkdir(parents=True, exist_ok=True)

    count = 0
    for path in sorted(in_dir.rglob(pattern)):
        if not path.is_file() or out_dir in path.parents:
            continue
        try:
            img = load_image_with_alpha(path, max_edit_dimension=args.max_dim)
        except (FileNotFoundError, InvalidImageError) as e:
            print(f"[SKIP] {path.name}: {e}")
            continue

        result, cleared = erase_regions(img, points, tolerance, history_capacity)
        out_png = out_dir / f"{path.stem}.png"
        try:
            save_png(result.to_image(), out_png)
        except OSError as e:
            print(f"[FAIL] {path.name}: {e}")
            continue
        print(f"[OK] {path.name} -> {out_png.name} ({cleared} pixels erased, {result.count_transparent()} transparent)")
        count += 1
    print(f"Batch complete. {count} images written to {out_dir}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Background Eraser: click a region to make it transparent")
    parser.add_argument("--cli", action="store_true", help="Run in command-line mode")
    parser.add_argument("--input", type=str, help="Input image path (for single export)")
    parser.add_argument("--output", type=str, help=f"Output .png path (default: {DEFAULT_OUTPUT_NAME} next to input)")
    parser.add_argument("--point", action="append", default=[], metavar="X,Y",
                        help="Seed pixel to erase from; repeat for several regions")
    parser.add_argument("--tolerance", type=int, default=None,
                        help=f"Color tolerance 0-100 (default: config value or {DEFAULT_TOLERANCE})")
    parser.add_argument("--max-dim", type=int, default=None, help="Downscale images larger than this before editing")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    # Batch mode
    parser.add_argument("--input-dir", type=str, help="Input directory for batch")
    parser.add_argument("--pattern", type=str, help="Glob pattern for input (e.g., '*.png')")
    parser.add_argument("--out-dir", type=str, help="Output directory for batch output")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = AppConfig()

    if args.cli:
        try:
            points = [parse_point(p) for p in args.point]
        except ValueError as e:
            parser.error(str(e))
        if not points:
            parser.error("--cli requires at least one --point X,Y")
        tolerance = clamp_tolerance(config.tolerance if args.tolerance is None else args.tolerance)
        if args.input_dir:
            run_cli_batch(args, points, tolerance, config.history_capacity)
            return
        if not args.input:
            parser.error("--cli requires --input (or use --input-dir for batch mode)")
        run_cli_single(args, points, tolerance, config.history_capacity)
        return

    from .gui.main_window import run_app
    run_app(config=config, max_edit_dimension=args.max_dim)


if __name__ == "__main__":
    main()
