import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

SUPPORTED_INPUTS = (".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tif", ".tiff", ".webp", ".ico")
MAX_FILE_SIZE = 10 * 1024 * 1024
DEFAULT_OUTPUT_NAME = "background-removed.png"


class InvalidImageError(ValueError):
    pass


def load_image_with_alpha(
    path: str | Path,
    max_edit_dimension: int | None = None,
    max_file_size: int | None = MAX_FILE_SIZE,
) -> Image.Image:
    """
    Load an image and convert to RGBA. Optionally downscale so max(width, height) <= max_edit_dimension
    for responsive editing with very large source images.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"File not found: {p}")
    if p.suffix.lower() not in SUPPORTED_INPUTS:
        raise InvalidImageError(f"Unsupported format: {p.suffix}")
    size = p.stat().st_size
    if max_file_size and size > max_file_size:
        raise InvalidImageError(f"File too large: {size} bytes (limit {max_file_size})")
    try:
        with Image.open(p) as src:
            img = src.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise InvalidImageError(f"Could not decode image {p.name}: {e}") from e
    if max_edit_dimension and max(img.width, img.height) > max_edit_dimension:
        scale = max_edit_dimension / max(img.width, img.height)
        new_size = (max(1, int(img.width * scale)), max(1, int(img.height * scale)))
        logger.info("Downscaling %s from %dx%d to %dx%d", p.name, img.width, img.height, *new_size)
        img = img.resize(new_size, Image.LANCZOS)
    return img


def save_png(image: Image.Image, out_path: str | Path):
    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    image.save(p, format="PNG", optimize=True)


def dialog_filetypes() -> list[tuple[str, str]]:
    patterns = " ".join(f"*{ext}" for ext in SUPPORTED_INPUTS)
    return (
        [("All supported", patterns)]
        + [(ext[1:].upper(), f"*{ext}") for ext in SUPPORTED_INPUTS]
        + [("All files", "*.*")]
    )
