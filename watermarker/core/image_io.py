"""
Image Loading and Saving
========================
Thin Pillow wrappers used around the compositor.

- EXIF orientation is applied on load so phone photos are upright
- Formats without an alpha channel are flattened onto white on save
"""

from pathlib import Path
from typing import Union

from PIL import Image, ImageOps

# Extensions whose formats cannot store transparency
OPAQUE_SUFFIXES = {".jpg", ".jpeg", ".bmp"}


def load_image(path: Union[str, Path]) -> Image.Image:
    """
    Load an image fully into memory with EXIF orientation applied.

    Raises:
        FileNotFoundError: If the image doesn't exist.
        PIL.UnidentifiedImageError: If the file is not a readable image.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")

    with Image.open(path) as img:
        image = ImageOps.exif_transpose(img)
        image.load()
    return image


def save_image(image: Image.Image, path: Union[str, Path], quality: int = 95) -> Path:
    """
    Save an image, choosing the format from the file extension.

    Args:
        image: Image to save; RGBA is flattened for opaque formats.
        path: Destination path. Parent directories are created.
        quality: JPEG quality.

    Returns:
        The destination path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    options = {}
    if "dpi" in image.info:
        options["dpi"] = image.info["dpi"]

    suffix = path.suffix.lower()
    if suffix in OPAQUE_SUFFIXES and image.mode != "RGB":
        # Convert RGBA to RGB on a white background
        rgba = image.convert("RGBA")
        flattened = Image.new("RGB", rgba.size, (255, 255, 255))
        flattened.paste(rgba, mask=rgba.getchannel("A"))
        try:
            if suffix == ".bmp":
                flattened.save(path, **options)
            else:
                flattened.save(path, quality=quality, **options)
        finally:
            flattened.close()
            rgba.close()
    elif suffix in (".jpg", ".jpeg"):
        image.save(path, quality=quality, **options)
    else:
        image.save(path, **options)

    return path
