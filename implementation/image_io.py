# load/save/display images

from PIL import Image, UnidentifiedImageError
import numpy as np
import os
import matplotlib.pyplot as plt

from errors import DecodeFailure, EncodeFailure
from pixel_buffer import PixelBuffer

OUTPUT_DIR = "outputs"


def load_image(path):
    """Load an image file as an RGB PixelBuffer."""
    if not os.path.isfile(path):
        raise FileNotFoundError(f"File not found: {path}")
    try:
        with Image.open(path) as img:
            arr = np.array(img.convert("RGB"), dtype=np.uint8)
    except (UnidentifiedImageError, OSError) as exc:
        raise DecodeFailure(f"Cannot decode image: {path}") from exc
    return PixelBuffer.from_array(arr)


def save_image(buffer, path):
    """Save a PixelBuffer; the format comes from the file extension."""
    img = Image.fromarray(buffer.to_uint8())
    try:
        img.save(path)
    except (ValueError, OSError) as exc:
        raise EncodeFailure(f"Cannot write image: {path}") from exc
    return path


def show_and_save_images(grid, titles, out_name="result.png", figSize=(12,6),
                         out_dir=OUTPUT_DIR, show=True):
    """
    grid: list of PixelBuffers
    titles: list of strings
    Saves to out_dir/out_name and, when show is set, displays using matplotlib.
    """
    os.makedirs(out_dir, exist_ok=True)
    n = len(grid)
    cols = min(3, n)
    rows = (n + cols - 1)//cols
    fig = plt.figure(figsize=figSize)
    for i, (img, title) in enumerate(zip(grid, titles)):
        plt.subplot(rows, cols, i+1)
        plt.imshow(img.to_uint8())
        plt.title(title)
        plt.axis('off')
    outPath = os.path.join(out_dir, out_name)
    plt.tight_layout()
    plt.savefig(outPath, bbox_inches='tight')
    if show:
        plt.show()
    plt.close(fig)
    return outPath
