# materials/texture_loader.py
import os
import numpy as np
from PIL import Image, UnidentifiedImageError
from core.errors import TextureLoadError
from materials.textures import ImageTexture

def load_texture(image_path: str) -> ImageTexture:
    """
    Read an image file into an ImageTexture. Unlike constructing the
    ImageTexture directly, a missing or undecodable file is an error here
    rather than a cyan placeholder.

    Raises:
        TextureLoadError: the file does not exist or Pillow cannot decode it
    """
    if not os.path.isfile(image_path):
        raise TextureLoadError(f"Texture file not found: {image_path}")

    try:
        with Image.open(image_path) as img:
            data = np.asarray(img.convert("RGB"), dtype=np.float32) / 255.0
    except (OSError, UnidentifiedImageError) as e:
        raise TextureLoadError(f"Cannot decode texture {image_path}: {e}") from e

    return ImageTexture(image_path, data=data)
