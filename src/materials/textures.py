# materials/textures.py
import logging
import math
import os
from typing import Optional, Union
import numpy as np
from PIL import Image
from core.vector import Vector3
from materials.perlin import Perlin

logger = logging.getLogger(__name__)

class Texture:
    """Base class for all textures."""
    def value(self, u: float, v: float, p: Vector3) -> Vector3:
        """Color at surface coordinates (u, v) and hit point p."""
        raise NotImplementedError("value() must be implemented by texture subclasses.")

def as_texture(color_or_texture: Union[Vector3, "Texture"]) -> "Texture":
    if isinstance(color_or_texture, Texture):
        return color_or_texture
    return SolidColor(color_or_texture)

class SolidColor(Texture):
    """A solid color texture."""
    def __init__(self, color: Vector3):
        self.color = color

    @classmethod
    def rgb(cls, r: float, g: float, b: float) -> "SolidColor":
        return cls(Vector3(r, g, b))

    def value(self, u: float, v: float, p: Vector3) -> Vector3:
        return self.color

class CheckerTexture(Texture):
    """A 3D checker pattern alternating between two textures in space."""
    def __init__(self, even: Union[Vector3, Texture], odd: Union[Vector3, Texture],
                 scale: float = 10.0):
        self.even = as_texture(even)
        self.odd = as_texture(odd)
        self.scale = scale

    def value(self, u: float, v: float, p: Vector3) -> Vector3:
        sines = (math.sin(self.scale * p.x)
                 * math.sin(self.scale * p.y)
                 * math.sin(self.scale * p.z))
        if sines < 0:
            return self.odd.value(u, v, p)
        return self.even.value(u, v, p)

class NoiseTexture(Texture):
    """Marble-like gray pattern: a sine along z phase-shifted by turbulence."""
    def __init__(self, scale: float = 1.0, rng: Optional[np.random.Generator] = None):
        self.noise = Perlin(rng)
        self.scale = scale

    def value(self, u: float, v: float, p: Vector3) -> Vector3:
        shade = 0.5 * (1 + math.sin(self.scale * p.z + 10 * self.noise.turbulence(p)))
        return Vector3(shade, shade, shade)

class ImageTexture(Texture):
    """
    A texture from an image file, addressed by (u, v) in [0, 1]. A missing
    or unreadable file renders solid cyan so it stays visible in the image.
    """
    FALLBACK = Vector3(0, 1, 1)

    def __init__(self, image_path: Optional[str] = None, data: Optional[np.ndarray] = None):
        self.image_path = image_path
        self.data = data
        if self.data is None and image_path is not None:
            if not os.path.exists(image_path):
                logger.warning("Texture file not found: %s", image_path)
            else:
                try:
                    with Image.open(image_path) as img:
                        if img.mode != 'RGB':
                            img = img.convert('RGB')
                        self.data = np.asarray(img, dtype=np.float32) / 255.0
                except OSError as e:
                    logger.warning("Error loading texture %s: %s", image_path, e)
        if self.data is not None:
            self.height, self.width = self.data.shape[:2]
        else:
            self.height = self.width = 0

    def value(self, u: float, v: float, p: Vector3) -> Vector3:
        if self.data is None:
            return self.FALLBACK

        u = min(max(u, 0.0), 1.0)
        v = 1.0 - min(max(v, 0.0), 1.0)  # Image rows run top to bottom

        i = min(int(u * self.width), self.width - 1)
        j = min(int(v * self.height), self.height - 1)

        color = self.data[j, i]
        return Vector3(float(color[0]), float(color[1]), float(color[2]))
