# renderer/settings.py
import os
from typing import Optional

# Overrides applied on top of a scene's own defaults. "scale" shrinks the
# image; None keeps the scene value.
QUALITY_LEVELS = {
    "preview": {"samples": 8, "bounces": 8, "scale": 0.5},
    "balanced": {"samples": 50, "bounces": 20, "scale": 1.0},
    "final": {"samples": None, "bounces": None, "scale": 1.0},
}

class RenderSettings:
    """
    Everything the renderer driver needs besides the scene itself.
    """
    def __init__(self, width: int, height: int, samples_per_pixel: int = 100,
                 max_depth: int = 50, workers: Optional[int] = None,
                 seed: Optional[int] = None, tone_map: str = "gamma",
                 output: str = "image.png", progress: bool = True):
        self.width = width
        self.height = height
        self.samples_per_pixel = samples_per_pixel
        self.max_depth = max_depth
        self.workers = workers if workers is not None else (os.cpu_count() or 1)
        self.seed = seed
        self.tone_map = tone_map
        self.output = output
        self.progress = progress
        self.validate()

    def validate(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")
        if self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")

    @classmethod
    def from_scene(cls, scene, quality: str = "final", width: Optional[int] = None,
                   samples_per_pixel: Optional[int] = None,
                   max_depth: Optional[int] = None, **kwargs) -> "RenderSettings":
        """
        Settings starting from the scene defaults, then the quality preset,
        then any explicit value given here.
        """
        try:
            level = QUALITY_LEVELS[quality]
        except KeyError:
            raise ValueError(f"Unknown quality {quality!r}; "
                             f"expected one of {sorted(QUALITY_LEVELS)}") from None

        aspect_ratio = scene.image_width / scene.image_height
        if width is None:
            width = max(1, int(scene.image_width * level["scale"]))
        height = max(1, int(width / aspect_ratio))

        if samples_per_pixel is None:
            samples_per_pixel = level["samples"] or scene.samples_per_pixel
        if max_depth is None:
            max_depth = level["bounces"] or scene.max_depth

        return cls(width, height, samples_per_pixel, max_depth, **kwargs)

    def __repr__(self) -> str:
        return (f"RenderSettings({self.width}x{self.height}, spp={self.samples_per_pixel}, "
                f"depth={self.max_depth}, workers={self.workers}, seed={self.seed})")
