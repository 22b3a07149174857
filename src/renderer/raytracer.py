# renderer/raytracer.py
import logging
import math
import random
import time
from concurrent import futures
from typing import Optional
import numpy as np
from PIL import Image
from tqdm import tqdm
from renderer.integrator import ray_color
from renderer.settings import RenderSettings
from renderer.tone_mapping import tone_map

logger = logging.getLogger(__name__)

# Mixes the render seed with the row index so each row gets its own stream.
ROW_SEED_STRIDE = 1_000_003

# Scene and settings of the current worker process, set by _init_worker.
_worker_state = None

def _init_worker(scene, settings: RenderSettings):
    global _worker_state
    _worker_state = (scene, settings)

def _render_worker_row(row: int):
    scene, settings = _worker_state
    return row, render_row(scene, settings, row)

def row_rng(seed: Optional[int], row: int) -> random.Random:
    if seed is None:
        return random.Random()
    return random.Random(seed * ROW_SEED_STRIDE + row)

def render_row(scene, settings: RenderSettings, row: int) -> np.ndarray:
    """
    Average radiance of every pixel in image row `row` (0 is the top row)
    as a (width, 3) float32 array.
    """
    rng = row_rng(settings.seed, row)
    width, height = settings.width, settings.height
    j = height - 1 - row
    out = np.zeros((width, 3), dtype=np.float32)
    inv_samples = 1.0 / settings.samples_per_pixel
    for i in range(width):
        r = g = b = 0.0
        for _ in range(settings.samples_per_pixel):
            s = (i + rng.random()) / max(width - 1, 1)
            t = (j + rng.random()) / max(height - 1, 1)
            ray = scene.camera.get_ray(s, t, rng)
            c = ray_color(ray, scene.background, scene.world, scene.lights,
                          settings.max_depth, rng)
            # A degenerate sample is dropped instead of poisoning the pixel.
            r += c.x if math.isfinite(c.x) else 0.0
            g += c.y if math.isfinite(c.y) else 0.0
            b += c.z if math.isfinite(c.z) else 0.0
        out[i] = (r * inv_samples, g * inv_samples, b * inv_samples)
    return out

class Renderer:
    """
    CPU render driver. Rows are independent work items distributed over a
    process pool; every row seeds its own random stream, so the result
    for a given seed does not depend on how rows were scheduled.
    """
    def __init__(self, scene, settings: RenderSettings):
        self.scene = scene
        self.settings = settings
        self.last_render_seconds = 0.0

    def render(self) -> np.ndarray:
        """Linear radiance image, float32 of shape (height, width, 3), top row first."""
        settings = self.settings
        image = np.zeros((settings.height, settings.width, 3), dtype=np.float32)
        rows = range(settings.height)
        logger.info("Rendering %s", settings)
        start = time.perf_counter()

        progress = tqdm(total=settings.height, unit="row", disable=not settings.progress)
        try:
            if settings.workers == 1:
                for row in rows:
                    image[row] = render_row(self.scene, settings, row)
                    progress.update(1)
            else:
                with futures.ProcessPoolExecutor(
                        max_workers=settings.workers,
                        initializer=_init_worker,
                        initargs=(self.scene, settings)) as executor:
                    for row, pixels in executor.map(_render_worker_row, rows, chunksize=4):
                        image[row] = pixels
                        progress.update(1)
        finally:
            progress.close()

        self.last_render_seconds = time.perf_counter() - start
        logger.info("Rendered %dx%d in %.2fs", settings.width, settings.height,
                    self.last_render_seconds)
        return image

    def render_to_file(self, path: Optional[str] = None) -> np.ndarray:
        """Render, tone map and save. Returns the 8-bit image."""
        rgb8 = tone_map(self.render(), self.settings.tone_map)
        write_image(path or self.settings.output, rgb8)
        return rgb8

def write_image(path: str, rgb8: np.ndarray):
    """Save an (H, W, 3) uint8 array; the format follows the file extension."""
    Image.fromarray(np.ascontiguousarray(rgb8, dtype=np.uint8)).save(path)
    logger.info("Wrote %s", path)

