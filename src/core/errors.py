# core/errors.py


class RenderError(Exception):
    """Base class for errors raised while building or rendering a scene."""


class BoundingBoxError(RenderError):
    """An object placed in a BVH cannot report a bounding box."""

    def __init__(self, obj):
        super().__init__(f"No bounding box for {obj!r}; it cannot be placed in a BVH")
        self.obj = obj


class SceneError(RenderError):
    """Unknown scene name or number."""


class TextureLoadError(RenderError):
    """An image texture could not be read."""
