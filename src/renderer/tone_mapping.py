# renderer/tone_mapping.py
import numpy as np
from numba import njit

@njit
def _gamma_kernel(linear, output, inv_gamma):
    height, width, _ = linear.shape
    for j in range(height):
        for i in range(width):
            for c in range(3):
                v = linear[j, i, c]
                if not (v > 0.0):  # negative or NaN
                    v = 0.0
                v = v ** inv_gamma
                if v > 0.999:
                    v = 0.999
                output[j, i, c] = np.uint8(int(256.0 * v))

def gamma_correct(linear: np.ndarray, gamma: float = 2.0) -> np.ndarray:
    """
    Convert averaged linear radiance (H x W x 3) to 8-bit RGB with a
    1/gamma power curve, clamping each channel to [0, 0.999] before scaling
    by 256.
    """
    linear = np.ascontiguousarray(linear, dtype=np.float64)
    output = np.zeros(linear.shape, dtype=np.uint8)
    _gamma_kernel(linear, output, 1.0 / gamma)
    return output

def reinhard_tone_mapping(accumulated, exposure=1.0, white_point=1.0, gamma=2.2):
    """
    Apply Reinhard tone mapping to a linear radiance image.
    """
    scaled = np.nan_to_num(np.asarray(accumulated, dtype=np.float64)) * exposure
    scaled = np.maximum(scaled, 0.0)
    mapped = scaled / (1.0 + scaled / white_point)
    mapped = mapped ** (1.0 / gamma)
    output = (mapped * 255).clip(0, 255).astype("uint8")
    return output

def auto_exposure_tone_mapping(accumulated, gamma=2.2, target_midgray=0.18):
    """
    Compute an exposure value based on the average scene luminance and then
    apply Reinhard tone mapping.
    """
    accumulated = np.nan_to_num(np.asarray(accumulated, dtype=np.float64))
    # Compute per-pixel luminance using standard coefficients.
    luminance = 0.2126 * accumulated[:,:,0] + 0.7152 * accumulated[:,:,1] + 0.0722 * accumulated[:,:,2]
    avg_lum = luminance.mean() + 1e-5  # avoid division by zero
    exposure = target_midgray / avg_lum
    return reinhard_tone_mapping(accumulated, exposure=exposure, white_point=1.0, gamma=gamma)

TONE_MAPPERS = {
    "gamma": gamma_correct,
    "reinhard": reinhard_tone_mapping,
    "auto": auto_exposure_tone_mapping,
}

def tone_map(linear: np.ndarray, method: str = "gamma") -> np.ndarray:
    try:
        mapper = TONE_MAPPERS[method]
    except KeyError:
        raise ValueError(f"Unknown tone mapping {method!r}; "
                         f"expected one of {sorted(TONE_MAPPERS)}") from None
    return mapper(linear)
