"""
Helpers for 2D (x, y) waveform pairs.

Gradient, k-space and slew samples are kept as two separate real arrays
rather than packed complex values; these functions provide the magnitude
and rotation operations on such pairs.
"""
from typing import Tuple

import numpy as np

__all__ = ['magnitude', 'rotate_xy']


def magnitude(x, y) -> np.ndarray:
    """Euclidean length of the pair (x, y), element-wise."""
    return np.hypot(x, y)


def rotate_xy(x, y, angle) -> Tuple[np.ndarray, np.ndarray]:
    """
    Rotates the pair (x, y) counter-clockwise by `angle` radians.

    `angle` may be a scalar or an array that broadcasts against x and y,
    e.g. x[:, None] with angles of shape (num_interleaves,).

    Returns:
        Tuple[np.ndarray, np.ndarray]: (x*cos(a) - y*sin(a), y*cos(a) + x*sin(a))
    """
    c = np.cos(angle)
    s = np.sin(angle)
    return x * c - y * s, y * c + x * s
