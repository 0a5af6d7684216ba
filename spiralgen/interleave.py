"""
Replication of a base spiral arm into rotated interleaves.
"""
import warnings
from typing import NamedTuple, Optional

import numpy as np

from .constraints import require_positive_int
from .exceptions import ConfigurationError
from .resample import ResampledWaveform
from .vector import rotate_xy

__all__ = ['PAD_POLICIES', 'Interleave', 'ComposedInterleaves', 'auto_num_samples',
           'fit_length', 'compose_interleaves']

PAD_POLICIES = ('zero', 'raise')

# Samples dropped from the end of the resampled arm for the automatic length
_AUTO_LENGTH_MARGIN = 2


class Interleave(NamedTuple):
    """One shot of the trajectory; `angle` is its total rotation in radians."""
    kx: np.ndarray
    ky: np.ndarray
    gx: np.ndarray
    gy: np.ndarray
    angle: float


class ComposedInterleaves(NamedTuple):
    """
    All interleaves as column stacks of shape (nk, nl).

    `num_padded_kspace` and `num_padded_gradient` count the zero-filled tail
    samples added because the resampled arm was shorter than nk.
    """
    kx: np.ndarray
    ky: np.ndarray
    gx: np.ndarray
    gy: np.ndarray
    angles: np.ndarray
    num_padded_kspace: int
    num_padded_gradient: int

    @property
    def num_samples(self) -> int:
        return self.kx.shape[0]

    @property
    def num_interleaves(self) -> int:
        return self.kx.shape[1]

    def interleave(self, index: int) -> Interleave:
        return Interleave(self.kx[:, index], self.ky[:, index],
                          self.gx[:, index], self.gy[:, index],
                          float(self.angles[index]))


def auto_num_samples(resampled: ResampledWaveform) -> int:
    """Automatic per-interleave length: resampled k-space length minus 2."""
    return max(resampled.num_kspace_samples - _AUTO_LENGTH_MARGIN, 0)


def fit_length(signal: np.ndarray, nk: int, pad_policy: str = 'zero', name: str = "signal"):
    """
    Slices `signal` to `nk` samples, zero-filling the tail if it is shorter.

    Returns:
        Tuple[np.ndarray, int]: The fitted signal and the number of padded samples.

    Raises:
        ConfigurationError: If padding is needed and `pad_policy` is 'raise',
            or `pad_policy` is unknown.
    """
    if pad_policy not in PAD_POLICIES:
        raise ConfigurationError(f"Unknown pad_policy: {pad_policy}. Supported: {PAD_POLICIES}.")
    available = signal.shape[0]
    if available >= nk:
        return signal[:nk].copy(), 0
    if pad_policy == 'raise':
        raise ConfigurationError(
            f"Requested {nk} samples per interleave but the resampled {name} "
            f"only has {available}.")
    fitted = np.zeros(nk)
    fitted[:available] = signal
    return fitted, nk - available


def compose_interleaves(resampled: ResampledWaveform,
                        num_interleaves: int = 1,
                        num_samples: Optional[int] = None,
                        rotamount: int = 0,
                        pad_policy: str = 'zero') -> ComposedInterleaves:
    """
    Builds `num_interleaves` rotated copies of the resampled base arm.

    Interleave 0 is the arm sliced to `num_samples` and rotated by
    -rotamount * pi / 2. Interleave i is interleave 0 rotated by
    i * 2 * pi / num_interleaves.

    Parameters:
    - resampled (ResampledWaveform): Base arm on the dwell-time grid.
    - num_interleaves (int): Number of shots nl.
    - num_samples (Optional[int]): Samples per interleave nk. None selects the
      automatic length (resampled k-space length - 2).
    - rotamount (int): Global rotation in quarter turns (clockwise).
    - pad_policy (str): 'zero' zero-fills a short arm and warns;
      'raise' rejects the request.

    Returns:
    - ComposedInterleaves: k-space and gradients of shape (nk, nl).
    """
    nl = require_positive_int("nl", num_interleaves)
    if num_samples is None:
        nk = auto_num_samples(resampled)
    else:
        nk = require_positive_int("num_samples", num_samples)

    kx, pad_k = fit_length(resampled.kx, nk, pad_policy, "k-space")
    ky, _ = fit_length(resampled.ky, nk, pad_policy, "k-space")
    gx, pad_g = fit_length(resampled.gx, nk, pad_policy, "gradient")
    gy, _ = fit_length(resampled.gy, nk, pad_policy, "gradient")
    if pad_k or pad_g:
        warnings.warn(f"Resampled arm is shorter than {nk} samples; zero-filled "
                      f"{pad_k} k-space and {pad_g} gradient samples.")

    # rotate for proper orientation
    phir = -rotamount * np.pi / 2
    kx, ky = rotate_xy(kx, ky, phir)
    gx, gy = rotate_xy(gx, gy, phir)

    phi = 2 * np.pi / nl * np.arange(nl)
    kxs, kys = rotate_xy(kx[:, np.newaxis], ky[:, np.newaxis], phi)
    gxs, gys = rotate_xy(gx[:, np.newaxis], gy[:, np.newaxis], phi)

    return ComposedInterleaves(kx=kxs, ky=kys, gx=gxs, gy=gys,
                               angles=phir + phi,
                               num_padded_kspace=pad_k,
                               num_padded_gradient=pad_g)
