"""
Resampling of raster waveforms onto the acquisition dwell time.

A waveform sampled every `dts` seconds from t = 0 is linearly interpolated
onto the grid 0, tsamp, 2*tsamp, ... . The target grid never reaches past
the last native sample, so nothing is extrapolated.
"""
from typing import Tuple

import numpy as np
from scipy.interpolate import interp1d

from .constraints import require_positive
from .waveform import RawWaveform

__all__ = ['resampled_length', 'resample_uniform', 'ResampledWaveform', 'resample_waveform']

_GRID_TOL = 1e-9


def resampled_length(num_native: int, dts: float, tsamp: float) -> int:
    """
    Number of target samples for a native sequence of `num_native` samples.

    The nominal count is floor(dts / tsamp * num_native). It is truncated so
    that the last target time (n - 1) * tsamp does not exceed the last native
    time (num_native - 1) * dts, which only happens when tsamp < dts.
    """
    dts = require_positive("dts", dts)
    tsamp = require_positive("tsamp", tsamp)
    if num_native <= 0:
        return 0
    nominal = int(np.floor(dts / tsamp * num_native + _GRID_TOL))
    in_domain = int(np.floor((num_native - 1) * dts / tsamp + _GRID_TOL)) + 1
    return min(nominal, in_domain)


def resample_uniform(signal, dts: float, tsamp: float) -> np.ndarray:
    """
    Linearly interpolates `signal` (spacing `dts`, starting at t=0) onto spacing `tsamp`.

    Target times that land on the native boundary up to rounding are clamped
    to the end samples.

    Returns:
        np.ndarray: Resampled signal of length `resampled_length(len(signal), dts, tsamp)`.
    """
    signal = np.asarray(signal, dtype=float)
    if signal.ndim != 1:
        raise ValueError(f"signal must be 1D, got shape {signal.shape}.")
    num_target = resampled_length(signal.shape[0], dts, tsamp)
    if num_target == 0:
        return np.zeros(0)
    if signal.shape[0] == 1:
        return signal.copy()

    t_native = np.arange(signal.shape[0]) * dts
    t_target = np.arange(num_target) * tsamp
    interp_func = interp1d(t_native, signal, kind='linear', assume_sorted=True,
                           bounds_error=False, fill_value=(signal[0], signal[-1]))
    return interp_func(t_target)


class ResampledWaveform:
    """
    K-space and gradient pairs of one arm on the dwell-time grid.

    The k-space pair and the gradient pair are resampled from their own native
    lengths, so their lengths can differ.
    """
    def __init__(self, kx: np.ndarray, ky: np.ndarray,
                 gx: np.ndarray, gy: np.ndarray, dt_s: float):
        self.kx, self.ky = kx, ky
        self.gx, self.gy = gx, gy
        self.dt_s = dt_s

    @property
    def num_kspace_samples(self) -> int:
        return self.kx.shape[0]

    @property
    def num_gradient_samples(self) -> int:
        return self.gx.shape[0]

    def kspace(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.kx, self.ky

    def gradients(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.gx, self.gy


def resample_waveform(raw: RawWaveform, tsamp: float) -> ResampledWaveform:
    """Resamples the k-space and gradient pairs of `raw` onto the dwell time `tsamp` (s)."""
    dts = raw.raster_time_s
    return ResampledWaveform(
        kx=resample_uniform(raw.kx, dts, tsamp),
        ky=resample_uniform(raw.ky, dts, tsamp),
        gx=resample_uniform(raw.gx, dts, tsamp),
        gy=resample_uniform(raw.gy, dts, tsamp),
        dt_s=tsamp,
    )
