"""
Single-arm Spiral Gradient Design
---------------------------------

This module designs one arm of a multi-shot Archimedean spiral using Duyn's
approximate slew-rate limited design, augmented with a gradient amplitude
limit. The waveform is what the scanner plays out on its gradient raster.

The design runs on a fine grid of half the raster time in two regimes:

1. Slew-rate limited: the angle theta(t) and its derivative follow a closed
   form approximation. This regime is valid while the gradient magnitude
   stays under the amplitude envelope |(gamp / theta, gamp)|.
2. Amplitude limited: once the envelope is crossed the gradient runs at
   constant amplitude `gamp` and theta grows as sqrt(theta_s^2 + c * t)
   until the k-space radius reaches N / 2 cycles per FOV.

The two regimes are concatenated and every second fine-grid sample is kept,
returning to the raster. K-space is the running integral of the gradient and
the slew rate its first difference.

References:
    Duyn and Yang, "Simple analytical spiral k-space algorithm",
    J Magn Reson 1997. Design adapted from the scanner spiral code of
    D. Noll (U. of Michigan).
"""
from typing import Optional, Tuple

import numpy as np

from .constants import (DEFAULT_MAX_GRAD_G_PER_CM, DEFAULT_MAX_SLEW_MT_PER_M_PER_MS,
                        ENVELOPE_EPS)
from .constraints import ScannerConstraints, require_positive_int
from .exceptions import CapacityExceededError, ConfigurationError, TrajectoryDesignError
from .vector import magnitude

__all__ = [
    'WaveformBuffer',
    'RawWaveform',
    'first_crossing_index',
    'design_spiral_arm',
]

# Shape constant of the slew-limited approximation
_Q = 5.0
# Absorbs rounding when counting grid points in [0, span]
_GRID_TOL = 1e-9


def _grid_count(span: float, step: float) -> int:
    """Number of steps of size `step` that fit in `span` (0 if span < 0)."""
    if span < 0:
        return 0
    return int(np.floor(span / step + _GRID_TOL))


class WaveformBuffer:
    """
    Fine-grid gradient buffer for the concatenated design regimes.

    The buffer is pre-sized to `capacity` samples per axis. When a write needs
    more room, it grows to exactly the required length if `allow_growth` is
    True and raises `CapacityExceededError` otherwise.
    """
    def __init__(self, capacity: int, allow_growth: bool = True):
        self.allow_growth = allow_growth
        self._gx = np.zeros(capacity)
        self._gy = np.zeros(capacity)
        self.length = 0

    @property
    def capacity(self) -> int:
        return self._gx.shape[0]

    def _ensure_capacity(self, required: int) -> None:
        if required <= self.capacity:
            return
        if not self.allow_growth:
            raise CapacityExceededError(
                f"Raw waveform needs {required} samples but the buffer holds {self.capacity}. "
                "Increase max_raw_samples or enable growth.")
        extra = required - self.capacity
        self._gx = np.concatenate((self._gx, np.zeros(extra)))
        self._gy = np.concatenate((self._gy, np.zeros(extra)))

    def write(self, start: int, gx: np.ndarray, gy: np.ndarray) -> None:
        """Writes the pair (gx, gy) at fine-grid index `start`."""
        end = start + len(gx)
        self._ensure_capacity(end)
        self._gx[start:end] = gx
        self._gy[start:end] = gy
        self.length = max(self.length, end)

    def decimate(self, step: int = 2) -> Tuple[np.ndarray, np.ndarray]:
        """Returns copies of every `step`-th valid sample, starting at index 0."""
        return self._gx[:self.length:step].copy(), self._gy[:self.length:step].copy()


class RawWaveform:
    """
    One spiral arm on the gradient raster.

    Attributes:
        gx, gy (np.ndarray): Gradient waveforms (G/cm), length L.
        kx, ky (np.ndarray): K-space (cycles/FOV), length L.
        sx, sy (np.ndarray): Slew rate (G/cm/ms), length L - 1.
        raster_time_s (float): Sample spacing `gts` (s).
        phase1_samples (int): Fine-grid samples kept from the slew-limited regime.
        phase2_samples (int): Fine-grid samples of the amplitude-limited regime.
        theta_transition (float): Spiral angle at the last slew-limited sample.
        design_duration_s (float): Design horizon T (s).
    """
    def __init__(self, gx: np.ndarray, gy: np.ndarray,
                 kx: np.ndarray, ky: np.ndarray,
                 sx: np.ndarray, sy: np.ndarray,
                 raster_time_s: float,
                 phase1_samples: int,
                 phase2_samples: int,
                 theta_transition: float,
                 design_duration_s: float):
        self.gx, self.gy = gx, gy
        self.kx, self.ky = kx, ky
        self.sx, self.sy = sx, sy
        for arr in (gx, gy, kx, ky, sx, sy):
            arr.setflags(write=False)
        self.raster_time_s = raster_time_s
        self.phase1_samples = phase1_samples
        self.phase2_samples = phase2_samples
        self.theta_transition = theta_transition
        self.design_duration_s = design_duration_s

    @property
    def num_samples(self) -> int:
        return self.gx.shape[0]

    @property
    def amplitude_limited(self) -> bool:
        """True if the design entered the constant-amplitude regime."""
        return self.phase2_samples > 0

    @property
    def transition_index(self) -> int:
        """First raster index produced by the amplitude-limited regime (num_samples if none)."""
        if not self.amplitude_limited:
            return self.num_samples
        return (self.phase1_samples + 1) // 2

    @property
    def matrix_extent(self) -> float:
        """Twice the largest k-space radius reached, in cycles/FOV."""
        if self.num_samples == 0:
            return 0.0
        return 2.0 * float(np.max(magnitude(self.kx, self.ky)))

    @property
    def max_grad(self) -> float:
        if self.num_samples == 0:
            return 0.0
        return float(np.max(magnitude(self.gx, self.gy)))

    @property
    def max_slew(self) -> float:
        if self.sx.shape[0] == 0:
            return 0.0
        return float(np.max(magnitude(self.sx, self.sy)))

    @property
    def duration_ms(self) -> float:
        """Last raster time point within the design horizon, in ms."""
        return _grid_count(self.design_duration_s, self.raster_time_s) * self.raster_time_s * 1000.0

    def __repr__(self) -> str:
        return (f"RawWaveform(num_samples={self.num_samples}, "
                f"amplitude_limited={self.amplitude_limited}, "
                f"max_grad={self.max_grad:.4f}, duration_ms={self.duration_ms:.3f})")


def first_crossing_index(values: np.ndarray, envelope: np.ndarray) -> int:
    """
    Finds the first index where `values` exceeds `envelope`.

    Samples equal to the envelope do not count as crossings. Once crossed,
    every later sample must stay above the envelope; a sequence that dips
    back is not monotone with respect to the envelope and the cutoff would be
    ambiguous.

    Returns:
        int: Number of leading samples at or below the envelope
             (len(values) if there is no crossing).

    Raises:
        TrajectoryDesignError: If a sample after the first crossing falls back
            to or below the envelope.
    """
    exceeds = np.asarray(values) > np.asarray(envelope)
    if not exceeds.any():
        return exceeds.shape[0]
    first = int(np.argmax(exceeds))
    if not exceeds[first:].all():
        recovered = first + int(np.argmin(exceeds[first:]))
        raise TrajectoryDesignError(
            f"Gradient magnitude crosses the amplitude envelope at sample {first} "
            f"but falls back under it at sample {recovered}; the slew-limited "
            "regime has no single cutoff for these parameters.")
    return first


def _slew_limited_regime(fov, N, nl, gamma, s0, dt):
    """Closed-form slew-limited regime on the grid 0, dt, ..., Ts."""
    ts_max = 0.666667 / nl * np.sqrt(((np.pi * N) ** 3) / (gamma * fov * s0))
    a2 = N * np.pi / (nl * (ts_max ** 0.666667))
    a1 = 1.5 * s0 / a2
    beta = s0 * gamma * fov / nl
    gmax_peak = a1 * (ts_max ** 0.333333)

    t = dt * np.arange(_grid_count(ts_max, dt) + 1)
    x = t ** 1.333333
    y = _Q + 0.5 * beta / a2 * x
    theta = (t ** 2) * (0.5 * beta / y)
    dthdt = t * (beta * (_Q + 0.166667 * beta / a2 * x) / (y * y))

    c = np.cos(theta)
    s = np.sin(theta)
    scale = nl / (fov * gamma)
    gx = scale * dthdt * (c - theta * s)
    gy = scale * dthdt * (s + theta * c)
    return t, theta, gx, gy, gmax_peak


def _amplitude_limited_regime(fov, N, nl, gamp, gamma, dt, t_start, theta_start):
    """Constant-amplitude regime from (t_start, theta_start) to the design horizon."""
    horizon = (((np.pi * N / nl) ** 2 - theta_start ** 2)
               / (2 * gamma * gamp * fov / nl) + t_start)
    t = t_start + dt * np.arange(1, _grid_count(horizon - t_start, dt) + 1)
    theta = np.sqrt(theta_start ** 2 + (2 * gamma * gamp * fov) * (t - t_start) / nl)
    c = np.cos(theta)
    s = np.sin(theta)
    gx = gamp * (c / theta - s)
    gy = gamp * (s / theta + c)
    return horizon, gx, gy


def _resolve_constraints(fov, N, gamp, gslew,
                         constraints: Optional[ScannerConstraints]) -> ScannerConstraints:
    """Builds constraints from explicit limits, or checks them against `constraints`."""
    if constraints is None:
        if fov is None or N is None:
            raise ConfigurationError("fov and N are required when no constraints are given.")
        return ScannerConstraints(
            fov_cm=fov, matrix_size=N,
            max_grad_G_per_cm=DEFAULT_MAX_GRAD_G_PER_CM if gamp is None else gamp,
            max_slew_mT_per_m_per_ms=DEFAULT_MAX_SLEW_MT_PER_M_PER_MS if gslew is None else gslew)

    given = (("fov", fov, constraints.fov_cm),
             ("N", N, constraints.matrix_size),
             ("gamp", gamp, constraints.max_grad_G_per_cm),
             ("gslew", gslew, constraints.max_slew_mT_per_m_per_ms))
    for name, value, expected in given:
        if value is not None and value != expected:
            raise ConfigurationError(
                f"{name}={value!r} disagrees with constraints ({name}={expected!r}).")
    return constraints


def design_spiral_arm(fov: Optional[float] = None,
                      N: Optional[int] = None,
                      nl: int = 1,
                      gamp: Optional[float] = None,
                      gslew: Optional[float] = None,
                      constraints: Optional[ScannerConstraints] = None,
                      allow_growth: bool = True) -> RawWaveform:
    """
    Designs one spiral arm at the gradient raster.

    Parameters:
    - fov (float): Field of view (cm).
    - N (int): Matrix size; the arm reaches a k-space radius of N/2 cycles/FOV.
    - nl (int): Number of interleaves the full trajectory will use.
    - gamp (float): Gradient amplitude limit (G/cm), default 2.2.
    - gslew (float): Slew rate limit (mT/m/ms), default 180.
    - constraints (Optional[ScannerConstraints]): Full set of limits, also
      supplying the raster time, raw buffer size and gyromagnetic ratio.
      fov, N, gamp and gslew may then be omitted; any that are passed must
      agree with it.
    - allow_growth (bool): Let the raw buffer grow past 2 * max_raw_samples.

    Returns:
    - RawWaveform: Gradient, k-space and slew waveforms of the arm.

    Raises:
    - ConfigurationError: For missing or non-positive limits, FOV, matrix size
      or interleaves, or explicit limits that disagree with `constraints`.
    - TrajectoryDesignError: If the slew-limited regime has no clean cutoff.
    - CapacityExceededError: If the arm overflows the buffer with growth disabled.
    """
    constraints = _resolve_constraints(fov, N, gamp, gslew, constraints)
    nl = require_positive_int("nl", nl)

    fov = constraints.fov_cm
    N = constraints.matrix_size
    gamp = constraints.max_grad_G_per_cm
    gts = constraints.raster_time_s
    gambar = constraints.gamma_Hz_per_G
    gamma = 2 * np.pi * gambar
    s0 = constraints.max_slew_mT_per_m_per_ms * 100
    dt = gts * 0.5

    buffer = WaveformBuffer(2 * constraints.max_raw_samples, allow_growth=allow_growth)

    t1, theta1, gx1, gy1, gmax_peak = _slew_limited_regime(fov, N, nl, gamma, s0, dt)

    # cut short where the gradient would exceed the amplitude envelope
    envelope = magnitude(gamp / (theta1 + ENVELOPE_EPS), gamp)
    l1 = first_crossing_index(magnitude(gx1, gy1), envelope)
    if l1 == 0:
        raise TrajectoryDesignError("Slew-limited regime has no sample under the amplitude envelope.")
    t_s = t1[l1 - 1]
    theta_s = theta1[l1 - 1]
    buffer.write(0, gx1[:l1], gy1[:l1])

    horizon = t_s
    l3 = 0
    if gmax_peak > gamp:
        horizon, gx2, gy2 = _amplitude_limited_regime(fov, N, nl, gamp, gamma, dt, t_s, theta_s)
        buffer.write(l1, gx2, gy2)
        l3 = gx2.shape[0]

    gx, gy = buffer.decimate(2)
    kscale = gts * fov * gambar
    kx = np.cumsum(gx) * kscale
    ky = np.cumsum(gy) * kscale
    sx = np.diff(gx) / (gts * 1000)
    sy = np.diff(gy) / (gts * 1000)

    return RawWaveform(gx, gy, kx, ky, sx, sy,
                       raster_time_s=gts,
                       phase1_samples=l1,
                       phase2_samples=l3,
                       theta_transition=float(theta_s),
                       design_duration_s=float(horizon))
