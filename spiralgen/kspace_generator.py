"""
High-Level Spiral Trajectory Generator
--------------------------------------

This module defines `SpiralTrajectoryGenerator`, which holds a validated
design configuration and runs the design pipeline

    design_spiral_arm -> resample_waveform -> compose_interleaves

to produce `SpiralTrajectory` objects, and `mri_kspace_spiral`, a function
interface with scanner defaults that returns plain arrays.
"""
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

from .constants import (DEFAULT_DWELL_TIME_S, DEFAULT_FOV_CM, DEFAULT_MATRIX_SIZE,
                        DEFAULT_MAX_GRAD_G_PER_CM, DEFAULT_MAX_SLEW_MT_PER_M_PER_MS,
                        DEFAULT_NUM_INTERLEAVES, GAMMA_BAR_HZ_PER_G,
                        GRADIENT_RASTER_TIME_S, GRESMAX, NUM_SAMPLES_BY_FOV_CM)
from .constraints import ScannerConstraints, require_positive, require_positive_int
from .exceptions import ConfigurationError
from .interleave import PAD_POLICIES, compose_interleaves
from .resample import resample_waveform
from .trajectory import SpiralTrajectory
from .waveform import RawWaveform, design_spiral_arm

__all__ = ['AUTO_LENGTH', 'LOOKUP_LENGTH', 'resolve_num_samples', 'SpiralTrajectoryGenerator', 'mri_kspace_spiral']

AUTO_LENGTH = 'auto'
# Same as None: per-FOV table, then the automatic length
LOOKUP_LENGTH = -1

TotalSamples = Union[None, int, str]


def resolve_num_samples(total_samples: TotalSamples, fov_cm: float,
                        num_interleaves: int = 1) -> Optional[int]:
    """
    Resolves the requested total sample count into samples per interleave.

    Rules:
    - None or -1: look the FOV up in `NUM_SAMPLES_BY_FOV_CM` (20 cm -> 4026,
      22 cm -> 3770); any other FOV uses the automatic length.
    - 'auto' or 0: automatic length (resampled arm length - 2).
    - positive int: used as given.

    Returns:
    - Optional[int]: Samples per interleave, or None for the automatic length.

    Raises:
    - ConfigurationError: For other negative or non-integer requests, or a total that
      is not divisible by the number of interleaves.
    """
    nl = require_positive_int("nl", num_interleaves)
    if total_samples is None or (isinstance(total_samples, (int, np.integer))
                                 and not isinstance(total_samples, bool)
                                 and total_samples == LOOKUP_LENGTH):
        total_samples = NUM_SAMPLES_BY_FOV_CM.get(fov_cm)
        if total_samples is None:
            return None
    if isinstance(total_samples, str):
        if total_samples != AUTO_LENGTH:
            raise ConfigurationError(f"Nt must be an integer, None or '{AUTO_LENGTH}', got {total_samples!r}.")
        return None
    if isinstance(total_samples, bool) or not isinstance(total_samples, (int, np.integer)):
        raise ConfigurationError(f"Nt must be an integer, None or '{AUTO_LENGTH}', got {total_samples!r}.")
    if total_samples == 0:
        return None
    if total_samples < 0:
        raise ConfigurationError(f"Nt must be {LOOKUP_LENGTH}, 0 or positive, got {total_samples}.")
    if total_samples % nl != 0:
        raise ConfigurationError(f"Nt ({total_samples}) must be divisible by nl ({nl}).")
    return int(total_samples) // nl


class SpiralTrajectoryGenerator:
    """
    A high-level generator for multi-shot spiral trajectories.
    """
    def __init__(self,
                 fov_cm: float = DEFAULT_FOV_CM,
                 matrix_size: int = DEFAULT_MATRIX_SIZE,
                 dt_s: float = DEFAULT_DWELL_TIME_S,
                 max_grad_G_per_cm: float = DEFAULT_MAX_GRAD_G_PER_CM,
                 max_slew_mT_per_m_per_ms: float = DEFAULT_MAX_SLEW_MT_PER_M_PER_MS,
                 gamma_Hz_per_G: float = GAMMA_BAR_HZ_PER_G,
                 raster_time_s: float = GRADIENT_RASTER_TIME_S,
                 max_raw_samples: int = GRESMAX):
        """
        Initializes the SpiralTrajectoryGenerator.

        Parameters:
        - fov_cm: Field of view in cm.
        - matrix_size: Reconstructed matrix size N.
        - dt_s: Output dwell time in seconds.
        - max_grad_G_per_cm: Gradient amplitude limit (G/cm).
        - max_slew_mT_per_m_per_ms: Slew rate limit (mT/m/ms).
        - gamma_Hz_per_G: Gyromagnetic ratio (Hz/G).
        - raster_time_s: Gradient raster time in seconds.
        - max_raw_samples: Raw waveform sample cap; the design buffer holds twice this.
        """
        self.constraints = ScannerConstraints(
            fov_cm=fov_cm,
            matrix_size=matrix_size,
            max_grad_G_per_cm=max_grad_G_per_cm,
            max_slew_mT_per_m_per_ms=max_slew_mT_per_m_per_ms,
            raster_time_s=raster_time_s,
            max_raw_samples=max_raw_samples,
            gamma_Hz_per_G=gamma_Hz_per_G)
        self.dt_s = require_positive("dt", dt_s)

    def get_params(self) -> Dict[str, Any]:
        """Returns a dictionary of the generator's current settings."""
        params = self.constraints.to_dict()
        params["dt_s"] = self.dt_s
        return params

    def set_params(self, **kwargs: Any) -> None:
        """Updates generator settings; the full configuration is re-validated."""
        params = self.get_params()
        for key in kwargs:
            if key not in params:
                raise AttributeError(f"'{type(self).__name__}' has no parameter '{key}'")
        params.update(kwargs)
        dt_s = params.pop("dt_s")
        constraints = ScannerConstraints(**params)
        self.dt_s = require_positive("dt", dt_s)
        self.constraints = constraints

    def design_arm(self, num_interleaves: int = DEFAULT_NUM_INTERLEAVES,
                   allow_growth: bool = True) -> RawWaveform:
        """Designs the base arm on the gradient raster for `num_interleaves` shots."""
        return design_spiral_arm(nl=num_interleaves, constraints=self.constraints,
                                 allow_growth=allow_growth)

    def create_spiral(self,
                      num_interleaves: int = DEFAULT_NUM_INTERLEAVES,
                      total_samples: TotalSamples = None,
                      rotamount: int = 0,
                      pad_policy: str = 'zero',
                      allow_growth: bool = True,
                      name_prefix: str = "spiral",
                      **kwargs) -> SpiralTrajectory:
        """
        Creates a spiral trajectory.

        Parameters:
        - num_interleaves (int): Number of interleaves nl.
        - total_samples: Total samples over all interleaves (see `resolve_num_samples`).
        - rotamount (int): Global rotation in quarter turns.
        - pad_policy (str): 'zero' or 'raise' when the arm is shorter than requested.
        - allow_growth (bool): Allow the raw design buffer to grow.
        - name_prefix (str): Prefix for the trajectory name.
        - **kwargs: Additional metadata to store in the trajectory.

        Returns:
        - SpiralTrajectory: The generated trajectory.
        """
        nl = require_positive_int("nl", num_interleaves)
        if pad_policy not in PAD_POLICIES:
            raise ConfigurationError(f"Unknown pad_policy: {pad_policy}. Supported: {PAD_POLICIES}.")
        nk = resolve_num_samples(total_samples, self.constraints.fov_cm, nl)

        raw = self.design_arm(nl, allow_growth=allow_growth)
        resampled = resample_waveform(raw, self.dt_s)
        composed = compose_interleaves(resampled, num_interleaves=nl, num_samples=nk,
                                       rotamount=rotamount, pad_policy=pad_policy)

        metadata = self.get_params()
        metadata.update({
            "trajectory_type": "spiral",
            "num_interleaves": nl,
            "total_samples_requested": total_samples,
            "auto_length": nk is None,
            "rotamount": rotamount,
            "pad_policy": pad_policy,
            "raw_num_samples": raw.num_samples,
            "resampled_kspace_samples": resampled.num_kspace_samples,
            "resampled_gradient_samples": resampled.num_gradient_samples,
            "amplitude_limited": raw.amplitude_limited,
            "transition_index": raw.transition_index,
            "theta_transition": raw.theta_transition,
            "raw_matrix_extent": raw.matrix_extent,
            "raw_max_grad_G_per_cm": raw.max_grad,
            "raw_max_slew_G_per_cm_per_ms": raw.max_slew,
            "design_duration_ms": raw.duration_ms,
        })
        metadata.update(kwargs)

        traj_name = f"{name_prefix}_{nl}il_{composed.num_samples}pts"
        return SpiralTrajectory(name=traj_name,
                                composed=composed,
                                dt_seconds=self.dt_s,
                                matrix_size=self.constraints.matrix_size,
                                metadata=metadata)


def mri_kspace_spiral(*,
                      fov: float = DEFAULT_FOV_CM,
                      N: int = DEFAULT_MATRIX_SIZE,
                      Nt: TotalSamples = None,
                      dt: float = DEFAULT_DWELL_TIME_S,
                      nl: int = DEFAULT_NUM_INTERLEAVES,
                      gamp: float = DEFAULT_MAX_GRAD_G_PER_CM,
                      gslew: float = DEFAULT_MAX_SLEW_MT_PER_M_PER_MS,
                      rotamount: int = 0,
                      pad_policy: str = 'zero') -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Makes a spiral k-space trajectory for GE 3T scanner constraints.

    Parameters:
    - fov: Field of view in cm.
    - N: Matrix size of the reconstructed image.
    - Nt: Total number of samples over all interleaves. None or -1 use the
      per-FOV table and fall back to the automatic length; 'auto' or 0
      always use the automatic length.
    - dt: Output sampling interval in seconds.
    - nl: Number of interleaves.
    - gamp: Design gradient amplitude limit (G/cm).
    - gslew: Design slew rate limit (mT/m/ms).
    - rotamount: Global rotation in quarter turns.
    - pad_policy: 'zero' or 'raise' when Nt asks for more samples than the arm has.

    Returns:
    - kspace: K-space trajectory [kx ky] in cycles/FOV; (Nt, 2) for one
      interleave, (Nt/nl, 2, nl) otherwise.
    - omega: 2*pi*kspace/N in radians, same shape.
    - gradxy: Gradient waveforms in G/cm, same shape.
    """
    generator = SpiralTrajectoryGenerator(fov_cm=fov, matrix_size=N, dt_s=dt,
                                          max_grad_G_per_cm=gamp,
                                          max_slew_mT_per_m_per_ms=gslew)
    trajectory = generator.create_spiral(num_interleaves=nl, total_samples=Nt,
                                         rotamount=rotamount, pad_policy=pad_policy)
    return trajectory.as_arrays()
