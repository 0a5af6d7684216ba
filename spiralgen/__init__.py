"""
Spiralgen: MRI Spiral K-Space Trajectory Design
===============================================

`spiralgen` designs multi-shot spiral k-space trajectories for MRI under
gradient amplitude and slew rate limits.

It provides tools to:
- Design a single spiral arm with a slew-limited / amplitude-limited closed
  form (Duyn's approximation with an Archimedean amplitude limit).
- Resample the raster waveform onto an acquisition dwell time.
- Replicate the arm into rotated interleaves and package k-space, angular
  frequency and gradient arrays for reconstruction.
- Display trajectories and run a self-test of the standard configurations.
"""

__version__ = "0.1.0"

from .constants import COMMON_NUCLEI_GAMMA_HZ_PER_G, GRESMAX, NUM_SAMPLES_BY_FOV_CM
from .exceptions import CapacityExceededError, ConfigurationError, TrajectoryDesignError
from .constraints import ScannerConstraints
from .waveform import RawWaveform, design_spiral_arm
from .resample import ResampledWaveform, resample_uniform, resample_waveform
from .interleave import ComposedInterleaves, Interleave, compose_interleaves
from .trajectory import SpiralTrajectory
from .kspace_generator import SpiralTrajectoryGenerator, mri_kspace_spiral, resolve_num_samples
from .utils import display_trajectory, run_self_test

__all__ = [
    'COMMON_NUCLEI_GAMMA_HZ_PER_G',
    'GRESMAX',
    'NUM_SAMPLES_BY_FOV_CM',
    'ConfigurationError',
    'TrajectoryDesignError',
    'CapacityExceededError',
    'ScannerConstraints',
    'RawWaveform',
    'design_spiral_arm',
    'ResampledWaveform',
    'resample_uniform',
    'resample_waveform',
    'Interleave',
    'ComposedInterleaves',
    'compose_interleaves',
    'SpiralTrajectory',
    'SpiralTrajectoryGenerator',
    'mri_kspace_spiral',
    'resolve_num_samples',
    'display_trajectory',
    'run_self_test',
]
