"""
Defines the `SpiralTrajectory` class.

A `SpiralTrajectory` holds every interleave of a composed spiral on the
acquisition dwell-time grid, together with metadata about the design that
produced it. It converts k-space to angular frequency and packages arrays in
the shapes reconstruction code expects.
"""
from typing import Any, Dict, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .interleave import ComposedInterleaves, Interleave
from .vector import magnitude

__all__ = ['SpiralTrajectory', 'kspace_to_omega']


def kspace_to_omega(kspace: np.ndarray, matrix_size: int) -> np.ndarray:
    """Converts k-space in cycles/FOV to angular frequency 2*pi*k/N (radians)."""
    return 2 * np.pi * np.asarray(kspace) / matrix_size


class SpiralTrajectory:
    """
    Represents a multi-shot spiral trajectory.

    Attributes:
        name (str): Name of the trajectory.
        kspace (np.ndarray): K-space in cycles/FOV, shape (nk, 2, nl).
        gradients (np.ndarray): Gradient waveforms in G/cm, shape (nk, 2, nl).
        angles (np.ndarray): Rotation of each interleave in radians, shape (nl,).
        dt_seconds (float): Dwell time between samples (s).
        matrix_size (int): Reconstructed matrix size N.
        metadata (Dict[str, Any]): Design parameters and computed metrics.
    """
    def __init__(self, name: str,
                 composed: ComposedInterleaves,
                 dt_seconds: float,
                 matrix_size: int,
                 metadata: Optional[Dict[str, Any]] = None):
        self.name = name
        self.kspace = np.stack((composed.kx, composed.ky), axis=1)
        self.gradients = np.stack((composed.gx, composed.gy), axis=1)
        self.angles = np.asarray(composed.angles)
        self.dt_seconds = dt_seconds
        self.matrix_size = matrix_size
        self.metadata = metadata or {}
        self.metadata['num_padded_kspace_samples'] = composed.num_padded_kspace
        self.metadata['num_padded_gradient_samples'] = composed.num_padded_gradient
        self._compute_metrics()

    def _compute_metrics(self):
        kmag = magnitude(self.kspace[:, 0, :], self.kspace[:, 1, :])
        gmag = magnitude(self.gradients[:, 0, :], self.gradients[:, 1, :])
        self.metadata['max_k_radius_cycles_per_fov'] = float(np.max(kmag)) if kmag.size else 0.0
        self.metadata['max_grad_G_per_cm'] = float(np.max(gmag)) if gmag.size else 0.0
        if self.get_num_points() > 1:
            slew = np.diff(self.gradients, axis=0) / (self.dt_seconds * 1000)  # G/cm/ms
            self.metadata['max_slew_G_per_cm_per_ms'] = float(
                np.max(magnitude(slew[:, 0, :], slew[:, 1, :])))
        else:
            self.metadata['max_slew_G_per_cm_per_ms'] = 0.0

    def get_num_points(self) -> int:
        """Samples per interleave (nk)."""
        return self.kspace.shape[0]

    def get_num_interleaves(self) -> int:
        return self.kspace.shape[2]

    def get_duration_seconds(self) -> float:
        """Readout duration of one interleave."""
        return self.get_num_points() * self.dt_seconds

    def get_max_grad_G_per_cm(self) -> float:
        return self.metadata['max_grad_G_per_cm']

    def get_max_slew_G_per_cm_per_ms(self) -> float:
        return self.metadata['max_slew_G_per_cm_per_ms']

    def get_interleave(self, index: int) -> Interleave:
        """Returns interleave `index` (0-based)."""
        nl = self.get_num_interleaves()
        if not -nl <= index < nl:
            raise IndexError(f"Interleave index {index} out of range for {nl} interleaves.")
        return Interleave(self.kspace[:, 0, index], self.kspace[:, 1, index],
                          self.gradients[:, 0, index], self.gradients[:, 1, index],
                          float(self.angles[index]))

    def get_omega(self) -> np.ndarray:
        """Angular frequency 2*pi*k/N, same shape as `kspace`."""
        return kspace_to_omega(self.kspace, self.matrix_size)

    def as_arrays(self, squeeze: bool = True) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Returns (kspace, omega, gradxy).

        With `squeeze`, a single-interleave trajectory is returned as (nk, 2)
        arrays; otherwise all arrays have shape (nk, 2, nl).
        """
        kspace = self.kspace
        gradxy = self.gradients
        if squeeze and self.get_num_interleaves() == 1:
            kspace = kspace[:, :, 0]
            gradxy = gradxy[:, :, 0]
        return kspace.copy(), kspace_to_omega(kspace, self.matrix_size), gradxy.copy()

    def plot_2d(self, ax: Optional[plt.Axes] = None,
                max_interleaves: Optional[int] = None,
                point_stride: int = 1,
                title: Optional[str] = None,
                plot_style: str = '.') -> plt.Axes:
        """
        Scatter-plots the k-space of each interleave.

        Args:
            ax (Optional[plt.Axes]): Axes to draw on; a new figure is created if None.
            max_interleaves (Optional[int]): Plot at most this many interleaves.
            point_stride (int): Plot every `point_stride`-th sample.
            title (Optional[str]): Plot title.
            plot_style (str): Matplotlib format string.
        """
        if ax is None:
            fig = plt.figure()
            ax = fig.add_subplot(111)
        nl = self.get_num_interleaves()
        if max_interleaves is not None:
            nl = min(nl, max_interleaves)
        stride = max(1, point_stride)
        for i in range(nl):
            ax.plot(self.kspace[::stride, 0, i], self.kspace[::stride, 1, i], plot_style,
                    markersize=1, label=f"IL {i}")
        ax.set_xlabel("kx (cycles/FOV)"); ax.set_ylabel("ky (cycles/FOV)")
        ax.set_title(title if title else f"K-space: {self.name}")
        ax.set_aspect('equal')
        return ax

    def summary(self) -> None:
        """Prints a summary of the trajectory's properties and metadata to stdout."""
        print(f"Trajectory Summary: {self.name}")
        print(f"  Interleaves: {self.get_num_interleaves()}")
        print(f"  Points per interleave: {self.get_num_points()}")
        print(f"  K-space shape (nk,2,nl): {self.kspace.shape}")
        print(f"  Dwell time (s): {self.dt_seconds}")
        print(f"  Duration (s): {self.get_duration_seconds()}")
        for k, v in self.metadata.items():
            print(f"  Metadata '{k}': {v}")
