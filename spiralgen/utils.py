"""
Utilities for Trajectory Display and Self-Test
----------------------------------------------

This module provides:
- `display_trajectory`: a figure with the k-space of every interleave and,
  optionally, the gradient and slew rate waveforms of the first interleave.
- `run_self_test`: exercises the default, automatic-length and multi-shot
  configurations and checks the basic trajectory invariants.
"""
from typing import Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .exceptions import ConfigurationError
from .kspace_generator import AUTO_LENGTH, SpiralTrajectoryGenerator
from .trajectory import SpiralTrajectory
from .vector import magnitude

__all__ = ['display_trajectory', 'run_self_test', 'SELF_TEST_TOKEN']

SELF_TEST_TOKEN = 'test'


def display_trajectory(
    trajectory_obj: SpiralTrajectory,
    show_gradients: bool = True,
    show_slew: bool = False,
    max_interleaves: Optional[int] = None,
    fig_size: Optional[Tuple[float, float]] = None,
    ) -> plt.Figure:
    """
    Displays the k-space trajectory and optionally its gradient and slew rate waveforms.

    Parameters:
    - trajectory_obj (SpiralTrajectory): The trajectory to display.
    - show_gradients (bool): If True, plot the gradient waveforms of every interleave.
    - show_slew (bool): If True, plot the slew rate of interleave 0.
    - max_interleaves (Optional[int]): Limit on interleaves drawn in the k-space panel.
    - fig_size (Optional[Tuple[float,float]]): Figure size for matplotlib.

    Returns:
    - matplotlib.figure.Figure: The figure object containing the plots.
    """
    if not isinstance(trajectory_obj, SpiralTrajectory):
        raise TypeError("trajectory_obj must be an instance of the SpiralTrajectory class.")

    num_subplots = 1 + int(show_gradients) + int(show_slew)
    if fig_size is None:
        fig_size = (6 * num_subplots, 5)
    fig = plt.figure(figsize=fig_size)

    current_subplot_idx = 1
    ax_kspace = fig.add_subplot(1, num_subplots, current_subplot_idx)
    trajectory_obj.plot_2d(ax=ax_kspace, max_interleaves=max_interleaves)

    time_ms = np.arange(trajectory_obj.get_num_points()) * trajectory_obj.dt_seconds * 1000

    if show_gradients:
        current_subplot_idx += 1
        ax_grad = fig.add_subplot(1, num_subplots, current_subplot_idx)
        for i in range(trajectory_obj.get_num_interleaves()):
            ax_grad.plot(time_ms, trajectory_obj.gradients[:, 0, i], linewidth=0.5)
            ax_grad.plot(time_ms, trajectory_obj.gradients[:, 1, i], linewidth=0.5)
        ax_grad.set_title("Gradient Waveforms")
        ax_grad.set_xlabel("Time (ms)")
        ax_grad.set_ylabel("Gradient (G/cm)")

    if show_slew:
        current_subplot_idx += 1
        ax_slew = fig.add_subplot(1, num_subplots, current_subplot_idx)
        if trajectory_obj.get_num_points() > 1:
            slew = np.diff(trajectory_obj.gradients[:, :, 0], axis=0) / (trajectory_obj.dt_seconds * 1000)
            ax_slew.plot(time_ms[1:], magnitude(slew[:, 0], slew[:, 1]), label="|s|")
            ax_slew.legend()
        else:
            ax_slew.text(0.5, 0.5, "Slew rate needs more than one sample.",
                         horizontalalignment='center', verticalalignment='center')
        ax_slew.set_title("Slew Rate (interleave 0)")
        ax_slew.set_xlabel("Time (ms)")
        ax_slew.set_ylabel("Slew Rate (G/cm/ms)")

    fig.tight_layout()
    return fig


def run_self_test(token: str = SELF_TEST_TOKEN,
                  show_plots: bool = False,
                  verbose: bool = False) -> bool:
    """
    Runs the spiral design on the standard configurations.

    The default 1-shot spiral, automatic-length spirals at 20, 21 and 22 cm
    and a 5-shot spiral are generated and checked: the 1-shot arm starts at
    the k-space origin, the interleaves share one radial profile and omega
    stays within [-pi, pi] up to a small overshoot.

    Parameters:
    - token (str): Must be 'test'.
    - show_plots (bool): Build diagnostic figures and call `plt.show()`.
    - verbose (bool): Print progress messages.

    Returns:
    - bool: True if every check passed.

    Raises:
    - ConfigurationError: For any token other than 'test'.
    """
    if token != SELF_TEST_TOKEN:
        raise ConfigurationError(f"Not a valid self-test token: {token!r}")

    def log_message(msg, level="INFO"):
        if verbose or level == "ERROR":
            print(f"SelfTest [{level}]: {msg}")

    passed = True

    default_traj = SpiralTrajectoryGenerator().create_spiral(name_prefix="selftest")
    kspace0, omega0, _ = default_traj.as_arrays()
    log_message(f"Default spiral: {kspace0.shape[0]} samples, "
                f"max |g| = {default_traj.get_max_grad_G_per_cm():.3f} G/cm")
    if not np.allclose(kspace0[0], 0.0):
        log_message("Default spiral does not start at the k-space origin.", "ERROR")
        passed = False
    if np.max(np.abs(omega0)) > np.pi * 1.05:
        log_message("Default spiral exceeds the k-space extent of the matrix.", "ERROR")
        passed = False

    for fov in (20, 21, 22):
        traj = SpiralTrajectoryGenerator(fov_cm=fov).create_spiral(total_samples=AUTO_LENGTH)
        log_message(f"FOV {fov} cm, automatic length: {traj.get_num_points()} samples")

    multi_traj = SpiralTrajectoryGenerator().create_spiral(num_interleaves=5)
    radii = magnitude(multi_traj.kspace[:, 0, :], multi_traj.kspace[:, 1, :])
    if not np.allclose(radii, radii[:, :1]):
        log_message("Interleaves do not share the radial profile.", "ERROR")
        passed = False
    log_message(f"5-shot spiral: {multi_traj.get_num_points()} samples per interleave")

    if show_plots:
        display_trajectory(default_traj, show_gradients=True)
        display_trajectory(multi_traj, show_gradients=True)
        plt.show()

    log_message("Self-test finished." if passed else "Self-test failed.")
    return passed
