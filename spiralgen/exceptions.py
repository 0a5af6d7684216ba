"""
Exceptions raised by the spiral trajectory designer.
"""

__all__ = ['ConfigurationError', 'TrajectoryDesignError', 'CapacityExceededError']


class ConfigurationError(ValueError):
    """Raised when a design parameter is missing, out of range or inconsistent."""


class TrajectoryDesignError(RuntimeError):
    """Raised when the closed-form design cannot produce a valid waveform."""


class CapacityExceededError(TrajectoryDesignError):
    """Raised when a raw waveform does not fit its buffer and growth is disabled."""
