"""
Defines `ScannerConstraints`, the read-only hardware and imaging limits
that a single spiral design is computed against.
"""
import numbers
from typing import Any, Dict

from .constants import (GAMMA_BAR_HZ_PER_G, GRADIENT_RASTER_TIME_S, GRESMAX)
from .exceptions import ConfigurationError

__all__ = ['ScannerConstraints', 'require_positive', 'require_positive_int']


def require_positive(name: str, value: Any) -> float:
    """Returns `value` as a float, raising ConfigurationError unless it is a finite number > 0."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigurationError(f"{name} must be a real number, got {value!r}.")
    value = float(value)
    if not value > 0 or value == float('inf'):
        raise ConfigurationError(f"{name} must be positive, got {value}.")
    return value


def require_positive_int(name: str, value: Any) -> int:
    """Returns `value` as an int, raising ConfigurationError unless it is an integer >= 1."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}.")
    if value < 1:
        raise ConfigurationError(f"{name} must be positive, got {value}.")
    return int(value)


class ScannerConstraints:
    """
    Hardware and imaging limits for one spiral design.

    All values are validated at construction and exposed read-only.

    Attributes:
        fov_cm (float): Field of view (cm).
        matrix_size (int): Reconstructed matrix size N; sets the k-space extent N/2.
        max_grad_G_per_cm (float): Design gradient amplitude limit `gamp` (G/cm).
        max_slew_mT_per_m_per_ms (float): Design slew rate limit `gslew` (mT/m/ms).
        raster_time_s (float): Gradient raster time `gts` (s).
        max_raw_samples (int): Raw sample cap `GRESMAX`; the fine-grid buffer
            is pre-sized to twice this value.
        gamma_Hz_per_G (float): Gyromagnetic ratio (Hz/G).
    """
    def __init__(self,
                 fov_cm: float,
                 matrix_size: int,
                 max_grad_G_per_cm: float,
                 max_slew_mT_per_m_per_ms: float,
                 raster_time_s: float = GRADIENT_RASTER_TIME_S,
                 max_raw_samples: int = GRESMAX,
                 gamma_Hz_per_G: float = GAMMA_BAR_HZ_PER_G):
        self._fov_cm = require_positive("fov", fov_cm)
        self._matrix_size = require_positive_int("N", matrix_size)
        self._max_grad_G_per_cm = require_positive("gamp", max_grad_G_per_cm)
        self._max_slew_mT_per_m_per_ms = require_positive("gslew", max_slew_mT_per_m_per_ms)
        self._raster_time_s = require_positive("raster_time_s", raster_time_s)
        self._max_raw_samples = require_positive_int("max_raw_samples", max_raw_samples)
        self._gamma_Hz_per_G = require_positive("gamma_Hz_per_G", gamma_Hz_per_G)

    @property
    def fov_cm(self) -> float:
        return self._fov_cm

    @property
    def matrix_size(self) -> int:
        return self._matrix_size

    @property
    def max_grad_G_per_cm(self) -> float:
        return self._max_grad_G_per_cm

    @property
    def max_slew_mT_per_m_per_ms(self) -> float:
        return self._max_slew_mT_per_m_per_ms

    @property
    def raster_time_s(self) -> float:
        return self._raster_time_s

    @property
    def max_raw_samples(self) -> int:
        return self._max_raw_samples

    @property
    def gamma_Hz_per_G(self) -> float:
        return self._gamma_Hz_per_G

    def to_dict(self) -> Dict[str, Any]:
        """Returns the constraints as a plain dictionary (used for trajectory metadata)."""
        return {
            "fov_cm": self.fov_cm,
            "matrix_size": self.matrix_size,
            "max_grad_G_per_cm": self.max_grad_G_per_cm,
            "max_slew_mT_per_m_per_ms": self.max_slew_mT_per_m_per_ms,
            "raster_time_s": self.raster_time_s,
            "max_raw_samples": self.max_raw_samples,
            "gamma_Hz_per_G": self.gamma_Hz_per_G,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScannerConstraints):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"ScannerConstraints({params})"
