"""
Physical, hardware and default parameters shared by the spiral designer.

Units follow the scanner convention used throughout the package: field of
view in cm, gradient amplitude in G/cm, slew rate in mT/m/ms and time in
seconds.
"""
import numpy as np

__all__ = [
    'COMMON_NUCLEI_GAMMA_HZ_PER_G',
    'GAMMA_BAR_HZ_PER_G',
    'GRADIENT_RASTER_TIME_S',
    'GRESMAX',
    'ENVELOPE_EPS',
    'DEFAULT_FOV_CM',
    'DEFAULT_MATRIX_SIZE',
    'DEFAULT_DWELL_TIME_S',
    'DEFAULT_NUM_INTERLEAVES',
    'DEFAULT_MAX_GRAD_G_PER_CM',
    'DEFAULT_MAX_SLEW_MT_PER_M_PER_MS',
    'NUM_SAMPLES_BY_FOV_CM',
]

# Gyromagnetic ratios in Hz/G (1 G = 1e-4 T)
COMMON_NUCLEI_GAMMA_HZ_PER_G = {
    '1H': 4.257e3, '13C': 1.0705e3, '31P': 1.7235e3, '19F': 4.0052e3,
    '23Na': 1.1262e3,
}
GAMMA_BAR_HZ_PER_G = COMMON_NUCLEI_GAMMA_HZ_PER_G['1H']

# Gradient hardware raster (s) and raw waveform memory, in samples
GRADIENT_RASTER_TIME_S = 4e-6
GRESMAX = 21000

# Keeps gamp / theta finite at theta == 0 in the amplitude envelope
ENVELOPE_EPS = np.finfo(np.float64).eps

DEFAULT_FOV_CM = 22.0
DEFAULT_MATRIX_SIZE = 64
DEFAULT_DWELL_TIME_S = 5e-6
DEFAULT_NUM_INTERLEAVES = 1
DEFAULT_MAX_GRAD_G_PER_CM = 2.2
DEFAULT_MAX_SLEW_MT_PER_M_PER_MS = 180.0

# Total output samples used on the scanner for these fields of view.
# Any other FOV falls back to the automatic length.
NUM_SAMPLES_BY_FOV_CM = {
    20: 4026,
    22: 3770,
}
