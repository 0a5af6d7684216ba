import unittest
import numpy as np
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from spiralgen.exceptions import ConfigurationError
from spiralgen.resample import resample_uniform, resample_waveform, resampled_length
from spiralgen.waveform import design_spiral_arm


class TestResampledLength(unittest.TestCase):
    def test_coarser_grid(self):
        # floor(4/5 * 10) = 8
        self.assertEqual(resampled_length(10, 4e-6, 5e-6), 8)
        self.assertEqual(resampled_length(4714, 4e-6, 5e-6), 3771)

    def test_same_grid(self):
        self.assertEqual(resampled_length(10, 4e-6, 4e-6), 10)

    def test_finer_grid_is_truncated_to_native_domain(self):
        # nominal floor(2 * 10) = 20, but t = 19 * 2us would pass the last native time 36us
        self.assertEqual(resampled_length(10, 4e-6, 2e-6), 19)

    def test_target_never_exceeds_native_domain(self):
        for num_native in (1, 2, 7, 100, 4713):
            for dts, tsamp in ((4e-6, 5e-6), (4e-6, 2e-6), (4e-6, 3e-6), (4e-6, 1e-6)):
                n = resampled_length(num_native, dts, tsamp)
                if n > 0:
                    self.assertLessEqual((n - 1) * tsamp, (num_native - 1) * dts * (1 + 1e-12))

    def test_empty(self):
        self.assertEqual(resampled_length(0, 4e-6, 5e-6), 0)

    def test_invalid_spacing(self):
        with self.assertRaises(ConfigurationError):
            resampled_length(10, 4e-6, 0)
        with self.assertRaises(ConfigurationError):
            resampled_length(10, -4e-6, 5e-6)


class TestResampleUniform(unittest.TestCase):
    def test_linear_signal_is_reproduced(self):
        # signal value equals time in us
        signal = np.arange(10) * 4.0
        out = resample_uniform(signal, 4e-6, 5e-6)
        np.testing.assert_allclose(out, np.arange(8) * 5.0, atol=1e-9)

    def test_midpoints_on_finer_grid(self):
        signal = np.arange(10, dtype=float)
        out = resample_uniform(signal, 4e-6, 2e-6)
        self.assertEqual(out.shape, (19,))
        np.testing.assert_allclose(out, np.arange(19) * 0.5, atol=1e-12)
        self.assertAlmostEqual(out[-1], signal[-1])

    def test_interpolates_between_neighbours(self):
        signal = np.array([0.0, 10.0, 0.0, 10.0, 0.0])
        out = resample_uniform(signal, 4e-6, 5e-6)
        # t = 0, 5, 10 us -> native positions 0, 1.25, 2.5
        np.testing.assert_allclose(out, [0.0, 7.5, 5.0, 2.5], atol=1e-9)

    def test_empty_and_single(self):
        self.assertEqual(resample_uniform(np.array([]), 4e-6, 5e-6).shape, (0,))
        np.testing.assert_array_equal(resample_uniform(np.array([3.0]), 4e-6, 4e-6), [3.0])

    def test_rejects_2d_input(self):
        with self.assertRaises(ValueError):
            resample_uniform(np.zeros((3, 2)), 4e-6, 5e-6)


class TestResampleWaveform(unittest.TestCase):
    def test_lengths_follow_native_lengths(self):
        raw = design_spiral_arm(22, 64)
        resampled = resample_waveform(raw, 5e-6)
        expected = resampled_length(raw.num_samples, raw.raster_time_s, 5e-6)
        self.assertEqual(resampled.num_kspace_samples, expected)
        self.assertEqual(resampled.num_gradient_samples, expected)
        self.assertEqual(resampled.ky.shape, resampled.kx.shape)
        self.assertEqual(resampled.dt_s, 5e-6)
        self.assertAlmostEqual(resampled.kx[0], 0.0, places=12)


if __name__ == '__main__':
    unittest.main()
