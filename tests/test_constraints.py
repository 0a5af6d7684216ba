import unittest
import numpy as np
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from spiralgen.constraints import ScannerConstraints, require_positive, require_positive_int
from spiralgen.exceptions import CapacityExceededError, ConfigurationError, TrajectoryDesignError


class TestValidators(unittest.TestCase):
    def test_require_positive(self):
        self.assertEqual(require_positive("gamp", 2), 2.0)
        self.assertIsInstance(require_positive("gamp", np.float32(2.5)), float)
        with self.assertRaisesRegex(ConfigurationError, "gamp must be positive, got 0.0"):
            require_positive("gamp", 0)
        with self.assertRaisesRegex(ConfigurationError, "must be positive"):
            require_positive("gamp", float('nan'))
        with self.assertRaisesRegex(ConfigurationError, "must be positive"):
            require_positive("gamp", float('inf'))
        with self.assertRaisesRegex(ConfigurationError, "real number"):
            require_positive("gamp", "2.2")
        with self.assertRaisesRegex(ConfigurationError, "real number"):
            require_positive("gamp", True)

    def test_require_positive_int(self):
        self.assertEqual(require_positive_int("nl", np.int32(4)), 4)
        with self.assertRaisesRegex(ConfigurationError, "nl must be positive"):
            require_positive_int("nl", 0)
        with self.assertRaisesRegex(ConfigurationError, "integer"):
            require_positive_int("nl", 2.0)


class TestScannerConstraints(unittest.TestCase):
    def test_read_only(self):
        c = ScannerConstraints(22, 64, 2.2, 180)
        self.assertEqual(c.fov_cm, 22.0)
        self.assertEqual(c.raster_time_s, 4e-6)
        self.assertEqual(c.max_raw_samples, 21000)
        self.assertEqual(c.gamma_Hz_per_G, 4257.0)
        with self.assertRaises(AttributeError):
            c.fov_cm = 20

    def test_equality_and_repr(self):
        a = ScannerConstraints(22, 64, 2.2, 180)
        self.assertEqual(a, ScannerConstraints(22.0, 64, 2.2, 180.0))
        self.assertNotEqual(a, ScannerConstraints(20, 64, 2.2, 180))
        self.assertIn("fov_cm=22.0", repr(a))

    def test_invalid(self):
        with self.assertRaisesRegex(ConfigurationError, "fov"):
            ScannerConstraints(-22, 64, 2.2, 180)
        with self.assertRaisesRegex(ConfigurationError, "N must be"):
            ScannerConstraints(22, 64.5, 2.2, 180)
        with self.assertRaisesRegex(ConfigurationError, "max_raw_samples"):
            ScannerConstraints(22, 64, 2.2, 180, max_raw_samples=0)


class TestExceptionHierarchy(unittest.TestCase):
    def test_hierarchy(self):
        self.assertTrue(issubclass(ConfigurationError, ValueError))
        self.assertTrue(issubclass(TrajectoryDesignError, RuntimeError))
        self.assertTrue(issubclass(CapacityExceededError, TrajectoryDesignError))


if __name__ == '__main__':
    unittest.main()
