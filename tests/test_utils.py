import contextlib
import io
import unittest
import warnings
import numpy as np
import os
import sys
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

# Add the parent directory to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from spiralgen.exceptions import ConfigurationError
from spiralgen.kspace_generator import SpiralTrajectoryGenerator
from spiralgen.utils import display_trajectory, run_self_test


@contextlib.contextmanager
def warnings_ignored():
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UserWarning)
        yield


class TestDisplayTrajectory(unittest.TestCase):
    def setUp(self):
        self.traj = SpiralTrajectoryGenerator().create_spiral(num_interleaves=4, total_samples=0)

    def tearDown(self):
        plt.close('all')

    def test_kspace_only(self):
        fig = display_trajectory(self.traj, show_gradients=False)
        self.assertIsInstance(fig, plt.Figure)
        self.assertEqual(len(fig.axes), 1)
        self.assertEqual(len(fig.axes[0].lines), 4)

    def test_all_panels(self):
        fig = display_trajectory(self.traj, show_gradients=True, show_slew=True)
        self.assertEqual(len(fig.axes), 3)
        self.assertEqual(fig.axes[1].get_ylabel(), "Gradient (G/cm)")
        self.assertEqual(fig.axes[2].get_title(), "Slew Rate (interleave 0)")

    def test_max_interleaves(self):
        fig = display_trajectory(self.traj, show_gradients=False, max_interleaves=2)
        self.assertEqual(len(fig.axes[0].lines), 2)

    def test_invalid_input(self):
        with self.assertRaisesRegex(TypeError, "SpiralTrajectory"):
            display_trajectory(np.zeros((10, 2)))


class TestRunSelfTest(unittest.TestCase):
    def tearDown(self):
        plt.close('all')

    def test_passes(self):
        with warnings_ignored():
            self.assertTrue(run_self_test())

    def test_verbose_output(self):
        out = io.StringIO()
        with warnings_ignored(), contextlib.redirect_stdout(out):
            run_self_test('test', verbose=True)
        self.assertIn("SelfTest [INFO]: Default spiral", out.getvalue())

    def test_invalid_token(self):
        with self.assertRaisesRegex(ConfigurationError, "self-test token"):
            run_self_test('nope')


if __name__ == '__main__':
    unittest.main()
