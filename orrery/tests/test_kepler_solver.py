"""Tests for the Kepler equation solver."""
import unittest

import numpy as np
from numpy.testing import assert_allclose

from orrery.astrodynamics import (
    kepler_iterate,
    kepler_residual,
    orbit_radius,
    solve_kepler,
    solve_kepler_checked,
    solve_kepler_vec,
    true_anomaly,
)
from orrery.constants import KEPLER_MAX_ITER, KEPLER_TOL
from orrery.errors import NonConvergence


class TestSolveKepler(unittest.TestCase):

    def test_residual_over_eccentricity_and_anomaly_grid(self):
        """E - e sin E - M stays below 1e-9 for e in [0, 0.97] and unwrapped M."""
        e_values = np.linspace(0.0, 0.97, 21)
        M_values = np.linspace(-50.0, 50.0, 401)
        M, e = np.meshgrid(M_values, e_values)

        E = np.asarray(solve_kepler_vec(M, e))

        self.assertEqual(E.shape, M.shape)
        residual = np.abs(E - e * np.sin(E) - M)
        self.assertLess(residual.max(), 1e-9)

    def test_circular_orbit_is_identity(self):
        for M in [0.0, 0.5, 1.0, 2.0, 5.0, -7.5, 100.0]:
            solution = kepler_iterate(M, 0.0)
            assert_allclose(float(solution.E), M, rtol=0.0, atol=1e-12)
            self.assertEqual(int(solution.iterations), 0)

    def test_high_eccentricity_near_periapsis(self):
        """The most eccentric comet converges near periapsis, where Newton is slowest."""
        e = 0.97
        for M in [1e-9, 1e-6, 1e-3, 0.1, -0.1, np.pi, -np.pi]:
            solution = kepler_iterate(M, e)
            self.assertLessEqual(float(solution.residual), KEPLER_TOL)
            self.assertLessEqual(int(solution.iterations), KEPLER_MAX_ITER)
            self.assertLess(abs(float(kepler_residual(solution.E, e, M))), 1e-9)

    def test_large_mean_anomaly_keeps_revolution(self):
        """Unwrapped M returns E on the same revolution."""
        M = 1.0e4
        E = float(solve_kepler(M, 0.5))
        self.assertLess(abs(E - 0.5 * np.sin(E) - M), 1e-9)
        self.assertLess(abs(E - M), 0.5 + 1e-12)

    def test_exhausted_budget_returns_estimate(self):
        solution = kepler_iterate(1.0, 0.9, max_iter=1)
        self.assertEqual(int(solution.iterations), 1)
        self.assertGreater(float(solution.residual), KEPLER_TOL)
        self.assertTrue(np.isfinite(float(solution.E)))

    def test_checked_solver_strict_raises(self):
        with self.assertRaises(NonConvergence) as cm:
            solve_kepler_checked(1.0, 0.9, strict=True, max_iter=1)
        self.assertEqual(cm.exception.iterations, 1)
        self.assertIsInstance(cm.exception, ArithmeticError)

    def test_checked_solver_logs_and_returns(self):
        with self.assertLogs('orrery.astrodynamics', level='WARNING') as logs:
            E = solve_kepler_checked(1.0, 0.9, max_iter=1)
        self.assertIsInstance(E, float)
        self.assertIn('residual', logs.output[0])

    def test_checked_solver_converged(self):
        E = solve_kepler_checked(2.0, 0.3, strict=True)
        self.assertAlmostEqual(E - 0.3 * np.sin(E), 2.0, places=12)

    def test_vectorized_broadcasting(self):
        M = np.linspace(0.0, 6.0, 7)
        E_vec = np.asarray(solve_kepler_vec(M, 0.2))
        E_loop = np.array([float(solve_kepler(m, 0.2)) for m in M])
        assert_allclose(E_vec, E_loop, rtol=0.0, atol=1e-14)


class TestAnomalies(unittest.TestCase):

    def test_true_anomaly_at_apsides(self):
        for e in [0.0, 0.5, 0.97]:
            self.assertAlmostEqual(float(true_anomaly(0.0, e)), 0.0, places=14)
            self.assertAlmostEqual(abs(float(true_anomaly(np.pi, e))), np.pi, places=12)

    def test_radius_ratio_matches_eccentricity(self):
        a, e = 101.6, 0.97
        r_peri = float(orbit_radius(a, e, 0.0))
        r_apo = float(orbit_radius(a, e, np.pi))
        assert_allclose(r_peri, a * (1.0 - e), rtol=1e-12)
        assert_allclose(r_apo, a * (1.0 + e), rtol=1e-12)
        assert_allclose(r_peri / r_apo, (1.0 - e) / (1.0 + e), rtol=1e-12)


if __name__ == '__main__':
    unittest.main()
