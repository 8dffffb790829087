import unittest

from diffrax import diffeqsolve, ODETerm, Dopri5, SaveAt, PIDController
import jax.numpy as jnp
import numpy as np

from orrery import bodies_data, J2000
from orrery.astrodynamics import elements_to_position


def two_body_ode(t, y, args):
    mu, = args
    r = y[:3]
    v = y[3:]
    a = -mu * r / jnp.linalg.norm(r)**3
    return jnp.concatenate([v, a])


class TestTwoBodyODE(unittest.TestCase):

    def test_resolver_follows_two_body_motion(self):
        """The analytic Kepler positions agree with a numerically integrated two-body orbit."""
        elements = bodies_data['mars'].elements
        mu = elements.n**2 * elements.a**3  # scene units^3 / day^2

        def position(days):
            return jnp.asarray(elements_to_position(elements, J2000 + days).position)

        # Initial velocity from a central difference of the resolver
        h = 2.0**-10  # exactly representable offset from J2000
        r0 = position(0.0)
        v0 = (position(h) - position(-h)) / (2.0 * h)
        y0 = jnp.concatenate([r0, v0])

        t0 = 0.0
        tf = elements.period
        ts = jnp.linspace(t0, tf, 25)

        solution = diffeqsolve(ODETerm(two_body_ode), Dopri5(), args=(mu,),
                               t0=t0, t1=tf, dt0=0.01 * tf, y0=y0,
                               saveat=SaveAt(ts=ts),
                               stepsize_controller=PIDController(rtol=1e-10, atol=1e-10))

        for t, y in zip(np.asarray(ts), np.asarray(solution.ys)):
            expected = np.asarray(position(float(t)))
            error = np.linalg.norm(y[:3] - expected)
            self.assertLess(error, 1e-4, f"Resolver and integrator disagree by {error} at t={t} days")

        # Back where it started after one period
        self.assertLess(np.linalg.norm(np.asarray(solution.ys[-1, :3]) - np.asarray(r0)), 1e-4)


if __name__ == '__main__':
    unittest.main()
