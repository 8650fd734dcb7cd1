"""
One-dimensional constant-acceleration Kalman filter.

State is [position, velocity, acceleration] with a unit (by default) time
step. Only position is observed. All matrices have fixed shapes (3x3, 1x3,
1x1) so the innovation covariance is a scalar and its inverse is a plain
reciprocal.
"""

from __future__ import annotations

import numpy as np

# Reciprocal used when the innovation covariance is numerically zero
SINGULAR_EPS = 1e-10
SINGULAR_INVERSE = 1e10


class Kalman1D:
    """
    Smooths one coordinate of one POI.

    Call predict() once per frame. Call update() first on frames that have a
    measurement for this axis. The first update seeds position from the
    measurement, leaving velocity and acceleration at zero.
    """

    def __init__(
        self,
        process_variance: float = 0.01,
        measurement_variance: float = 0.1,
        dt: float = 1.0,
    ):
        self.process_variance = process_variance
        self.measurement_variance = measurement_variance
        self.dt = dt

        self.F = np.array([
            [1.0, dt, 0.5 * dt * dt],
            [0.0, 1.0, dt],
            [0.0, 0.0, 1.0],
        ])
        self.H = np.array([[1.0, 0.0, 0.0]])
        self.R = np.array([[measurement_variance]])
        self.Q = np.eye(3) * process_variance

        self.reset()

    def reset(self) -> None:
        """Return to the uninitialized state."""
        self.x = np.zeros((3, 1))
        self.P = np.eye(3)
        self.initialized = False

    @property
    def position(self) -> float:
        return float(self.x[0, 0])

    @property
    def velocity(self) -> float:
        return float(self.x[1, 0])

    def predict(self) -> float:
        """Advance one step and return the predicted position."""
        self.x = self.F @ self.x
        self.P = self.F @ self.P @ self.F.T + self.Q
        return self.position

    def update(self, measurement: float) -> None:
        """Correct the state with an observed position."""
        if not self.initialized:
            self.x[0, 0] = measurement
            self.initialized = True

        y = measurement - (self.H @ self.x)[0, 0]
        S = self.H @ self.P @ self.H.T + self.R
        s = S[0, 0]
        s_inv = SINGULAR_INVERSE if abs(s) < SINGULAR_EPS else 1.0 / s

        K = self.P @ self.H.T * s_inv
        self.x = self.x + K * y
        self.P = (np.eye(3) - K @ self.H) @ self.P
