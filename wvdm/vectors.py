"""Small numpy helpers for 3-vectors."""

import numpy as np

EPS = 1e-12  # below this a direction is treated as degenerate

X_AXIS = np.array([1.0, 0.0, 0.0])
Y_AXIS = np.array([0.0, 1.0, 0.0])
Z_AXIS = np.array([0.0, 0.0, 1.0])


def zero():
    return np.zeros(3)


def norm(v) -> float:
    return float(np.sqrt(np.dot(v, v)))


def is_finite(v) -> bool:
    return bool(np.all(np.isfinite(v)))


def normalize(v, eps: float = EPS):
    """Unit vector along v, or None if |v| <= eps (or v is not finite)."""
    n = norm(v)
    if not np.isfinite(n) or n <= eps:
        return None
    return np.asarray(v, dtype=float) / n


def reject(v, direction):
    """Component of v perpendicular to the unit vector `direction`."""
    return v - np.dot(v, direction) * direction


# ── Rotation ─────────────────────────────────────────────────────────

def rot_y(theta):
    """Rotation about the y-axis with x' = x cos θ + z sin θ, z' = -x sin θ + z cos θ."""
    c, s = np.cos(theta), np.sin(theta)
    return np.array([[c, 0, s], [0, 1, 0], [-s, 0, c]])
