# ------- import libs -------
from dataclasses import dataclass
from enum import Enum
from math import sqrt

import numpy as np
import scipy.special as sp
from scipy.special import factorial

a0 = 1.0


# Unnormalized n = 3 radial shape shared by the named 3d orbitals
def radial_3d(r):
    return r * r * np.exp(-r / 3.0)


# Angular parts (unnormalized) of the real 3d orbitals
def _angular_z2(theta, phi):
    return 3.0 * np.cos(theta) ** 2 - 1.0


def _angular_xy(theta, phi):
    return np.sin(theta) ** 2 * np.sin(2.0 * phi)


def _angular_xz(theta, phi):
    return np.sin(theta) * np.cos(theta) * np.cos(phi)


def _angular_yz(theta, phi):
    return np.sin(theta) * np.cos(theta) * np.sin(phi)


def _angular_x2_y2(theta, phi):
    return np.sin(theta) ** 2 * np.cos(2.0 * phi)


class Orbital(Enum):
    """Named hydrogen 3d orbitals with the simplified r^2 exp(-r/3) radial part."""

    D_Z2 = "3d_z2"
    D_XY = "3d_xy"
    D_XZ = "3d_xz"
    D_YZ = "3d_yz"
    D_X2_Y2 = "3d_x2-y2"

    @property
    def axially_symmetric(self):
        return self is Orbital.D_Z2

    def density(self, r, theta, phi=0.0):
        # psi^2 = |R * Y|^2
        psi = radial_3d(r) * _ANGULAR[self](theta, phi)
        return psi * psi

    def __str__(self):
        return self.value


_ANGULAR = {
    Orbital.D_Z2: _angular_z2,
    Orbital.D_XY: _angular_xy,
    Orbital.D_XZ: _angular_xz,
    Orbital.D_YZ: _angular_yz,
    Orbital.D_X2_Y2: _angular_x2_y2,
}


# Radial part R_{n,l}(r) for hydrogen (normalized)
def R(n, l, r):
    # using associated Laguerre polynomials
    rho = 2.0 * r / (n * a0)

    # Normalization constant
    norm = sqrt((2.0 / (n * a0))**3 * factorial(n - l - 1) /
                (2 * n * factorial(n + l)))

    L = sp.assoc_laguerre(rho, n - l - 1, 2 * l + 1)

    return norm * np.exp(-rho / 2.0) * rho**l * L


def spherical_harmonic(l, m, theta, phi):
    """Return Y_l^m(theta, phi) with theta=polar, phi=azimuth across SciPy APIs."""
    if hasattr(sp, "sph_harm_y"):
        return sp.sph_harm_y(l, m, theta, phi)

    # Legacy SciPy API: sph_harm(m, n, theta_azimuth, phi_polar)
    return sp.sph_harm(m, l, phi, theta)


def real_spherical_harm(l, m, theta, phi):
    """Real spherical harmonics, so psi stays real-valued for any m"""
    if m == 0:
        return spherical_harmonic(l, 0, theta, phi).real
    elif m > 0:
        return np.sqrt(2) * (-1)**m * spherical_harmonic(l, m, theta, phi).real
    else:  # m < 0
        return np.sqrt(2) * (-1)**m * spherical_harmonic(l, -m, theta, phi).imag


@dataclass(frozen=True)
class HydrogenOrbital:
    """General hydrogen orbital |n, l, m> with a normalized radial part."""

    n: int
    l: int
    m: int

    def __post_init__(self):
        if self.n < 1 or self.l < 0 or self.l > self.n - 1:
            raise ValueError(f"Invalid quantum numbers: n={self.n}, l={self.l}. Ensure n > l >= 0.")
        if abs(self.m) > self.l:
            raise ValueError(f"Invalid quantum numbers: m={self.m} must be in [-{self.l}, {self.l}].")

    @property
    def axially_symmetric(self):
        return self.m == 0

    def density(self, r, theta, phi=0.0):
        # broadcast so scalar phi works with array theta for m == 0
        theta, phi = np.broadcast_arrays(np.asarray(theta, dtype=float), np.asarray(phi, dtype=float))
        psi = R(self.n, self.l, r) * real_spherical_harm(self.l, self.m, theta, phi)
        return psi * psi

    def __str__(self):
        return f"hydrogen:{self.n},{self.l},{self.m}"


def density(orbital, r, theta, phi=0.0):
    """Unnormalized probability density of `orbital` at (r, theta, phi).

    Works on scalars or numpy arrays. Only relative magnitudes are meaningful.
    """
    return orbital.density(r, theta, phi)


def resolve_orbital(selector):
    """Turn a selector ("3d_z2", "D_XY", "hydrogen:3,2,1", ...) into an orbital."""
    if callable(getattr(selector, "density", None)):
        return selector
    if not isinstance(selector, str):
        raise ValueError(f"Unknown orbital selector: {selector!r}")

    text = selector.strip()
    for orbital in Orbital:
        if text.lower() == orbital.value or text.upper() == orbital.name:
            return orbital

    if text.lower().startswith("hydrogen:"):
        try:
            n, l, m = (int(part) for part in text.split(":", 1)[1].split(","))
        except ValueError:
            raise ValueError(f"Expected hydrogen:n,l,m but got {selector!r}") from None
        return HydrogenOrbital(n, l, m)

    known = ", ".join(o.value for o in Orbital)
    raise ValueError(f"Unknown orbital {selector!r}. Choose one of: {known}, or hydrogen:n,l,m")
