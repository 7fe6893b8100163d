# jetfinder/fourvectors.py
from typing import NamedTuple, Tuple

import numpy as np


# -------------------------
# Geometry helpers
# -------------------------
def wrap_phi(phi):
    return (phi + np.pi) % (2*np.pi) - np.pi


def to_p4(pt, eta, phi, mass):
    pt = np.asarray(pt, dtype=float)
    px = pt * np.cos(phi)
    py = pt * np.sin(phi)
    pz = pt * np.sinh(eta)
    e = np.sqrt(px**2 + py**2 + pz**2 + np.asarray(mass, dtype=float)**2)
    return px, py, pz, e


def from_p4(px, py, pz, e):
    px, py, pz, e = (np.asarray(v, dtype=float) for v in (px, py, pz, e))
    pt = np.sqrt(px**2 + py**2)
    phi = np.arctan2(py, px)
    eta = np.arcsinh(pz / np.maximum(pt, 1e-6))
    mass = np.sqrt(np.maximum(e**2 - (px**2 + py**2 + pz**2), 0))
    return pt, eta, phi, mass


# -------------------------
# Event inputs / clustering outputs
# -------------------------
class FourVector(NamedTuple):
    px: float
    py: float
    pz: float
    E: float
    index: int   # position of the source particle in the event


class Jet(NamedTuple):
    px: float
    py: float
    pz: float
    E: float
    constituents: Tuple[int, ...]   # origin indices, sorted

    @property
    def pt(self) -> float:
        return float(np.hypot(self.px, self.py))

    @property
    def eta(self) -> float:
        return float(from_p4(self.px, self.py, self.pz, self.E)[1])

    @property
    def phi(self) -> float:
        return float(wrap_phi(np.arctan2(self.py, self.px)))

    @property
    def m(self) -> float:
        return float(from_p4(self.px, self.py, self.pz, self.E)[3])


def fourvectors_from_arrays(px, py, pz, E):
    """
    One FourVector per particle; the origin index is the array position.
    """
    px = np.asarray(px, dtype=float).reshape(-1)
    py = np.asarray(py, dtype=float).reshape(-1)
    pz = np.asarray(pz, dtype=float).reshape(-1)
    E  = np.asarray(E,  dtype=float).reshape(-1)
    if not (len(px) == len(py) == len(pz) == len(E)):
        raise ValueError(f"Component arrays differ in length: {len(px)}, {len(py)}, {len(pz)}, {len(E)}")

    return [
        FourVector(float(x), float(y), float(z), float(e), i)
        for i, (x, y, z, e) in enumerate(zip(px, py, pz, E))
    ]


def fourvectors_from_ptetaphim(pt, eta, phi, mass=None, default_mass=0.13957):
    pt = np.asarray(pt, dtype=float)
    if mass is None:
        mass = np.full_like(pt, default_mass)
    px, py, pz, e = to_p4(pt, np.asarray(eta, dtype=float), wrap_phi(np.asarray(phi, dtype=float)), mass)
    return fourvectors_from_arrays(px, py, pz, e)
