# argon/analysis.py

from dataclasses import dataclass

import numpy as np


# ------------------------------------------------------------
# 1. Instantaneous observables: H, T, P
# ------------------------------------------------------------

@dataclass(frozen=True)
class ObservableSnapshot:
    t: float    # time (ps)
    V: float    # total potential (kJ/mol)
    H: float    # Hamiltonian (kJ/mol)
    T: float    # temperature (K)
    P: float    # pressure on the sphere walls


@dataclass(frozen=True)
class MeanObservables:
    H: float
    T: float
    P: float


def kinetic_energies(momenta, m):
    """Kinetic energy of every atom, |p|^2 / 2m."""
    p = np.asarray(momenta, dtype=float)
    return np.sum(p * p, axis=1) / (2.0 * m)


def compute_observables(system, t=0.0):
    """
    Hamiltonian, temperature and pressure at the current state.

        H = V + sum_i E_k,i
        T = sum_i 2/(3Nk) E_k,i
        P = sum_i |F_s,i| / (4 pi L^2)

    P is the force the atoms exert on the walls per unit sphere area. It
    is zero until atoms actually reach the wall.
    """
    cfg = system.config
    ek = system.kinetic_energies()
    V = float(system.potential_energy)

    H = V + float(np.sum(ek))
    T = float(np.sum(2.0 / (3.0 * system.N * cfg.k) * ek))
    wall = np.sqrt(np.sum(system.wall_force ** 2, axis=1))
    P = float(np.sum(wall / (4.0 * np.pi * cfg.L * cfg.L))) if cfg.L > 0.0 else 0.0

    return ObservableSnapshot(t=float(t), V=V, H=H, T=T, P=P)


class RunningMeans:
    """Sums of H, T and P over the production part of a run."""

    def __init__(self):
        self.H = 0.0
        self.T = 0.0
        self.P = 0.0
        self.count = 0

    def add(self, snapshot):
        self.H += snapshot.H
        self.T += snapshot.T
        self.P += snapshot.P
        self.count += 1

    def finalize(self, Sd):
        """Mean values: accumulated sums divided by the production length Sd."""
        return MeanObservables(H=self.H / Sd, T=self.T / Sd, P=self.P / Sd)


# ------------------------------------------------------------
# 2. Momentum distribution
# ------------------------------------------------------------

def momentum_magnitudes(momenta):
    """|p| of every atom."""
    p = np.asarray(momenta, dtype=float)
    return np.sqrt(np.sum(p * p, axis=1))


def maxwell_boltzmann_momentum_pdf(p, m, k, T):
    """
    Maxwell-Boltzmann distribution of momentum magnitudes:

        f(p) = 4 pi p^2 (2 pi m k T)^(-3/2) exp(-p^2 / (2 m k T))
    """
    p = np.asarray(p, dtype=float)
    mkT = m * k * T
    if mkT <= 0.0:
        return np.zeros_like(p)
    return 4.0 * np.pi * p ** 2 * (2.0 * np.pi * mkT) ** -1.5 * np.exp(-p ** 2 / (2.0 * mkT))


# ------------------------------------------------------------
# 3. Thermodynamic checks
# ------------------------------------------------------------

def sphere_volume(L):
    return 4.0 / 3.0 * np.pi * L ** 3


def ideal_gas_ratio(P, T, N, k, L):
    """
    PV / (NkT) for the confining sphere.

    Close to 1 when the cluster has evaporated into an ideal gas.
    """
    if T <= 0.0:
        return float("nan")
    return P * sphere_volume(L) / (N * k * T)


def relative_energy_drift(H_series):
    """
    Largest deviation of the Hamiltonian from its first value,
    relative to |H(0)|.
    """
    H = np.asarray(H_series, dtype=float)
    H0 = H[0]
    scale = abs(H0) if H0 != 0.0 else 1.0
    return float(np.max(np.abs(H - H0)) / scale)
