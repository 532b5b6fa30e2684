from typing import NamedTuple

import numpy as np

from .errors import NumericalSingularityError


class PairState(NamedTuple):
    """Pair interactions for the strict lower triangle i > j."""
    i: np.ndarray
    j: np.ndarray
    potential: np.ndarray   # (M,)
    force: np.ndarray       # (M, 3), force on atom i due to atom j

    def force_between(self, a, b):
        """Force on atom a due to atom b."""
        if a == b:
            return np.zeros(self.force.shape[1])
        hi, lo = (a, b) if a > b else (b, a)
        # Row-major lower triangle: pairs with first index hi start at hi(hi-1)/2
        idx = hi * (hi - 1) // 2 + lo
        return self.force[idx] if a > b else -self.force[idx]


class ForceResult(NamedTuple):
    force: np.ndarray
    potential_energy: float
    wall_force: np.ndarray
    wall_potential: np.ndarray
    pairs: PairState


def wall_interactions(positions, L, f):
    """
    Soft spherical wall of radius L and stiffness f.

    V_s = 0                  r < L
          f/2 (r - L)^2      r >= L
    F_s = f (L - r) r_vec/r  r >= L

    Returns wall potentials (N,) and wall forces (N, 3).
    """
    pos = positions
    r = np.sqrt(np.sum(pos * pos, axis=1))

    outside = r >= L
    potential = np.where(outside, 0.5 * f * (r - L) ** 2, 0.0)

    force = np.zeros_like(pos)
    # An atom exactly at the origin can only be "outside" when L = 0,
    # where the force magnitude f (L - r) vanishes anyway
    hit = outside & (r > 0.0)
    force[hit] = (f * (L - r[hit]) / r[hit])[:, None] * pos[hit]

    return potential, force


# Pairs evaluated per block, bounding the size of temporaries
PAIR_BLOCK = 1 << 18


def pair_interactions(positions, R, e, block=PAIR_BLOCK):
    """
    Lennard-Jones type interaction for every pair i > j.

        y = (R/r)^2,  x = y^3
        V_p = e x (x - 2)                     minimum -e at r = R
        F_p = 12 e x (x - 1) (r_i - r_j) / r^2

    Coincident atoms give non-finite values; callers decide what to do.
    """
    pos = positions
    N, K = pos.shape
    i, j = np.tril_indices(N, k=-1)
    M = i.size

    potential = np.empty(M)
    force = np.empty((M, K))

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        for start in range(0, M, block):
            stop = min(start + block, M)
            rij = pos[i[start:stop]] - pos[j[start:stop]]
            r2 = np.sum(rij * rij, axis=1)

            y = (R * R) / r2
            x = y * y * y
            potential[start:stop] = e * x * (x - 2.0)
            force[start:stop] = (12.0 * e * x * (x - 1.0) / r2)[:, None] * rij

    return PairState(i, j, potential, force)


def evaluate_forces(positions, config):
    """
    Net force on every atom and the total potential energy.

    Pure function of the positions: calling it twice on the same input
    gives bit-identical output.
    """
    pos = np.asarray(positions, dtype=float)

    wall_potential, wall_force = wall_interactions(pos, config.L, config.f)
    pairs = pair_interactions(pos, config.R, config.e)

    N, K = pos.shape
    force = wall_force.copy()

    # Newton's 3rd Law
    # Each pair is computed once and applied with opposite signs
    for d in range(K):
        force[:, d] += np.bincount(pairs.i, weights=pairs.force[:, d], minlength=N)
        force[:, d] -= np.bincount(pairs.j, weights=pairs.force[:, d], minlength=N)

    potential_energy = float(np.sum(wall_potential) + np.sum(pairs.potential))

    if not (np.isfinite(potential_energy) and np.all(np.isfinite(force))):
        bad = ~np.isfinite(pairs.potential) | ~np.all(np.isfinite(pairs.force), axis=1)
        culprits = list(zip(pairs.i[bad].tolist(), pairs.j[bad].tolist()))
        raise NumericalSingularityError(
            f"Non-finite forces; coincident atom pairs: {culprits[:10]}",
            pairs=culprits,
        )

    return ForceResult(force, potential_energy, wall_force, wall_potential, pairs)
