import numpy as np


def crystal_basis(a):
    # Edges of the elementary crystal cell, all of length a
    return np.array([
        [a, 0.0, 0.0],
        [0.5 * a, 0.5 * np.sqrt(3.0) * a, 0.0],
        [0.5 * a, np.sqrt(3.0) / 6.0 * a, np.sqrt(6.0) / 3.0 * a],
    ])


def make_cluster_lattice(n, a):
    """
    Build an n x n x n crystal cluster centred at the origin.

    Atom i = i0 + i1*n + i2*n^2 sits at
        (i0 - (n-1)/2) b0 + (i1 - (n-1)/2) b1 + (i2 - (n-1)/2) b2

    Returns positions, shape (n^3, 3).
    """
    b0, b1, b2 = crystal_basis(a)
    shift = 0.5 * (n - 1)

    positions = np.zeros((n ** 3, 3))

    for i2 in range(n):
        for i1 in range(n):
            for i0 in range(n):
                i = i0 + i1 * n + i2 * n * n
                positions[i] = (i0 - shift) * b0 + (i1 - shift) * b1 + (i2 - shift) * b2

    return positions


def sample_momenta(N, k, T0, m, rng):
    """
    Draw initial momenta, shape (N, 3).

    Each component gets |p| = sqrt(-k T0 m ln u) with u uniform in (0, 1]
    and a random sign. Magnitudes and signs come from the same generator so
    a run is reproducible from its seed.
    """
    u = 1.0 - rng.random((N, 3))
    sign = np.where(rng.integers(0, 2, size=(N, 3)) == 0, -1.0, 1.0)

    magnitude = np.sqrt(-k * T0 * m * np.log(u))
    return sign * magnitude


def initialize(system, rng=None):
    """
    Place the atoms on the lattice, give them thermal momenta and remove
    the centre of mass movement. Leaves the system POSITIONS_READY.
    """
    if rng is None:
        rng = np.random.default_rng()

    cfg = system.config
    positions = make_cluster_lattice(cfg.n, cfg.a)
    momenta = sample_momenta(system.N, cfg.k, cfg.T0, cfg.m, rng)

    system.set_initial_state(positions, momenta)
    system.remove_drift()
    return system
