import numpy as np
import pytest

from argon.analysis import compute_observables, relative_energy_drift
from argon.config import SystemConfig
from argon.errors import SequencingError
from argon.integrator import run_steps, velocity_verlet
from argon.lattice import initialize
from argon.system import ParticleSystem


def prepared_system(cfg, seed=5):
    system = ParticleSystem(cfg)
    initialize(system, np.random.default_rng(seed))
    system.compute_forces()
    return system


def test_step_requires_initial_forces():
    cfg = SystemConfig(n=2)
    system = ParticleSystem(cfg)
    with pytest.raises(SequencingError):
        velocity_verlet(system)

    initialize(system, np.random.default_rng(0))
    with pytest.raises(SequencingError):
        velocity_verlet(system)


def test_hamiltonian_is_conserved():
    cfg = SystemConfig(n=3, T0=50.0, tau=5e-4, So=0, Sd=400, Sout=1, Sxyz=0)
    system = prepared_system(cfg)

    H = [compute_observables(system).H]
    for _ in range(cfg.Sd):
        velocity_verlet(system)
        H.append(compute_observables(system).H)

    assert relative_energy_drift(H) < 1e-3


def test_total_momentum_is_conserved_without_walls():
    cfg = SystemConfig(n=3, T0=100.0, tau=1e-3)
    system = prepared_system(cfg)

    run_steps(system, 200)

    assert np.all(system.wall_potential == 0.0)
    np.testing.assert_allclose(system.total_momentum(), 0.0, atol=1e-9)


def test_integration_is_time_reversible():
    cfg = SystemConfig(n=2, T0=100.0, tau=1e-3)
    system = prepared_system(cfg)
    pos0 = system.pos.copy()
    mom0 = system.mom.copy()

    run_steps(system, 50)
    system.mom *= -1.0
    run_steps(system, 50)

    np.testing.assert_allclose(system.pos, pos0, atol=1e-9)
    np.testing.assert_allclose(-system.mom, mom0, atol=1e-8)


def test_atom_at_rest_moves_under_wall_force():
    cfg = SystemConfig(n=1, L=1.0, f=100.0, tau=1e-3)
    system = ParticleSystem(cfg)
    system.set_initial_state([[0.0, 0.0, 1.5]], [[0.0, 0.0, 0.0]])
    system.compute_forces()

    velocity_verlet(system)

    # half kick + drift: z = 1.5 + tau^2 F / (2m)
    assert system.pos[0, 2] == pytest.approx(1.5 - 0.5 * 1e-6 * 50.0)
    assert system.mom[0, 2] < 0.0
    assert system.pos[0, 0] == 0.0
