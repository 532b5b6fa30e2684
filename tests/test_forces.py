import numpy as np
import pytest

from argon.config import SystemConfig
from argon.errors import NumericalSingularityError, SequencingError
from argon.forces import evaluate_forces, pair_interactions, wall_interactions
from argon.lattice import make_cluster_lattice
from argon.system import ParticleSystem, Phase


def perturbed_lattice(n, a, scale=1.0, noise=0.02, seed=0):
    rng = np.random.default_rng(seed)
    pos = make_cluster_lattice(n, a) * scale
    return pos + noise * rng.standard_normal(pos.shape)


# ------------------------------------------------------------
# Wall term
# ------------------------------------------------------------

def test_wall_is_inactive_inside_sphere():
    V, F = wall_interactions(np.array([[1.0, 2.0, 0.5]]), L=5.0, f=1e4)

    assert V[0] == 0.0
    np.testing.assert_array_equal(F, 0.0)


def test_wall_pushes_atoms_back_inside():
    V, F = wall_interactions(np.array([[6.0, 0.0, 0.0], [0.0, -5.5, 0.0]]), L=5.0, f=10.0)

    np.testing.assert_allclose(V, [5.0, 1.25])
    np.testing.assert_allclose(F[0], [-10.0, 0.0, 0.0])
    np.testing.assert_allclose(F[1], [0.0, 5.0, 0.0])


# ------------------------------------------------------------
# Pair term
# ------------------------------------------------------------

def test_pair_potential_minimum_at_R():
    R, e = 0.38, 1.0
    pairs = pair_interactions(np.array([[0.0, 0.0, 0.0], [R, 0.0, 0.0]]), R, e)

    assert pairs.potential[0] == pytest.approx(-e)
    np.testing.assert_allclose(pairs.force[0], 0.0, atol=1e-12)


def test_close_atoms_repel_and_distant_atoms_attract():
    R, e = 0.38, 1.0
    close = pair_interactions(np.array([[0.0, 0.0, 0.0], [0.3, 0.0, 0.0]]), R, e)
    far = pair_interactions(np.array([[0.0, 0.0, 0.0], [0.5, 0.0, 0.0]]), R, e)

    # force on atom 1 (the i > j member) along +x means pushed away from atom 0
    assert close.force[0, 0] > 0.0
    assert far.force[0, 0] < 0.0
    assert close.potential[0] > -e
    assert -e < far.potential[0] < 0.0


def test_pair_forces_are_exactly_antisymmetric():
    pos = perturbed_lattice(3, 0.38)
    pairs = pair_interactions(pos, 0.38, 1.0)
    N = pos.shape[0]

    for a in range(N):
        for b in range(N):
            if a != b:
                np.testing.assert_array_equal(pairs.force_between(a, b), -pairs.force_between(b, a))


def test_pair_indexing_matches_direct_computation():
    pos = perturbed_lattice(2, 0.38)
    pairs = pair_interactions(pos, 0.38, 1.0)

    a, b = 5, 2
    rij = pos[a] - pos[b]
    r2 = rij @ rij
    x = (0.38 ** 2 / r2) ** 3
    expected = 12.0 * x * (x - 1.0) * rij / r2

    np.testing.assert_allclose(pairs.force_between(a, b), expected, rtol=1e-10)


# ------------------------------------------------------------
# Net forces
# ------------------------------------------------------------

def test_forces_are_minus_gradient_of_potential():
    cfg = SystemConfig(n=2, L=0.47, f=1e3)
    pos = perturbed_lattice(2, cfg.a, scale=1.1, noise=0.01, seed=3)
    result = evaluate_forces(pos, cfg)

    # some atoms must feel the wall for this to test both terms
    assert np.any(result.wall_potential > 0.0)

    h = 1e-6
    numeric = np.zeros_like(pos)
    for i in range(pos.shape[0]):
        for d in range(3):
            plus = pos.copy()
            minus = pos.copy()
            plus[i, d] += h
            minus[i, d] -= h
            numeric[i, d] = -(
                evaluate_forces(plus, cfg).potential_energy
                - evaluate_forces(minus, cfg).potential_energy
            ) / (2.0 * h)

    np.testing.assert_allclose(result.force, numeric, rtol=1e-4, atol=1e-4)


def test_pair_forces_sum_to_zero():
    cfg = SystemConfig(n=3)
    result = evaluate_forces(perturbed_lattice(3, cfg.a), cfg)

    np.testing.assert_allclose(
        np.sum(result.force - result.wall_force, axis=0), 0.0, atol=1e-9
    )


def test_evaluation_is_idempotent():
    cfg = SystemConfig(n=3)
    pos = perturbed_lattice(3, cfg.a, seed=11)

    first = evaluate_forces(pos, cfg)
    second = evaluate_forces(pos, cfg)

    assert first.potential_energy == second.potential_energy
    np.testing.assert_array_equal(first.force, second.force)
    np.testing.assert_array_equal(first.wall_force, second.wall_force)


@pytest.mark.parametrize("block", [1, 7, 100, 351])
def test_pair_blocks_do_not_change_results(block):
    cfg = SystemConfig(n=3)
    pos = perturbed_lattice(3, cfg.a, seed=3)

    whole = pair_interactions(pos, cfg.R, cfg.e)
    split = pair_interactions(pos, cfg.R, cfg.e, block=block)

    np.testing.assert_array_equal(whole.i, split.i)
    np.testing.assert_array_equal(whole.potential, split.potential)
    np.testing.assert_array_equal(whole.force, split.force)


def test_net_force_accumulates_every_pair():
    cfg = SystemConfig(n=2)
    pos = perturbed_lattice(2, cfg.a, seed=8)
    result = evaluate_forces(pos, cfg)

    expected = result.wall_force.copy()
    for a in range(cfg.N):
        for b in range(cfg.N):
            expected[a] += result.pairs.force_between(a, b)

    np.testing.assert_allclose(result.force, expected, rtol=1e-10, atol=1e-9)


def test_total_potential_is_wall_plus_pairs():
    cfg = SystemConfig(n=2, L=0.47)
    result = evaluate_forces(perturbed_lattice(2, cfg.a, scale=1.1), cfg)

    assert result.potential_energy == pytest.approx(
        result.wall_potential.sum() + result.pairs.potential.sum()
    )


def test_coincident_atoms_are_fatal():
    cfg = SystemConfig(n=2)
    pos = make_cluster_lattice(2, cfg.a)
    pos[1] = pos[0]

    with pytest.raises(NumericalSingularityError) as info:
        evaluate_forces(pos, cfg)

    assert (1, 0) in info.value.pairs


def test_lone_atom_has_only_wall_terms():
    cfg = SystemConfig(n=1, L=1.0, f=100.0)

    inside = evaluate_forces(np.zeros((1, 3)), cfg)
    assert inside.potential_energy == 0.0
    assert inside.pairs.potential.size == 0
    np.testing.assert_array_equal(inside.force, 0.0)

    outside = evaluate_forces(np.array([[0.0, 0.0, 1.5]]), cfg)
    assert outside.potential_energy == pytest.approx(0.5 * 100.0 * 0.25)
    np.testing.assert_allclose(outside.force, [[0.0, 0.0, -50.0]])


# ------------------------------------------------------------
# ParticleSystem wrapper
# ------------------------------------------------------------

def test_forces_require_initial_state():
    system = ParticleSystem(SystemConfig(n=2))

    with pytest.raises(SequencingError):
        system.compute_forces()


def test_first_force_evaluation_marks_forces_ready():
    cfg = SystemConfig(n=2)
    system = ParticleSystem(cfg)
    system.set_initial_state(make_cluster_lattice(2, cfg.a), np.zeros((8, 3)))

    pe = system.compute_forces()

    assert system.phase is Phase.FORCES_READY
    assert pe == system.potential_energy
    assert pe < 0.0
