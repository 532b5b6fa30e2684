# argon/integrator.py

from .system import Phase


def velocity_verlet(system):
    """
    One velocity Verlet (leapfrog) step of width tau.

    The stored forces must belong to the current positions, so the system
    has to be FORCES_READY: the first step uses the forces of the initial
    configuration.

    Returns the potential energy at the new positions.
    """
    system.require(Phase.FORCES_READY, "integrate")

    tau = system.config.tau
    inv_m = 1.0 / system.mass

    # 1) Half-step momentum update with forces from the previous evaluation
    system.mom += 0.5 * tau * system.force

    # 2) Full-step position update
    system.pos += tau * system.mom * inv_m

    # 3) Recompute forces at new positions
    pe_new = system.compute_forces()

    # 4) Second half-step momentum update
    system.mom += 0.5 * tau * system.force

    return pe_new


def run_steps(system, nsteps):
    """Advance `nsteps` steps without any sampling; returns the final potential energy."""
    pe = system.potential_energy
    for _ in range(nsteps):
        pe = velocity_verlet(system)
    return pe
