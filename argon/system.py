# argon/system.py
from enum import Enum

import numpy as np

from .analysis import kinetic_energies
from .errors import SequencingError
from .forces import evaluate_forces


class Phase(Enum):
    UNINITIALIZED = 0
    POSITIONS_READY = 1
    FORCES_READY = 2
    COMPLETE = 3


class ParticleSystem:
    """
    Represents the state of the argon cluster.
    Holds:
        - positions
        - momenta
        - net forces
        - wall forces and wall potentials
        - total potential energy
        - the current phase of the run

    Arrays are allocated once for the N atoms of `config`. Loading new
    parameters means building a new ParticleSystem.
    """

    def __init__(self, config, symbol="AR"):
        self.config = config
        self.N = config.N
        self.K = config.K
        self.mass = config.m
        self.symbol = symbol

        # Positions, momenta, forces
        self.pos = np.zeros((self.N, self.K))
        self.mom = np.zeros((self.N, self.K))
        self.force = np.zeros((self.N, self.K))

        # Repulsion from the sphere walls
        self.wall_force = np.zeros((self.N, self.K))
        self.wall_potential = np.zeros(self.N)

        self.potential_energy = 0.0
        self.pairs = None
        self.phase = Phase.UNINITIALIZED

    # --- Phase bookkeeping ---
    def require(self, phase, action):
        """Raise SequencingError unless the system is in `phase`."""
        if self.phase is not phase:
            raise SequencingError(
                f"Cannot {action}: system is {self.phase.name}, expected {phase.name}."
            )

    def set_initial_state(self, positions, momenta):
        positions = np.asarray(positions, dtype=float)
        momenta = np.asarray(momenta, dtype=float)
        if positions.shape != (self.N, self.K) or momenta.shape != (self.N, self.K):
            raise ValueError(
                f"Initial state must have shape {(self.N, self.K)}, "
                f"got {positions.shape} and {momenta.shape}"
            )

        self.pos[:] = positions
        self.mom[:] = momenta
        self.phase = Phase.POSITIONS_READY

    # --- Force evaluation wrapper ---
    def compute_forces(self):
        """
        Evaluate walls and pair interactions at the current positions.

        Allowed once positions exist; the first successful call moves the
        system from POSITIONS_READY to FORCES_READY.
        """
        if self.phase is Phase.UNINITIALIZED:
            raise SequencingError(
                "Cannot compute forces: initial positions and momenta are not set."
            )

        result = evaluate_forces(self.pos, self.config)
        self.force = result.force
        self.wall_force = result.wall_force
        self.wall_potential = result.wall_potential
        self.pairs = result.pairs
        self.potential_energy = result.potential_energy

        if self.phase is Phase.POSITIONS_READY:
            self.phase = Phase.FORCES_READY
        return self.potential_energy

    # --- Kinetic energy ---
    def kinetic_energies(self):
        return kinetic_energies(self.mom, self.mass)

    # --- Momentum ---
    def total_momentum(self):
        return np.sum(self.mom, axis=0)

    def remove_drift(self):
        """Remove centre of mass movement."""
        self.mom -= self.total_momentum() / self.N
