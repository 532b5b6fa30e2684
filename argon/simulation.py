# argon/simulation.py

import numpy as np

from .analysis import RunningMeans, compute_observables
from .config import SystemConfig, format_parameters, load_parameters
from .errors import NumericalSingularityError, SequencingError
from .integrator import velocity_verlet
from .lattice import initialize
from .system import ParticleSystem, Phase
from .utils import MemorySink


class Simulation:
    """
    Microcanonical run of an argon cluster.

    Phases, in order:
        initial_state()   lattice positions and thermal momenta
        initial_forces()  first force evaluation and the t=0 snapshot
        run()             So thermalisation + Sd production steps, means

    `sink` receives positions, momenta, snapshots and means (see
    argon.utils). `log` receives console messages; print by default.
    """

    def __init__(self, config=None, seed=None, sink=None, log=print):
        self.config = config if config is not None else SystemConfig()
        self.seed = seed
        self.sink = sink if sink is not None else MemorySink()
        self.log = log

        self.system = ParticleSystem(self.config)
        self.snapshot = None
        self.means = None

    @classmethod
    def from_parameter_file(cls, filename, seed=None, sink=None, log=print):
        return cls(load_parameters(filename, log=log), seed=seed, sink=sink, log=log)

    # --------------------------------------------------------
    # Parameters
    # --------------------------------------------------------
    def load_parameters(self, filename):
        """Read new parameters and start over with a fresh particle system."""
        self.config = load_parameters(filename, log=self.log)
        self.system = ParticleSystem(self.config)
        self.snapshot = None
        self.means = None
        return self.config

    def check_parameters(self):
        for line in format_parameters(self.config):
            self.log(line)

    # --------------------------------------------------------
    # Phases 1 and 2
    # --------------------------------------------------------
    def initial_state(self):
        rng = np.random.default_rng(self.seed)
        initialize(self.system, rng)

        self.sink.write_positions(0, self.system.pos)
        self.sink.write_momenta(self.system.mom)
        self.log("Calculated initial positions and momenta of atoms.")

    def initial_forces(self):
        self.system.compute_forces()
        self.snapshot = compute_observables(self.system, 0.0)
        self.sink.write_observables(self.snapshot)
        self.log("Calculated initial forces and potentials.")
        return self.snapshot

    # --------------------------------------------------------
    # Phases 3 and 4
    # --------------------------------------------------------
    def run(self):
        """
        Main loop. Returns the MeanObservables, or None when the system was
        not prepared by initial_state() and initial_forces().
        """
        try:
            self.system.require(Phase.FORCES_READY, "run the simulation")
        except SequencingError as exc:
            self.log(f"ERROR: {exc}")
            self.log("ERROR: Calculate the initial state and forces first. Leaving the simulation.")
            return None

        cfg = self.config
        self.log("System is ready to simulation.")
        self.print_current_info(self.snapshot)

        means = RunningMeans()
        info_out = max(1, cfg.Sd // 10)

        for s in range(1, cfg.So + cfg.Sd + 1):
            try:
                velocity_verlet(self.system)
            except NumericalSingularityError as exc:
                self.log(f"FATAL: step {s}: {exc}")
                raise

            self.snapshot = compute_observables(self.system, s * cfg.tau)

            if cfg.Sxyz and s % cfg.Sxyz == 0:
                self.sink.write_positions(s, self.system.pos)

            if cfg.Sout and s % cfg.Sout == 0:
                self.sink.write_observables(self.snapshot)

            if s >= cfg.So:
                means.add(self.snapshot)

            if s % info_out == 0:
                self.print_current_info(self.snapshot)

        self.means = means.finalize(cfg.Sd)
        self.sink.write_means(self.means)
        self.system.phase = Phase.COMPLETE

        self.log(
            f"Mean values: H = {self.means.H:.5f}, T = {self.means.T:.5f}, "
            f"P = {self.means.P:.5f}"
        )
        return self.means

    def simulate(self):
        """All phases in order."""
        self.initial_state()
        self.initial_forces()
        return self.run()

    def print_current_info(self, snapshot):
        self.log(f"Current Time:             {snapshot.t:.5f}")
        self.log(f"Current Total Energy:     {snapshot.H:.5f}")
        self.log(f"Current Total Potential:  {snapshot.V:.5f}")
        self.log(f"Current Temperature:      {snapshot.T:.5f}")
        self.log(f"Current Pressure:         {snapshot.P:.5f}")
