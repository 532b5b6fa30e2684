# argon/config.py

import math
from dataclasses import dataclass, fields

from .errors import ConfigurationError

# Order in which values appear in a parameter file
PARAMETER_ORDER = (
    "n", "m", "e", "R", "k", "f", "L", "a",
    "T0", "tau", "So", "Sd", "Sout", "Sxyz",
)

INTEGER_PARAMETERS = ("n", "So", "Sd", "Sout", "Sxyz")


@dataclass(frozen=True)
class SystemConfig:
    """
    Constants of one simulation run.

    Units follow the usual argon conventions:
        length nm, time ps, energy kJ/mol, temperature K
    """

    n: int = 7            # atoms along the crystal edge
    m: float = 1.0        # mass of a single atom
    e: float = 1.0        # depth of the potential well
    R: float = 0.38       # distance of the potential minimum
    k: float = 8.31e-3    # Boltzmann constant, kJ/(mol K)
    f: float = 1e4        # wall stiffness
    L: float = 5.0        # radius of the confining sphere
    a: float = 0.38       # lattice spacing
    T0: float = 1e3       # initial temperature
    tau: float = 1e-3     # time step
    So: int = 100         # thermalisation steps
    Sd: int = 10000       # production steps
    Sout: int = 100       # observables written every Sout steps (0 = never)
    Sxyz: int = 100       # positions written every Sxyz steps (0 = never)

    def __post_init__(self):
        self.validate()

    # --- Derived sizes ---
    @property
    def N(self):
        """Total number of atoms."""
        return self.n ** 3

    @property
    def K(self):
        """Spatial dimension."""
        return 3

    def validate(self):
        # NaN compares False against every bound below
        for name in PARAMETER_ORDER:
            if not math.isfinite(getattr(self, name)):
                raise ConfigurationError(f"Invalid argument: {name}. Must be a finite number.")

        for name in INTEGER_PARAMETERS:
            value = getattr(self, name)
            if isinstance(value, bool) or int(value) != value:
                raise ConfigurationError(f"Invalid argument: {name}. Must be an integer.")

        if self.n < 1 or self.n > 25:
            raise ConfigurationError("Invalid argument: n. Must be between 1 and 25.")
        if self.m <= 0.0:
            raise ConfigurationError("Invalid argument: m. Must be positive.")
        for name in ("e", "R", "f", "a", "T0"):
            if getattr(self, name) < 0.0:
                raise ConfigurationError(f"Invalid argument: {name}. Must be positive.")
        if self.k <= 0.0 or self.k > 1.0:
            raise ConfigurationError("Invalid argument: k. Must be in (0, 1].")
        if self.L < 1.22 * (self.n - 1) * self.a:
            raise ConfigurationError("Invalid argument: L. Must be greater than 1.22(n-1)a.")
        if self.tau <= 0.0 or self.tau > 1e-2:
            raise ConfigurationError("Invalid argument: tau. Must be in (0, 1e-2].")
        if self.Sd < 1:
            raise ConfigurationError("Invalid argument: Sd. Must be at least 1.")
        if self.So < 0 or self.So > self.Sd:
            raise ConfigurationError("Invalid argument: So. Must be between 0 and Sd.")
        if self.Sout < 0 or self.Sout > self.Sd:
            raise ConfigurationError("Invalid argument: Sout. Must be between 0 and Sd.")
        if self.Sxyz < 0 or self.Sxyz > self.Sd:
            raise ConfigurationError("Invalid argument: Sxyz. Must be between 0 and Sd.")


def parse_parameters(text):
    """
    Parse the contents of a parameter file into a SystemConfig.

    The file holds whitespace separated ``value label`` pairs in the
    order of PARAMETER_ORDER. Labels are only there for the reader.

    Raises ConfigurationError on anything it cannot use.
    """
    tokens = text.split()
    if not tokens:
        raise ConfigurationError("Parameter file is empty.")

    values = tokens[0::2]
    if len(values) < len(PARAMETER_ORDER):
        raise ConfigurationError(
            f"Expected {len(PARAMETER_ORDER)} parameters, found {len(values)}."
        )

    kwargs = {}
    for name, raw in zip(PARAMETER_ORDER, values):
        try:
            if name in INTEGER_PARAMETERS:
                kwargs[name] = int(raw)
            else:
                kwargs[name] = float(raw)
        except ValueError:
            raise ConfigurationError(f"Invalid argument: {name}. Cannot parse {raw!r}.")

    return SystemConfig(**kwargs)


def load_parameters(filename, log=print):
    """
    Read a parameter file.

    Errors never propagate: they are reported through `log` and the
    default parameters are returned instead.
    """
    try:
        with open(filename, "r") as f:
            config = parse_parameters(f.read())
    except (OSError, UnicodeDecodeError) as exc:
        log(f"WARNING: Cannot read parameter file {filename}: {exc}")
        log("WARNING: Values are set to default now.")
        return SystemConfig()
    except ConfigurationError as exc:
        log(f"WARNING: Exception while setting parameters from {filename}")
        log(f"WARNING: {exc}")
        log("WARNING: Values are set to default now.")
        return SystemConfig()

    log(f"Successfully set parameters from {filename}")
    return config


def format_parameters(config):
    """Return one human readable line per parameter."""
    width = max(len(name) for name in PARAMETER_ORDER)
    lines = ["Currently set parameters:"]
    for field in fields(config):
        lines.append(f"  {field.name:<{width}}  {getattr(config, field.name)}")
    lines.append(f"  {'N':<{width}}  {config.N}")
    return lines


def write_parameters(config, filename):
    """Write `config` in the format read by load_parameters."""
    with open(filename, "w") as f:
        for name in PARAMETER_ORDER:
            f.write(f"{getattr(config, name)}\t{name}\n")
