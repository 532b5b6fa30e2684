import os
import sys
import matplotlib.pyplot as plt

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(SCRIPT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from argon.simulation import Simulation
from argon.utils import FileSink
from argon.analysis import ideal_gas_ratio, relative_energy_drift
from argon.plot_analysis import load_htp, plot_htp, plot_momentum_distribution, load_xyz_frame

# -----------------------------------------------------
# Simulation Inputs
# -----------------------------------------------------
parameter_file = sys.argv[1] if len(sys.argv) > 1 else os.path.join(PROJECT_ROOT, "config", "parameters.txt")
out_dir = sys.argv[2] if len(sys.argv) > 2 else os.path.join(PROJECT_ROOT, "out")
seed = 123

# -----------------------------------------------------
# Run
# -----------------------------------------------------
with FileSink(out_dir) as sink:
    sim = Simulation.from_parameter_file(parameter_file, seed=seed, sink=sink)
    sim.check_parameters()
    means = sim.simulate()

cfg = sim.config
print("Simulation complete.")

# ================================================================
# ========================= ANALYSIS ==============================
# ================================================================
t, H, T, P = load_htp(sink.path("HTP.txt"))

print("\n=== Summary ===")
print(f"Atoms: {cfg.N}")
print(f"Mean H: {means.H:.5f} kJ/mol")
print(f"Mean T: {means.T:.3f} K")
print(f"Mean P: {means.P:.5e} kJ/mol/nm³")
print(f"PV/NkT: {ideal_gas_ratio(means.P, means.T, cfg.N, cfg.k, cfg.L):.4f}")
print(f"Relative energy drift: {relative_energy_drift(H):.3e}")
print("=================\n")

# ================================================================
# ============================ PLOTS ==============================
# ================================================================
plot_htp(t, H, T, P)
plot_momentum_distribution(load_xyz_frame(sink.path("p0.xyz")), cfg.m, cfg.k, cfg.T0)
plt.show()
