# plot_analysis.py
#
# Plot H, T, P and the momentum distribution from simulation output:
#   - HTP.txt
#   - p0.xyz
#
# Run:  python -m argon.plot_analysis [out_dir] [parameter_file]

import os
import sys

import numpy as np
import matplotlib.pyplot as plt

from .analysis import maxwell_boltzmann_momentum_pdf, momentum_magnitudes
from .config import SystemConfig, load_parameters


# ---------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------
def load_htp(filename):
    """Return t, H, T, P columns of an HTP.txt file."""
    data = np.loadtxt(filename, skiprows=1)
    if data.ndim == 1:
        data = data[None, :]
    return data[:, 0], data[:, 1], data[:, 2], data[:, 3]


def load_xyz_frame(filename):
    """Vectors of the first frame of an XYZ file, shape (N, 3)."""
    with open(filename) as f:
        n = int(f.readline())
        f.readline()
        rows = [f.readline().split()[1:4] for _ in range(n)]
    return np.array(rows, dtype=float)


# ---------------------------------------------------------------------
# Figures
# ---------------------------------------------------------------------
def plot_htp(t, H, T, P):
    fig, axes = plt.subplots(3, 1, figsize=(7, 8), sharex=True)
    for ax, values, label in zip(axes, (H, T, P), ("H (kJ/mol)", "T (K)", "P (kJ/mol/nm$^3$)")):
        ax.plot(t, values, lw=1.5)
        ax.set_ylabel(label)
        ax.grid(True, alpha=0.3)
    axes[-1].set_xlabel("t (ps)")
    axes[0].set_title("Hamiltonian, temperature and pressure")
    fig.tight_layout()
    return fig


def plot_momentum_distribution(momenta, m, k, T, bins=30):
    """Histogram of |p| against the Maxwell-Boltzmann curve at T."""
    p_abs = momentum_magnitudes(momenta)

    fig, ax = plt.subplots(figsize=(6, 4))
    ax.hist(p_abs, bins=bins, density=True, alpha=0.6, label="simulation")
    if p_abs.size and T > 0.0:
        p = np.linspace(0.0, p_abs.max() * 1.2, 200)
        ax.plot(p, maxwell_boltzmann_momentum_pdf(p, m, k, T), lw=2, label="Maxwell-Boltzmann")
    ax.set_xlabel("|p|")
    ax.set_ylabel("probability density")
    ax.set_title("Momentum distribution")
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return fig


def main(out_dir="out", parameter_file=None):
    htp_file = os.path.join(out_dir, "HTP.txt")
    if os.path.exists(htp_file):
        fig = plot_htp(*load_htp(htp_file))
        fig.savefig(os.path.join(out_dir, "htp.png"), dpi=300)
        print("Saved htp.png")
    else:
        print(f"Missing {htp_file}")

    p_file = os.path.join(out_dir, "p0.xyz")
    if os.path.exists(p_file):
        cfg = load_parameters(parameter_file) if parameter_file else SystemConfig()
        fig = plot_momentum_distribution(load_xyz_frame(p_file), cfg.m, cfg.k, cfg.T0)
        fig.savefig(os.path.join(out_dir, "momenta.png"), dpi=300)
        print("Saved momenta.png")

    print("Done.")


if __name__ == "__main__":
    main(*sys.argv[1:3])
