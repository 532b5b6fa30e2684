# streamlit_app.py
# Argon Cluster Molecular Dynamics – Web Version (persistent results + 3D viewer + plot carousel)

import io
import csv

import streamlit as st
import matplotlib.pyplot as plt

from argon.config import SystemConfig
from argon.errors import ConfigurationError, NumericalSingularityError
from argon.simulation import Simulation
from argon.utils import MemorySink, write_xyz
from argon.viz import visualize_cluster_3d
from argon.plot_analysis import plot_momentum_distribution
from argon.analysis import ideal_gas_ratio, relative_energy_drift


def to_csv(*cols, headers):
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(headers)
    for row in zip(*cols):
        writer.writerow(row)
    return buf.getvalue().encode()


# ------------------------------------------------------------
# Streamlit UI
# ------------------------------------------------------------
st.set_page_config(page_title="Argon Cluster MD", layout="wide")
st.title("Argon Cluster Molecular Dynamics - Web Version")

defaults = SystemConfig()
st.sidebar.header("Simulation Parameters")

n = st.sidebar.number_input("Atoms per edge n", min_value=1, max_value=25, value=5, step=1)
T0 = st.sidebar.number_input("Initial temperature T0 (K)", min_value=0.0, value=defaults.T0)
L = st.sidebar.number_input("Sphere radius L (nm)", min_value=0.0, value=defaults.L)
a = st.sidebar.number_input("Lattice spacing a (nm)", min_value=0.0, value=defaults.a, format="%.3f")
R = st.sidebar.number_input("Potential minimum R (nm)", min_value=0.0, value=defaults.R, format="%.3f")
e = st.sidebar.number_input("Well depth e (kJ/mol)", min_value=0.0, value=defaults.e)
f = st.sidebar.number_input("Wall stiffness f", min_value=0.0, value=defaults.f)
tau = st.sidebar.number_input("Time step tau (ps)", min_value=1e-5, max_value=1e-2, value=defaults.tau, format="%.4f")

So = st.sidebar.number_input("Thermalisation steps So", min_value=0, value=100, step=100)
Sd = st.sidebar.number_input("Production steps Sd", min_value=1, value=2000, step=100)
Sout = st.sidebar.number_input("Observable interval Sout", min_value=0, value=10, step=1)
Sxyz = st.sidebar.number_input("Position interval Sxyz", min_value=0, value=50, step=1)
seed = st.sidebar.number_input("Random seed", min_value=0, value=123, step=1)

run_btn = st.sidebar.button("Run Simulation")


# ------------------------------------------------------------
# Run simulation when button pressed (store results in session_state)
# ------------------------------------------------------------
if run_btn:
    try:
        cfg = SystemConfig(
            n=int(n), m=defaults.m, e=e, R=R, k=defaults.k, f=f, L=L, a=a,
            T0=T0, tau=tau, So=int(So), Sd=int(Sd), Sout=int(Sout), Sxyz=int(Sxyz),
        )
    except ConfigurationError as exc:
        st.error(str(exc))
        st.stop()

    log_lines = []
    sink = MemorySink()
    sim = Simulation(cfg, seed=int(seed), sink=sink, log=log_lines.append)

    with st.spinner(f"Running {cfg.So + cfg.Sd} steps for {cfg.N} atoms…"):
        try:
            means = sim.simulate()
        except NumericalSingularityError as exc:
            st.error(f"Simulation aborted: {exc}")
            st.stop()

    t, H, T, P = sink.observable_arrays()

    xyz_buf = io.StringIO()
    for step, frame in sink.frames:
        write_xyz(xyz_buf, frame, comment=f"Step={step}")

    st.session_state["results"] = {
        "config": cfg,
        "frames": sink.frames,
        "momenta0": sink.momenta,
        "t": t,
        "H": H,
        "T": T,
        "P": P,
        "means": means,
        "drift": relative_energy_drift(H),
        "ideal_gas": ideal_gas_ratio(means.P, means.T, cfg.N, cfg.k, cfg.L),
        "log": log_lines,
        "traj_bytes": xyz_buf.getvalue().encode(),
    }

    st.success("Simulation complete!")


# --------------------------------------------------------
# Display results
# --------------------------------------------------------
if "results" in st.session_state:
    res = st.session_state["results"]
    cfg = res["config"]
    means = res["means"]

    # -------- Row 1: Summary (left) + Plot carousel (right) --------
    col1, col2 = st.columns(2)

    with col1:
        st.write("### Summary")
        st.write(f"**Atoms:** {cfg.N}")
        st.write(f"**Mean Hamiltonian:** {means.H:.5f} kJ/mol")
        st.write(f"**Mean Temperature:** {means.T:.3f} K")
        st.write(f"**Mean Pressure:** {means.P:.5e} kJ/mol/nm³")
        st.write(f"**PV/NkT:** {res['ideal_gas']:.4f}")
        st.write(f"**Relative energy drift:** {res['drift']:.3e}")
        with st.expander("Console log"):
            st.text("\n".join(res["log"]))

    with col2:
        st.write("### Plots")
        plot_choice = st.selectbox(
            "Select plot",
            [
                "Hamiltonian vs Time",
                "Temperature vs Time",
                "Pressure vs Time",
                "Initial Momentum Distribution",
            ],
            index=0,
            key="plot_choice",
        )

        if plot_choice == "Initial Momentum Distribution":
            fig = plot_momentum_distribution(res["momenta0"], cfg.m, cfg.k, cfg.T0)
        else:
            fig, ax = plt.subplots()
            key, label = {
                "Hamiltonian vs Time": ("H", "H (kJ/mol)"),
                "Temperature vs Time": ("T", "T (K)"),
                "Pressure vs Time": ("P", "P (kJ/mol/nm³)"),
            }[plot_choice]
            ax.plot(res["t"], res[key])
            ax.set_xlabel("t (ps)")
            ax.set_ylabel(label)
            ax.set_title(plot_choice)

        st.pyplot(fig)

    # -------- Row 2: Visualizer full width below --------
    st.write("### 3D Argon Cluster Interactive Visualizer")
    frames = res["frames"]
    frame = 0
    if len(frames) > 1:
        frame = st.slider(
            "Frame",
            min_value=0,
            max_value=len(frames) - 1,
            value=0,
            key="frame_slider",
        )
    step, positions = frames[frame]
    st.caption(f"Step {step}, t = {step * cfg.tau:.4f} ps")
    st.plotly_chart(visualize_cluster_3d(positions, cfg.L), width="stretch")

    # -------- Downloads at bottom --------
    st.write("### Downloadable Data Files")

    st.download_button(
        label="Download trajectory (.xyz)",
        data=res["traj_bytes"],
        file_name="rt_data.xyz",
        mime="chemical/x-xyz",
    )

    st.download_button(
        label="Download H, T, P (CSV)",
        data=to_csv(res["t"], res["H"], res["T"], res["P"],
                    headers=["t (ps)", "H (kJ/mol)", "T (K)", "P (kJ/mol/nm^3)"]),
        file_name="HTP.csv",
        mime="text/csv",
    )

else:
    st.info("Set parameters in the sidebar and click **Run Simulation** to begin.")
