# ------------------------------------------------------------
# Browser-native 3D cluster visualizer (Plotly)
# ------------------------------------------------------------
import plotly.graph_objects as go
import numpy as np


def visualize_cluster_3d(positions, L, symbol="AR", n_circles=3):
    pos = np.asarray(positions)
    x, y, z = pos.T

    fig = go.Figure()

    # Atoms
    fig.add_trace(
        go.Scatter3d(
            x=x,
            y=y,
            z=z,
            mode="markers",
            marker=dict(size=4, opacity=0.9),
            name=symbol,
        )
    )

    # Confining sphere as a wireframe of great circles
    phi = np.linspace(0.0, 2.0 * np.pi, 97)
    for k in range(n_circles):
        theta = np.pi * k / n_circles
        fig.add_trace(
            go.Scatter3d(
                x=L * np.cos(phi) * np.cos(theta),
                y=L * np.cos(phi) * np.sin(theta),
                z=L * np.sin(phi),
                mode="lines",
                line=dict(width=2),
                showlegend=False,
            )
        )
    fig.add_trace(
        go.Scatter3d(
            x=L * np.cos(phi),
            y=L * np.sin(phi),
            z=np.zeros_like(phi),
            mode="lines",
            line=dict(width=2),
            showlegend=False,
        )
    )

    fig.update_layout(
        title=f"{symbol} Cluster Configuration",
        scene=dict(
            xaxis=dict(title="x (nm)", range=[-L, L], showbackground=False),
            yaxis=dict(title="y (nm)", range=[-L, L], showbackground=False),
            zaxis=dict(title="z (nm)", range=[-L, L], showbackground=False),
            aspectmode="cube",
        ),
        margin=dict(l=0, r=0, t=30, b=0),
        showlegend=False,
    )
    return fig
