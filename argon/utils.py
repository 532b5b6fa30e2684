import os

import numpy as np

from .errors import SequencingError


def write_xyz(f, positions, symbol="AR", comment=""):
    """
    Write one XYZ frame (Jmol / OVITO readable) to an open file.
    """
    pos = np.asarray(positions)
    f.write(f"{pos.shape[0]}\n")
    f.write(f"{comment}\n")
    for x, y, z in pos:
        f.write(f"{symbol} {x:.8f} {y:.8f} {z:.8f}\n")


class MemorySink:
    """
    Keeps everything a simulation emits in memory.
    Used by the web front-end and for analysis in the same process.
    """

    def __init__(self):
        self.frames = []        # (step, positions)
        self.momenta = None
        self.observables = []   # ObservableSnapshot
        self.means = None

    def write_positions(self, step, positions):
        self.frames.append((step, np.array(positions, copy=True)))

    def write_momenta(self, momenta):
        self.momenta = np.array(momenta, copy=True)

    def write_observables(self, snapshot):
        self.observables.append(snapshot)

    def write_means(self, means):
        self.means = means

    def observable_arrays(self):
        """t, H, T, P as arrays."""
        rows = [(s.t, s.H, s.T, s.P) for s in self.observables]
        data = np.array(rows, dtype=float).reshape(-1, 4)
        return data[:, 0], data[:, 1], data[:, 2], data[:, 3]


class FileSink:
    """
    Writes a run to text files in `out_dir`:
        r0.xyz, p0.xyz   initial positions and momenta
        rt_data.xyz      trajectory frames
        HTP.txt          t, H, T, P every Sout steps
        HTP-MEAN.txt     mean H, T, P of the production run
    """

    HTP_HEADER = "t (ps)\tH (kJ/mol)\tT (K)\tP (kJ/mol/nm^3)\n"

    def __init__(self, out_dir="out", symbol="AR"):
        self.out_dir = out_dir
        self.symbol = symbol
        self._traj = None
        self._htp = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def path(self, filename):
        return os.path.join(self.out_dir, filename)

    def open(self):
        os.makedirs(self.out_dir, exist_ok=True)
        self._traj = open(self.path("rt_data.xyz"), "w")
        self._htp = open(self.path("HTP.txt"), "w")
        self._htp.write(self.HTP_HEADER)

    def close(self):
        for f in (self._traj, self._htp):
            if f is not None:
                f.close()
        self._traj = None
        self._htp = None

    def _require_open(self):
        if self._traj is None or self._htp is None:
            raise SequencingError(
                "FileSink is not open: call open() or use it in a with block."
            )

    def write_positions(self, step, positions):
        self._require_open()
        if step == 0:
            with open(self.path("r0.xyz"), "w") as f:
                write_xyz(f, positions, self.symbol, comment="Step=0")
        write_xyz(self._traj, positions, self.symbol, comment=f"Step={step}")

    def write_momenta(self, momenta):
        with open(self.path("p0.xyz"), "w") as f:
            write_xyz(f, momenta, self.symbol, comment="Initial momenta")

    def write_observables(self, snapshot):
        self._require_open()
        self._htp.write(
            f"{snapshot.t:.5f}\t{snapshot.H:.5f}\t{snapshot.T:.5f}\t{snapshot.P:.5f}\n"
        )
        self._htp.flush()

    def write_means(self, means):
        with open(self.path("HTP-MEAN.txt"), "w") as f:
            f.write("H (kJ/mol)\tT (K)\tP (kJ/mol/nm^3)\n")
            f.write(f"{means.H:.5f}\t{means.T:.5f}\t{means.P:.5f}\n")
