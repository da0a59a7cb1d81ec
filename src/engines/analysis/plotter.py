import queue
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation

from common.handler import PrintHandler
from engines.analysis.notes import NOTE_TABLE


# Pitch classes on the x axis, the wrap C is drawn with the low C
PITCH_CLASSES = NOTE_TABLE[:-1]


def get_pitch_class_levels(notes):
    """Summed magnitude of the notes per pitch class, in `PITCH_CLASSES` order."""
    names = [ref.name for ref in PITCH_CLASSES]
    levels = np.zeros(len(names), dtype=np.float64)
    for note in notes:
        try:
            levels[names.index(note.name)] += note.magnitude
        except ValueError:
            continue
    return levels


# Matplotlib plotter
class MatplotlibPlotter(PrintHandler):
    """Live view of the analysis results.

    **Arguments**
    * `data`    -- (Queue) `(level, notes)` items, e.g. `AnalyzerWorker.results`.
    * `ylim`    -- (float) Upper limit of the note bars. Default is `1.0`.
    """
    def __init__(self, data, ylim=1.0):

        # Arguments
        self.data = data
        self.ylim = ylim

        # Last result
        self.level = 0.0
        self.notes = []

        self.initialize()

        self.ani = FuncAnimation(
            self.fig,
            self.update,
            interval=10,
            blit=False,
            cache_frame_data=False
        )
        plt.show()

    def update(self, frame):

        # Keep only the latest result
        result = None
        while True:
            try:
                result = self.data.get_nowait()
            except queue.Empty:
                break

        if result is not None:
            self.level, self.notes = result

            # Loudness
            self.level_bar.set_height(self.level)

            # Notes
            levels = get_pitch_class_levels(self.notes)
            for bar, height in zip(self.note_bars, levels):
                bar.set_height(min(height, self.ylim))

            self.texts.set_text(
                "  ".join(f"{n.name} {n.frequency:.1f}Hz" for n in self.notes))

        return (self.level_bar, *self.note_bars, self.texts)

    def initialize(self):
        self.fig, (self.ax_level, self.ax) = plt.subplots(
            1, 2, gridspec_kw={'width_ratios': [1, 8]})

        # VU meter
        self.level_bar, = self.ax_level.bar([0], [0.0], color='g')
        self.ax_level.set_ylim(0.0, 1.0)
        self.ax_level.set_xticks([])
        self.ax_level.set_title("Level")

        # Pitch classes
        x = np.arange(len(PITCH_CLASSES))
        self.note_bars = self.ax.bar(
            x, np.zeros(len(PITCH_CLASSES)),
            color=[ref.color for ref in PITCH_CLASSES],
            edgecolor='k')
        self.ax.set_xticks(x)
        self.ax.set_xticklabels([ref.name for ref in PITCH_CLASSES])
        self.ax.set_ylim(0.0, self.ylim)
        self.texts = self.ax.text(0.02, 0.95, "", transform=self.ax.transAxes)
