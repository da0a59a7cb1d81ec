from __future__ import annotations

import math
from bisect import bisect_right
from dataclasses import dataclass


# RGBA in [0, 1]
WHITE = (1.0, 1.0, 1.0, 1.0)

# Relative distance to a reference pitch that still counts as that pitch
PERCENT_DISSIMILAR = 0.01

# Upper bound of halvings while folding into the reference octave
MAX_FOLD_DEPTH = 64


@dataclass(frozen=True)
class Note:
    name: str
    frequency: float    # Hz
    magnitude: float    # relative energy
    color: tuple = WHITE

    @property
    def key(self) -> str:
        return str(self.frequency)

    def __str__(self):
        return (f"Note: [name: {self.name}, frequency: {self.frequency}, "
                f"magnitude: {self.magnitude}, color: {self.color}]")


# Lowest octave, C0 ~ C1. The wrap C is repeated at both ends to bound the search.
NOTE_TABLE = (
    Note("C", 16.35, 0.0, (1.0, 0.0, 0.0, 1.0)),
    Note("Db", 17.32, 0.0, (0.5, 0.0, 0.0, 1.0)),
    Note("D", 18.35, 0.0, (0.01, 0.01, 0.01, 1.0)),
    Note("Eb", 19.45, 0.0, (0.0, 0.0, 0.3, 1.0)),
    Note("E", 20.60, 0.0, (0.0, 0.5, 0.0, 1.0)),
    Note("F", 21.83, 0.0, (1.0, 0.5, 0.0, 1.0)),
    Note("Gb", 23.12, 0.0, (0.0, 1.0, 0.0, 1.0)),
    Note("G", 24.5, 0.0, (0.0, 0.0, 1.0, 1.0)),
    Note("Ab", 25.96, 0.0, (0.0, 0.0, 1.0, 1.0)),
    Note("A", 27.5, 0.0, (0.0, 1.0, 1.0, 1.0)),
    Note("Bb", 29.14, 0.0, (1.0, 0.7, 1.0, 0.3)),
    Note("B", 30.87, 0.0, (0.5, 0.0, 0.5, 1.0)),
    Note("C", 32.7, 0.0, (1.0, 0.0, 0.0, 1.0)),
)


def fold_frequency(f, stop, max_depth=MAX_FOLD_DEPTH):
    """Halve `f` until it is below `stop`.

    Returns `(base_freq, depth)`, or `None` when `f` can not be folded:
    non-positive, non-finite, or deeper than `max_depth` octaves.
    """
    if not math.isfinite(f) or f <= 0:
        return None

    depth = 0
    while f >= stop:
        if depth >= max_depth:
            return None
        f /= 2
        depth += 1
    return f, depth


def get_pow(depth, val):
    """`val * 2 ** depth`, one octave at a time."""
    for _ in range(min(depth, MAX_FOLD_DEPTH)):
        val *= 2
    return val


def find_bounding_frequencies(base_note_freq, notes=NOTE_TABLE) -> int | None:
    """Index `i` such that `notes[i-1] <= base_note_freq < notes[i]` (by frequency).

    `None` when the frequency is outside the table.
    """
    freqs = [note.frequency for note in notes]
    i = bisect_right(freqs, base_note_freq)
    if i == 0 or i >= len(freqs):
        return None
    return i


def calculate_note(note, notes=NOTE_TABLE) -> Note | None:
    """Match a guess against the reference octave.

    The guess is folded down into the table's octave, bounded by its two
    neighbouring pitches and accepted only within `PERCENT_DISSIMILAR` of
    one of them. The accepted note is the closer reference pitch moved back
    up to the guess's octave, carrying the guess's magnitude.
    """
    ## 1) Fold into the reference octave
    folded = fold_frequency(note.frequency, notes[-1].frequency)
    if folded is None:
        return None
    base_note_freq, depth = folded

    ## 2) Bounding pitches
    i = find_bounding_frequencies(base_note_freq, notes)
    if i is None:
        return None
    lower, upper = notes[i - 1], notes[i]

    ## 3) Tolerance
    upper_dist = abs(upper.frequency - base_note_freq)
    lower_dist = abs(base_note_freq - lower.frequency)
    if min(lower_dist, upper_dist) / base_note_freq >= PERCENT_DISSIMILAR:
        return None

    ## 4) Closer one, back to the original octave
    ref = lower if upper_dist > lower_dist else upper
    return Note(
        name=ref.name,
        frequency=get_pow(depth, ref.frequency),
        magnitude=note.magnitude,
        color=ref.color)
