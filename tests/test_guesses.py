import numpy as np
import pytest

from engines.analysis.notes import Note, calculate_note
from engines.analysis.guesses import get_notes, remove_duplicate_guesses
from engines.analysis.spectrum import NO_CORRECTION


GUESSES = [
    Note("", 261.63, 0.3),
    Note("", 440.5, 0.9),   # same A4 as 440.0, weaker
    Note("", 10.0, 5.0),    # below the table, dropped
    Note("", 880.0, 0.5),
    Note("", 440.0, 1.0),
]


def test_strongest_first_and_deduped():
    notes = remove_duplicate_guesses(GUESSES, 1.0, 0)
    assert [(n.name, n.frequency) for n in notes] == [
        ("A", 440.0), ("A", 880.0), ("C", 261.6)]
    assert [n.magnitude for n in notes] == [1.0, 0.5, 0.3]


def test_octaves_are_not_duplicates():
    notes = remove_duplicate_guesses([Note("", 440.0, 1.0), Note("", 880.0, 0.9)], 1.0, 0)
    assert [n.frequency for n in notes] == [440.0, 880.0]
    assert {n.name for n in notes} == {"A"}


def test_energy_budget_checked_before_admitting():
    # total 1.8: after A4 1.0/1.8 = 0.56 < 0.7, after A5 1.5/1.8 = 0.83
    notes = remove_duplicate_guesses(GUESSES, 0.7, 0)
    assert [n.frequency for n in notes] == [440.0, 880.0]


def test_cap():
    assert len(remove_duplicate_guesses(GUESSES, 1.0, 1)) == 1
    assert len(remove_duplicate_guesses(GUESSES, 1.0, 2)) == 2


def test_nothing_matched():
    assert remove_duplicate_guesses([], 0.7, 2) == []
    assert remove_duplicate_guesses([Note("", 10.0, 1.0), Note("", 0.0, 1.0)], 0.7, 2) == []


def test_zero_magnitude_candidates():
    assert remove_duplicate_guesses([Note("", 440.0, 0.0)], 0.7, 2) == []


@pytest.mark.parametrize("percentage, cap", [(0.3, 0), (0.5, 3), (0.7, 2), (0.9, 0), (1.0, 5)])
def test_cap_and_energy_bound(percentage, cap):
    rng = np.random.default_rng(7)
    guesses = [Note("", f, m) for f, m in zip(rng.uniform(30, 2000, 300), rng.uniform(0, 1, 300))]

    candidates = {}
    for g in sorted(guesses, key=lambda n: n.magnitude, reverse=True):
        note = calculate_note(g)
        if note is not None:
            candidates.setdefault(note.frequency, note)
    total = sum(n.magnitude for n in candidates.values())

    notes = remove_duplicate_guesses(guesses, percentage, cap)
    assert notes
    if cap:
        assert len(notes) <= cap
    kept = sum(n.magnitude for n in notes)
    assert (kept - notes[-1].magnitude) / total < percentage
    assert len({n.frequency for n in notes}) == len(notes)
    assert [n.magnitude for n in notes] == sorted((n.magnitude for n in notes), reverse=True)


def test_get_notes_from_spectrum():
    # 10 Hz per index, the 430-440 Hz pair lands on A4, 440-450 Hz is off by 1.1%
    spectrum = np.zeros(128)
    spectrum[43:47] = [0.2, 0.5, 0.5, 0.2]
    notes = get_notes(spectrum, 10.0, 0.1, 0.7, 2, 3, 0, 127, correction=NO_CORRECTION)
    assert [(n.name, n.frequency) for n in notes] == [("A", 440.0)]
