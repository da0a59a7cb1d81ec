from engines.analysis.notes import calculate_note
from engines.analysis.spectrum import (
    FREQ_CORRECTION, setup_frequency_bins, make_guesses_between_notes)


def remove_duplicate_guesses(bin_guesses, percentage, notes):
    """Match the guesses and keep the strongest ones.

    **Arguments**
    * `bin_guesses` -- (list[Note]) Raw guesses from the peak estimation.
    * `percentage`  -- (float) Fraction of the total matched magnitude to gather.
    * `notes`       -- (int) Maximum number of notes to keep, `0` for no limit.

    Guesses landing on exactly the same frequency are kept once. The same
    pitch class on another octave is a different note.
    """
    ## 1) Candidates, strongest first
    total_mag = 0.0
    guesses = []
    seen = set()
    for guess in sorted(bin_guesses, key=lambda n: n.magnitude, reverse=True):
        note = calculate_note(guess)
        if note is None or note.frequency in seen:
            continue
        seen.add(note.frequency)
        guesses.append(note)
        total_mag += note.magnitude

    if total_mag <= 0:
        return []

    ## 2) Keep until the energy budget or the cap is reached
    mag_kept = 0.0
    kept_guesses = []
    for note in guesses:
        if (notes == 0 or len(kept_guesses) < notes) and mag_kept / total_mag < percentage:
            kept_guesses.append(note)
            mag_kept += note.magnitude
    return kept_guesses


def get_notes(fft_values, frequency_interval, threshold, percentage, notes,
              min_bin_size, low_index, high_index, correction=FREQ_CORRECTION):
    """Best note guesses for a magnitude spectrum."""
    bins = setup_frequency_bins(
        fft_values, frequency_interval, threshold,
        low_index, high_index, correction=correction)
    bin_guesses = make_guesses_between_notes(bins, min_bin_size)
    return remove_duplicate_guesses(bin_guesses, percentage, notes)
