import math

import numpy as np
from scipy.fft import fft

from engines.analysis.notes import Note


# Linear regression of played -> detected frequency
#   220 (A) -> 187.7, 262 (C) -> 223.2, 440 (A) -> 375.5, 880 (A) -> 751.2
FREQ_CORRECTION = (1.17088, 0.42245)
NO_CORRECTION = (1.0, 0.0)


# FFT
def perform_fft(pcm_data):
    """Normalized magnitudes of the frame.

    Only the first `2 ** floor(log2(N))` samples are transformed. The rest
    keep their raw values, so every output bin past that size holds
    `|sample| * 2 / N`. Output length is always `N`.
    """
    data = np.asarray(pcm_data, dtype=np.float64).reshape(-1)
    count = data.shape[0]
    if count == 0:
        return np.zeros(0)

    ## 1) Radix-2 size
    length = int(math.floor(math.log2(count)))
    size = 2 ** length

    ## 2) Magnitudes of the transformed part, raw tail untouched
    magnitudes = np.abs(data)
    magnitudes[:size] = np.abs(fft(data[:size]))

    ## 3) Normalize
    return magnitudes * (2.0 / count)


# Frequency bins
def correct_freq(frequency, correction=FREQ_CORRECTION):
    slope, intercept = correction
    return frequency * slope + intercept

def setup_frequency_bins(fft_values, frequency_interval, threshold,
                         low_index, high_index, correction=FREQ_CORRECTION):
    """Group contiguous bins at or above `threshold` into frequency bins.

    **Arguments**
    * `fft_values`          -- (array) Magnitudes by spectral index.
    * `frequency_interval`  -- (float) Hz per spectral index.
    * `threshold`           -- (float) Minimum magnitude kept in a bin.
    * `low_index`           -- (int) First spectral index to scan (an index, not Hz).
    * `high_index`          -- (int) Last spectral index to scan, inclusive.
    * `correction`          -- (tuple) `(slope, intercept)` applied to every frequency.

    Returns a list of bins, each a list of `(frequency, magnitude)`.
    """
    low = max(0, int(low_index))
    high = min(len(fft_values) - 1, int(high_index))

    bins = []
    is_adding = False
    for i in range(low, high + 1):
        magnitude = float(fft_values[i])
        if magnitude < threshold:
            is_adding = False
            continue

        if not is_adding:
            bins.append([])
            is_adding = True
        frequency = correct_freq(i * frequency_interval, correction)
        bins[-1].append((frequency, magnitude))

    return bins


# Peak estimation
def make_guesses_between_notes(bins, min_bin_size):
    """Magnitude-weighted guesses between neighbouring samples of each bin.

    The last pair of a bin gives no guess. Magnitudes are combined with
    `hypot`, not summed.
    """
    bin_guesses = []
    for freq_bin in bins:
        if len(freq_bin) < min_bin_size or len(freq_bin) <= 1:
            continue

        for i in range(len(freq_bin) - 2):
            freq_a, mag_a = freq_bin[i]
            freq_b, mag_b = freq_bin[i + 1]
            combined_mag = mag_a + mag_b
            if combined_mag == 0:
                continue

            avg_freq = freq_a * (mag_a / combined_mag) + freq_b * (mag_b / combined_mag)
            avg_mag = math.hypot(mag_a, mag_b)
            bin_guesses.append(Note("", avg_freq, avg_mag))

    return bin_guesses
