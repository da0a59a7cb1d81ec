from __future__ import annotations

import math
import queue
import threading
import time

import numpy as np

from common.handler import PrintHandler
from engines.analysis.loudness import get_average_power, get_vu_meter
from engines.analysis.spectrum import FREQ_CORRECTION, perform_fft
from engines.analysis.guesses import get_notes


class SoundAnalyzer(PrintHandler):

    """Loudness and note guesses for one audio frame.

    **Arguments**
    * `threshold`       -- (float) Minimum spectral magnitude to join a bin. Default is `0.001`.
    * `percentage`      -- (float) Fraction of matched energy to gather. Default is `0.7`.
    * `notes`           -- (int) Maximum number of notes returned, `0` for no limit. Default is `2`.
    * `min_bin_size`    -- (int) Minimum samples in a bin to guess from. Default is `3`.
    * `low_index`       -- (int) First spectral index scanned. Default is `10`.
    * `high_index`      -- (int) Last spectral index scanned. Default is `1000`.
    * `min_db`          -- (float) Floor of the VU meter. Default is `-80.0`.
    * `correction`      -- (tuple) Frequency correction `(slope, intercept)`.
    * `verbose`         -- (bool) Print timing and notes for every frame. Default is `False`.


    **Example**

    >>> analyzer = SoundAnalyzer(notes=1)
    >>> level, notes = analyzer.analyze(frame, 44100)

    """

    def __init__(self,
                 threshold: float=0.001,
                 percentage: float=0.7,
                 notes: int=2,
                 min_bin_size: int=3,
                 low_index: int=10,
                 high_index: int=1000,
                 min_db: float=-80.0,
                 correction: tuple=FREQ_CORRECTION,
                 verbose: bool=False):

        # Arguments
        self.threshold = threshold
        self.percentage = percentage
        self.notes = notes
        self.min_bin_size = min_bin_size
        self.low_index = low_index
        self.high_index = high_index
        self.min_db = min_db
        self.correction = correction
        self.verbose = verbose

    def analyze(self, pcm_data, samplerate):
        """Returns `(level, notes)` for the frame.

        An empty frame or a bad sample rate gives `(0.0, [])`."""

        data = np.asarray(pcm_data, dtype=np.float32)
        if data.ndim > 1:
            data = data[:, 0]

        if data.size == 0 or not math.isfinite(samplerate) or samplerate <= 0:
            return 0.0, []

        start = time.perf_counter()

        ## 1) Loudness
        avg_power = get_average_power(data, data.shape[0])
        level = get_vu_meter(avg_power, self.min_db)

        ## 2) Spectrum
        fft_values = perform_fft(data)
        frequency_interval = samplerate / fft_values.shape[0]

        ## 3) Notes
        guesses = get_notes(
            fft_values,
            frequency_interval=frequency_interval,
            threshold=self.threshold,
            percentage=self.percentage,
            notes=self.notes,
            min_bin_size=self.min_bin_size,
            low_index=self.low_index,
            high_index=self.high_index,
            correction=self.correction)

        if self.verbose:
            elapsed = time.perf_counter() - start
            self.prtwl(f"elapsed time: {elapsed:.4f}s, level: {level:.3f}")
            for note in guesses:
                self.prtwl(note)

        return level, guesses


class AnalyzerWorker(PrintHandler):

    """Worker class running `SoundAnalyzer` over queued frames.

    **Arguments**
    * `data`        -- (Queue) Items of `(frame, samplerate)`, e.g. `RecordWorker.buffer`.
    * `analyzer`    -- (SoundAnalyzer) Pipeline settings. Default is `SoundAnalyzer()`.
    * `maxsize`     -- (int) Results kept for the consumer. Default is `8`.


    **Example**

    >>> worker = AnalyzerWorker(recorder.buffer)
    >>> level, notes = worker.results.get()
    >>> worker.stop()

    Results are `(level, notes)`. When the consumer is slow, the oldest
    result is discarded.

    """

    def __init__(self,
                 data,
                 analyzer: SoundAnalyzer | None=None,
                 maxsize: int=8):

        # Arguments
        self.data = data
        self.analyzer = analyzer if analyzer is not None else SoundAnalyzer()

        # Results for the visualizer
        self.results = queue.Queue(maxsize=maxsize)
        self.n_frames = 0

        # Open the thread
        self.stop_event = threading.Event()
        self.thread = threading.Thread(
            target=self.process_analysis,
            daemon=True
        )

        # Start thread
        self.thread.start()

    def process_analysis(self):

        while not self.stop_event.is_set():

            # Get audio buffer from recorder
            try:
                frame, samplerate = self.data.get(timeout=0.1)
            except queue.Empty:
                continue

            try:
                result = self.analyzer.analyze(frame, samplerate)
            except Exception as e:
                self.prtwl("Warning!", "Unexpected exception:", e)
                continue
            finally:
                self.n_frames += 1

            self._publish(result)

    def _publish(self, result):
        try:
            self.results.put_nowait(result)
        except queue.Full:
            # Drop the oldest one
            try:
                self.results.get_nowait()
            except queue.Empty:
                pass
            self.results.put_nowait(result)

    def stop(self):
        self.stop_event.set()
        self.thread.join()
