from __future__ import annotations

import queue
import sounddevice as sd

from common.handler import PrintHandler


class RecordWorker(PrintHandler):

    """Worker class for capturing microphone frames for the analysis.

    **Arguments**
    * `samplerate`  -- Samples per a second. Default is `44100`.
    * `blocksize`   -- Samples per a block. Default is `1024`.
    * `channels`    -- Recording channel. Default is `1` as mono.
    * `device`      -- Input device. Default is `None` as auto-selection.
    * `maxsize`     -- Frames waiting for analysis. Default is `32`.


    **Example**

    * How to start?

    This contains the recording thread.
    You can handle thread like this.

    >>> worker = RecordWorker()     # Start thread automatically with assigning
    >>> [ANOTHER FUNCTINOAL CODE EXCEPT RECORDING]
    >>> worker.stop()               # When ending thread
    >>> worker.close()


    * How to get recording data from `buffer`?

    Every item is `(frame, samplerate)`: the first channel of the block
    and the rate the stream is actually running at.

    >>> frame, samplerate = worker.buffer.get(timeout=0.1)

    """

    def __init__(self,
                 samplerate: int=44100,
                 blocksize: int=1024,
                 channels: int=1,
                 device: int | None=None,
                 maxsize: int=32):

        # Audio buffer for analysis
        self.buffer = queue.Queue(maxsize=maxsize)

        # Input thread
        self.thread = sd.InputStream(
            samplerate=samplerate,
            blocksize=blocksize,
            device=device,
            channels=channels,
            dtype='float32',
            latency='low',
            callback=self.record_callback
        )

        # Start thread
        self.thread.start()


    def record_callback(self, indata, frames, time_info, status):
        """Recording callback. Those arguments are neccessary for thread."""

        if status:
            self.prtwl("Warning!", status)

        # Try to hand over the frame, or drop it.
        try:
            self.buffer.put_nowait((indata[:, 0].copy(), self.thread.samplerate))
        except queue.Full:
            self.prtwl("Warning!", "This buffer will be ignored.")

    def stop(self):
        self.thread.stop()

    def close(self):
        self.thread.close()
