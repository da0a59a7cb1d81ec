import queue

import librosa
import numpy as np


def read_frames(path, blocksize=1024, samplerate=None):
    """Yield `(frame, samplerate)` blocks of a recorded file.

    **Arguments**
    * `path`        -- (str) Audio file, any format `librosa` can load.
    * `blocksize`   -- (int) Samples per a frame. Default is `1024`.
    * `samplerate`  -- (int | None) Resample to this rate. Default is `None` as native rate.

    Frames are mono float32 and all exactly `blocksize` long;
    the last one is padded with zeros.
    """
    y, sr = librosa.load(path, sr=samplerate, mono=True)

    ## 1) Pad up to whole blocks
    n_blocks = max(1, int(np.ceil(y.shape[0] / blocksize)))
    y = librosa.util.fix_length(y, size=n_blocks * blocksize)

    ## 2) Non-overlapping frames
    frames = librosa.util.frame(y, frame_length=blocksize, hop_length=blocksize)
    for frame in frames.T:
        yield frame.astype(np.float32), sr


def load_queue(path, blocksize=1024, samplerate=None):
    """Same frames as `read_frames`, queued like `RecordWorker.buffer`."""
    buffer = queue.Queue()
    for item in read_frames(path, blocksize=blocksize, samplerate=samplerate):
        buffer.put_nowait(item)
    return buffer
