import numpy as np


def get_average_power(data, frame_count):
    """Effective power of the frame in dB.

    RMS of the samples converted with `20 * log10(rms)`.
    A silent frame gives `-inf`, which the VU meter reads as the floor.
    """
    data = np.asarray(data, dtype=np.float64).reshape(-1)
    if frame_count <= 0:
        return float("-inf")

    with np.errstate(divide='ignore', invalid='ignore'):
        rms = np.sqrt(np.sum(data ** 2) / frame_count)
        return float(20 * np.log10(rms))


def get_vu_meter(power, min_db=-80.0):
    """VU meter level between 0.0 and 1.0.

    **Arguments**
    * `power`   -- (float) Average power of the frame, see `get_average_power`.
    * `min_db`  -- (float) Lowest level registered by the meter. Default is `-80.0`.
    """
    if not np.isfinite(power):
        return 0.0

    if power < min_db:
        return 0.0
    elif power >= 1.0:
        return 1.0
    else:
        return (abs(min_db) - abs(power)) / abs(min_db)
