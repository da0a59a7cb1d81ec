import numpy as np
import librosa
import pytest

SR = 44100
N = 1024


def make_tone(f0, sr=SR, length=N, amplitude=1.0):
    """Sine wave frame, float32 like the capture stream."""
    y = amplitude * librosa.tone(f0, sr=sr, length=length)
    return y.astype(np.float32)


@pytest.fixture
def tone():
    return make_tone
