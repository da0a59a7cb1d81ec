import queue

import numpy as np
import pytest

pytest.importorskip("sounddevice")
try:
    from engines.audio import record
except OSError:
    pytest.skip("PortAudio is not available", allow_module_level=True)


class FakeStream:
    samplerate = 48000.0


def make_worker(maxsize=1):
    worker = object.__new__(record.RecordWorker)
    worker.buffer = queue.Queue(maxsize=maxsize)
    worker.thread = FakeStream()
    return worker


def test_callback_hands_over_first_channel():
    worker = make_worker()
    indata = np.arange(8, dtype=np.float32).reshape(4, 2)
    worker.record_callback(indata, 4, None, None)
    indata[:] = -1

    frame, samplerate = worker.buffer.get_nowait()
    assert frame.tolist() == [0.0, 2.0, 4.0, 6.0]
    assert samplerate == 48000.0


def test_full_buffer_drops_frame(capsys):
    worker = make_worker(maxsize=1)
    worker.record_callback(np.ones((4, 1), dtype=np.float32), 4, None, None)
    worker.record_callback(np.zeros((4, 1), dtype=np.float32), 4, None, None)

    assert worker.buffer.qsize() == 1
    assert worker.buffer.get_nowait()[0].tolist() == [1.0] * 4
    assert "[RecordWorker]  Warning! This buffer will be ignored." in capsys.readouterr().out


def test_status_is_reported(capsys):
    worker = make_worker()
    worker.record_callback(np.zeros((4, 1), dtype=np.float32), 4, None, "input overflow")
    assert "Warning! input overflow" in capsys.readouterr().out
    assert worker.buffer.qsize() == 1


def test_live_mode_closes_stream_on_error(monkeypatch):
    import run
    from engines.analysis import plotter

    calls = []

    class FakeRecorder:
        def __init__(self, samplerate, blocksize):
            self.buffer = queue.Queue()

        def stop(self):
            calls.append("stop")

        def close(self):
            calls.append("close")

    def broken_plotter(data):
        raise RuntimeError("no display")

    monkeypatch.setattr(record, "RecordWorker", FakeRecorder)
    monkeypatch.setattr(plotter, "MatplotlibPlotter", broken_plotter)

    with pytest.raises(RuntimeError):
        run.main(["--plot"])
    assert calls == ["stop", "close"]
