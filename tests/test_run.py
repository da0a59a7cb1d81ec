import numpy as np
import soundfile as sf

import run


def test_missing_file(tmp_path, capsys):
    path = tmp_path / "missing.wav"
    assert run.main(["--file", str(path)]) == 1

    out = capsys.readouterr().out
    assert "[Console]  Warning! Can not read" in out
    assert str(path) in out


def test_file_mode_prints_every_frame(tmp_path, tone, capsys):
    path = tmp_path / "tone.wav"
    sf.write(path, tone(440.0, length=2048), samplerate=44100, format='WAV', subtype='FLOAT')

    assert run.main(["--file", str(path), "--no-correction", "--notes", "1"]) == 0

    lines = [l for l in capsys.readouterr().out.splitlines() if "LEVEL:" in l]
    assert len(lines) == 2
    assert all(l.startswith("[Console]") and "A(A4) 440.00Hz" in l for l in lines)


def test_parse_args_defaults():
    args = run.parse_args([])
    assert args.file is None
    assert (args.samplerate, args.blocksize, args.notes) == (run.SAMPLE_RATE, run.BLOCK_SIZE, run.MAX_NOTES)
    assert not args.no_correction and not args.plot
