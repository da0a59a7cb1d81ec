from __future__ import annotations

import argparse
import queue
import sys
import time

import librosa

from common.handler import PrintHandler
from engines.analysis.analyzer import SoundAnalyzer, AnalyzerWorker
from engines.analysis.spectrum import FREQ_CORRECTION, NO_CORRECTION

SAMPLE_RATE = 44100
BLOCK_SIZE = 1024
THRESHOLD = 0.001
PERCENTAGE = 0.7
MAX_NOTES = 2
MIN_BIN_SIZE = 3
LOW_INDEX = 10
HIGH_INDEX = 1000
MIN_DB = -80.0


class Console(PrintHandler):
    '''Prints analysis results.'''
    def show(self, level, notes):
        labels = "  ".join(
            f"{n.name}({librosa.hz_to_note(n.frequency)}) {n.frequency:.2f}Hz {n.magnitude:.4f}"
            for n in notes)
        self.prtwl(f"LEVEL: {level:.3f}", labels or "-")


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Live note detection.")
    ap.add_argument('--file', default=None, help="analyze a recorded file instead of the microphone")
    ap.add_argument('--samplerate', type=int, default=SAMPLE_RATE)
    ap.add_argument('--blocksize', type=int, default=BLOCK_SIZE)
    ap.add_argument('--threshold', type=float, default=THRESHOLD)
    ap.add_argument('--percentage', type=float, default=PERCENTAGE)
    ap.add_argument('--notes', type=int, default=MAX_NOTES)
    ap.add_argument('--min-bin-size', type=int, default=MIN_BIN_SIZE)
    ap.add_argument('--low-index', type=int, default=LOW_INDEX)
    ap.add_argument('--high-index', type=int, default=HIGH_INDEX)
    ap.add_argument('--min-db', type=float, default=MIN_DB)
    ap.add_argument('--no-correction', action='store_true')
    ap.add_argument('--plot', action='store_true', help="show the matplotlib view")
    ap.add_argument('--verbose', action='store_true')
    return ap.parse_args(argv)


def run_file(args, analyzer, console):
    from engines.audio.reader import read_frames

    try:
        frames = list(read_frames(args.file, blocksize=args.blocksize))
    except Exception as e:
        console.prtwl("Warning!", f"Can not read {args.file}:", e)
        return 1

    for frame, samplerate in frames:
        console.show(*analyzer.analyze(frame, samplerate))
    return 0


def run_live(args, analyzer, console):
    from engines.audio.record import RecordWorker

    recorder = RecordWorker(
        samplerate=args.samplerate,
        blocksize=args.blocksize)
    worker = AnalyzerWorker(recorder.buffer, analyzer=analyzer)

    try:
        if args.plot:
            from engines.analysis.plotter import MatplotlibPlotter
            MatplotlibPlotter(data=worker.results)
        else:
            while True:
                try:
                    console.show(*worker.results.get(timeout=0.5))
                except queue.Empty:
                    continue
    except KeyboardInterrupt:
        console.prtwl("Keyboard interruption detected.")
    finally:
        recorder.stop()
        worker.stop()
        recorder.close()
    return 0


def main(argv=None):
    args = parse_args(argv)

    print("chromavu START")

    analyzer = SoundAnalyzer(
        threshold=args.threshold,
        percentage=args.percentage,
        notes=args.notes,
        min_bin_size=args.min_bin_size,
        low_index=args.low_index,
        high_index=args.high_index,
        min_db=args.min_db,
        correction=NO_CORRECTION if args.no_correction else FREQ_CORRECTION,
        verbose=args.verbose)
    console = Console()

    start = time.perf_counter()
    if args.file:
        status = run_file(args, analyzer, console)
    else:
        status = run_live(args, analyzer, console)

    print(f"chromavu END ({time.perf_counter() - start:.1f}s)")
    return status


if __name__ == "__main__":
    sys.exit(main())
