# src/Sigflow/application/cli/main.py
# -*- coding: utf-8 -*-
"""
Command line interface: load a table (or the demo recording), apply a saved
pipeline to one channel and export the result.
"""
import argparse
import logging
from pathlib import Path

from Sigflow.application.session_manager import SessionManager
from Sigflow.infrastructure.file_readers import generate_demo_dataset, read_dataset
from Sigflow.shared.error_handling import SigflowError

log = logging.getLogger('Sigflow.application.cli')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sigflow",
        description="Sigflow - filter pipeline and spectral analysis for tabular recordings",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--input", "-i", type=Path, help="CSV/TXT file with a time column and channel columns")
    source.add_argument("--demo", action="store_true", help="Use the synthetic two-channel demo recording")
    parser.add_argument("--time-column", type=str, default=None, help="Time column name (auto-detected if omitted)")
    parser.add_argument("--channel", "-c", type=str, default=None, help="Channel to process (first channel if omitted)")
    parser.add_argument("--sampling-rate", type=float, default=None, help="Sampling rate in Hz (inferred if omitted)")
    parser.add_argument("--pipeline", "-p", type=Path, default=None, help="Pipeline JSON document to apply")
    parser.add_argument(
        "--time-range", type=float, nargs=2, metavar=("START", "END"), default=None,
        help="Restrict processing to this time window",
    )
    parser.add_argument("--export-csv", type=Path, default=None, help="Write processed data (file or directory)")
    parser.add_argument("--export-script", type=Path, default=None, help="Write the pipeline as a SciPy script")
    parser.add_argument("--spectrum", action="store_true", help="Print the dominant spectral peak")
    parser.add_argument("--max-frequency", type=float, default=None, help="Upper frequency bound for --spectrum")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for --demo")
    parser.add_argument("--dev", action="store_true", help="Run in development mode with increased logging")
    parser.add_argument("--log-dir", type=str, default=None, help="Directory to store log files")
    parser.add_argument("--version", action="store_true", help="Show version information and exit")
    return parser


def run_cli(args: argparse.Namespace) -> int:
    """Execute a parsed command line. Returns the process exit code."""
    if args.input is None and not args.demo:
        print("Error: one of --input or --demo is required")
        return 2

    session = SessionManager()
    try:
        if args.demo:
            session.dataset = generate_demo_dataset(seed=args.seed)
        else:
            session.dataset = read_dataset(
                args.input, time_column=args.time_column, sampling_rate=args.sampling_rate
            )
        if args.channel:
            session.active_channel = args.channel
        if args.pipeline:
            session.load_pipeline(args.pipeline)
        if args.time_range:
            session.set_time_range(*args.time_range)
        if args.max_frequency is not None:
            session.max_frequency = args.max_frequency

        for line in session.pipeline.describe():
            print(line)

        _, values = session.processed()
        print(f"Processed {values.size} samples of '{session.active_channel}' at {session.sampling_rate} Hz")

        if args.export_csv:
            path = session.export_processed_csv(args.export_csv)
            print(f"Processed data written to {path}")
        if args.export_script:
            path = session.export_script(args.export_script)
            print(f"Pipeline script written to {path}")
        if args.spectrum:
            result = session.spectrum()
            peak = result.peak() if result.is_valid else None
            if peak is None:
                print(f"No spectrum: {result.error_message or 'too few samples'}")
            else:
                print(f"Spectral peak: {peak[0]:.3f} Hz (magnitude {peak[1]:.4f})")
    except SigflowError as e:
        log.error(f"{type(e).__name__}: {e}")
        print(f"Error: {e}")
        return 1
    return 0
