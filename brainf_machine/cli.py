import argparse
import codecs
import logging
import sys
from dataclasses import replace

import yaml

from .config import MachineConfig
from .debugger import TracingMachine
from .errors import BrainfError, ParseError
from .machine import TapeMachine
from .program import build
from .suite import load_cases, run_suite

logger = logging.getLogger(__name__)

EXIT_PARSE_ERROR = 1
EXIT_EXECUTION_ERROR = 2
EXIT_USAGE_ERROR = 3

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="brainf", description="Evaluate tape-language programs")
    ap.add_argument("--chunk-size", type=_positive_int, default=None,
                    help="Tape growth increment in cells (default: $BRAINF_CHUNK_SIZE or 100)")
    ap.add_argument("--encoding", default=None,
                    help="Encoding for text programs and input (default: $BRAINF_ENCODING or utf-8)")
    ap.add_argument("--log-level", default="WARNING", type=str.upper, choices=LOG_LEVELS,
                    help="Logging level")
    sub = ap.add_subparsers(dest="command", required=True)

    for name, text in (("run", "Run a program and write its output"),
                       ("trace", "Run a program, printing the machine state after every step")):
        p = sub.add_parser(name, help=text)
        source = p.add_mutually_exclusive_group(required=True)
        source.add_argument("file", nargs="?", help="Program file ('-' for stdin)")
        source.add_argument("-e", "--execute", metavar="CODE", help="Program text given inline")
        data = p.add_mutually_exclusive_group()
        data.add_argument("--input", default="", help="Input text")
        data.add_argument("--input-file", help="Read input bytes from this file")
        if name == "trace":
            p.add_argument("--memory-range", type=int, default=10,
                           help="Number of tape cells shown around the head")

    p = sub.add_parser("check", help="Run YAML conformance suites")
    p.add_argument("suites", nargs="+", help="Suite files")
    return ap


def _read_program(args) -> bytes:
    if args.execute is not None:
        return args.execute.encode(args.config.encoding)
    if args.file == "-":
        return sys.stdin.buffer.read()
    with open(args.file, "rb") as f:
        return f.read()


def _read_input(args) -> bytes:
    if args.input_file:
        with open(args.input_file, "rb") as f:
            return f.read()
    return args.input.encode(args.config.encoding)


def _run(args) -> int:
    if args.command == "trace":
        machine = TracingMachine(args.config, show_memory_range=args.memory_range)
    else:
        machine = TapeMachine(args.config)
    try:
        output = machine.run(build(_read_program(args)), _read_input(args))
    except BrainfError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_PARSE_ERROR if isinstance(e, ParseError) else EXIT_EXECUTION_ERROR
    if args.command == "run":
        sys.stdout.buffer.write(output)
        sys.stdout.flush()
    return 0


def _check(args) -> int:
    failed = 0
    total = 0
    for path in args.suites:
        cases = load_cases(path, encoding=args.config.encoding)
        logger.info("Loaded %d cases from %s", len(cases), path)
        for result in run_suite(cases, args.config):
            total += 1
            status = "PASS" if result.passed else "FAIL"
            line = f"{status} {path}::{result.case.name}"
            if not result.passed:
                failed += 1
                line += f" ({result.describe()})"
            print(line)
    print(f"{total - failed}/{total} cases passed")
    return 1 if failed else 0


def _load_config(args) -> MachineConfig:
    config = MachineConfig.from_env()
    overrides = {}
    if args.chunk_size is not None:
        overrides["chunk_size"] = args.chunk_size
    if args.encoding is not None:
        overrides["encoding"] = args.encoding
    config = replace(config, **overrides)
    codecs.lookup(config.encoding)
    return config


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        args.config = _load_config(args)
        if args.command == "check":
            return _check(args)
        return _run(args)
    except (OSError, ValueError, LookupError, yaml.YAMLError) as e:
        # missing files, bad suites, unknown or unusable encodings
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR


if __name__ == "__main__":
    sys.exit(main())
