# cli.py

"""
Command line runner.

    pagesim optimal -n 3 trace.txt
    pagesim wsclock -n 3 -t 3 trace.txt -v
    pagesim compare -n 3 -t 3 trace.txt
"""

import argparse
import sys
from typing import List, Optional

from access_trace import TraceParseError, format_trace, parse_trace, read_trace_file
from config import Algorithm, ConfigurationError, SimulationConfig, parse_number
from engine import ReplacementEngine, count_faults

ALGORITHM_NAMES = {
    "optimal": Algorithm.OPTIMAL,
    "second": Algorithm.SECOND_CHANCE,
    "wsclock": Algorithm.WSCLOCK,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagesim",
        description="Page replacement simulator for Optimal, Second-Chance and WSClock",
    )
    parser.add_argument("algorithm", choices=[*ALGORITHM_NAMES, "compare"], help="Replacement algorithm")
    parser.add_argument("-n", "--numframes", help="Number of frames")
    parser.add_argument("-t", "--tau", help="WSClock age threshold, in accesses")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print the full event log")
    parser.add_argument("tracefile", help="File of R:<page> / W:<page> tokens")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    algorithm = ALGORITHM_NAMES.get(args.algorithm)

    try:
        capacity = parse_number("frame count", args.numframes)
        if algorithm == Algorithm.WSCLOCK or args.tau is not None:
            tau = parse_number("tau", args.tau)
        else:
            tau = 0
        SimulationConfig(algorithm or Algorithm.OPTIMAL, capacity, tau).validate()
    except ConfigurationError as e:
        print(f"Args Error: {e}", file=sys.stderr)
        return 1

    try:
        trace = parse_trace(read_trace_file(args.tracefile))
    except TraceParseError as e:
        print(f"Trace Error: {e}", file=sys.stderr)
        return 1

    print(f"Total Frames: {capacity}")
    if algorithm == Algorithm.WSCLOCK or algorithm is None:
        print(f"Tau: {tau}")
    print(f"Memory accesses: {format_trace(trace)}")

    if algorithm is None:
        for name, faults in ReplacementEngine.compare(capacity, trace, tau).items():
            print(f"{name:<14} faults: {faults}")
        return 0

    engine = ReplacementEngine(capacity, algorithm, tau)
    engine.load(trace)
    results = engine.run()

    lines = engine.event_log if args.verbose else engine.write_back_notices
    for line in lines:
        print(line)

    print(f"Total faults: {count_faults(results)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
