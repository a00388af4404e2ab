#!/usr/bin/env python3
"""
Example script demonstrating how to drive the RTT Rules Fuzzer from Python
"""
import os
import sys
import argparse
from pathlib import Path

from rtt_fuzzer import RulesFuzzer
from rtt_fuzzer.fuzzer_engine import FuzzFailure, load_config_file


def replay_input(fuzzer, input_file):
    """Replay a saved fuzz input"""
    print("=" * 80)
    print(f"Replaying: {input_file}")
    print("=" * 80)

    try:
        result = fuzzer.run(Path(input_file).read_bytes())
    except FuzzFailure as e:
        print(f"Failure: {e}")
        print(f"Crash state written to {fuzzer.config.crash_state_path}")
        return False

    print(f"Outcome: {result.outcome.value}")
    print(f"Steps: {result.steps}")
    if result.setup:
        print(f"Seed: {result.setup.seed}  Scenario: {result.setup.scenario}")
    return True


def random_bytes_campaign(fuzzer, iterations, length):
    """Feed random byte strings through the deterministic backend"""
    failures = 0
    for i in range(iterations):
        data = os.urandom(length)
        try:
            fuzzer.run(data)
        except FuzzFailure as e:
            failures += 1
            crash_file = Path(f"crash-input-{i}.bin")
            crash_file.write_bytes(data)
            print(f"[{i}] {e} -> input saved to {crash_file}")
    print(f"\n{iterations} runs, {failures} failures")
    return failures == 0


def main():
    parser = argparse.ArgumentParser(description="RTT Rules Fuzzer example")
    parser.add_argument('--config', default=str(Path(__file__).parent / 'fuzzer_config.yaml'))

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    replay_parser = subparsers.add_parser('replay', help='Replay a saved input')
    replay_parser.add_argument('file', help='Fuzz input file')

    bytes_parser = subparsers.add_parser('bytes', help='Run random byte strings')
    bytes_parser.add_argument('--iterations', type=int, default=100)
    bytes_parser.add_argument('--length', type=int, default=256)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    fuzzer = RulesFuzzer(load_config_file(args.config))

    if args.command == 'replay':
        return 0 if replay_input(fuzzer, args.file) else 1
    elif args.command == 'bytes':
        return 0 if random_bytes_campaign(fuzzer, args.iterations, args.length) else 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
