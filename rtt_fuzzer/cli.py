#!/usr/bin/env python3
"""
Command-line interface for the RTT Rules Fuzzer
Provides commands for replaying saved inputs, running random games, and fuzzing with atheris.
"""
import sys
import argparse
import json
import random
import atheris
import yaml
import traceback
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional
from datetime import datetime
from .main import RulesFuzzer
from .models import FuzzerConfig, RunResult
from .fuzzer_engine import FuzzFailure, load_config_from_env, load_config_file, load_crash_state


class FuzzerCLI:
    """Command-line interface for the RTT Rules Fuzzer"""

    def __init__(self, config: Optional[FuzzerConfig] = None):
        self.config = config or FuzzerConfig()
        self.fuzzer: Optional[RulesFuzzer] = None

    def build_config(self, args) -> FuzzerConfig:
        """Environment, then config file, then command-line flags"""
        config = load_config_from_env()

        if getattr(args, 'config', None):
            config = load_config_file(args.config, base=config)
            print(f"Loaded configuration from {args.config}")

        overrides = {}
        if getattr(args, 'rules', None):
            overrides['rules'] = args.rules
        if getattr(args, 'max_steps', None):
            overrides['max_steps'] = args.max_steps
        if getattr(args, 'no_undo', False):
            overrides['no_undo'] = True
        if getattr(args, 'no_resign', False):
            overrides['no_resign'] = True
        if getattr(args, 'crash_state', None):
            overrides['crash_state_path'] = args.crash_state

        for key, value in overrides.items():
            setattr(config, key, value)
        return config

    def replay_inputs(self, args) -> int:
        """Replay saved fuzz inputs deterministically"""
        self._print_header("Replay Fuzz Inputs")

        self.config.random = False
        self.fuzzer = RulesFuzzer(self.config)

        initial_state = None
        if args.from_state:
            try:
                initial_state = load_crash_state(args.from_state)
            except FileNotFoundError as e:
                print(f"Error: {e}")
                return 1
            print(f"Starting from state in {args.from_state}")

        outcomes = []
        for input_file in args.files:
            path = Path(input_file)
            if not path.exists():
                print(f"Error: Input file not found: {input_file}")
                return 1

            print(f"\n--- {path} ---")
            outcome = self._run_and_report(path.read_bytes(), args.verbose, initial_state)
            outcome['input'] = str(path)
            outcomes.append(outcome)

        if args.output:
            self._save_results(outcomes, args.output, args.format)

        return 0 if all(o['success'] for o in outcomes) else 1

    def run_random_games(self, args) -> int:
        """Play games with non-deterministic choices"""
        self._print_header("Random Games")

        self.config.random = True
        rng = random.Random(args.seed) if args.seed is not None else None
        self.fuzzer = RulesFuzzer(self.config, rng=rng)

        if args.seed is not None:
            print(f"Seed: {args.seed} (reproducible)")
        else:
            print("Seed: Random")
        print(f"Iterations: {args.iterations}")

        outcomes = []
        for i in range(args.iterations):
            if args.iterations > 1:
                print(f"\n--- Iteration {i + 1}/{args.iterations} ---")
            outcomes.append(self._run_and_report(b"", args.verbose))

        if args.iterations > 1:
            self._print_aggregate_results(outcomes)

        if args.output:
            self._save_results(outcomes, args.output, args.format)

        return 0 if all(o['success'] for o in outcomes) else 1

    def run_atheris(self, args) -> int:
        """Hand the fuzz target to atheris"""
        self.config.random = False
        self.fuzzer = RulesFuzzer(self.config)

        # Rules loaded from a file path bypass the import hooks of
        # instrument_imports, so instrument everything loaded so far
        atheris.instrument_all()

        libfuzzer_args = list(args.libfuzzer_args)
        if libfuzzer_args[:1] == ['--']:
            libfuzzer_args = libfuzzer_args[1:]

        atheris.Setup([sys.argv[0]] + libfuzzer_args, self.fuzzer.fuzz_one_input)
        atheris.Fuzz()
        return 0

    def _run_and_report(self, data: bytes, verbose: bool, initial_state: Any = None) -> Dict[str, Any]:
        """Run one game and print its verdict"""
        try:
            result = self.fuzzer.run(data, initial_state)
        except FuzzFailure as e:
            print("Status: FAILED")
            print(f"Failure: {e}")
            if verbose and e.trace:
                print(e.trace)
            setup = self.fuzzer.last_setup
            return {
                'success': False,
                'outcome': e.kind.value,
                'steps': e.step,
                'seed': setup.seed if setup else None,
                'scenario': setup.scenario if setup else None,
                'error_message': e.message,
            }

        self._print_summary_result(result, verbose)
        return self._result_to_dict(result)

    def _print_header(self, title: str):
        """Print formatted header"""
        print()
        print("=" * 80)
        print(title)
        print("=" * 80)
        print()

    def _print_summary_result(self, result: RunResult, verbose: bool = False):
        """Print summary of a finished game"""
        print(f"Status: {'PASSED' if result.success else 'SKIPPED'}")
        print(f"Outcome: {result.outcome.value}")
        print(f"Steps: {result.steps}")

        if result.setup:
            print(f"Seed: {result.setup.seed}")
            print(f"Scenario: {result.setup.scenario}")

        if verbose and result.history:
            print("\nActions:")
            for record in result.history:
                print(f"  {record.step}. {record.active}: {record.action} {json.dumps(record.argument, default=str)}")

    def _print_aggregate_results(self, outcomes: List[Dict[str, Any]]):
        """Print aggregate statistics for multiple games"""
        print("\n" + "=" * 80)
        print("Aggregate Results")
        print("=" * 80)

        total = len(outcomes)
        passed = sum(1 for o in outcomes if o['success'])
        failed = total - passed
        avg_steps = sum(o['steps'] or 0 for o in outcomes) / total

        print(f"Total Games: {total}")
        print(f"Passed: {passed} ({passed/total*100:.1f}%)")
        print(f"Failed: {failed} ({failed/total*100:.1f}%)")
        print(f"Average Steps: {avg_steps:.1f}")

        summary = self.fuzzer.error_handler.get_error_summary()
        for kind, count in summary['by_kind'].items():
            print(f"  {kind}: {count}")

    def _save_results(self, outcomes: List[Dict[str, Any]], output_path: str, format: str):
        """Save run results to file"""
        try:
            output = Path(output_path)
            output.parent.mkdir(parents=True, exist_ok=True)

            data = {
                'timestamp': datetime.now().isoformat(),
                'rules': self.config.rules,
                'total_runs': len(outcomes),
                'passed': sum(1 for o in outcomes if o['success']),
                'failed': sum(1 for o in outcomes if not o['success']),
                'results': outcomes
            }

            with open(output, 'w') as f:
                if format == 'json':
                    json.dump(data, f, indent=2, default=str)
                elif format == 'yaml':
                    yaml.safe_dump(data, f, default_flow_style=False)

            print(f"\nResults saved to {output_path}")

        except Exception as e:
            print(f"\nFailed to save results: {e}")

    def _result_to_dict(self, result: RunResult) -> Dict[str, Any]:
        """Convert RunResult to dictionary"""
        return {
            'success': True,
            'outcome': result.outcome.value,
            'steps': result.steps,
            'seed': result.setup.seed if result.setup else None,
            'scenario': result.setup.scenario if result.setup else None,
            'error_message': None,
        }


def _add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        '--rules',
        type=str,
        metavar='PATH',
        help='Rules module path or dotted name (default: $RTT_RULES or rules.py)'
    )
    parser.add_argument(
        '--max-steps',
        type=int,
        help='Maximum steps per game (default: $MAX_STEPS or 2048)'
    )
    parser.add_argument(
        '--no-undo',
        action='store_true',
        help='Never choose the undo action'
    )
    parser.add_argument(
        '--no-resign',
        action='store_true',
        help='Never offer resignation'
    )
    parser.add_argument(
        '--config',
        type=str,
        help='Path to configuration file (YAML or JSON)'
    )
    parser.add_argument(
        '--crash-state',
        type=str,
        metavar='FILE',
        help='Where to write the game state on failure (default: crash-state.json)'
    )


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI"""
    parser = argparse.ArgumentParser(
        prog='rtt-fuzzer',
        description='RTT Rules Fuzzer - Drive game rules with fuzzer-chosen moves until they break',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Replay a saved crash input
  rtt-fuzzer replay crash-1a2b3c --rules rules.py

  # Continue a saved crash state with the same input
  rtt-fuzzer replay crash-1a2b3c --rules rules.py --from-state crash-state.json

  # Play 100 random games
  rtt-fuzzer random --rules rules.py --iterations 100

  # Reproducible random games
  rtt-fuzzer random --rules rules.py --seed 42 --iterations 10

  # Coverage-guided fuzzing with atheris
  rtt-fuzzer fuzz --rules rules.py -- -max_total_time=60 corpus/
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version='RTT Fuzzer 0.1.0'
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    replay_parser = subparsers.add_parser(
        'replay',
        help='Replay saved fuzz inputs'
    )
    replay_parser.add_argument(
        'files',
        nargs='+',
        help='Fuzz input files'
    )
    replay_parser.add_argument(
        '--from-state',
        type=str,
        metavar='FILE',
        help='Continue from a saved crash state instead of a fresh setup'
    )
    _add_common_arguments(replay_parser)

    random_parser = subparsers.add_parser(
        'random',
        help='Play games with random choices'
    )
    random_parser.add_argument(
        '--seed',
        type=int,
        help='Seed for reproducibility'
    )
    random_parser.add_argument(
        '--iterations',
        type=int,
        default=1,
        help='Number of games to play (default: 1)'
    )
    _add_common_arguments(random_parser)

    for sub in (replay_parser, random_parser):
        sub.add_argument(
            '--output',
            type=str,
            help='Path to save results'
        )
        sub.add_argument(
            '--format',
            choices=['json', 'yaml'],
            default='json',
            help='Output format for results (default: json)'
        )
        sub.add_argument(
            '--verbose',
            action='store_true',
            help='Enable verbose output'
        )

    fuzz_parser = subparsers.add_parser(
        'fuzz',
        help='Run coverage-guided fuzzing with atheris'
    )
    _add_common_arguments(fuzz_parser)
    fuzz_parser.add_argument(
        'libfuzzer_args',
        nargs=argparse.REMAINDER,
        help='Arguments passed through to libFuzzer'
    )

    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point for CLI"""

    logging.basicConfig(
        level=logging.INFO,
        format='%(levelname)-5s | %(filename)s:%(lineno)-3d | %(message)s',
        handlers=[logging.StreamHandler()]
    )

    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        print("Error: No command specified\n")
        parser.print_help()
        print("\nCommon commands:")
        print("  rtt-fuzzer replay <input>                # Replay a saved input")
        print("  rtt-fuzzer random --iterations 10        # Play random games")
        print("  rtt-fuzzer fuzz -- corpus/                # Fuzz with atheris")
        return 1

    try:
        cli = FuzzerCLI()
        cli.config = cli.build_config(args)

        if args.command == 'replay':
            return cli.replay_inputs(args)
        elif args.command == 'random':
            return cli.run_random_games(args)
        elif args.command == 'fuzz':
            return cli.run_atheris(args)
    except KeyboardInterrupt:
        print("\n\nRTT Fuzzer process was interrupted by user")
        return 130
    except Exception as e:
        print(f"\nUnexpected error: {e}")
        if getattr(args, 'verbose', False):
            traceback.print_exc()
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
