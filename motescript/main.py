"""
MOTE-SCRIPT: event-driven mote test scripts

This is the main entry point for running MOTE-SCRIPT tests. It provides:
- Command-line argument parsing for run parameters
- RNG seeding for reproducibility
- Scenario (or log replay) orchestration and verdict reporting

Usage:
    python -m motescript.main [OPTIONS]

Options:
    --script NAME     link-fault or reception (default: link-fault)
    --replay FILE     Replay a recorded mote log instead of simulating
    --seed INT        RNG seed (default: from Config.SEED)
    --run INT         Run number, part of the run id (default: from Config.RUN)
    --prr FLOAT       Client-server PRR for the reception scenario
    --counters INT    Counter limit of the client firmware
    --timeout MS      Override the script deadline
    --output DIR      Trace output directory (default: from Config.TRACE_OUTPUT_DIR)
    --no-trace        Do not write CSV traces
"""

import argparse
import random
import sys
import time
import numpy as np
from motescript.Config import Config
from motescript.LogReplay import load_log
from motescript.Scenarios import build_reception_scenario, build_replay, build_weak_link_scenario, run_script
from motescript.Scripts import SCRIPTS
from motescript.TraceCollector import TraceCollector


def parse_args(argv=None):
    """
    Parse command-line arguments for run configuration.

    Returns:
        Namespace object with parsed arguments
    """
    p = argparse.ArgumentParser(prog="motescript")
    p.add_argument("--script", choices=sorted(SCRIPTS), default="link-fault")
    p.add_argument("--replay", type=str, default=None, help="mote log export to replay")
    p.add_argument("--seed", type=int, default=Config.SEED)
    p.add_argument("--run", type=int, default=Config.RUN)
    p.add_argument("--prr", type=float, default=Config.NOMINAL_PRR,
                   help="client-server PRR (reception scenario)")
    p.add_argument("--counters", type=int, default=None, help="client counter limit")
    p.add_argument("--timeout", type=int, default=None, help="script deadline (ms)")
    p.add_argument("--output", type=str, default=Config.TRACE_OUTPUT_DIR)
    p.add_argument("--no-trace", action="store_true")
    return p.parse_args(argv)


def build_simulation(args):
    if args.replay:
        events = load_log(args.replay)
        print(f"Replaying {len(events)} events from {args.replay}")
        return build_replay(events, seed=args.seed)
    if args.script == "reception":
        return build_reception_scenario(seed=args.seed, prr=args.prr, counter_limit=args.counters)
    return build_weak_link_scenario(seed=args.seed, counter_limit=args.counters)


def run_test(argv=None) -> int:
    """
    Execute a single test run with configured parameters.

    This function:
    1. Parses command-line arguments
    2. Applies configuration overrides
    3. Seeds all RNGs (Python random, numpy) for reproducibility
    4. Builds the scenario or replay and runs the script
    5. Prints the verdict and trace summary

    Returns:
        Process exit status: 0 if the test passed, 1 otherwise
    """
    args = parse_args(argv)

    Config.SEED = args.seed
    Config.RUN = args.run
    Config.TRACE_OUTPUT_DIR = args.output
    Config.TRACE_ENABLED = not args.no_trace

    print(f"🔧 Configuration: script={args.script}, seed={args.seed}, run={args.run}, "
          f"replay={args.replay or '-'}")

    random.seed(args.seed)
    np.random.seed(args.seed)

    collector = None
    if Config.TRACE_ENABLED:
        collector = TraceCollector()
        run_id = f"{time.strftime('%Y%m%d_%H%M%S')}_{args.script}_seed{args.seed}_run{args.run}"
        collector.init_trace_files(run_id, Config.TRACE_OUTPUT_DIR)

    script = SCRIPTS[args.script](timeout_ms=args.timeout)

    try:
        sim = build_simulation(args)
        log = run_script(script, sim, collector=collector)
    except Exception as e:
        print(f"❌ Test run failed: {e}")
        return 1

    print(f"\n─── {args.script} ───")
    print(f"Verdict:        {log.verdict}")
    print(f"Sim time:       {sim.now}ms")
    print(f"Events:         {sim.events_processed}")
    if log.failure_reason:
        print(f"Reason:         {log.failure_reason}")

    if collector is not None:
        summary = collector.generate_summary_report()
        stats = summary['reception']
        if stats['received']:
            print(f"Received:       {stats['received']}")
            print(f"Lost:           {stats['lost']} ({stats['loss_rate']:.1%})")
        print(f"Traces in:      {collector.output_dir}")

    return 0 if log.passed else 1


def main():
    sys.exit(run_test())


if __name__ == "__main__":
    main()
