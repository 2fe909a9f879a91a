from __future__ import annotations

import os
import random
import argparse
from datetime import datetime
from typing import Optional

from reactive_grasp.config import GraspConfig, load_config
from reactive_grasp.engine import ReactiveGRASP
from reactive_grasp.task_assignment import TaskAssignment, TaskAssignmentObjective
from reactive_grasp.io_instances import load_instance, save_instance, write_stats_json, write_summary_csv
from reactive_grasp.comparison import print_summary_table, print_statistics, print_probability_table
from reactive_grasp.visualization import plot_fitness_traces, plot_probability_trace


def _safe_stem(s: str) -> str:
    s = s.replace(" ", "_")
    s = s.replace(":", "-").replace("/", "-").replace("\\", "-")
    s = "".join(ch for ch in s if ch.isalnum() or ch in "._-")
    return s


def build_engine(inst: TaskAssignment, cfg: GraspConfig, verbosity: int = 0) -> ReactiveGRASP:
    """Engine for a task assignment instance, RCL values 1..n-1."""
    obj = TaskAssignmentObjective(inst, num_neighbors=cfg.neighbors)
    engine = ReactiveGRASP(objective=obj, verbosity=verbosity)
    cfg.apply(engine)
    for v in range(1, inst.n):
        engine.add_value(v)
    if inst.n == 1:
        engine.add_value(0)
    return engine


def solve(inst: TaskAssignment, cfg: GraspConfig, verbosity: int = 0) -> ReactiveGRASP:
    engine = build_engine(inst, cfg, verbosity=verbosity)
    stats = engine.get_statistics()
    for r in range(cfg.numruns):
        engine.run()
        print(f"Run {r}: {stats.time(r):.2f}s\t{stats.best_fitness(r)}")
        if verbosity > 0:
            print(f"  ranks: {stats.best_ranks(r)}")
            print(f"  assignment: {stats.best(r)}")
    return engine


def main(argv: Optional[list] = None):
    ap = argparse.ArgumentParser(description="Reactive GRASP for the task assignment problem.")
    ap.add_argument("config", type=str, help="JSON algorithm configuration.")
    ap.add_argument("instance", type=str, nargs="?", default=None, help="Path to a .tap instance.")

    ap.add_argument("--random", type=int, default=None, help="Generate a random instance with N agents.")
    ap.add_argument("--instance-seed", type=int, default=1, help="Seed for --random.")
    ap.add_argument("--save-instance", type=str, default=None, help="Write the generated instance here.")

    ap.add_argument("--runs", type=int, default=None, help="Override numruns.")
    ap.add_argument("--seed", type=int, default=None, help="Override seed.")
    ap.add_argument("--iterations", type=float, default=None, help="Override the evaluation budget.")

    ap.add_argument("--out", type=str, default=None, help="JSON statistics output.")
    ap.add_argument("--csv", type=str, default=None, help="CSV summary output (one row per run).")
    ap.add_argument("--plot-dir", type=str, default=None, help="Save fitness/probability plots here.")
    ap.add_argument("-v", "--verbose", action="count", default=0)

    args = ap.parse_args(argv)

    cfg = load_config(args.config)
    if args.runs is not None:
        cfg.numruns = args.runs
    if args.seed is not None:
        cfg.seed = args.seed
    if args.iterations is not None:
        cfg.iterations = args.iterations
    cfg.validate()

    if args.random is not None:
        inst = TaskAssignment.random(args.random, random.Random(args.instance_seed))
        name = f"random{args.random}"
        if args.save_instance:
            save_instance(inst, args.save_instance)
            print(f"Saved instance -> {args.save_instance}")
    elif args.instance is not None:
        inst = load_instance(args.instance)
        name = _safe_stem(os.path.splitext(os.path.basename(args.instance))[0])
    else:
        raise SystemExit("Provide either an instance file or --random N.")

    if args.verbose > 1:
        print(inst)

    print(f"\n{'='*70}")
    print(f"Instance: {name} (n={inst.n})")
    print(f"Runs: {cfg.numruns}, Budget: {cfg.iterations}, Seed: {cfg.seed}, "
          f"Amplification: {cfg.amplification}, Update: {cfg.update}, Neighbors: {cfg.neighbors}")
    print(f"{'='*70}\n")

    engine = solve(inst, cfg, verbosity=args.verbose)
    stats = engine.get_statistics()

    print_summary_table(stats)
    print_statistics(stats)
    if args.verbose > 0:
        print_probability_table(stats, stats.num_runs - 1)

    if args.out:
        write_stats_json(stats, args.out)
        print(f"Wrote: {args.out}")
    if args.csv:
        write_summary_csv(stats, args.csv)
        print(f"Wrote: {args.csv}")
    if args.plot_dir:
        timestamp = datetime.now().strftime("%d_%H_%M")
        plots_dir = os.path.join(args.plot_dir, timestamp)
        plot_fitness_traces(stats, save_path=os.path.join(plots_dir, f"{name}__fitness.png"), show=False)
        for r in range(stats.num_runs):
            plot_probability_trace(stats, run=r, save_path=os.path.join(plots_dir, f"{name}__prob__run{r}.png"),
                                   show=False)
        print(f"Plots: {plots_dir}")

    return stats


if __name__ == "__main__":
    main()
