"""
Tableaux et statistiques récapitulatives sur les runs d'un GRASP réactif.
"""

from __future__ import annotations

import math
import statistics
from typing import Dict, List

from tabulate import tabulate

from .statistics import GraspStatistics


def summarize_runs(stats: GraspStatistics) -> List[Dict]:
    """One row per closed run."""
    rows = []
    for i, r in enumerate(stats.runs):
        rows.append({
            "run": i,
            "seed": r.seed,
            "time_s": round(r.elapsed_s, 4),
            "best_fitness": r.best_fitness,
            "best_evals": r.best_entry.evals if r.best_entry is not None else -1,
            "solutions": len(r.trace),
            "improvements": len(r.sols),
            "prob_updates": max(0, len(r.probs) - 1),
        })
    return rows


def final_probabilities(stats: GraspStatistics, i: int) -> Dict[int, float]:
    r = stats.run(i)
    if not r.probs:
        return {}
    return dict(zip(r.values, r.probs[-1].prob))


def print_summary_table(stats: GraspStatistics) -> None:
    rows = summarize_runs(stats)
    if not rows:
        print("Aucun run terminé.")
        return

    headers = ["Run", "Seed", "Temps (s)", "Meilleur", "Eval. meilleur", "Solutions", "Améliorations"]
    best = stats.best_fitness()
    table_data = []
    for row in rows:
        mark = " *" if row["best_fitness"] == best else ""
        table_data.append([
            row["run"],
            row["seed"],
            f"{row['time_s']:.2f}",
            f"{row['best_fitness']}{mark}",
            row["best_evals"],
            row["solutions"],
            row["improvements"],
        ])

    print("\n" + "=" * 80)
    print("TABLEAU RÉCAPITULATIF DES RUNS")
    print("=" * 80)
    print(tabulate(table_data, headers=headers, tablefmt="grid", stralign="left"))
    print()


def print_probability_table(stats: GraspStatistics, i: int, top: int = 10) -> None:
    """Most likely control values at the end of run i."""
    probs = final_probabilities(stats, i)
    if not probs:
        return
    ranked = sorted(probs.items(), key=lambda kv: (-kv[1], kv[0]))[:top]
    print(tabulate([[v, f"{p:.4f}"] for v, p in ranked], headers=["Valeur RCL", "Probabilité"], tablefmt="simple"))
    print()


def print_statistics(stats: GraspStatistics) -> None:
    """Moyenne, médiane, min, max et écart-type du meilleur fitness et du temps."""
    rows = summarize_runs(stats)
    fitness = [r["best_fitness"] for r in rows if not math.isinf(r["best_fitness"])]
    times = [r["time_s"] for r in rows]

    print("\n" + "=" * 80)
    print("STATISTIQUES")
    print("=" * 80)

    if fitness:
        print("Meilleur fitness:")
        print(f"  Moyenne: {statistics.mean(fitness):.2f}")
        print(f"  Médiane: {statistics.median(fitness):.2f}")
        print(f"  Min: {min(fitness)}")
        print(f"  Max: {max(fitness)}")
        if len(fitness) > 1:
            print(f"  Écart-type: {statistics.stdev(fitness):.2f}")
    if times:
        print("Temps de résolution:")
        print(f"  Moyenne: {statistics.mean(times):.2f}s")
        print(f"  Médiane: {statistics.median(times):.2f}s")
        print(f"  Min: {min(times):.2f}s")
        print(f"  Max: {max(times):.2f}s")
    print()
