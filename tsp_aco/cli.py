"""Command line entry point: run the colony on one instance for several ant counts."""

import argparse
import logging
import os
import sys
import time

from .colony import ColonyOptimizer
from .config import (PRESETS, ColonyConfig, ConstructionPolicy, DepositPolicy,
                     StartPolicy)
from .construction import nearest_neighbor_tour
from .distances import DistanceTable
from .exceptions import TSPError
from .problem import generate_problem, load_problem
from .reporting import save_solution, visualize_results


def build_argparser():
  """
  Parse command line arguments to allow easy parameter tuning and experimentation.
  """
  parser = argparse.ArgumentParser(
      prog="tsp-aco", description='Ant Colony Optimization for TSP')

  # Problem instance
  source = parser.add_argument_group("instance")
  source.add_argument('--coords', type=str, default=None,
                      help='Text file with one "x y" pair per line')
  source.add_argument('--cities', type=int, default=20,
                      help='Number of random cities when --coords is not given (default: 20)')
  source.add_argument('--seed', type=int, default=None,
                      help='Random seed for reproducibility')

  # Algorithm parameters; None means "keep the preset value"
  aco = parser.add_argument_group("colony")
  aco.add_argument('--preset', choices=sorted(PRESETS), default=None,
                   help='Start from a named configuration')
  aco.add_argument('--ants', type=str, default=None,
                   help='Comma-separated list of ant counts to try (e.g. 5,10,20)')
  aco.add_argument('--iterations', type=int, default=None,
                   help='Number of iterations')
  aco.add_argument('--time-limit', type=float, default=None,
                   help='Wall-clock budget per run in seconds')
  aco.add_argument('--rho', type=float, default=None,
                   help='Pheromone evaporation rate')
  aco.add_argument('--q', type=float, default=None,
                   help='Pheromone deposit factor')
  aco.add_argument('--alpha', type=float, default=None,
                   help='Pheromone influence factor')
  aco.add_argument('--beta', type=float, default=None,
                   help='Distance influence factor')
  aco.add_argument('--initial-pheromone', type=float, default=None,
                   help='Initial pheromone level')
  aco.add_argument('--max-pheromone', type=float, default=None,
                   help='Upper bound of any pheromone entry')
  aco.add_argument('--gamma', type=float, default=None,
                   help='GRASP restricted candidate list width')
  aco.add_argument('--grasp', action='store_true',
                   help='Use GRASP construction instead of the roulette wheel')
  aco.add_argument('--progressive', action='store_true',
                   help='Deposit pheromone while ants walk instead of once per iteration')
  aco.add_argument('--rotating-start', action='store_true',
                   help='Spread start cities evenly before repeating one')
  aco.add_argument('--no-local-search', action='store_true',
                   help='Disable 2-opt local search improvement')

  out = parser.add_argument_group("output")
  out.add_argument('--output-dir', type=str, default='.',
                   help='Directory for solutions/ and visualizations/')
  out.add_argument('--save', action='store_true',
                   help='Save every run as JSON under <output-dir>/solutions')
  out.add_argument('--no-visualization', action='store_true',
                   help='Disable visualization generation')
  out.add_argument('--progress', action='store_true',
                   help='Show a progress bar per run')
  out.add_argument('-v', '--verbose', action='store_true',
                   help='Debug logging')
  return parser


def parse_ant_counts(text):
  try:
    counts = [int(x.strip()) for x in text.split(',') if x.strip()]
  except ValueError:
    raise argparse.ArgumentTypeError(
        "ant counts must be comma-separated integers") from None
  if not counts:
    raise argparse.ArgumentTypeError("at least one ant count is required")
  return counts


def config_from_args(args):
  """Preset (or defaults) overridden by whatever was given on the command line."""
  base = ColonyConfig.from_preset(args.preset) if args.preset else ColonyConfig()
  config = base.with_overrides(
      n_iterations=args.iterations, time_limit=args.time_limit,
      rho=args.rho, q_val=args.q, alpha=args.alpha, beta=args.beta,
      initial_pheromone=args.initial_pheromone,
      max_pheromone=args.max_pheromone, grasp_gamma=args.gamma,
      seed=args.seed)
  if args.grasp:
    config = config.with_overrides(construction=ConstructionPolicy.GRASP)
  if args.progressive:
    config = config.with_overrides(deposit=DepositPolicy.PROGRESSIVE)
  if args.rotating_start:
    config = config.with_overrides(start=StartPolicy.ROTATING)
  if args.no_local_search:
    config = config.with_overrides(enable_local_search=False)
  if args.progress:
    config = config.with_overrides(show_progress=True)
  if not args.no_visualization:
    config = config.with_overrides(track_pheromones=True)
  return config


def run_experiments(problem, base_config, ant_counts, output_dir=".",
                    save=False, visualize=True):
  """
  Runs the colony once per ant count and returns {ant count: result}.
  """
  results = {}
  for n_ants in ant_counts:
    config = base_config.with_overrides(n_ants=n_ants).validate()
    print(f"\n--- Running with {n_ants} Ant(s) for {problem.name} ---")

    optimizer = ColonyOptimizer(problem, config)
    result = optimizer.run()
    results[n_ants] = result

    print(f"  Best tour length: {result.best_length:.2f}")
    print(f"  Iterations: {result.iterations} ({result.stop_reason})")
    print(f"  Runtime: {result.elapsed:.2f} seconds")

    tag = f"{len(problem)}cities_{n_ants}ants"
    if save:
      save_solution(result, config, problem,
                    directory=os.path.join(output_dir, "solutions"), tag=tag)
    if visualize:
      visualize_results(result, problem, optimizer.pheromones.snapshot(),
                        directory=os.path.join(output_dir, "visualizations"),
                        tag=tag)
  return results


def print_summary(problem, results, baseline_length):
  print("\n" + "=" * 20 + " FINAL RESULTS SUMMARY " + "=" * 20)
  print(f"Instance: {problem.name} ({len(problem)} cities)")
  print(f"Nearest neighbour baseline: {baseline_length:.2f}")

  # Sort results by tour length (best first)
  for n_ants, result in sorted(results.items(), key=lambda x: x[1].best_length):
    print(f"  {n_ants} Ants:")
    print(f"    Best Tour Length: {result.best_length:.2f}")
    print(f"    Runtime: {result.elapsed:.2f} seconds")
    print(f"    Best Tour Path: {result.best_tour}")

  best_ants, best = min(results.items(), key=lambda x: x[1].best_length)
  print(f"Best configuration: {best_ants} Ants with length {best.best_length:.2f}")
  if baseline_length > 0:
    print(f"Improvement over nearest neighbour: "
          f"{(1 - best.best_length / baseline_length) * 100:.2f}%")


def main(argv=None):
  parser = build_argparser()
  args = parser.parse_args(argv)

  logging.basicConfig(
      level=logging.DEBUG if args.verbose else logging.INFO,
      format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

  try:
    ant_counts = parse_ant_counts(args.ants) if args.ants else None
  except argparse.ArgumentTypeError as exc:
    parser.error(str(exc))

  try:
    if args.coords:
      problem = load_problem(args.coords)
    else:
      problem = generate_problem(args.cities, seed=args.seed)
    config = config_from_args(args).validate()
    ant_counts = ant_counts or [config.n_ants]

    print(f"\n{'='*20} EXPERIMENT CONFIGURATION {'='*20}")
    print(f"Instance: {problem.name} ({len(problem)} cities)")
    print(f"Ant counts: {ant_counts}")
    print(f"Iterations: {config.n_iterations}, time limit: {config.time_limit}")
    print(f"Parameters: rho={config.rho}, Q={config.q_val}, "
          f"alpha={config.alpha}, beta={config.beta}")
    print(f"Construction: {config.construction.value}, deposit: {config.deposit.value}, "
          f"start: {config.start.value}")
    print(f"Local search: {'Enabled' if config.enable_local_search else 'Disabled'}")
    print('=' * 66)

    started = time.time()
    results = run_experiments(problem, config, ant_counts,
                              output_dir=args.output_dir, save=args.save,
                              visualize=not args.no_visualization)
  except (TSPError, OSError) as exc:
    print(f"error: {exc}", file=sys.stderr)
    return 2

  table = DistanceTable.from_problem(problem)
  baseline = table.tour_length(nearest_neighbor_tour(table))
  print_summary(problem, results, baseline)
  print(f"\nTotal time: {time.time() - started:.2f} seconds")
  return 0


if __name__ == "__main__":  # pragma: no cover
  raise SystemExit(main())
