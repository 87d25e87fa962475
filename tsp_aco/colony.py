"""The ant colony: iteration loop, pheromone updates and best-tour tracking."""

import logging
import random
import time
from dataclasses import dataclass, field

from tqdm import tqdm

from .config import ColonyConfig, DepositPolicy
from .construction import TourBuilder
from .distances import DistanceTable
from .pheromones import PheromoneField
from .problem import TourEvaluator
from .two_opt import TwoOptRefiner

logger = logging.getLogger(__name__)

STOP_ITERATIONS = "iterations exhausted"
STOP_TIME_BUDGET = "time budget exceeded"


@dataclass
class OptimizationResult:
  """
  best_tour: best tour found (None if no iteration ran)
  best_length: its closed length
  iterations: number of completed iterations
  elapsed: wall-clock seconds spent in run()
  stop_reason: STOP_ITERATIONS or STOP_TIME_BUDGET
  """
  best_tour: list | None
  best_length: float
  iterations: int
  elapsed: float
  stop_reason: str
  iteration_best_lengths: list = field(default_factory=list)
  iteration_avg_lengths: list = field(default_factory=list)
  iteration_times: list = field(default_factory=list)
  best_tour_history: list = field(default_factory=list)
  pheromone_history: list = field(default_factory=list)


class ColonyOptimizer:
  """
  Ant Colony Optimization for the symmetric TSP.

  problem: object with __len__ and coordinates_of(i)
  config: ColonyConfig (defaults to ColonyConfig())
  evaluator: object with evaluate(tour) and quick_evaluate(tour); defaults to
    a TourEvaluator over the problem. evaluate() is called each time the best
    tour improves and once more when the run ends.
  clock: zero-argument callable returning seconds, used for the time budget
  """

  def __init__(self, problem, config=None, evaluator=None, clock=time.perf_counter):
    self.config = (config or ColonyConfig()).validate()
    self.problem = problem
    self.distances = DistanceTable.from_problem(problem)
    self.n_cities = len(self.distances)
    self.evaluator = evaluator if evaluator is not None else TourEvaluator(problem)
    self.clock = clock
    self.rng = random.Random(self.config.seed)

    self.pheromones = PheromoneField(self.config.min_pheromone,
                                     self.config.max_pheromone)
    self.pheromones.initialize(self.n_cities, self.config.initial_pheromone)

    progressive = self.config.deposit is DepositPolicy.PROGRESSIVE
    self.builder = TourBuilder.from_config(
        self.distances, self.pheromones, self.rng, self.config,
        step_deposit=self.config.q_val if progressive else None)
    self.refiner = TwoOptRefiner(self.distances)

    self.best_tour = None
    self.best_tour_length = float("inf")

  def _run_ant(self):
    """Builds, refines and measures one ant's tour."""
    tour = self.builder.construct()
    if self.config.enable_local_search:
      tour = self.refiner.refine(tour, in_place=True)
    length = self.evaluator.quick_evaluate(tour)
    if self.config.deposit is DepositPolicy.PROGRESSIVE and length > 0:
      # Extra reinforcement of the refined tour, seen by the next ant
      self.pheromones.deposit_tour(tour, self.config.q_val / length)
    return tour, length

  def _update_pheromones(self, ant_tours):
    """Evaporation, then (batch policy only) deposition of every ant's tour."""
    # 1. Evaporation
    self.pheromones.evaporate(self.config.rho)

    # 2. Deposition
    if self.config.deposit is DepositPolicy.BATCH:
      for tour, tour_length in ant_tours:
        if tour_length == 0:
          continue  # Avoid division by zero for degenerate tours
        self.pheromones.deposit_tour(tour, self.config.q_val / tour_length)

  def _report_best(self, tour, length):
    self.best_tour = list(tour)
    self.best_tour_length = length
    self.evaluator.evaluate(self.best_tour)

  def run(self):
    """Runs the colony until the iteration count or the time budget runs out."""
    config = self.config
    logger.info(
        "Running ACO on %d cities: %d ants, %d iterations, rho=%s, Q=%s, "
        "alpha=%s, beta=%s, %s construction, %s deposit, local search %s",
        self.n_cities, config.n_ants, config.n_iterations, config.rho,
        config.q_val, config.alpha, config.beta, config.construction.value,
        config.deposit.value, "on" if config.enable_local_search else "off")

    result = OptimizationResult(best_tour=None, best_length=float("inf"),
                                iterations=0, elapsed=0.0,
                                stop_reason=STOP_ITERATIONS)
    start_time = self.clock()

    progress = tqdm(range(config.n_iterations), desc="ACO Progress",
                    disable=not config.show_progress)
    for iteration in progress:
      if (iteration > 0 and config.time_limit is not None
          and self.clock() - start_time >= config.time_limit):
        logger.info("Time budget of %.1fs exceeded after %d iterations",
                    config.time_limit, iteration)
        result.stop_reason = STOP_TIME_BUDGET
        break

      iteration_start_time = self.clock()
      ant_tours = []

      for _ in range(config.n_ants):
        tour, tour_length = self._run_ant()
        ant_tours.append((tour, tour_length))

        if tour_length < self.best_tour_length:
          self._report_best(tour, tour_length)
          logger.debug("Iteration %d: new best tour length %.4f",
                       iteration + 1, tour_length)

      self._update_pheromones(ant_tours)

      avg_length = sum(length for _, length in ant_tours) / len(ant_tours)
      result.iterations = iteration + 1
      result.iteration_best_lengths.append(self.best_tour_length)
      result.iteration_avg_lengths.append(avg_length)
      result.iteration_times.append(self.clock() - iteration_start_time)
      result.best_tour_history.append(list(self.best_tour))
      if config.track_pheromones:
        result.pheromone_history.append(self.pheromones.snapshot())
      progress.set_postfix(best=f"{self.best_tour_length:.2f}")

      if (iteration + 1) % 10 == 0 or iteration == 0:
        logger.info("Iteration %d/%d: best tour length %.2f, average %.2f",
                    iteration + 1, config.n_iterations,
                    self.best_tour_length, avg_length)
    progress.close()

    if self.best_tour is not None:
      # Final report, harmless if nothing changed since the last one
      self.evaluator.evaluate(self.best_tour)

    result.best_tour = None if self.best_tour is None else list(self.best_tour)
    result.best_length = self.best_tour_length
    result.elapsed = self.clock() - start_time
    logger.info("Finished ACO (%s). Best tour length: %.2f in %.2f seconds",
                result.stop_reason, result.best_length, result.elapsed)
    return result
