"""Tour construction: the walk of a single ant."""

import logging
import math

import numpy as np

from .config import ConstructionPolicy, StartPolicy
from .exceptions import InvalidInstance

logger = logging.getLogger(__name__)


def select_by_roulette(scores, visited, draw):
  """
  Roulette-wheel selection over the unvisited cities.

  Walks the unvisited cities in index order accumulating their scores and
  returns the first one whose cumulative score reaches ``draw`` (a value in
  [0, total)). Falls back to the first unvisited city when the total score is
  zero or not finite.
  """
  candidates = np.flatnonzero(~np.asarray(visited, dtype=bool))
  if candidates.size == 0:
    raise ValueError("every city has already been visited")
  cumulative = np.cumsum(np.asarray(scores, dtype=float)[candidates])
  total = cumulative[-1]
  if not (math.isfinite(total) and total > 0):
    logger.debug("Degenerate selection (total score %r), taking city %d",
                 total, candidates[0])
    return int(candidates[0])
  position = int(np.searchsorted(cumulative, draw, side="left"))
  # draw can only overshoot through rounding in the caller's total
  position = min(position, candidates.size - 1)
  return int(candidates[position])


def restricted_candidates(distance_row, visited, gamma):
  """
  GRASP restricted candidate list: the unvisited cities whose distance from the
  current city is within min + gamma * (max - min).
  """
  candidates = np.flatnonzero(~np.asarray(visited, dtype=bool))
  if candidates.size == 0:
    raise ValueError("every city has already been visited")
  dists = np.asarray(distance_row, dtype=float)[candidates]
  threshold = dists.min() + gamma * (dists.max() - dists.min())
  return candidates[dists <= threshold]


def nearest_neighbor_tour(distances, start=0):
  """Greedy baseline: always move to the closest unvisited city."""
  n = len(distances)
  visited = np.zeros(n, dtype=bool)
  tour = [start]
  visited[start] = True
  current = start
  while len(tour) < n:
    row = distances.row(current).copy()
    row[visited] = np.inf
    current = int(np.argmin(row))
    tour.append(current)
    visited[current] = True
  return tour


class TourBuilder:
  """
  Builds one candidate tour per call to construct().

  distances: DistanceTable of the instance
  pheromones: PheromoneField owned by the colony (read, plus the per-step
    deposit when step_deposit is set)
  rng: random.Random instance shared with the colony
  alpha, beta: weights of pheromone and proximity in the roulette score
  policy: ConstructionPolicy.ROULETTE or ConstructionPolicy.GRASP
  gamma: GRASP restricted candidate list width
  start: StartPolicy used when construct() is called without a start city
  step_deposit: Q constant of the progressive deposit; None disables it
  """

  def __init__(self, distances, pheromones, rng, alpha=1.0, beta=2.0,
               policy=ConstructionPolicy.ROULETTE, gamma=0.2,
               start=StartPolicy.RANDOM, step_deposit=None):
    if len(distances) == 0:
      raise InvalidInstance("cannot build a tour over zero cities")
    self.distances = distances
    self.pheromones = pheromones
    self.rng = rng
    self.alpha = alpha
    self.beta = beta
    self.policy = policy
    self.gamma = gamma
    self.start = start
    self.step_deposit = step_deposit
    self._used_starts = set()
    # eta^beta is fixed for the whole run; zero distances give inf
    with np.errstate(divide="ignore"):
      self._heuristic = (1.0 / distances.matrix) ** beta

  @classmethod
  def from_config(cls, distances, pheromones, rng, config, step_deposit=None):
    return cls(distances, pheromones, rng,
               alpha=config.alpha, beta=config.beta,
               policy=config.construction, gamma=config.grasp_gamma,
               start=config.start, step_deposit=step_deposit)

  def choose_start(self):
    n = len(self.distances)
    if self.start is StartPolicy.ROTATING:
      if len(self._used_starts) >= n:
        self._used_starts.clear()
      remaining = [c for c in range(n) if c not in self._used_starts]
      city = remaining[self.rng.randrange(len(remaining))]
      self._used_starts.add(city)
      return city
    return self.rng.randrange(n)

  def construct(self, start=None):
    n = len(self.distances)
    current = self.choose_start() if start is None else start
    if not 0 <= current < n:
      raise ValueError(f"start city {current} is outside [0, {n})")
    visited = np.zeros(n, dtype=bool)
    visited[current] = True
    tour = [current]

    for _ in range(n - 1):
      if self.policy is ConstructionPolicy.GRASP:
        nxt = self._next_grasp(current, visited)
      else:
        nxt = self._next_roulette(current, visited)
      tour.append(nxt)
      visited[nxt] = True
      if self.step_deposit is not None:
        self._deposit_step(current, nxt, n)
      current = nxt

    return tour

  def _next_roulette(self, current, visited):
    scores = self.pheromones.row(current) ** self.alpha * self._heuristic[current]
    total = float(scores[~visited].sum())
    if not (math.isfinite(total) and total > 0):
      return select_by_roulette(scores, visited, 0.0)
    return select_by_roulette(scores, visited, self.rng.random() * total)

  def _next_grasp(self, current, visited):
    rcl = restricted_candidates(self.distances.row(current), visited, self.gamma)
    return int(rcl[self.rng.randrange(rcl.size)])

  def _deposit_step(self, a, b, n_cities):
    d = self.distances.get(a, b)
    cap = self.pheromones.max_pheromone
    amount = cap if d <= 0 else min(cap, (self.step_deposit / n_cities) / d)
    self.pheromones.deposit(a, b, amount)
