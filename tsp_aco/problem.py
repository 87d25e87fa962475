"""Problem instances and tour evaluation.

A Problem supplies the city coordinates; a TourEvaluator scores tours and
remembers the best one it has been shown. The colony only relies on
``len(problem)``, ``problem.coordinates_of(i)``, ``evaluator.evaluate(tour)``
and ``evaluator.quick_evaluate(tour)``, so any objects with those methods can
be plugged in instead.
"""

import logging

import numpy as np

from .exceptions import InvalidInstance, InvalidTour

logger = logging.getLogger(__name__)


class Problem:
  """A symmetric Euclidean TSP instance: one (x, y) pair per city."""

  def __init__(self, coordinates, name=None):
    coords = np.asarray(coordinates, dtype=float)
    if coords.size == 0:
      coords = coords.reshape(0, 2)
    if coords.ndim != 2 or coords.shape[1] != 2:
      raise InvalidInstance(
          f"coordinates must have shape (n, 2), got {coords.shape}")
    if not np.all(np.isfinite(coords)):
      raise InvalidInstance("coordinates must be finite numbers")
    coords.flags.writeable = False
    self.coordinates = coords
    self.name = name or f"{len(coords)}-cities"

  def __len__(self):
    return self.coordinates.shape[0]

  def coordinates_of(self, city):
    x, y = self.coordinates[city]
    return float(x), float(y)

  def __repr__(self):
    return f"Problem({self.name!r}, n={len(self)})"


def generate_problem(num_cities, size=100.0, seed=None):
  """Generates a random instance with cities uniformly spread over a square."""
  if num_cities < 0:
    raise InvalidInstance(f"num_cities must be >= 0, got {num_cities}")
  rng = np.random.default_rng(seed)
  coords = rng.uniform(0.0, size, size=(num_cities, 2))
  return Problem(coords, name=f"random-{num_cities}")


def load_problem(path):
  """
  Loads coordinates from a text file with one ``x y`` (or ``x,y``) pair per line.
  Lines starting with '#' are ignored.
  """
  try:
    with open(path, encoding="utf-8") as f:
      lines = f.read().splitlines()
    data = [line for line in lines if line.strip() and not line.lstrip().startswith("#")]
    # Delimiter of the first data line, comments may contain commas
    delimiter = "," if data and "," in data[0] else None
    coords = np.loadtxt(data, delimiter=delimiter, comments="#", ndmin=2)
  except ValueError as exc:
    # UnicodeDecodeError is a ValueError too
    raise InvalidInstance(f"cannot read coordinates from {path}: {exc}") from exc
  return Problem(coords, name=str(path))


def check_tour(tour, n_cities):
  """Raises InvalidTour unless tour is a permutation of range(n_cities)."""
  if len(tour) != n_cities or sorted(int(c) for c in tour) != list(range(n_cities)):
    raise InvalidTour(
        f"tour must visit each of the {n_cities} cities exactly once, got {list(tour)}")


class TourEvaluator:
  """
  Scores tours of one problem instance.

  evaluate() is the canonical scoring: it validates the tour, counts the call,
  records the best tour seen so far and notifies ``on_improvement`` if given.
  quick_evaluate() only computes the closed tour length and has no side effects.
  """

  def __init__(self, problem, on_improvement=None):
    self.problem = problem
    self.on_improvement = on_improvement
    self.best_tour = None
    self.best_length = float("inf")
    self.evaluations = 0
    n = len(problem)
    self._coords = np.array([problem.coordinates_of(i) for i in range(n)],
                            dtype=float).reshape(n, 2)

  def quick_evaluate(self, tour):
    if len(tour) == 0:
      return 0.0
    points = self._coords[np.asarray(tour, dtype=int)]
    deltas = points - np.roll(points, -1, axis=0)
    return float(np.sqrt((deltas ** 2).sum(axis=1)).sum())

  def evaluate(self, tour):
    check_tour(tour, len(self.problem))
    length = self.quick_evaluate(tour)
    self.evaluations += 1
    if length < self.best_length:
      self.best_length = length
      self.best_tour = list(tour)
      logger.debug("Evaluator recorded new best length %.4f", length)
      if self.on_improvement is not None:
        self.on_improvement(self.best_tour, length)
    return length
