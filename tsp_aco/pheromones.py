"""The pheromone trail shared by the ants of a colony.

The field is symmetric: every write touches tau[i, j] and tau[j, i] together.
Entries never leave [min_pheromone, max_pheromone]: evaporation clamps to the
floor (an edge at zero could never be chosen again by the roulette rule) and
deposits clamp to the cap (a single edge cannot grow without bound).

Not thread-safe. The colony runs its ants one after another and all writes go
through evaporate() and deposit().
"""

import numpy as np


class PheromoneField:

  def __init__(self, min_pheromone=1e-6, max_pheromone=100.0):
    if not 0 < min_pheromone < max_pheromone:
      raise ValueError(
          f"need 0 < min_pheromone < max_pheromone, got "
          f"{min_pheromone} and {max_pheromone}")
    self.min_pheromone = min_pheromone
    self.max_pheromone = max_pheromone
    self._tau = None

  def initialize(self, n_cities, initial_pheromone):
    """Fill the n x n trail with a constant level."""
    if n_cities < 1:
      raise ValueError(f"n_cities must be >= 1, got {n_cities}")
    level = min(max(initial_pheromone, self.min_pheromone), self.max_pheromone)
    self._tau = np.full((n_cities, n_cities), level, dtype=np.float64)
    return self

  @property
  def n_cities(self):
    return self._matrix().shape[0]

  def _matrix(self):
    if self._tau is None:
      raise RuntimeError("PheromoneField.initialize() must be called first")
    return self._tau

  def evaporate(self, rho):
    """Multiply every entry by (1 - rho), never going below the floor."""
    if not 0.0 <= rho < 1.0:
      raise ValueError(f"rho must be in [0, 1), got {rho}")
    tau = self._matrix()
    tau *= 1.0 - rho
    np.maximum(tau, self.min_pheromone, out=tau)

  def deposit(self, i, j, amount):
    """Reinforce edge (i, j) in both directions, capped at max_pheromone."""
    tau = self._matrix()
    if amount <= 0:
      return
    level = min(self.max_pheromone, tau[i, j] + amount)
    tau[i, j] = level
    tau[j, i] = level

  def deposit_tour(self, tour, amount):
    """Deposit ``amount`` on every edge of the closed tour."""
    for k in range(len(tour)):
      self.deposit(tour[k - 1], tour[k], amount)

  def intensity(self, i, j):
    return float(self._matrix()[i, j])

  def row(self, i):
    """Read-only view of the trail leaving city i."""
    view = self._matrix()[i]
    view.flags.writeable = False
    return view

  def snapshot(self):
    return self._matrix().copy()
