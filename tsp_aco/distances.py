import numpy as np

from .exceptions import InvalidInstance


class DistanceTable:
  """Precomputed Euclidean distances between every pair of cities."""

  def __init__(self, matrix):
    matrix = np.array(matrix, dtype=float)
    n = matrix.shape[0] if matrix.ndim == 2 else 0
    if matrix.ndim != 2 or matrix.shape != (n, n):
      raise InvalidInstance(f"distance matrix must be square, got {matrix.shape}")
    if n < 2:
      raise InvalidInstance(f"a tour needs at least 2 cities, got {n}")
    if not np.all(np.isfinite(matrix)) or np.any(matrix < 0):
      raise InvalidInstance("distances must be finite and non-negative")
    if not np.allclose(matrix, matrix.T):
      raise InvalidInstance("distance matrix must be symmetric")
    np.fill_diagonal(matrix, 0.0)
    matrix.flags.writeable = False
    self.matrix = matrix
    self.n_cities = n
    # Nested lists index faster than numpy scalars in the 2-opt inner loop
    self.rows = matrix.tolist()

  @classmethod
  def build(cls, coordinates):
    coords = np.asarray(coordinates, dtype=float)
    if coords.ndim != 2 or coords.shape[1] != 2:
      raise InvalidInstance(
          f"coordinates must have shape (n, 2), got {coords.shape}")
    if coords.shape[0] < 2:
      raise InvalidInstance(
          f"a tour needs at least 2 cities, got {coords.shape[0]}")
    if not np.all(np.isfinite(coords)):
      raise InvalidInstance("coordinates must be finite numbers")
    deltas = coords[:, np.newaxis, :] - coords[np.newaxis, :, :]
    return cls(np.sqrt((deltas ** 2).sum(axis=-1)))

  @classmethod
  def from_problem(cls, problem):
    n = len(problem)
    coords = [problem.coordinates_of(i) for i in range(n)]
    return cls.build(np.array(coords, dtype=float).reshape(n, 2))

  def __len__(self):
    return self.n_cities

  def get(self, i, j):
    return self.rows[i][j]

  def row(self, i):
    return self.matrix[i]

  def tour_length(self, tour):
    """Length of the closed tour, including the edge back to the start."""
    rows = self.rows
    length = 0.0
    for k in range(len(tour)):
      length += rows[tour[k - 1]][tour[k]]
    return length
