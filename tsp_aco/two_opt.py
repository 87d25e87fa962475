"""2-opt local search.

Known limitation: the first and last positions of the tour are never used as a
swap boundary, so the edge closing the tour (last city back to the first) is
not considered for reversal. The result is a local optimum over the interior
edges only.

A move is accepted only when its gain exceeds MIN_GAIN rather than any
positive gain, so on near-degenerate instances the sequence of moves can differ
from a strict "gain > 0" 2-opt.
"""

# Gains below this are rounding noise; accepting them could cycle forever
MIN_GAIN = 1e-12


class TwoOptRefiner:

  def __init__(self, distances):
    self.distances = distances

  def gain(self, tour, i, j):
    """Length saved by reconnecting (i-1, i), (j, j+1) as (i-1, j), (i, j+1)."""
    rows = self.distances.rows
    a, b = tour[i - 1], tour[i]
    c, d = tour[j], tour[j + 1]
    return (rows[a][b] + rows[c][d]) - (rows[a][c] + rows[b][d])

  def refine(self, tour, in_place=False):
    """
    Applies 2-opt moves until a full pass finds no improvement.
    Returns the refined tour; the input list is modified only if in_place.
    """
    cities = tour if in_place else list(tour)
    n = len(cities)
    if n < 4:
      return cities

    improved = True
    while improved:
      improved = False
      for i in range(1, n - 2):
        for j in range(i + 1, n - 1):
          if self.gain(cities, i, j) > MIN_GAIN:
            cities[i:j + 1] = cities[i:j + 1][::-1]
            improved = True

    return cities
