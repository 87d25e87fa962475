from tsp_aco.problem import Problem

UNIT_SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


def unit_square():
  return Problem(UNIT_SQUARE, name="unit-square")


def is_permutation(tour, n):
  return sorted(tour) == list(range(n))
