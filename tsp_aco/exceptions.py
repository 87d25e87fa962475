"""Errors raised by the TSP ant colony package."""


class TSPError(Exception):
  """Base class for every error raised by tsp_aco."""


class InvalidInstance(TSPError, ValueError):
  """The problem instance cannot be optimized (too few cities, bad coordinates)."""


class InvalidTour(TSPError, ValueError):
  """A tour is not a permutation of the instance's city indices."""


class ConfigurationError(TSPError, ValueError):
  """A colony parameter is outside its valid range."""
