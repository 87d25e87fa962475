"""Colony parameters and the named reference configurations."""

import enum
import math
from dataclasses import asdict, dataclass, replace

from .exceptions import ConfigurationError


class ConstructionPolicy(enum.Enum):
  """How an ant picks the next city."""
  ROULETTE = "roulette"
  GRASP = "grasp"


class DepositPolicy(enum.Enum):
  """When pheromone is laid on the trail."""
  BATCH = "batch"
  PROGRESSIVE = "progressive"


class StartPolicy(enum.Enum):
  """How an ant chooses its first city when the caller does not supply one."""
  RANDOM = "random"
  ROTATING = "rotating"


@dataclass
class ColonyConfig:
  """
  n_ants: Number of ants (agents) per iteration
  n_iterations: Maximum number of iterations
  time_limit: Wall-clock budget in seconds (None = no budget)
  alpha: Controls importance of pheromone trail (higher = more influence)
  beta: Controls importance of distance (higher = greedier construction)
  rho: Pheromone evaporation rate, in [0, 1)
  q_val: Pheromone deposit constant (Q in literature)
  initial_pheromone: Initial pheromone level on all paths
  min_pheromone: Floor kept after evaporation so no edge becomes unreachable
  max_pheromone: Cap applied after every deposit
  grasp_gamma: Width of the GRASP restricted candidate list, in (0, 1)
  enable_local_search: Whether to apply 2-opt to every constructed tour
  construction: Roulette-wheel or GRASP next-city selection
  deposit: Batch (once per iteration) or progressive (during construction)
  start: Random or rotating start city
  seed: Random seed for reproducibility (None = system entropy)
  show_progress: Whether to display a tqdm progress bar
  track_pheromones: Whether to keep a pheromone snapshot per iteration
  """
  n_ants: int = 50
  n_iterations: int = 200
  time_limit: float | None = 70.0
  alpha: float = 1.0
  beta: float = 2.0
  rho: float = 0.5
  q_val: float = 100.0
  initial_pheromone: float = 0.1
  min_pheromone: float = 1e-6
  max_pheromone: float = 100.0
  grasp_gamma: float = 0.2
  enable_local_search: bool = True
  construction: ConstructionPolicy = ConstructionPolicy.ROULETTE
  deposit: DepositPolicy = DepositPolicy.BATCH
  start: StartPolicy = StartPolicy.RANDOM
  seed: int | None = None
  show_progress: bool = False
  track_pheromones: bool = False

  def validate(self):
    """Raise ConfigurationError on the first parameter outside its range."""
    if self.n_ants < 1:
      raise ConfigurationError(f"n_ants must be >= 1, got {self.n_ants}")
    if self.n_iterations < 1:
      raise ConfigurationError(
          f"n_iterations must be >= 1, got {self.n_iterations}")
    if self.time_limit is not None and not self.time_limit > 0:
      raise ConfigurationError(
          f"time_limit must be positive or None, got {self.time_limit}")
    if not 0.0 <= self.rho < 1.0:
      raise ConfigurationError(f"rho must be in [0, 1), got {self.rho}")
    for name in ("alpha", "beta", "q_val", "initial_pheromone", "min_pheromone"):
      value = getattr(self, name)
      if not (math.isfinite(value) and value > 0):
        raise ConfigurationError(f"{name} must be a positive number, got {value}")
    if not self.max_pheromone > self.min_pheromone:
      raise ConfigurationError(
          f"max_pheromone ({self.max_pheromone}) must exceed "
          f"min_pheromone ({self.min_pheromone})")
    if not self.min_pheromone <= self.initial_pheromone <= self.max_pheromone:
      raise ConfigurationError(
          "initial_pheromone must lie between min_pheromone and max_pheromone")
    if not 0.0 < self.grasp_gamma < 1.0:
      raise ConfigurationError(
          f"grasp_gamma must be in (0, 1), got {self.grasp_gamma}")
    return self

  def with_overrides(self, **overrides):
    """Copy of this config with the given (non-None) fields replaced."""
    return replace(self, **{k: v for k, v in overrides.items() if v is not None})

  def to_dict(self):
    data = asdict(self)
    for key in ("construction", "deposit", "start"):
      data[key] = data[key].value
    return data

  @classmethod
  def from_preset(cls, name, **overrides):
    try:
      preset = PRESETS[name]
    except KeyError:
      raise ConfigurationError(
          f"unknown preset {name!r}, expected one of {sorted(PRESETS)}") from None
    return preset.with_overrides(**overrides)


# Reference variants of the colony
PRESETS = {
    # Plain ant system: batch deposit, random starts, no local search
    "classic": ColonyConfig(
        n_ants=50, n_iterations=200, time_limit=None,
        alpha=1.0, beta=2.0, rho=0.5, initial_pheromone=0.1,
        enable_local_search=False),
    # Pheromone guided walk: online deposit while walking, rotating starts
    "guided": ColonyConfig(
        n_ants=35, n_iterations=200, time_limit=70.0,
        alpha=1.5, beta=7.2, rho=0.4, initial_pheromone=0.22,
        deposit=DepositPolicy.PROGRESSIVE, start=StartPolicy.ROTATING),
    # Greedy randomized construction followed by 2-opt
    "grasp": ColonyConfig(
        n_ants=130, n_iterations=200, time_limit=70.0,
        rho=0.5, initial_pheromone=0.1, grasp_gamma=0.2,
        construction=ConstructionPolicy.GRASP),
}
