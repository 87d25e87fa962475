"""Ant Colony Optimization with 2-opt local search for the symmetric TSP.

- tsp_aco.colony: ColonyOptimizer, the iteration loop
- tsp_aco.construction: TourBuilder (roulette wheel or GRASP walk)
- tsp_aco.two_opt: TwoOptRefiner
- tsp_aco.pheromones / tsp_aco.distances: the shared matrices
- tsp_aco.problem: Problem instances and TourEvaluator
- tsp_aco.cli: the tsp-aco command
"""
from .colony import ColonyOptimizer, OptimizationResult
from .config import (PRESETS, ColonyConfig, ConstructionPolicy, DepositPolicy,
                     StartPolicy)
from .construction import TourBuilder, nearest_neighbor_tour
from .distances import DistanceTable
from .exceptions import ConfigurationError, InvalidInstance, InvalidTour, TSPError
from .pheromones import PheromoneField
from .problem import Problem, TourEvaluator, generate_problem, load_problem
from .two_opt import TwoOptRefiner

__version__ = "0.1.0"

__all__ = [
    "ColonyOptimizer", "OptimizationResult", "ColonyConfig", "PRESETS",
    "ConstructionPolicy", "DepositPolicy", "StartPolicy", "TourBuilder",
    "nearest_neighbor_tour", "DistanceTable", "PheromoneField", "TwoOptRefiner",
    "Problem", "TourEvaluator", "generate_problem", "load_problem",
    "TSPError", "InvalidInstance", "InvalidTour", "ConfigurationError",
]
