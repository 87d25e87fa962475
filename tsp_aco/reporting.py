"""Saving and plotting optimization results."""

import json
import logging
import os

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
from matplotlib.ticker import MaxNLocator  # noqa: E402

logger = logging.getLogger(__name__)


def save_solution(result, config, problem, directory="solutions", tag=None):
  """
  Saves the best solution and the run's performance history as JSON.
  Returns the path of the written file.
  """
  os.makedirs(directory, exist_ok=True)
  tag = tag or f"{len(problem)}cities_{config.n_ants}ants"

  solution_data = {
      "problem": getattr(problem, "name", None),
      "city_count": len(problem),
      "ant_count": config.n_ants,
      "best_tour": [int(c) for c in result.best_tour or []],
      "best_tour_length": result.best_length,
      "iterations": result.iterations,
      "elapsed": result.elapsed,
      "stop_reason": result.stop_reason,
      "parameters": config.to_dict(),
      "performance": {
          "iteration_best_lengths": result.iteration_best_lengths,
          "iteration_avg_lengths": result.iteration_avg_lengths,
          "iteration_times": result.iteration_times,
      },
  }

  path = os.path.join(directory, f"solution_{tag}.json")
  with open(path, "w", encoding="utf-8") as f:
    json.dump(solution_data, f, indent=2)
  logger.info("Solution saved to %s", path)
  return path


def plot_convergence(result, path, title="ACO Convergence"):
  """Best and average tour length per iteration."""
  iterations = range(1, result.iterations + 1)
  fig = plt.figure(figsize=(10, 6))
  plt.plot(iterations, result.iteration_best_lengths, 'b-', label='Best Tour Length')
  plt.plot(iterations, result.iteration_avg_lengths, 'r--', label='Average Tour Length')
  plt.xlabel('Iteration')
  plt.ylabel('Tour Length')
  plt.title(title)
  plt.legend()
  plt.grid(True)
  plt.gca().xaxis.set_major_locator(MaxNLocator(integer=True))
  plt.tight_layout()
  plt.savefig(path)
  plt.close(fig)
  return path


def plot_tour(problem, tour, path, title="Best Tour"):
  """Cities as points, the closed tour as a polyline."""
  coords = np.array([problem.coordinates_of(i) for i in range(len(problem))])
  closed = list(tour) + [tour[0]]
  fig = plt.figure(figsize=(8, 8))
  plt.plot(coords[closed, 0], coords[closed, 1], 'b-', linewidth=1)
  plt.scatter(coords[:, 0], coords[:, 1], c='red', zorder=3)
  plt.scatter(coords[tour[0], 0], coords[tour[0], 1], c='green', s=80, zorder=4,
              label='Start')
  plt.title(title)
  plt.legend()
  plt.axis('equal')
  plt.tight_layout()
  plt.savefig(path)
  plt.close(fig)
  return path


def plot_pheromones(matrix, path, title="Final Pheromone Distribution"):
  """Heatmap of a pheromone matrix, diagonal masked out."""
  n = matrix.shape[0]
  fig = plt.figure(figsize=(8, 6))
  masked_pheromones = np.ma.masked_where(np.eye(n) == 1, matrix)
  plt.imshow(masked_pheromones, cmap='viridis', interpolation='nearest')
  plt.colorbar(label='Pheromone Strength')
  plt.title(title)
  plt.xlabel('Destination City')
  plt.ylabel('Origin City')
  plt.tight_layout()
  plt.savefig(path)
  plt.close(fig)
  return path


def visualize_results(result, problem, pheromones, directory="visualizations", tag=None):
  """
  Writes the convergence graph, the best tour and the final pheromone heatmap
  (plus a few intermediate heatmaps when pheromone history was tracked).
  Returns the list of written files.
  """
  os.makedirs(directory, exist_ok=True)
  tag = tag or f"{len(problem)}cities"
  written = [
      plot_convergence(result, os.path.join(directory, f"convergence_{tag}.png"),
                       title=f"ACO Convergence - {tag}"),
      plot_pheromones(pheromones, os.path.join(directory, f"pheromone_{tag}.png"),
                      title=f"Final Pheromone Distribution - {tag}"),
  ]
  if result.best_tour:
    written.append(plot_tour(problem, result.best_tour,
                             os.path.join(directory, f"tour_{tag}.png"),
                             title=f"Best Tour ({result.best_length:.2f}) - {tag}"))

  # Save 5 snapshots
  history = result.pheromone_history
  snapshot_interval = max(1, len(history) // 5)
  for i in range(0, len(history), snapshot_interval):
    written.append(plot_pheromones(
        history[i], os.path.join(directory, f"pheromone_{tag}_iter{i + 1}.png"),
        title=f"Pheromone at Iteration {i + 1} - {tag}"))

  logger.info("Visualizations saved to %s", directory)
  return written
