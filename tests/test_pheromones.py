import random
import unittest

import numpy as np

from tsp_aco.pheromones import PheromoneField


class TestPheromoneField(unittest.TestCase):

  def setUp(self):
    self.field = PheromoneField(min_pheromone=0.01, max_pheromone=10.0)
    self.field.initialize(5, 0.5)

  def test_initialize_fills_constant(self):
    self.assertTrue(np.all(self.field.snapshot() == 0.5))
    self.assertEqual(self.field.n_cities, 5)

  def test_use_before_initialize_fails(self):
    field = PheromoneField()
    with self.assertRaises(RuntimeError):
      field.evaporate(0.5)
    with self.assertRaises(RuntimeError):
      field.intensity(0, 1)

  def test_evaporate_scales_entries(self):
    self.field.evaporate(0.4)
    self.assertAlmostEqual(self.field.intensity(1, 2), 0.3)

  def test_evaporate_keeps_floor(self):
    for _ in range(100):
      self.field.evaporate(0.9)
    self.assertEqual(self.field.snapshot().min(), 0.01)

  def test_evaporate_rejects_bad_rate(self):
    with self.assertRaises(ValueError):
      self.field.evaporate(1.0)
    with self.assertRaises(ValueError):
      self.field.evaporate(-0.1)

  def test_deposit_is_symmetric_and_capped(self):
    self.field.deposit(1, 3, 2.0)
    self.assertEqual(self.field.intensity(1, 3), 2.5)
    self.assertEqual(self.field.intensity(3, 1), 2.5)
    self.field.deposit(3, 1, 100.0)
    self.assertEqual(self.field.intensity(1, 3), 10.0)
    self.assertEqual(self.field.intensity(3, 1), 10.0)

  def test_deposit_tour_covers_closing_edge(self):
    self.field.deposit_tour([0, 1, 2, 3, 4], 1.0)
    for a, b in [(0, 1), (1, 2), (2, 3), (3, 4), (4, 0)]:
      self.assertEqual(self.field.intensity(a, b), 1.5)
    self.assertEqual(self.field.intensity(0, 2), 0.5)

  def test_row_is_read_only_view(self):
    row = self.field.row(0)
    with self.assertRaises(ValueError):
      row[1] = 3.0
    self.field.deposit(0, 1, 1.0)
    self.assertEqual(row[1], 1.5)

  def test_bounds_and_symmetry_over_long_run(self):
    rng = random.Random(0)
    for _ in range(2000):
      if rng.random() < 0.3:
        self.field.evaporate(rng.uniform(0.0, 0.99))
      else:
        i, j = rng.sample(range(5), 2)
        self.field.deposit(i, j, rng.uniform(0.0, 5.0))
      tau = self.field.snapshot()
      self.assertTrue(np.array_equal(tau, tau.T))
    tau = self.field.snapshot()
    self.assertGreaterEqual(tau.min(), 0.01)
    self.assertLessEqual(tau.max(), 10.0)


if __name__ == "__main__":
  unittest.main()
