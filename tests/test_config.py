import unittest

from tsp_aco.config import (PRESETS, ColonyConfig, ConstructionPolicy,
                            DepositPolicy, StartPolicy)
from tsp_aco.exceptions import ConfigurationError


class TestColonyConfig(unittest.TestCase):

  def test_defaults_are_valid(self):
    config = ColonyConfig().validate()
    self.assertIs(config.construction, ConstructionPolicy.ROULETTE)
    self.assertIs(config.deposit, DepositPolicy.BATCH)

  def test_presets_are_valid(self):
    for name, config in PRESETS.items():
      with self.subTest(preset=name):
        config.validate()
    self.assertIs(PRESETS["guided"].deposit, DepositPolicy.PROGRESSIVE)
    self.assertIs(PRESETS["guided"].start, StartPolicy.ROTATING)
    self.assertIs(PRESETS["grasp"].construction, ConstructionPolicy.GRASP)
    self.assertFalse(PRESETS["classic"].enable_local_search)

  def test_invalid_values(self):
    bad = [
        dict(n_ants=0), dict(n_iterations=0), dict(time_limit=0.0),
        dict(rho=1.0), dict(rho=-0.1), dict(alpha=0.0), dict(beta=-1.0),
        dict(q_val=0.0), dict(initial_pheromone=float("nan")),
        dict(min_pheromone=1.0, max_pheromone=1.0),
        dict(initial_pheromone=500.0), dict(grasp_gamma=0.0),
        dict(grasp_gamma=1.0),
    ]
    for overrides in bad:
      with self.subTest(**overrides):
        with self.assertRaises(ConfigurationError):
          ColonyConfig(**overrides).validate()

  def test_configuration_error_is_a_value_error(self):
    with self.assertRaises(ValueError):
      ColonyConfig(rho=2.0).validate()

  def test_from_preset_with_overrides(self):
    config = ColonyConfig.from_preset("grasp", n_ants=7, seed=None)
    self.assertEqual(config.n_ants, 7)
    self.assertIs(config.construction, ConstructionPolicy.GRASP)
    self.assertEqual(PRESETS["grasp"].n_ants, 130)

  def test_unknown_preset(self):
    with self.assertRaises(ConfigurationError):
      ColonyConfig.from_preset("tabu")

  def test_to_dict_uses_enum_values(self):
    data = ColonyConfig(deposit=DepositPolicy.PROGRESSIVE).to_dict()
    self.assertEqual(data["deposit"], "progressive")
    self.assertEqual(data["construction"], "roulette")
    self.assertEqual(data["n_ants"], 50)


if __name__ == "__main__":
  unittest.main()
