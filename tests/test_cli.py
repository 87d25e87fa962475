import contextlib
import io
import json
import os
import tempfile
import unittest

from tsp_aco import cli
from tsp_aco.colony import ColonyOptimizer
from tsp_aco.config import ColonyConfig, ConstructionPolicy, DepositPolicy
from tsp_aco.problem import generate_problem
from tsp_aco.reporting import save_solution, visualize_results


def run_main(argv):
  out = io.StringIO()
  with contextlib.redirect_stdout(out), contextlib.redirect_stderr(io.StringIO()):
    code = cli.main(argv)
  return code, out.getvalue()


class TestCommandLine(unittest.TestCase):

  def test_runs_each_ant_count_and_saves(self):
    with tempfile.TemporaryDirectory() as tmp:
      code, output = run_main([
          "--cities", "8", "--ants", "3,5", "--iterations", "3", "--seed", "1",
          "--no-visualization", "--save", "--output-dir", tmp])
      self.assertEqual(code, 0)
      self.assertIn("FINAL RESULTS SUMMARY", output)
      files = sorted(os.listdir(os.path.join(tmp, "solutions")))
      self.assertEqual(files, ["solution_8cities_3ants.json",
                               "solution_8cities_5ants.json"])
      with open(os.path.join(tmp, "solutions", files[0]), encoding="utf-8") as f:
        data = json.load(f)
      self.assertEqual(sorted(data["best_tour"]), list(range(8)))
      self.assertEqual(data["parameters"]["n_ants"], 3)

  def test_config_from_flags(self):
    args = cli.build_argparser().parse_args(
        ["--preset", "classic", "--grasp", "--progressive", "--rho", "0.2",
         "--no-visualization"])
    config = cli.config_from_args(args)
    self.assertIs(config.construction, ConstructionPolicy.GRASP)
    self.assertIs(config.deposit, DepositPolicy.PROGRESSIVE)
    self.assertEqual(config.rho, 0.2)
    self.assertEqual(config.n_ants, 50)
    self.assertFalse(config.track_pheromones)

  def test_invalid_parameters_exit_code(self):
    code, _ = run_main(["--cities", "5", "--rho", "1.5", "--no-visualization"])
    self.assertEqual(code, 2)

  def test_missing_coordinates_file(self):
    code, _ = run_main(["--coords", "/nonexistent/cities.txt", "--no-visualization"])
    self.assertEqual(code, 2)

  def test_undecodable_coordinates_file(self):
    with tempfile.TemporaryDirectory() as tmp:
      path = os.path.join(tmp, "cities.txt")
      with open(path, "wb") as f:
        f.write(b"0 0\n1 0\n\xff\xfe\n")
      code, _ = run_main(["--coords", path, "--no-visualization"])
    self.assertEqual(code, 2)

  def test_negative_city_count(self):
    code, _ = run_main(["--cities", "-4", "--no-visualization"])
    self.assertEqual(code, 2)

  def test_bad_ant_counts(self):
    with self.assertRaises(SystemExit):
      run_main(["--ants", "a,b"])


class TestReporting(unittest.TestCase):

  def test_save_and_visualize(self):
    problem = generate_problem(8, seed=2)
    config = ColonyConfig(n_ants=4, n_iterations=5, time_limit=None, seed=2,
                          track_pheromones=True)
    optimizer = ColonyOptimizer(problem, config)
    result = optimizer.run()
    with tempfile.TemporaryDirectory() as tmp:
      path = save_solution(result, config, problem, directory=tmp, tag="run")
      self.assertTrue(os.path.exists(path))
      written = visualize_results(result, problem, optimizer.pheromones.snapshot(),
                                  directory=tmp, tag="run")
      self.assertGreaterEqual(len(written), 4)
      for name in written:
        self.assertTrue(os.path.getsize(name) > 0)


if __name__ == "__main__":
  unittest.main()
