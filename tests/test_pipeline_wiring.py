import ast
from pathlib import Path
import unittest


class PipelineWiringTests(unittest.TestCase):
    def _module(self, rel_path: str):
        src = Path(rel_path).read_text(encoding="utf-8")
        return src, ast.parse(src)

    def test_container_passes_config_to_modules(self):
        src, _ = self._module("Service/container.py")
        self.assertIn("snap_tolerance=topo_config.node_snap_tolerance_m", src)
        self.assertIn("directed=topo_config.directed_graph", src)
        self.assertIn("datum=topo_config.utm_datum", src)
        self.assertIn("max_workers=topo_config.max_workers", src)

    def test_service_uses_ground_truth_as_crs_reference(self):
        src, _ = self._module("Service/topo_service.py")
        self.assertIn("self._unifier.ensure_common_projected_crs(ground_truth_graph, proposal_graph)", src)

    def test_scorer_claims_outside_the_executor(self):
        _, module = self._module("Service/topo_modules/topo/scorer.py")
        calculate = next(
            node for node in ast.walk(module)
            if isinstance(node, ast.FunctionDef) and node.name == "calculate_topo"
        )
        with_block = next(node for node in calculate.body if isinstance(node, ast.With))
        inner_calls = {
            n.func.id for n in ast.walk(with_block)
            if isinstance(n, ast.Call) and isinstance(n.func, ast.Name)
        }
        self.assertNotIn("claim_candidates", inner_calls)

    def test_main_cleans_logs_with_configured_retention(self):
        src, _ = self._module("main.py")
        self.assertIn("clean_old_logs(logger.log_dir, logger, retention_days=config.log_retention_days)", src)


if __name__ == "__main__":
    unittest.main()
