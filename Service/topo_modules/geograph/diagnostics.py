"""
Service/topo_modules/geograph/diagnostics.py

생성된 위상 그래프의 구성 통계를 로그로 출력하는 진단 모듈입니다.
"""
from __future__ import annotations

from typing import Dict

import networkx as nx

from Common.log import Log
from .primitives import GeoGraph


class GraphDiagnostics:
    """
    노드/간선/평행 간선 수와 연결 그룹 수를 집계하여 입력 품질을 보고합니다.
    """

    def __init__(self, logger: Log):
        self._logger = logger

    def report(self, graph: GeoGraph, label: str) -> Dict[str, int]:
        summary = self.summarize(graph)
        self._logger.log(
            f"[GeoGraph:Diag][{label}] 노드={summary['nodes']} 간선={summary['edges']} "
            f"평행간선={summary['parallel_edges']} 그룹={summary['components']} "
            f"단말(D1)={summary['terminal_nodes']}",
            level="INFO",
        )
        if summary["nodes"] and summary["components"] > 1:
            self._logger.log(
                f"[GeoGraph:Diag][{label}] 네트워크가 {summary['components']}개 그룹으로 분리되어 있습니다.",
                level="DEBUG",
            )
        return summary

    def summarize(self, graph: GeoGraph) -> Dict[str, int]:
        G = graph.edge_graph
        if G.number_of_nodes() == 0:
            components = 0
        elif G.is_directed():
            components = nx.number_weakly_connected_components(G)
        else:
            components = nx.number_connected_components(G)

        return {
            "nodes": G.number_of_nodes(),
            "edges": G.number_of_edges(),
            "parallel_edges": graph.parallel_edge_count(),
            "components": components,
            "terminal_nodes": sum(1 for _, d in G.degree() if d == 1),
        }
