"""
Prerequisite Graph - Topic dependency graph.

Features:
    - Ordered prerequisite lists per topic (last declaration wins)
    - Node set covering every declared or referenced topic
    - Post-order traversal (prerequisites before dependents)
    - Cycle diagnostics

Edges point FROM a prerequisite TO the topic that depends on it, so a
topic's prerequisites are its predecessors.
"""

from typing import Dict, Iterable, List, Optional, Set

import networkx as nx


class PrerequisiteGraph:
    """
    Directed graph of topics and their prerequisites.

    Expected to be a DAG. Cycles are tolerated by the traversal (it always
    terminates) but can be detected with find_cycle().
    """

    def __init__(self):
        self.graph = nx.DiGraph()

    # ==================== Construction ====================

    def add_topic(self, topic: str):
        """Add a topic node with no prerequisites of its own."""
        self.graph.add_node(topic)

    def set_prerequisites(self, topic: str, prerequisites: Iterable[str]):
        """
        Declare the prerequisites of a topic.

        Replaces any earlier declaration for the same topic. Topics only
        referenced by an earlier declaration stay in the node set.
        """
        self.graph.add_node(topic)
        self.graph.remove_edges_from(list(self.graph.in_edges(topic)))

        for prereq in prerequisites:
            self.graph.add_edge(prereq, topic)

    @classmethod
    def from_mapping(cls, mapping: Dict[str, List[str]]) -> "PrerequisiteGraph":
        kg = cls()
        for topic, prereqs in mapping.items():
            kg.set_prerequisites(topic, prereqs)
        return kg

    # ==================== Query Methods ====================

    @property
    def nodes(self) -> Set[str]:
        return set(self.graph.nodes)

    def is_empty(self) -> bool:
        return self.graph.number_of_nodes() == 0

    def __contains__(self, topic: str) -> bool:
        return self.graph.has_node(topic)

    def __len__(self) -> int:
        return self.graph.number_of_nodes()

    def prerequisites(self, topic: str) -> List[str]:
        """Immediate prerequisites in declared order ([] for unknown topics)."""
        if not self.graph.has_node(topic):
            return []
        return list(self.graph.predecessors(topic))

    def adjacency(self) -> Dict[str, List[str]]:
        """topic -> prerequisites, for every topic that declares any."""
        return {
            topic: self.prerequisites(topic)
            for topic in self.graph.nodes
            if self.graph.in_degree(topic) > 0
        }

    # ==================== Traversal ====================

    def post_order_path(
        self,
        target: str,
        visited: Optional[Set[str]] = None,
        path: Optional[List[str]] = None,
    ) -> List[str]:
        """
        Append target and everything it depends on to path, prerequisites first.

        Nodes already in visited are skipped, so each node is emitted once
        and shared prerequisites are not repeated. Uses an explicit stack in
        place of recursion; the order matches a recursive depth-first
        post-order visiting prerequisites in declared order.

        On a cyclic graph the back edge is ignored, so the dependent on that
        edge may come before its prerequisite.
        """
        if visited is None:
            visited = set()
        if path is None:
            path = []

        if target in visited:
            return path
        visited.add(target)

        stack = [(target, iter(self.prerequisites(target)))]
        while stack:
            node, pending = stack[-1]
            for prereq in pending:
                if prereq not in visited:
                    visited.add(prereq)
                    stack.append((prereq, iter(self.prerequisites(prereq))))
                    break
            else:
                stack.pop()
                path.append(node)

        return path

    # ==================== Diagnostics ====================

    def find_cycle(self, within: Optional[Iterable[str]] = None) -> List[str]:
        """
        Topics on one dependency cycle, or [] when there is none.

        Pass within to only look among those topics (e.g. one review path).
        """
        graph = self.graph if within is None else self.graph.subgraph(within)
        try:
            edges = nx.find_cycle(graph)
        except nx.NetworkXNoCycle:
            return []
        return [u for u, _ in edges]

    def is_acyclic(self) -> bool:
        return nx.is_directed_acyclic_graph(self.graph)

    def get_stats(self) -> dict:
        """Get graph statistics."""
        acyclic = self.is_acyclic()
        return {
            "total_topics": self.graph.number_of_nodes(),
            "total_edges": self.graph.number_of_edges(),
            "acyclic": acyclic,
            "max_depth": nx.dag_longest_path_length(self.graph) if acyclic and len(self) else 0,
        }
