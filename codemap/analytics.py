"""Read-only summaries over a finished dependency graph and its records."""

from __future__ import annotations

from collections import Counter
from typing import List, Mapping, Optional, Set

from .graph import DependencyGraph
from .model import DependencyFlow, KeyDependency, RankedComponent, SymbolRecord

DEFAULT_COMPONENT_LIMIT = 10
DEFAULT_FLOW_LIMIT = 5
DEFAULT_KEY_DEPENDENCY_LIMIT = 5


def rank_components(
	records: Mapping[str, Optional[SymbolRecord]],
	limit: Optional[int] = DEFAULT_COMPONENT_LIMIT,
) -> List[RankedComponent]:
	"""Rank export names by how many export entries use them across all files.

	Ties keep the order in which names were first seen.
	"""
	counts: Counter = Counter(
		spec.name
		for record in records.values()
		if record is not None
		for spec in record.export_specs
	)
	return [RankedComponent(name=name, count=count) for name, count in counts.most_common(limit)]


def longest_chain(graph: DependencyGraph, node_id: str) -> List[str]:
	"""Longest simple dependency path starting at ``node_id``.

	A node already on the current path ends that branch, so cycles terminate.
	On equal length the first path found in edge order wins. The walk keeps
	its own stack of ``[node, next edge index, best chain]`` frames.
	"""
	on_path: Set[str] = {node_id}
	stack: List[list] = [[node_id, 0, [node_id]]]
	while True:
		frame = stack[-1]
		current, index, best = frame
		deps = graph.outbound(current)
		if index < len(deps):
			frame[1] = index + 1
			dep = deps[index]
			if dep not in on_path:
				on_path.add(dep)
				stack.append([dep, 0, [dep]])
			continue
		stack.pop()
		on_path.discard(current)
		if not stack:
			return best
		parent = stack[-1]
		if len(best) + 1 > len(parent[2]):
			parent[2] = [parent[0]] + best


def find_dependency_flows(
	graph: DependencyGraph,
	limit: Optional[int] = DEFAULT_FLOW_LIMIT,
) -> List[DependencyFlow]:
	"""Longest chain per unvisited root, at most ``limit`` of them.

	Every node on a discovered chain is claimed, so later roots skip it even if
	a longer chain through it exists from elsewhere. Single-node chains are not
	reported. The ``limit`` longest flows are returned in discovery order.
	"""
	flows: List[DependencyFlow] = []
	visited: Set[str] = set()
	for node_id in graph:
		if node_id in visited:
			continue
		chain = longest_chain(graph, node_id)
		if len(chain) > 1:
			flows.append(DependencyFlow(nodes=chain))
		visited.update(chain)
	if limit is None or len(flows) <= limit:
		return flows
	keep = sorted(range(len(flows)), key=lambda i: -len(flows[i].nodes))[:limit]
	return [flows[i] for i in sorted(keep)]


def rank_key_dependencies(
	graph: DependencyGraph,
	limit: Optional[int] = DEFAULT_KEY_DEPENDENCY_LIMIT,
) -> List[KeyDependency]:
	counts: Counter = Counter(target for node_id in graph for target in graph.outbound(node_id))
	return [KeyDependency(node_id=node_id, count=count) for node_id, count in counts.most_common(limit)]
