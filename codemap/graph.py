from __future__ import annotations

import logging
from concurrent.futures import Executor
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .model import DependencyEdge, DependencyNode, SymbolRecord
from .resolve import Resolver, resolve_import

logger = logging.getLogger(__name__)


class DependencyGraph:
	"""File dependency graph. Nodes are frozen and the node map is read-only."""

	def __init__(self, nodes: Dict[str, DependencyNode]):
		self._nodes = dict(nodes)

	@property
	def nodes(self) -> Mapping[str, DependencyNode]:
		return MappingProxyType(self._nodes)

	def __contains__(self, node_id: object) -> bool:
		return node_id in self._nodes

	def __getitem__(self, node_id: str) -> DependencyNode:
		return self._nodes[node_id]

	def __iter__(self) -> Iterator[str]:
		return iter(self._nodes)

	def __len__(self) -> int:
		return len(self._nodes)

	def get(self, node_id: str) -> Optional[DependencyNode]:
		return self._nodes.get(node_id)

	def outbound(self, node_id: str) -> Tuple[str, ...]:
		node = self._nodes.get(node_id)
		return node.outbound if node is not None else ()

	def edges(self) -> List[DependencyEdge]:
		return [
			DependencyEdge(source=node.node_id, target=target)
			for node in self._nodes.values()
			for target in node.outbound
		]

	def to_dict(self) -> Dict[str, DependencyNode]:
		return dict(self._nodes)


def _dedupe(items: Iterable[str]) -> List[str]:
	return list(dict.fromkeys(items))


def build_dependency_graph(
	records: Mapping[str, SymbolRecord],
	resolver: Optional[Resolver] = None,
	executor: Optional[Executor] = None,
) -> DependencyGraph:
	"""Assemble the dependency graph from every file's symbol record.

	Import sources are resolved per node (optionally fanned out over
	``executor``), deduplicated in first-seen order and then mirrored into the
	targets' ``inbound`` lists. Targets without a record become nodes with no
	outbound edges. Self-loops and cycles are kept.
	"""
	resolve = resolver or resolve_import

	# Phase 1: one node per record, outbound still as written
	unresolved: Dict[str, List[str]] = {
		path: [spec.source for spec in record.import_specs] for path, record in records.items()
	}

	# Phase 2: resolve every node's specifiers against its own path
	def resolve_node(item: Tuple[str, List[str]]) -> Tuple[str, List[str]]:
		path, specifiers = item
		return path, _dedupe(resolve(path, spec) for spec in specifiers)

	items = list(unresolved.items())
	resolved = executor.map(resolve_node, items) if executor is not None else map(resolve_node, items)
	outbound: Dict[str, List[str]] = dict(resolved)

	# Phase 3: reverse index, creating nodes for dangling and external targets
	inbound: Dict[str, List[str]] = {path: [] for path in outbound}
	for source, targets in outbound.items():
		for target in targets:
			inbound.setdefault(target, []).append(source)

	nodes = {
		node_id: DependencyNode(
			node_id=node_id,
			outbound=tuple(outbound.get(node_id, ())),
			inbound=tuple(sources),
		)
		for node_id, sources in inbound.items()
	}
	logger.debug(
		"Built dependency graph: %d nodes (%d from records), %d edges",
		len(nodes),
		len(records),
		sum(len(n.outbound) for n in nodes.values()),
	)
	return DependencyGraph(nodes)
