from concurrent.futures import ThreadPoolExecutor

import pytest
from pydantic import ValidationError

from codemap.graph import build_dependency_graph
from codemap.model import ImportSpec, SymbolRecord


def _records(imports):
	return {
		path: SymbolRecord(path=path, import_specs=[ImportSpec(source=s) for s in sources])
		for path, sources in imports.items()
	}


def _identity(from_path, specifier):
	return specifier


def test_mutual_imports_resolve_to_both_edges(tmp_path):
	a = tmp_path / "a.js"
	b = tmp_path / "b.js"
	a.write_text("import {x} from './b'\n")
	b.write_text("import {y} from './a'\n")
	graph = build_dependency_graph(_records({str(a): ["./b"], str(b): ["./a"]}))

	assert graph[str(a)].outbound == (str(b),)
	assert graph[str(b)].outbound == (str(a),)
	assert graph[str(a)].inbound == (str(b),)
	assert graph[str(b)].inbound == (str(a),)
	assert len(graph) == 2


def test_external_and_dangling_targets_become_nodes(tmp_path):
	a = str(tmp_path / "a.js")
	graph = build_dependency_graph(_records({a: ["react", "./missing"]}))
	missing = str(tmp_path / "missing")

	assert list(graph) == [a, "react", missing]
	assert graph["react"].outbound == ()
	assert graph["react"].inbound == (a,)
	assert graph[missing].inbound == (a,)


def test_duplicate_imports_are_deduplicated():
	graph = build_dependency_graph(_records({"a": ["b", "c", "b"]}), resolver=_identity)
	assert graph["a"].outbound == ("b", "c")
	assert graph["b"].inbound == ("a",)


def test_self_reference_is_kept():
	graph = build_dependency_graph(_records({"a": ["a", "b"]}), resolver=_identity)
	assert graph["a"].outbound == ("a", "b")
	assert graph["a"].inbound == ("a",)


def test_completeness_and_duality():
	imports = {
		"a": ["b", "c", "ext"],
		"b": ["c", "a"],
		"c": ["d"],
		"e": [],
	}
	graph = build_dependency_graph(_records(imports), resolver=_identity)

	for node_id in graph:
		for target in graph[node_id].outbound:
			assert target in graph
			assert node_id in graph[target].inbound
		for source in graph[node_id].inbound:
			assert node_id in graph[source].outbound

	out_edges = {(n, t) for n in graph for t in graph[n].outbound}
	in_edges = {(s, n) for n in graph for s in graph[n].inbound}
	assert out_edges == in_edges
	assert len(graph.edges()) == len(out_edges) == 6


def test_nodes_are_read_only():
	graph = build_dependency_graph(_records({"a": ["b"]}), resolver=_identity)
	with pytest.raises(ValidationError):
		graph["a"].outbound = ()
	with pytest.raises(TypeError):
		graph.nodes["z"] = graph["a"]


def test_parallel_resolution_matches_sequential():
	imports = {f"n{i}": [f"n{(i + 1) % 20}", f"n{(i * 7) % 20}", "ext"] for i in range(20)}
	sequential = build_dependency_graph(_records(imports), resolver=_identity)
	with ThreadPoolExecutor(max_workers=4) as executor:
		parallel = build_dependency_graph(_records(imports), resolver=_identity, executor=executor)
	assert parallel.to_dict() == sequential.to_dict()
	assert list(parallel) == list(sequential)


def test_records_without_imports():
	graph = build_dependency_graph(_records({"README.md": []}), resolver=_identity)
	assert graph["README.md"].outbound == ()
	assert graph.edges() == []
