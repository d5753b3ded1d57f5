from codemap.analytics import (
	find_dependency_flows,
	longest_chain,
	rank_components,
	rank_key_dependencies,
)
from codemap.graph import build_dependency_graph
from codemap.model import ExportKind, ExportSpec, ImportSpec, SymbolRecord


def _graph(imports):
	records = {
		path: SymbolRecord(path=path, import_specs=[ImportSpec(source=s) for s in sources])
		for path, sources in imports.items()
	}
	return build_dependency_graph(records, resolver=lambda from_path, spec: spec)


def _exporting(path, *names):
	return SymbolRecord(
		path=path,
		export_specs=[ExportSpec(kind=ExportKind.NAMED, name=n) for n in names],
	)


def test_rank_components_by_name_popularity():
	records = {
		"a.js": _exporting("a.js", "foo"),
		"b.js": _exporting("b.js", "foo"),
		"c.js": _exporting("c.js", "bar", "foo"),
	}
	ranked = rank_components(records)
	assert (ranked[0].name, ranked[0].count) == ("foo", 3)
	assert (ranked[1].name, ranked[1].count) == ("bar", 1)


def test_rank_components_ties_keep_first_seen_order():
	records = {
		"a.js": _exporting("a.js", "zeta", "alpha"),
		"b.js": _exporting("b.js", "mid"),
	}
	assert [c.name for c in rank_components(records)] == ["zeta", "alpha", "mid"]
	assert [c.name for c in rank_components(records, limit=2)] == ["zeta", "alpha"]


def test_rank_components_counts_repeats_within_a_file():
	record = _exporting("a.js", "foo")
	record.export_specs.append(ExportSpec(kind=ExportKind.DEFAULT, name="foo"))
	ranked = rank_components({"a.js": record, "missing.js": None})
	assert [(c.name, c.count) for c in ranked] == [("foo", 2)]


def test_two_node_cycle_gives_one_flow():
	graph = _graph({"a.js": ["b.js"], "b.js": ["a.js"]})
	flows = find_dependency_flows(graph)
	assert len(flows) == 1
	assert flows[0].nodes == ["a.js", "b.js"]
	assert len(flows[0]) == 2


def test_fully_cyclic_graph_terminates():
	imports = {f"n{i}": [f"n{j}" for j in range(6) if j != i] for i in range(6)}
	graph = _graph(imports)
	flows = find_dependency_flows(graph)
	assert len(flows) == 1
	assert len(flows[0].nodes) == 6
	assert len(set(flows[0].nodes)) == 6


def test_self_loop_is_a_dead_end():
	graph = _graph({"a": ["a"]})
	assert longest_chain(graph, "a") == ["a"]
	assert find_dependency_flows(graph) == []


def test_longest_chain_ties_follow_edge_order():
	graph = _graph({"a": ["b", "c"], "b": [], "c": []})
	assert longest_chain(graph, "a") == ["a", "b"]

	graph = _graph({"a": ["b", "c"], "b": [], "c": ["d"]})
	assert longest_chain(graph, "a") == ["a", "c", "d"]


def test_long_chains_do_not_exhaust_the_stack():
	names = [f"m{i}" for i in range(1500)]
	imports = {src: [dst] for src, dst in zip(names, names[1:])}
	imports[names[-1]] = []
	graph = _graph(imports)

	flows = find_dependency_flows(graph)
	assert [len(f) for f in flows] == [1500]
	assert flows[0].nodes == names

	# closing the ring must still stop at the start node
	imports[names[-1]] = [names[0]]
	graph = _graph(imports)
	chain = longest_chain(graph, "m750")
	assert chain == names[750:] + names[:750]


def test_claimed_nodes_are_not_roots_again():
	graph = _graph({"a": ["b"], "b": ["c"], "c": []})
	flows = find_dependency_flows(graph)
	assert [f.nodes for f in flows] == [["a", "b", "c"]]

	# b is claimed by x's flow, yet a still walks through it
	graph = _graph({"x": ["b"], "a": ["b"], "b": ["c"], "c": []})
	flows = find_dependency_flows(graph)
	assert [f.nodes for f in flows] == [["x", "b", "c"], ["a", "b", "c"]]


def test_flow_limit_keeps_longest_in_discovery_order():
	imports = {}
	lengths = [2, 5, 3, 2, 4, 6, 2]
	for i, length in enumerate(lengths):
		chain = [f"c{i}_{k}" for k in range(length)]
		for src, dst in zip(chain, chain[1:]):
			imports[src] = [dst]
	graph = _graph(imports)

	flows = find_dependency_flows(graph)
	assert [len(f) for f in flows] == [2, 5, 3, 4, 6]
	assert flows[0].nodes[0] == "c0_0"
	assert len(find_dependency_flows(graph, limit=None)) == 7


def test_flow_labels_use_base_names():
	graph = _graph({"/repo/src/a.js": ["/repo/src/b.js"]})
	(flow,) = find_dependency_flows(graph)
	assert flow.labels() == ["a.js", "b.js"]


def test_key_dependencies_ranked_by_inbound_count():
	graph = _graph(
		{
			"a.js": ["react", "b.js"],
			"b.js": ["react", "lodash"],
			"c.js": ["react", "b.js"],
		}
	)
	ranked = rank_key_dependencies(graph)
	assert [(k.node_id, k.count) for k in ranked] == [
		("react", 3),
		("b.js", 2),
		("lodash", 1),
	]
	assert len(rank_key_dependencies(graph, limit=1)) == 1


def test_analytics_do_not_mutate_graph():
	graph = _graph({"a": ["b", "ext"], "b": ["a"]})
	before = graph.to_dict()
	find_dependency_flows(graph)
	rank_key_dependencies(graph)
	assert graph.to_dict() == before
