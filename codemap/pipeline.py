from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional

from .analytics import find_dependency_flows, rank_components, rank_key_dependencies
from .config import AnalyzerSettings, get_settings
from .extract import extract, failed_record
from .graph import build_dependency_graph
from .languages import detect_language, read_source
from .model import AnalyzeResult, SymbolRecord
from .resolve import make_resolver

logger = logging.getLogger(__name__)


def analyze_file(path: str) -> SymbolRecord:
	"""Read and extract one file; unreadable files give an empty failed record."""
	language = detect_language(path)
	try:
		text = read_source(path)
	except OSError as exc:
		logger.warning("Could not read %s: %s", path, exc)
		return failed_record(path, language)
	return extract(path, text, language)


def analyze_files(paths: Iterable[str], settings: Optional[AnalyzerSettings] = None) -> AnalyzeResult:
	"""Run extraction, graph building and analytics over an explicit file list.

	Files are extracted concurrently; all records are collected before any
	import is resolved. One file failing never stops the others.
	"""
	settings = settings or get_settings()
	ordered: List[str] = list(dict.fromkeys(os.path.abspath(p) for p in paths))

	with ThreadPoolExecutor(max_workers=settings.MAX_WORKERS) as executor:
		records: Dict[str, SymbolRecord] = dict(zip(ordered, executor.map(analyze_file, ordered)))
		graph = build_dependency_graph(
			records,
			resolver=make_resolver(settings.RESOLVE_EXTENSIONS),
			executor=executor,
		)

	failed = [path for path, record in records.items() if not record.parse_succeeded]
	if failed:
		logger.warning("%d of %d files could not be analyzed", len(failed), len(records))
	logger.info("Analyzed %d files into %d graph nodes", len(records), len(graph))

	return AnalyzeResult(
		records=records,
		graph=graph.to_dict(),
		edges=graph.edges(),
		components=rank_components(records, settings.COMPONENT_LIMIT),
		flows=find_dependency_flows(graph, settings.FLOW_LIMIT),
		key_dependencies=rank_key_dependencies(graph, settings.KEY_DEPENDENCY_LIMIT),
		failed_files=failed,
	)
