"""Structural code map for documentation generation.

Modules:
- languages.py: Language detection by extension and source reading.
- extract.py: tree-sitter symbol extraction for JavaScript and TypeScript.
- resolve.py: Import specifier to graph node resolution.
- graph.py: Dependency graph construction.
- analytics.py: Component, flow and key dependency summaries.
- pipeline.py: End-to-end analysis of a file list.
- model.py: Data structures for records, graph nodes and results.
"""

__all__ = [
	"languages",
	"extract",
	"resolve",
	"graph",
	"analytics",
	"pipeline",
	"model",
]
