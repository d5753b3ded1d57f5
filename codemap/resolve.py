from __future__ import annotations

import os
from typing import Callable, Sequence, Tuple

DEFAULT_EXTENSIONS: Tuple[str, ...] = (".js", ".jsx", ".ts", ".tsx")

Resolver = Callable[[str, str], str]


def is_relative(specifier: str) -> bool:
	return specifier.startswith(".")


def resolve_import(
	from_path: str,
	specifier: str,
	extensions: Sequence[str] = DEFAULT_EXTENSIONS,
) -> str:
	"""Map an import specifier to a dependency graph node id.

	Package specifiers pass through unchanged. Relative specifiers are joined
	to the importing file's directory and tried as written, then with each
	extension in order. When nothing exists the joined path is returned anyway.
	"""
	if not is_relative(specifier):
		return specifier
	base = os.path.abspath(os.path.join(os.path.dirname(from_path), specifier))
	if os.path.exists(base):
		return base
	for ext in extensions:
		candidate = base + ext
		if os.path.exists(candidate):
			return candidate
	return base


def make_resolver(extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> Resolver:
	exts = tuple(extensions)

	def resolver(from_path: str, specifier: str) -> str:
		return resolve_import(from_path, specifier, exts)

	return resolver
