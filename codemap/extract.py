"""Symbol extraction for JavaScript and TypeScript sources.

Each file is parsed once with tree-sitter and its top-level statements are
walked in source order. A file that does not parse cleanly yields an empty
record; a single construct that cannot be read is skipped on its own and the
rest of the file is still extracted.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Callable, Dict, Iterator, List, Optional

import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser

from .languages import detect_language, file_extension
from .model import (
	ClassInfo,
	ExportKind,
	ExportSpec,
	FunctionInfo,
	ImportSpec,
	InterfaceInfo,
	MethodInfo,
	PropertyInfo,
	SourceLanguage,
	SymbolRecord,
	TypeAliasInfo,
	TypeConstructs,
)

logger = logging.getLogger(__name__)

UNNAMED_PARAM = "unnamed"
UNKNOWN_MEMBER = "unknown"
ANY_TYPE = "any"
DEFAULT_EXPORT_NAME = "default"

_FUNCTION_TYPES = ("function_declaration", "generator_function_declaration")
_FUNCTION_EXPRESSION_TYPES = ("function_expression", "function", "generator_function")
_CLASS_TYPES = ("class_declaration", "abstract_class_declaration")
_VARIABLE_TYPES = ("lexical_declaration", "variable_declaration")
_METHOD_NAME_TYPES = ("property_identifier", "identifier")


class ParseError(Exception):
	"""The file does not parse cleanly as its declared language."""


class ConstructError(ValueError):
	"""A single construct has a shape the extractor cannot read."""


@lru_cache(maxsize=None)
def _language(language: SourceLanguage) -> Language:
	if language is SourceLanguage.JAVASCRIPT:
		return Language(tsjs.language())
	if language is SourceLanguage.TSX:
		return Language(tsts.language_tsx())
	return Language(tsts.language_typescript())


def _parse(text: str, language: SourceLanguage) -> Node:
	# Parser instances are not shared between threads.
	parser = Parser(_language(language))
	tree = parser.parse(text.encode("utf-8", errors="surrogatepass"))
	root = tree.root_node
	if root.has_error:
		raise ParseError(f"syntax error in {language.value} source")
	return root


def _text(node: Optional[Node]) -> str:
	if node is None or node.text is None:
		raise ConstructError("missing node")
	return node.text.decode("utf-8", errors="replace")


def _field(node: Node, name: str) -> Node:
	child = node.child_by_field_name(name)
	if child is None:
		raise ConstructError(f"{node.type} has no {name}")
	return child


def _has_token(node: Node, *tokens: str) -> bool:
	return any(child.type in tokens for child in node.children)


def _string_value(node: Node) -> str:
	raw = _text(node)
	if len(raw) < 2 or raw[0] not in "'\"`":
		raise ConstructError(f"not a string literal: {raw!r}")
	return raw[1:-1]


def _byte_size(text: str) -> int:
	return len(text.encode("utf-8", errors="surrogatepass"))


def _unwrap_ambient(node: Node) -> Node:
	# `declare const x` and friends wrap the real declaration
	if node.type == "ambient_declaration" and node.named_children:
		return node.named_children[0]
	return node


# -----------------------------
# Imports and exports
# -----------------------------

def _clause_bindings(clause: Node) -> Iterator[str]:
	for child in clause.named_children:
		if child.type == "identifier":
			yield _text(child)
		elif child.type == "namespace_import":
			for ident in child.named_children:
				if ident.type == "identifier":
					yield _text(ident)
		elif child.type == "named_imports":
			for spec in child.named_children:
				if spec.type != "import_specifier":
					continue
				local = spec.child_by_field_name("alias")
				if local is None:
					local = _field(spec, "name")
				yield _text(local)


def _import_spec(node: Node) -> List[ImportSpec]:
	source = node.child_by_field_name("source")
	bindings: List[str] = []
	for child in node.named_children:
		if child.type == "import_clause":
			bindings.extend(_clause_bindings(child))
		elif child.type == "import_require_clause":
			source = _field(child, "source")
			bindings.extend(_text(c) for c in child.named_children if c.type == "identifier")
	if source is None:
		raise ConstructError("import without source")
	return [ImportSpec(source=_string_value(source), bindings=bindings)]


def _default_export(node: Node) -> List[ExportSpec]:
	declaration = node.child_by_field_name("declaration")
	if declaration is not None:
		name_node = declaration.child_by_field_name("name")
	else:
		value = _field(node, "value")
		name_node = value if value.type == "identifier" else value.child_by_field_name("name")
	name = _text(name_node) if name_node is not None else DEFAULT_EXPORT_NAME
	return [ExportSpec(kind=ExportKind.DEFAULT, name=name)]


def _declarator_export(declarator: Node) -> List[ExportSpec]:
	name_node = _field(declarator, "name")
	if name_node.type != "identifier":
		raise ConstructError(f"destructured export ({name_node.type})")
	return [ExportSpec(kind=ExportKind.NAMED, name=_text(name_node))]


def _declaration_export(declaration: Node) -> List[ExportSpec]:
	return [ExportSpec(kind=ExportKind.NAMED, name=_text(_field(declaration, "name")))]


def _specifier_export(spec: Node) -> List[ExportSpec]:
	exported = spec.child_by_field_name("alias")
	if exported is None:
		exported = _field(spec, "name")
	return [ExportSpec(kind=ExportKind.NAMED, name=_text(exported))]


def _namespace_export(node: Node) -> List[ExportSpec]:
	for child in node.named_children:
		if child.type == "identifier":
			return [ExportSpec(kind=ExportKind.NAMED, name=_text(child))]
		if child.type == "string":
			return [ExportSpec(kind=ExportKind.NAMED, name=_string_value(child))]
	raise ConstructError("namespace export without a name")


# -----------------------------
# Functions and classes
# -----------------------------

def _param_name(param: Node) -> str:
	if param.type == "identifier":
		return _text(param)
	if param.type in ("required_parameter", "optional_parameter"):
		pattern = param.child_by_field_name("pattern")
		if (
			pattern is not None
			and pattern.type == "identifier"
			and param.child_by_field_name("value") is None
		):
			return _text(pattern)
	return UNNAMED_PARAM


def _param_names(params: Optional[Node]) -> List[str]:
	if params is None:
		return []
	return [_param_name(p) for p in params.named_children if p.type != "comment"]


def _function_info(node: Node) -> List[FunctionInfo]:
	return [
		FunctionInfo(
			name=_text(_field(node, "name")),
			params=_param_names(node.child_by_field_name("parameters")),
			is_async=_has_token(node, "async"),
			is_generator=node.type == "generator_function_declaration" or _has_token(node, "*"),
		)
	]


def _method_info(node: Node) -> Optional[MethodInfo]:
	name_node = _field(node, "name")
	if name_node.type not in _METHOD_NAME_TYPES:
		# private and computed names
		return None
	name = _text(name_node)
	if name == "constructor":
		kind = "constructor"
	elif _has_token(node, "get", "static get"):
		kind = "get"
	elif _has_token(node, "set"):
		kind = "set"
	else:
		kind = "method"
	return MethodInfo(
		name=name,
		kind=kind,
		is_static=_has_token(node, "static", "static get"),
		is_async=_has_token(node, "async"),
		params=_param_names(node.child_by_field_name("parameters")),
	)


def _super_class_name(node: Node) -> Optional[str]:
	for child in node.children:
		if child.type != "class_heritage":
			continue
		expr: Optional[Node] = None
		for part in child.named_children:
			if part.type == "extends_clause":
				expr = part.child_by_field_name("value")
				break
			if part.type != "implements_clause":
				expr = part
				break
		if expr is not None and expr.type == "identifier":
			return _text(expr)
	return None


def _class_info(node: Node) -> List[ClassInfo]:
	methods: List[MethodInfo] = []
	for member in _field(node, "body").named_children:
		if member.type == "method_definition":
			method = _method_info(member)
			if method is not None:
				methods.append(method)
	return [
		ClassInfo(
			name=_text(_field(node, "name")),
			super_class_name=_super_class_name(node),
			methods=methods,
		)
	]


# -----------------------------
# Type constructs
# -----------------------------

def describe_type(node: Optional[Node]) -> str:
	"""Summarize a type annotation syntactically.

	Keyword types keep their keyword, ``T[]`` recurses on ``T``, named
	references keep their name and everything else becomes ``any``.
	"""
	if node is None:
		return ANY_TYPE
	if node.type == "type_annotation":
		inner = node.named_children
		return describe_type(inner[0] if inner else None)
	if node.type == "predefined_type":
		return _text(node)
	if node.type == "array_type":
		inner = node.named_children
		return f"{describe_type(inner[0] if inner else None)}[]"
	if node.type == "type_identifier":
		return _text(node)
	if node.type == "generic_type":
		name = node.child_by_field_name("name")
		if name is not None and name.type == "type_identifier":
			return _text(name)
	return ANY_TYPE


def _member_name(member: Node) -> str:
	name = member.child_by_field_name("name")
	if name is not None and name.type == "property_identifier":
		return _text(name)
	return UNKNOWN_MEMBER


def _member_type(member: Node) -> str:
	annotation = member.child_by_field_name("type")
	if annotation is None:
		annotation = member.child_by_field_name("return_type")
	return describe_type(annotation)


def _interface_info(node: Node) -> List[InterfaceInfo]:
	properties = [
		PropertyInfo(name=_member_name(m), type=_member_type(m))
		for m in _field(node, "body").named_children
		if m.type != "comment"
	]
	return [InterfaceInfo(name=_text(_field(node, "name")), properties=properties)]


def _type_alias_info(node: Node) -> List[TypeAliasInfo]:
	return [
		TypeAliasInfo(
			name=_text(_field(node, "name")),
			type=describe_type(node.child_by_field_name("value")),
		)
	]


# -----------------------------
# Single-pass walk
# -----------------------------

class _Extraction:
	def __init__(self, path: str, typed: bool):
		self.path = path
		self.typed = typed
		self.import_specs: List[ImportSpec] = []
		self.export_specs: List[ExportSpec] = []
		self.functions: List[FunctionInfo] = []
		self.classes: List[ClassInfo] = []
		self.interfaces: List[InterfaceInfo] = []
		self.type_aliases: List[TypeAliasInfo] = []
		self.skipped = 0

	def attempt(self, build: Callable[[Node], list], node: Node) -> list:
		try:
			return build(node)
		except Exception as exc:
			self.skipped += 1
			logger.debug("Skipping %s in %s: %s", node.type, self.path, exc)
			return []

	def visit(self, root: Node) -> None:
		for statement in root.named_children:
			if statement.type == "import_statement":
				self.import_specs.extend(self.attempt(_import_spec, statement))
			elif statement.type == "export_statement":
				self.visit_export(statement)
			else:
				self.visit_declaration(statement)

	def visit_export(self, node: Node) -> None:
		declaration = node.child_by_field_name("declaration")
		if _has_token(node, "default"):
			self.export_specs.extend(self.attempt(_default_export, node))
		elif declaration is not None:
			declaration = _unwrap_ambient(declaration)
			if declaration.type in _VARIABLE_TYPES:
				for declarator in declaration.named_children:
					if declarator.type == "variable_declarator":
						self.export_specs.extend(self.attempt(_declarator_export, declarator))
			else:
				self.export_specs.extend(self.attempt(_declaration_export, declaration))
		else:
			for clause in node.named_children:
				if clause.type == "namespace_export":
					self.export_specs.extend(self.attempt(_namespace_export, clause))
				if clause.type != "export_clause":
					continue
				for spec in clause.named_children:
					if spec.type == "export_specifier":
						self.export_specs.extend(self.attempt(_specifier_export, spec))
		if declaration is not None:
			self.visit_declaration(declaration)
		else:
			# export default class Foo {} / function foo() {} as named expressions
			value = node.child_by_field_name("value")
			if value is not None and value.child_by_field_name("name") is not None:
				self.visit_declaration(value)

	def visit_declaration(self, node: Node) -> None:
		node = _unwrap_ambient(node)
		if node.type in _FUNCTION_TYPES or node.type in _FUNCTION_EXPRESSION_TYPES:
			self.functions.extend(self.attempt(_function_info, node))
		elif node.type in _CLASS_TYPES or node.type == "class":
			self.classes.extend(self.attempt(_class_info, node))
		elif self.typed and node.type == "interface_declaration":
			self.interfaces.extend(self.attempt(_interface_info, node))
		elif self.typed and node.type == "type_alias_declaration":
			self.type_aliases.extend(self.attempt(_type_alias_info, node))

	def record(self, language: SourceLanguage, text: str) -> SymbolRecord:
		type_constructs = None
		if self.typed:
			type_constructs = TypeConstructs(interfaces=self.interfaces, type_aliases=self.type_aliases)
		return SymbolRecord(
			path=self.path,
			language=language,
			extension=file_extension(self.path),
			byte_size=_byte_size(text),
			import_specs=self.import_specs,
			export_specs=self.export_specs,
			functions=self.functions,
			classes=self.classes,
			type_constructs=type_constructs,
			raw_text=text,
			skipped_constructs=self.skipped,
		)


def _extract_structured(path: str, text: str, language: SourceLanguage) -> SymbolRecord:
	root = _parse(text, language)
	extraction = _Extraction(path, typed=language.is_typed)
	extraction.visit(root)
	return extraction.record(language, text)


def _extract_generic(path: str, text: str, language: SourceLanguage) -> SymbolRecord:
	return SymbolRecord(
		path=path,
		language=language,
		extension=file_extension(path),
		byte_size=_byte_size(text),
		raw_text=text,
	)


_EXTRACTORS: Dict[SourceLanguage, Callable[[str, str, SourceLanguage], SymbolRecord]] = {
	SourceLanguage.JAVASCRIPT: _extract_structured,
	SourceLanguage.TYPESCRIPT: _extract_structured,
	SourceLanguage.TSX: _extract_structured,
	SourceLanguage.GENERIC: _extract_generic,
}


def failed_record(path: str, language: SourceLanguage, raw_text: str = "") -> SymbolRecord:
	"""Empty-but-valid record for a file that could not be read or parsed."""
	structured = language is not SourceLanguage.GENERIC
	return SymbolRecord(
		path=path,
		language=language,
		extension=file_extension(path),
		byte_size=_byte_size(raw_text),
		functions=[] if structured else None,
		classes=[] if structured else None,
		type_constructs=TypeConstructs() if language.is_typed else None,
		raw_text=raw_text,
		parse_succeeded=False,
	)


def extract(
	file_path: str,
	text: str,
	language_hint: Optional[SourceLanguage] = None,
) -> SymbolRecord:
	"""Extract the symbol record of one file. Never raises."""
	try:
		language = SourceLanguage(language_hint) if language_hint is not None else detect_language(file_path)
	except ValueError:
		logger.warning("Unknown language hint %r for %s, treating as generic", language_hint, file_path)
		language = SourceLanguage.GENERIC
	raw_text = text if isinstance(text, str) else ""
	try:
		return _EXTRACTORS[language](file_path, raw_text, language)
	except Exception as exc:
		logger.warning("Could not analyze %s: %s", file_path, exc)
		return failed_record(file_path, language, raw_text=raw_text)
