from __future__ import annotations

import os
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class SourceLanguage(str, Enum):
	JAVASCRIPT = "javascript"
	TYPESCRIPT = "typescript"
	TSX = "tsx"
	GENERIC = "generic"

	@property
	def is_typed(self) -> bool:
		return self in (SourceLanguage.TYPESCRIPT, SourceLanguage.TSX)


class ExportKind(str, Enum):
	NAMED = "named"
	DEFAULT = "default"


class ImportSpec(BaseModel):
	source: str
	bindings: List[str] = []


class ExportSpec(BaseModel):
	kind: ExportKind
	name: str


class FunctionInfo(BaseModel):
	name: str
	params: List[str] = []
	is_async: bool = False
	is_generator: bool = False


class MethodInfo(BaseModel):
	name: str
	kind: str = "method"
	is_static: bool = False
	is_async: bool = False
	params: List[str] = []


class ClassInfo(BaseModel):
	name: str
	super_class_name: Optional[str] = None
	methods: List[MethodInfo] = []


class PropertyInfo(BaseModel):
	name: str
	type: str = "any"


class InterfaceInfo(BaseModel):
	name: str
	properties: List[PropertyInfo] = []


class TypeAliasInfo(BaseModel):
	name: str
	type: str = "any"


class TypeConstructs(BaseModel):
	interfaces: List[InterfaceInfo] = []
	type_aliases: List[TypeAliasInfo] = []


class SymbolRecord(BaseModel):
	"""Symbol summary of one source file.

	``functions``, ``classes`` and ``type_constructs`` are ``None`` when the
	language does not carry them; on a failed parse they are empty instead.
	"""

	path: str
	language: SourceLanguage = SourceLanguage.GENERIC
	extension: str = ""
	byte_size: int = 0
	import_specs: List[ImportSpec] = []
	export_specs: List[ExportSpec] = []
	functions: Optional[List[FunctionInfo]] = None
	classes: Optional[List[ClassInfo]] = None
	type_constructs: Optional[TypeConstructs] = None
	raw_text: str = ""
	parse_succeeded: bool = True
	skipped_constructs: int = 0


class DependencyNode(BaseModel):
	model_config = ConfigDict(frozen=True)

	node_id: str
	outbound: Tuple[str, ...] = ()
	inbound: Tuple[str, ...] = ()


class DependencyEdge(BaseModel):
	source: str
	target: str


class RankedComponent(BaseModel):
	name: str
	count: int


class DependencyFlow(BaseModel):
	nodes: List[str]

	def labels(self) -> List[str]:
		return [os.path.basename(n) or n for n in self.nodes]

	def __len__(self) -> int:
		return len(self.nodes)


class KeyDependency(BaseModel):
	node_id: str
	count: int


class AnalyzeResult(BaseModel):
	records: Dict[str, SymbolRecord]
	graph: Dict[str, DependencyNode]
	edges: List[DependencyEdge]
	components: List[RankedComponent]
	flows: List[DependencyFlow]
	key_dependencies: List[KeyDependency]
	failed_files: List[str] = []
