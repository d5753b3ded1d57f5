from __future__ import annotations

import os
from typing import Dict

from .model import SourceLanguage


EXTENSION_LANGUAGE: Dict[str, SourceLanguage] = {
	".js": SourceLanguage.JAVASCRIPT,
	".jsx": SourceLanguage.JAVASCRIPT,
	".mjs": SourceLanguage.JAVASCRIPT,
	".cjs": SourceLanguage.JAVASCRIPT,
	".ts": SourceLanguage.TYPESCRIPT,
	".mts": SourceLanguage.TYPESCRIPT,
	".cts": SourceLanguage.TYPESCRIPT,
	".tsx": SourceLanguage.TSX,
}


def file_extension(path: str) -> str:
	_, ext = os.path.splitext(path)
	return ext[1:].lower()


def detect_language(path: str) -> SourceLanguage:
	_, ext = os.path.splitext(path)
	return EXTENSION_LANGUAGE.get(ext.lower(), SourceLanguage.GENERIC)


def read_source(path: str) -> str:
	# Undecodable bytes are replaced so a readable file always yields text.
	with open(path, "r", encoding="utf-8", errors="replace", newline="") as fh:
		return fh.read()
