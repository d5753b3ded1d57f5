import functools
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .analytics import DEFAULT_COMPONENT_LIMIT, DEFAULT_FLOW_LIMIT, DEFAULT_KEY_DEPENDENCY_LIMIT
from .resolve import DEFAULT_EXTENSIONS


class AnalyzerSettings(BaseSettings):
	LOG_LEVEL: str = "INFO"

	# Worker threads for per-file extraction and import resolution
	MAX_WORKERS: int = Field(default=8, ge=1)

	# Probed in order when a relative import omits its extension
	RESOLVE_EXTENSIONS: List[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))

	COMPONENT_LIMIT: int = Field(default=DEFAULT_COMPONENT_LIMIT, ge=0)
	FLOW_LIMIT: int = Field(default=DEFAULT_FLOW_LIMIT, ge=0)
	KEY_DEPENDENCY_LIMIT: int = Field(default=DEFAULT_KEY_DEPENDENCY_LIMIT, ge=0)

	API_HOST: str = "127.0.0.1"
	API_PORT: int = 8000

	model_config = SettingsConfigDict(env_prefix="CODEMAP_", extra="ignore", case_sensitive=False)

	@field_validator("RESOLVE_EXTENSIONS")
	@classmethod
	def check_extensions(cls, v: List[str]) -> List[str]:
		for ext in v:
			if not ext.startswith("."):
				raise ValueError(f"extension must start with a dot: {ext!r}")
		return v


@functools.lru_cache(maxsize=1)
def get_settings() -> AnalyzerSettings:
	return AnalyzerSettings()
