from __future__ import annotations

from typing import List

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from codemap.model import AnalyzeResult
from codemap.pipeline import analyze_files


app = FastAPI(title="Codemap Analyzer")


class AnalyzeRequest(BaseModel):
	paths: List[str]


@app.post("/analyze", response_model=AnalyzeResult)
def analyze(req: AnalyzeRequest) -> AnalyzeResult:
	if not req.paths:
		raise HTTPException(status_code=400, detail="paths must not be empty")
	return analyze_files(req.paths)


def create_app() -> FastAPI:
	return app
