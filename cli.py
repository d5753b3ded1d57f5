from __future__ import annotations

import argparse

import uvicorn

from codemap.config import get_settings
from codemap.logger_config import setup_logging
from codemap.pipeline import analyze_files


def cmd_analyze(args: argparse.Namespace) -> None:
	result = analyze_files(args.paths)
	print(result.model_dump_json(indent=args.indent))


def cmd_serve(args: argparse.Namespace) -> None:
	uvicorn.run("api:app", host=args.host, port=args.port, reload=args.reload)


def build_parser() -> argparse.ArgumentParser:
	settings = get_settings()
	parser = argparse.ArgumentParser(prog="codemap")
	sub = parser.add_subparsers(dest="cmd", required=True)

	pa = sub.add_parser("analyze", help="Analyze source files and print the code map JSON")
	pa.add_argument("paths", nargs="+", help="Source files to analyze")
	pa.add_argument("--indent", type=int, default=2)
	pa.set_defaults(func=cmd_analyze)

	ps = sub.add_parser("serve", help="Run FastAPI server")
	ps.add_argument("--host", default=settings.API_HOST)
	ps.add_argument("--port", type=int, default=settings.API_PORT)
	ps.add_argument("--reload", action="store_true")
	ps.set_defaults(func=cmd_serve)
	return parser


def main(argv=None) -> None:
	args = build_parser().parse_args(argv)
	setup_logging()
	args.func(args)


if __name__ == "__main__":
	main()
