import logging
import sys

from .config import get_settings

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(stream=None, level=None):
	"""
	Configures the root logger with a single console handler.
	The level comes from ``level`` or the LOG_LEVEL setting; unknown names fall back to INFO.
	Calling it again replaces the previous handler.
	"""
	level_name = (level or get_settings().LOG_LEVEL).upper()
	numeric_level = logging.getLevelName(level_name)
	if not isinstance(numeric_level, int):
		numeric_level = logging.INFO

	root_logger = logging.getLogger()
	root_logger.setLevel(numeric_level)

	for handler in root_logger.handlers[:]:
		root_logger.removeHandler(handler)
		handler.close()

	console_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
	console_handler.setLevel(numeric_level)
	console_handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
	root_logger.addHandler(console_handler)
