"""ETL utilities package: logging and run cancellation."""

from src.etl.utils.logger import setup_logger
from src.etl.utils.run_guard import RunGuard

__all__ = ["RunGuard", "setup_logger"]
