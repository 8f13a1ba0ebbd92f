# student_records/core/logging.py
import functools
import logging
import sys
import time

from student_records.core.config import settings


# Configure standard Python logging
def setup_logging():
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)  # Print logs to console
        ]
    )
    return logging.getLogger("student_records")


def log_execution_time(func):
    """Log how long a service operation took, in milliseconds."""
    op_logger = logging.getLogger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            op_logger.info("Execution time for %s: %.1f ms", func.__name__, elapsed_ms)

    return wrapper


logger = setup_logging()
