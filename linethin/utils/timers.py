# linethin/utils/timers.py
import time
from contextlib import contextmanager
from loguru import logger

@contextmanager
def timer(name: str):
    t0 = time.perf_counter()
    yield
    dt = time.perf_counter() - t0
    logger.debug(f"[timer] {name}: {dt:.3f}s")
