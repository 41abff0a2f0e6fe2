"""Console logging utilities for the CHIP-8 machine.

The engine reports unknown opcodes and, at DEBUG, an instruction trace
through the package ``logger``. The host uses the same logger for its
errors, plus a tqdm progress bar for long headless runs.
"""

import sys
from typing import Optional, TextIO

from tqdm import tqdm


LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ConsoleLogger:
    """Level-filtered logger writing ``[LEVEL][name] message`` lines."""

    def __init__(self, name: str = "chip8vm", log_level: str = "WARNING",
                 stream: Optional[TextIO] = None):
        self.name = name
        self.log_level = "WARNING"
        self.set_level(log_level)
        # None follows whatever sys.stdout is at write time
        self.stream = stream

    def set_level(self, log_level: str):
        if log_level.upper() not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
        self.log_level = log_level.upper()

    def is_enabled_for(self, level: str) -> bool:
        return LEVELS.index(level.upper()) >= LEVELS.index(self.log_level)

    def log(self, level: str, message: str):
        if self.is_enabled_for(level):
            stream = self.stream if self.stream is not None else sys.stdout
            print(f"[{level.upper()}][{self.name}] {message}", file=stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)


logger = ConsoleLogger("chip8vm")


def set_log_level(level: str):
    """Set the level of the package logger."""
    logger.set_level(level)


def frame_progress(n: int, desc: Optional[str] = None, enabled: bool = True, **kwargs) -> tqdm:
    """Build a tqdm progress bar counting emulated frames."""
    if desc is None:
        desc = f"Emulating ({n:,} frames)"

    for kwarg in ("total", "disable"):
        kwargs.pop(kwarg, None)

    return tqdm(total=n, desc=desc, unit="frame", disable=not enabled, **kwargs)
