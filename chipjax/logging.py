"""Console logging utilities for the CHIP-8 emulator.

Provides a small leveled console logger with colours and timestamps, an
emulator-specific logger with helpers for the events the execution engine
reports (unknown opcodes, faults, instruction traces), and tqdm progress bars
for long headless runs.
"""

import time
import sys
from typing import Optional

from tqdm import tqdm

from chipjax.decode import disassemble
from chipjax.errors import Chip8Error, DecodeError


class ConsoleLogger:
    """Flexible console logger with levels, colours and timestamps."""

    def __init__(
        self,
        name: str = "chipjax",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.use_colors = (
            use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }

    def set_level(self, log_level: str):
        """Change the minimum level that gets printed."""
        level = log_level.upper()
        if level not in self.level_order:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(self.level_order)}"
            )
        self.log_level = level

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, flush=True)

    def debug(self, message: str):
        """Log debug message."""
        self.log("DEBUG", message)

    def info(self, message: str):
        """Log info message."""
        self.log("INFO", message)

    def warning(self, message: str):
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str):
        """Log error message."""
        self.log("ERROR", message)

    def critical(self, message: str):
        """Log critical message."""
        self.log("CRITICAL", message)


class EmulatorLogger(ConsoleLogger):
    """Logger for execution engine events."""

    def __init__(self, name: str = "chipjax", **kwargs):
        super().__init__(name, **kwargs)
        self.decode_errors = 0

    def log_rom_loaded(self, size: int, source: Optional[str] = None):
        origin = f" from {source}" if source else ""
        self.info(f"Loaded {size} byte program{origin} at 0x200")

    def log_trace(self, pc: int, instruction: int):
        """Per-instruction disassembly, only built when DEBUG is enabled."""
        if self._should_log("DEBUG"):
            self.debug(f"0x{pc:03X}: {instruction:04X}  {disassemble(instruction)}")

    def log_decode_error(self, error: DecodeError):
        self.decode_errors += 1
        self.warning(f"{error}; skipping")

    def log_fault(self, error: Chip8Error):
        self.error(f"Execution halted: {error}")

    def log_run_summary(self, cycles: int, elapsed: float, waiting: bool = False):
        rate = cycles / elapsed if elapsed > 0 else 0.0
        status = "waiting for key" if waiting else "done"
        self.info(f"Ran {cycles:,} cycles in {elapsed:.2f}s ({rate:,.0f} Hz), {status}")


_default_logger: Optional[EmulatorLogger] = None


def get_logger() -> EmulatorLogger:
    """Return the shared emulator logger, creating it on first use."""
    global _default_logger
    if _default_logger is None:
        _default_logger = EmulatorLogger()
    return _default_logger


def set_log_level(log_level: str):
    get_logger().set_level(log_level)


def build_progress_bar(total: int, desc: Optional[str] = None, **kwargs) -> tqdm:
    """Build a tqdm progress bar counting executed cycles."""
    if desc is None:
        desc = f"Running ({total:,} cycles)"

    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)

    return tqdm(total=total, desc=desc, unit="cycle", **kwargs)
