"""
Progress reporting utilities for depvalidator.

Provides consistent progress reporting that respects piping and redirection.
Progress goes to stderr so stdout stays clean for validation records.
"""

import sys
import os
import time
from contextlib import contextmanager
from typing import Optional
from enum import Enum


class LogLevel(Enum):
    """Log levels for progress messages."""
    INFO = 1
    WARNING = 2
    ERROR = 3
    SUCCESS = 4


class ProgressReporter:
    """Handles progress reporting to stderr while keeping stdout clean for data."""

    def __init__(self, enabled: Optional[bool] = None, use_colors: Optional[bool] = None):
        """
        Initialize progress reporter.

        Args:
            enabled: Explicitly enable/disable progress. None = auto-detect
            use_colors: Use ANSI colors in output
        """
        if enabled is None:
            # Auto-detect: show progress if stderr is a terminal
            self.enabled = sys.stderr.isatty()
        else:
            self.enabled = enabled

        if use_colors is None:
            self.use_colors = sys.stderr.isatty() and os.environ.get('NO_COLOR') is None
        else:
            self.use_colors = use_colors

        self.colors = {
            'reset': '\033[0m',
            'red': '\033[31m',
            'green': '\033[32m',
            'yellow': '\033[33m',
        }

    def _colorize(self, text: str, color: str) -> str:
        """Add color to text if colors are enabled."""
        if self.use_colors and color in self.colors:
            return f"{self.colors[color]}{text}{self.colors['reset']}"
        return text

    def __call__(self, message: str, force: bool = False, level: LogLevel = LogLevel.INFO):
        """
        Output progress message to stderr if enabled.

        Args:
            message: Progress message to display
            force: Force output even if disabled
            level: Log level for the message
        """
        if not (force or self.enabled):
            return

        if level == LogLevel.ERROR:
            message = self._colorize(f"✗ {message}", 'red')
        elif level == LogLevel.WARNING:
            message = self._colorize(f"⚠ {message}", 'yellow')
        elif level == LogLevel.SUCCESS:
            message = self._colorize(f"✓ {message}", 'green')

        print(message, file=sys.stderr, flush=True)

    def error(self, message: str):
        """Always output errors to stderr."""
        self(message, force=True, level=LogLevel.ERROR)

    def warning(self, message: str):
        """Output warnings to stderr if enabled."""
        self(message, level=LogLevel.WARNING)

    def success(self, message: str):
        """Output success message if enabled."""
        self(message, level=LogLevel.SUCCESS)

    @contextmanager
    def task(self, description: str, total: Optional[int] = None):
        """
        Context manager for tracking a task with optional item count.

        Example:
            with progress.task("Validating repositories", total=3) as update:
                for i, repo in enumerate(repos, 1):
                    update(i, repo)
        """
        start_time = time.time()

        if total:
            self(f"{description} ({total} items)...")
        else:
            self(f"{description}...")

        def update(current: int, item: str = ""):
            """Report the item being processed."""
            if total:
                self(f"  [{current}/{total}] {item}".rstrip())
            else:
                self(f"  {item}")

        try:
            yield update
        finally:
            self(f"Completed in {time.time() - start_time:.1f}s")


def get_progress(enabled: Optional[bool] = None) -> ProgressReporter:
    """
    Create a progress reporter.

    DEPVALIDATOR_PROGRESS=0/1 overrides auto-detection when enabled is None.
    """
    if enabled is None:
        env = os.environ.get('DEPVALIDATOR_PROGRESS')
        if env == '0':
            enabled = False
        elif env == '1':
            enabled = True
    return ProgressReporter(enabled)
