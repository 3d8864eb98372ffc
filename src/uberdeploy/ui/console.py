"""Console output formatting utilities for uberdeploy."""

from __future__ import annotations

import sys
from typing import Iterable, Optional


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show debug lines and full stack traces
        """
        self.debug = debug

    def print_run_started(self, task: str, host: str, recipe: str | None) -> None:
        """Print run start information."""
        print("\nRUN STARTED")
        print(f"Task: {task}")
        print(f"Host: {host}")
        if recipe:
            print(f"Recipe: {recipe}")
        print()

    def print_task_start(self, name: str) -> None:
        print(f"  * executing `{name}'")

    def print_command(self, where: str, command: str) -> None:
        """Echo a command before it is executed ('remote', 'local', 'put', ...)."""
        print(f"    [{where}] {command}")

    def print_warning(self, message: str) -> None:
        print(f"WARNING: {message}", file=sys.stderr)

    def print_results(self, executed: Iterable[str]) -> None:
        """Print final results summary."""
        executed = list(executed)
        print("\n" + "=" * 40)
        print("RESULTS")
        print("=" * 40)
        for name in executed:
            print(f"  {name}: SUCCESS")

    def print_task_list(self, rows: Iterable[tuple[str, str | None]]) -> None:
        rows = list(rows)
        width = max((len(name) for name, _ in rows), default=0)
        for name, description in rows:
            if description:
                print(f"uberdeploy {name.ljust(width)}  # {description}")
            else:
                print(f"uberdeploy {name}")

    def print_task_tree(self, lines: Iterable[str]) -> None:
        for line in lines:
            print(line)

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: BaseException) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exception(type(exc), exc, exc.__traceback__)
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        print(message)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Global console instance (initialized by the CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
