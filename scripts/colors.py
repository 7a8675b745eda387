"""Terminal color utilities for script output."""

import os
import sys


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"

    BRIGHT_BLACK = "\033[90m"
    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_CYAN = "\033[96m"

    BOLD = "\033[1m"


def supports_color() -> bool:
    """Check if the terminal supports color output."""
    # Check for explicit no-color environment variables
    if os.environ.get("NO_COLOR") or os.environ.get("ANSI_COLORS_DISABLED"):
        return False

    if os.environ.get("FORCE_COLOR"):
        return True

    if not hasattr(sys.stdout, "isatty") or not sys.stdout.isatty():
        return False

    term = os.environ.get("TERM", "")
    if term in ("dumb", "unknown"):
        return False

    return True


def colorize(text: str, color: str, style: str | None = None) -> str:
    """Apply color and optional style to text if color is supported."""
    if not supports_color():
        return text

    result = color + text + Colors.RESET
    if style:
        result = style + result

    return result


def success(text: str) -> str:
    return colorize(text, Colors.BRIGHT_GREEN, Colors.BOLD)


def error(text: str) -> str:
    return colorize(text, Colors.BRIGHT_RED, Colors.BOLD)


def warning(text: str) -> str:
    return colorize(text, Colors.BRIGHT_YELLOW, Colors.BOLD)


def info(text: str) -> str:
    return colorize(text, Colors.BRIGHT_CYAN)


def dim(text: str) -> str:
    return colorize(text, Colors.BRIGHT_BLACK)


def section_header(text: str) -> str:
    """Format text as a section header."""
    separator = "-" * len(text)
    if supports_color():
        return (
            f"\n{Colors.BOLD}{Colors.BRIGHT_CYAN}{separator}{Colors.RESET}\n"
            f"{Colors.BOLD}{Colors.BRIGHT_CYAN}{text}{Colors.RESET}\n"
            f"{Colors.BOLD}{Colors.BRIGHT_CYAN}{separator}{Colors.RESET}\n"
        )
    return f"\n{separator}\n{text}\n{separator}\n"


def print_success(message: str) -> None:
    print(success(f"✓ {message}"))


def print_error(message: str) -> None:
    print(error(f"✗ {message}"), file=sys.stderr)


def print_warning(message: str) -> None:
    print(warning(f"! {message}"))


def print_info(message: str) -> None:
    print(info(message))


def print_step(step: int, total: int, message: str) -> None:
    """Print a step in a multi-step process."""
    step_info = dim(f"[{step}/{total}]")
    print(f"{step_info} {info(message)}")


def print_section(title: str) -> None:
    print(section_header(title))
