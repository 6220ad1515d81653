"""Terminal Output Formatting Package"""

import sys
import os

from commitsplit.tree.mark import Mark


class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    CYAN = '\033[36m'
    MAGENTA = '\033[35m'


def _supports_color() -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    if not hasattr(sys.stdout, 'isatty') or not sys.stdout.isatty():
        return False
    if sys.platform == 'win32':
        try:
            import ctypes
            kernel32 = ctypes.windll.kernel32
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)
            return True
        except Exception:
            return False
    return True


def _supports_unicode() -> bool:
    try:
        '☑☐⚀✓'.encode(sys.stdout.encoding or 'utf-8')
        return True
    except (UnicodeEncodeError, LookupError):
        return False


COLORS_ENABLED = _supports_color()
UNICODE_ENABLED = _supports_unicode()

CHECK = '✓' if UNICODE_ENABLED else '[OK]'
CROSS = '✗' if UNICODE_ENABLED else '[X]'
ARROW = '→' if UNICODE_ENABLED else '->'

MARK_GLYPHS_UNICODE = {
    Mark.SELECTED: '☑',
    Mark.UNSELECTED: '☐',
    Mark.PARTIALLY_SELECTED: '⚀',
}

MARK_GLYPHS_ASCII = {
    Mark.SELECTED: '[x]',
    Mark.UNSELECTED: '[ ]',
    Mark.PARTIALLY_SELECTED: '[~]',
}


def _colorize(text: str, *codes: str) -> str:
    if not COLORS_ENABLED:
        return text
    return f"{''.join(codes)}{text}{Colors.RESET}"


def success(text: str) -> str:
    return _colorize(text, Colors.GREEN)


def error(text: str) -> str:
    return _colorize(text, Colors.RED)


def warning(text: str) -> str:
    return _colorize(text, Colors.YELLOW)


def info(text: str) -> str:
    return _colorize(text, Colors.CYAN)


def dim(text: str) -> str:
    return _colorize(text, Colors.DIM)


def bold(text: str) -> str:
    return _colorize(text, Colors.BOLD)


def mark_glyph(mark: Mark, ascii_only: bool = False) -> str:
    """Checkbox for a selection mark, coloured by state."""
    glyphs = MARK_GLYPHS_ASCII if ascii_only or not UNICODE_ENABLED else MARK_GLYPHS_UNICODE
    glyph = glyphs[mark]
    if mark is Mark.SELECTED:
        return success(glyph)
    if mark is Mark.PARTIALLY_SELECTED:
        return warning(glyph)
    return dim(glyph)


def selection_count(selected: int, total: int) -> str:
    """Selected-file counter, green once every file is picked."""
    text = f"{selected} of {total} files selected"
    if total and selected == total:
        return success(text)
    return info(text) if selected else dim(text)


def print_success(message: str) -> None:
    print(f"{success(CHECK)} {message}")


def print_error(message: str) -> None:
    print(f"{error(CROSS)} {error(message)}", file=sys.stderr)


__all__ = [
    "Colors", "COLORS_ENABLED", "UNICODE_ENABLED",
    "CHECK", "CROSS", "ARROW",
    "MARK_GLYPHS_UNICODE", "MARK_GLYPHS_ASCII",
    "success", "error", "warning", "info", "dim", "bold",
    "mark_glyph", "selection_count", "print_success", "print_error",
]
