"""Colored character diffs for the log."""

from difflib import SequenceMatcher


class ANSIColors:
    """ANSI color codes for terminal output."""
    RED = "31"
    GREEN = "32"
    RESET = "0"

    @staticmethod
    def colorize(text: str, color_code: str) -> str:
        """Applies ANSI color codes to text."""
        return f"\033[{color_code}m{text}\033[{ANSIColors.RESET}m"


def highlight_diff(original: str, formatted: str) -> str:
    """Render formatted against original, removals in red and additions in green."""
    matcher = SequenceMatcher(None, original, formatted, autojunk=False)
    parts = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            parts.append(original[i1:i2])
            continue
        if tag in ("delete", "replace"):
            parts.append(ANSIColors.colorize(original[i1:i2], ANSIColors.RED))
        if tag in ("insert", "replace"):
            parts.append(ANSIColors.colorize(formatted[j1:j2], ANSIColors.GREEN))
    return "".join(parts)
