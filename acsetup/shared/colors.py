"""
Terminal colour codes used for user-facing output.
"""

COLOR_BOLD = "\033[1m"
COLOR_RESET = "\033[0m"
COLOR_ERROR = "\033[1m\033[31m"
COLOR_WARNING = "\033[33m"
COLOR_INFO = "\033[36m"
COLOR_PROMPT = "\033[1m"
COLOR_SELECTION = "\033[1m\033[34m"


def bold(text: str) -> str:
    return f"{COLOR_BOLD}{text}{COLOR_RESET}"
