"""Terminal output helpers."""


# ANSI color codes
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    CYAN = "\033[36m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"


def success(text: str) -> str:
    return f"{Colors.GREEN}✓ {text}{Colors.RESET}"


def failure(text: str) -> str:
    return f"{Colors.RED}✗ {text}{Colors.RESET}"


def dim(text: str) -> str:
    return f"{Colors.DIM}{text}{Colors.RESET}"
