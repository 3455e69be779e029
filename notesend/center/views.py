"""Render the publication center as terminal text."""

from notesend.console import Colors
from notesend.publisher import BatchResult

from .model import CATEGORIES, CHANGED, SELECTABLE_CATEGORIES, PublicationCenter
from .scanner import FolderNode

CATEGORY_TITLES = {
    "unpublished": "Unpublished Notes",
    "changed": "Changed Since Last Publish",
    "published": "Published Notes",
}


def render_tree(
    node: FolderNode,
    selected: set[str],
    selectable: bool,
    changed: bool = False,
    depth: int = 0,
) -> list[str]:
    """Render one folder level and everything under it."""
    lines = []
    indent = "  " * depth

    for item in node.files:
        box = ("[x] " if item.path in selected else "[ ] ") if selectable else "    "
        marker = f" {Colors.YELLOW}(changed){Colors.RESET}" if changed else ""
        lines.append(f"{indent}{box}{item.name}{marker}")

    for name, sub in node.subfolders.items():
        notes = list(sub.iter_notes())
        if selectable:
            picked = sum(1 for n in notes if n.path in selected)
            box = "[x] " if notes and picked == len(notes) else ("[-] " if picked else "[ ] ")
        else:
            box = "    "
        lines.append(f"{indent}{box}{Colors.BOLD}{name}/{Colors.RESET}")
        lines.extend(render_tree(sub, selected, selectable, changed, depth + 1))

    return lines


def render_center(center: PublicationCenter) -> str:
    """Render all categories with the current selection."""
    lines = [f"{Colors.BOLD}{Colors.CYAN}Publication Center{Colors.RESET}", ""]

    for name in CATEGORIES:
        items = center.category(name)
        lines.append(f"{Colors.BOLD}{CATEGORY_TITLES[name]}{Colors.RESET} ({len(items)})")
        if not items:
            lines.append(f"    {Colors.DIM}(none){Colors.RESET}")
        else:
            lines.extend(
                render_tree(
                    center.tree(name),
                    center.selected,
                    selectable=name in SELECTABLE_CATEGORIES,
                    changed=name == CHANGED,
                )
            )
        lines.append("")

    lines.append(f"{Colors.DIM}{len(center.selected)} selected{Colors.RESET}")
    return "\n".join(lines)


def render_batch_result(result: BatchResult) -> str:
    """Summarize a finished batch."""
    lines = [
        f"{Colors.GREEN}✓ {result.success_count} published{Colors.RESET}, "
        f"{Colors.RED}✗ {result.failure_count} failed{Colors.RESET}"
    ]
    for path in result.failed:
        reason = result.errors.get(path)
        detail = f"{path}: {reason}" if reason else path
        lines.append(f"  {Colors.RED}- {detail}{Colors.RESET}")
    if result.success_count:
        lines.append(
            f"{Colors.DIM}Check the destination app to confirm the notes arrived.{Colors.RESET}"
        )
    return "\n".join(lines)
