"""CLI interface for notesend - publish vault notes to a note-capture endpoint."""

import argparse
import asyncio
import logging
import sys

from notesend.center import PublicationCenter, render_batch_result, render_center
from notesend.config import Settings, get_settings
from notesend.console import Colors, dim, failure, success
from notesend.publisher import (
    EndpointNotConfiguredError,
    PublishClient,
    Publisher,
    build_endpoint_url,
)
from notesend.storage import NoteStatus, StateStorage

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for CLI."""
    logging.basicConfig(
        format="%(message)s",
        level=logging.DEBUG if verbose else logging.INFO,
    )
    # Reduce noise from libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def confirm(prompt: str) -> bool:
    """Ask a yes/no question. Anything but y/yes is a no."""
    try:
        answer = input(f"{Colors.BOLD}{prompt} [y/N]{Colors.RESET} ").strip().lower()
    except EOFError:
        return False
    return answer in ("y", "yes")


def parse_indices(value: str) -> list[int]:
    """Parse '1,3,5' (1-based) into zero-based block indices."""
    try:
        indices = [int(part) - 1 for part in value.split(",") if part.strip()]
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid block list: {value}") from e
    if any(i < 0 for i in indices):
        raise argparse.ArgumentTypeError("Block numbers start at 1")
    return indices


def create_publisher(settings: Settings, storage: StateStorage) -> Publisher:
    client = PublishClient(
        settings.resolve_endpoint(storage.get()),
        token=settings.endpoint_token,
        timeout=settings.request_timeout,
    )
    return Publisher(settings.vault_path, storage, client)


def show_reminder(storage: StateStorage, endpoint: str) -> None:
    """Print a one-time welcome when no endpoint is configured yet."""
    state = storage.get()
    if endpoint or state.has_shown_reminder:
        return
    print(f"{Colors.CYAN}Welcome to notesend! Set your endpoint first:{Colors.RESET}")
    print(dim("  notesend config --endpoint https://example.com/iwh/<id>/<token>/"))
    storage.update(has_shown_reminder=True)


async def run_publish(publisher: Publisher, path: str, assume_yes: bool) -> int:
    prepared = publisher.prepare_note(path)
    status = prepared.status

    if status is NoteStatus.PUBLISHED:
        print(dim(f"{prepared.path} is unchanged since its last publish, sending again."))

    if status is NoteStatus.PENDING_CONFIRMATION and not assume_yes:
        print(f"\n{Colors.BOLD}The following will be published:{Colors.RESET}")
        print(dim(prepared.preview))
        print()
        if not confirm("Publish this note?"):
            print(dim("Cancelled."))
            return 0

    outcome = await publisher.publish_prepared(prepared)
    if outcome.success:
        print(success(f"Published {outcome.path}"))
        return 0

    print(failure(f"Publish failed: {outcome.result.message}"))
    return 1


async def run_blocks(
    publisher: Publisher, path: str, selected: list[int] | None, assume_yes: bool
) -> int:
    blocks = publisher.prepare_blocks(path)
    if not blocks:
        print(failure("No content blocks found"))
        return 1

    indices = selected if selected is not None else list(range(len(blocks)))
    print(f"\n{Colors.BOLD}{len(blocks)} blocks, split on blank lines:{Colors.RESET}")
    for i, block in enumerate(blocks):
        box = "[x]" if i in indices else "[ ]"
        first_line = block.splitlines()[0]
        print(f"  {box} {i + 1}. {first_line[:70]}")
    print()

    if not indices:
        print(failure("Select at least one block"))
        return 1

    if not assume_yes and not confirm(f"Publish {len(indices)} blocks?"):
        print(dim("Cancelled."))
        return 0

    result = await publisher.publish_blocks(path, blocks, indices)
    if result.success_count:
        print(success(f"Published {result.success_count} of {len(indices)} blocks"))
        return 0 if not result.failure_count else 1

    print(failure("Publish failed, check the endpoint configuration"))
    return 1


CENTER_HELP = f"""
{Colors.BOLD}Publication center commands:{Colors.RESET}
  select <path>   - Toggle selection of a note
  folder <path>   - Select every note under a folder
  unfolder <path> - Deselect every note under a folder
  all             - Select all unpublished and changed notes
  clear           - Clear the selection
  publish         - Publish the selected notes
  refresh         - Rescan the vault
  help            - Show this help message
  exit            - Leave the publication center
"""


async def interactive_center(center: PublicationCenter) -> None:
    """Run the publication center REPL."""
    print(render_center(center))
    print(dim("Type 'help' for commands."))

    while True:
        try:
            user_input = input(f"{Colors.BOLD}{Colors.BLUE}center>{Colors.RESET} ").strip()
            if not user_input:
                continue

            command, _, arg = user_input.partition(" ")
            command = command.lower()
            arg = arg.strip()

            if command in ("exit", "quit"):
                break
            if command == "help":
                print(CENTER_HELP)
                continue

            if command == "select" and arg:
                if center.toggle(arg):
                    print(success(f"Selected {arg}"))
                elif arg not in center.selected and not center.is_selectable(arg):
                    print(failure(f"Not selectable: {arg}"))
            elif command in ("folder", "unfolder") and arg:
                count = center.select_folder(arg, selected=command == "folder")
                print(dim(f"{count} notes affected"))
            elif command == "all":
                center.select_category("unpublished")
                center.select_category("changed")
            elif command == "clear":
                center.clear_selection()
            elif command == "refresh":
                center.refresh()
            elif command == "publish":
                if not center.selected:
                    print(failure("Select notes to publish first"))
                    continue
                print(dim(f"Publishing {len(center.selected)} notes..."))
                result = await center.publish_selected()
                print(render_batch_result(result))
            else:
                print(failure(f"Unknown command: {user_input}"))
                continue

            print(render_center(center))

        except (KeyboardInterrupt, EOFError):
            print()
            break
        except Exception as e:
            print(f"{Colors.RED}Error: {e}{Colors.RESET}")


async def run_center(publisher: Publisher, args: argparse.Namespace) -> int:
    center = PublicationCenter(publisher)
    center.refresh()

    for path in args.select or []:
        if not center.select(path):
            print(failure(f"Not selectable: {path}"))
    for folder in args.folder or []:
        center.select_folder(folder)
    if args.all:
        center.select_category("unpublished")
        center.select_category("changed")

    if not args.publish:
        if args.select or args.folder or args.all:
            print(render_center(center))
        else:
            await interactive_center(center)
        return 0

    if not center.selected:
        print(failure("Select notes to publish first"))
        return 1

    print(dim(f"Publishing {len(center.selected)} notes..."))
    result = await center.publish_selected()
    print(render_batch_result(result))
    return 0 if not result.failure_count else 1


def run_config(settings: Settings, storage: StateStorage, endpoint: str | None) -> int:
    if endpoint is not None:
        storage.update(endpoint_url=endpoint.strip())
        print(success("Endpoint saved"))

    effective = settings.resolve_endpoint(storage.get())
    print(f"{Colors.BOLD}Vault:{Colors.RESET}    {settings.vault_path}")
    print(f"{Colors.BOLD}Endpoint:{Colors.RESET} {effective or dim('(not set)')}")
    if effective:
        url = build_endpoint_url(effective, settings.endpoint_token)
        print(f"{Colors.BOLD}Posts to:{Colors.RESET} {url}")
    return 0


async def run_test(publisher: Publisher) -> int:
    print(dim("Sending test note..."))
    result = await publisher.send_test()
    if result.success:
        print(success("Test note sent, check that it arrived"))
        return 0
    print(failure(f"Test failed: {result.message}"))
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notesend",
        description="Publish notes from a Markdown vault to a note-capture endpoint.",
    )
    parser.add_argument("--vault", type=str, help="Vault directory (overrides VAULT_PATH)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    publish = sub.add_parser("publish", help="Publish a whole note")
    publish.add_argument("note", help="Vault-relative path of the note")
    publish.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")

    blocks = sub.add_parser("blocks", help="Publish a note paragraph by paragraph")
    blocks.add_argument("note", help="Vault-relative path of the note")
    blocks.add_argument(
        "--select",
        type=parse_indices,
        help="Comma-separated block numbers to publish (default: all)",
    )
    blocks.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")

    center = sub.add_parser("center", help="Browse notes by publish status")
    center.add_argument("--select", action="append", metavar="NOTE", help="Select a note")
    center.add_argument("--folder", action="append", metavar="FOLDER", help="Select a folder")
    center.add_argument("--all", action="store_true", help="Select all unpublished and changed")
    center.add_argument("--publish", action="store_true", help="Publish the selection and exit")

    config = sub.add_parser("config", help="Show or set the endpoint")
    config.add_argument("--endpoint", type=str, help="Endpoint URL to store in the vault")

    sub.add_parser("test", help="Send a test note to the endpoint")

    return parser


def cli(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose)

    try:
        settings = get_settings(vault_path=args.vault)
    except Exception as e:
        logger.error(f"{Colors.RED}Failed to load settings: {e}{Colors.RESET}")
        logger.error(
            f"{Colors.RED}Set VAULT_PATH in a .env file or pass --vault.{Colors.RESET}"
        )
        sys.exit(1)

    storage = StateStorage(settings.vault_path)

    if args.command == "config":
        sys.exit(run_config(settings, storage, args.endpoint))

    show_reminder(storage, settings.resolve_endpoint(storage.get()))
    publisher = create_publisher(settings, storage)

    try:
        if args.command == "publish":
            code = asyncio.run(run_publish(publisher, args.note, args.yes))
        elif args.command == "blocks":
            code = asyncio.run(run_blocks(publisher, args.note, args.select, args.yes))
        elif args.command == "center":
            code = asyncio.run(run_center(publisher, args))
        else:
            code = asyncio.run(run_test(publisher))
    except EndpointNotConfiguredError as e:
        print(failure(str(e)))
        code = 1
    except (FileNotFoundError, ValueError) as e:
        print(failure(str(e)))
        code = 1
    except KeyboardInterrupt:
        print(f"\n{Colors.DIM}Interrupted.{Colors.RESET}")
        code = 130
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        print(failure(f"Unexpected error while processing the note: {e}"))
        code = 1

    sys.exit(code)


if __name__ == "__main__":
    cli()
