"""Main CLI entry point for LingoWeb.

Usage:
    python -m lingoweb.cli languages                          # List target languages
    python -m lingoweb.cli fetch <url>                        # Print sanitized page HTML
    python -m lingoweb.cli detect <url>                       # Detect the page's language
    python -m lingoweb.cli translate <url> --lang te          # Translate a page
    python -m lingoweb.cli translate <url> -o page.html       # Save side-by-side view

Global options:
    --config PATH   YAML configuration file (default: ./config.yaml if present)
    --mock          Use the mock LLM provider (no API calls)
    -v, --verbose   Debug logging
"""

import argparse
import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from rich.console import Console
from rich.table import Table

console = Console()
err_console = Console(stderr=True)


def _load_config(args: argparse.Namespace):
    from ..config import load_config

    config = load_config(args.config)
    if args.mock:
        config.llm.provider = "mock"
    return config


def cmd_languages(args: argparse.Namespace) -> int:
    """List the languages pages can be translated into."""
    from ..models import DEFAULT_LANGUAGE, LANGUAGES

    table = Table(title="Target languages")
    table.add_column("Code", style="cyan")
    table.add_column("Name")
    table.add_column("Native")
    for language in LANGUAGES:
        name = language.name
        if language == DEFAULT_LANGUAGE:
            name += " (default)"
        table.add_row(language.code, name, language.native)

    console.print(table)
    return 0


def cmd_fetch(args: argparse.Namespace) -> int:
    """Fetch a page and print its sanitized HTML."""
    from ..ingestion import ContentFetcher, FetchError, fetch_page

    config = _load_config(args)
    try:
        if args.raw:
            html = ContentFetcher(config.proxy).fetch(args.url)
        else:
            page = fetch_page(args.url, config.proxy)
            html = page.clean_html
            err_console.print(f"[dim]{page.title}[/dim]")
    except FetchError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        return 1

    if args.output:
        Path(args.output).write_text(html, encoding="utf-8")
        console.print(f"Saved {len(html)} characters to {args.output}")
    else:
        print(html)
    return 0


def cmd_detect(args: argparse.Namespace) -> int:
    """Detect the language of a page's text."""
    from bs4 import BeautifulSoup

    from ..ingestion import FetchError, fetch_page
    from ..translation import TranslationClient, TranslationError
    from ..understanding import LLMError, get_llm_provider

    config = _load_config(args)
    try:
        page = fetch_page(args.url, config.proxy)
        text = BeautifulSoup(page.clean_html, "html.parser").get_text(" ", strip=True)
        client = TranslationClient.from_config(get_llm_provider(config), config.translation)
        language = client.detect_language(text)
    except (FetchError, TranslationError, LLMError, ValueError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        return 1

    console.print(language)
    return 0


def cmd_translate(args: argparse.Namespace) -> int:
    """Fetch, sanitize and translate a page."""
    from ..models import PageStatus, UnknownLanguageError, ViewMode, get_language
    from ..pipeline import build_controller
    from ..render import render_document
    from ..understanding import LLMError

    try:
        language = get_language(args.lang)
    except UnknownLanguageError as e:
        err_console.print(f"[red]Error:[/red] {e.args[0]}")
        return 1

    config = _load_config(args)
    try:
        controller = build_controller(config)
    except (LLMError, ValueError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        return 1

    def show_progress(state) -> None:
        if state.status.is_busy:
            console.print(f"[dim]{state.message}[/dim]")

    controller.subscribe(show_progress)

    try:
        state = controller.run(args.url, language)
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        return 1

    if state.status != PageStatus.READY:
        err_console.print(f"[red]{state.message}[/red]")
        return 1

    if state.truncated:
        console.print(
            f"[yellow]Warning:[/yellow] page exceeded {config.translation.max_input_chars} "
            "characters; only the beginning was translated"
        )

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(
            render_document(state, ViewMode(args.view)), encoding="utf-8"
        )
        console.print(f"[green]Saved translation to {output_path}[/green]")
    else:
        print(state.translated_html)

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="LingoWeb - translate webpages with a language model",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use the mock LLM provider (for testing)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # languages command
    languages_parser = subparsers.add_parser("languages", help="List target languages")
    languages_parser.set_defaults(func=cmd_languages)

    # fetch command
    fetch_parser = subparsers.add_parser("fetch", help="Fetch and sanitize a page")
    fetch_parser.add_argument("url", help="Page URL")
    fetch_parser.add_argument("--raw", action="store_true", help="Print the unsanitized HTML")
    fetch_parser.add_argument("--output", "-o", help="Write HTML to this file")
    fetch_parser.set_defaults(func=cmd_fetch)

    # detect command
    detect_parser = subparsers.add_parser("detect", help="Detect a page's language")
    detect_parser.add_argument("url", help="Page URL")
    detect_parser.set_defaults(func=cmd_detect)

    # translate command
    translate_parser = subparsers.add_parser("translate", help="Translate a page")
    translate_parser.add_argument("url", help="Page URL")
    translate_parser.add_argument(
        "--lang", "-l",
        default="te",
        help="Target language code (default: te). See 'languages'.",
    )
    translate_parser.add_argument(
        "--view",
        choices=["split", "full"],
        default="split",
        help="Layout of the saved page (default: split)",
    )
    translate_parser.add_argument("--output", "-o", help="Write rendered HTML to this file")
    translate_parser.set_defaults(func=cmd_translate)

    args = parser.parse_args(argv)

    # .env in the working directory or above; existing variables win
    load_dotenv(find_dotenv(usecwd=True))

    if not args.command:
        parser.print_help()
        return 0

    from ..log import setup_logging

    setup_logging(verbose=args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
