"""CLI entrypoint for azure-blob-sas."""
import sys
import argparse
import logging
from pathlib import Path

from azure_blob_sas import __version__
from .validators import parse_selection, validate_urls

VERSION = __version__

# Configure logging to stderr
logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s",
    stream=sys.stderr
)
logger = logging.getLogger(__name__)


def _configure_logging(args, config) -> None:
    """Apply --verbose, or the level from the config file."""
    root = logging.getLogger()
    if getattr(args, "verbose", False):
        root.setLevel(logging.DEBUG)
    elif config["logging"]["level"]:
        root.setLevel(config["logging"]["level"])


def _build_command(args):
    """Create the SAS URI command with terminal prompts and the configured choices."""
    from azure_blob_sas.sas.domains.config_loader import load_config
    from azure_blob_sas.sas.domains.editor import OutputChannel
    from azure_blob_sas.sas.domains.prompts import ConsolePrompter
    from azure_blob_sas.sas.workflows.build_sas_uri import OUTPUT_CHANNEL_NAME, SasUriCommand

    config = load_config(getattr(args, "config", None))
    _configure_logging(args, config)

    return SasUriCommand(
        prompter=ConsolePrompter(),
        output_channel=OutputChannel(OUTPUT_CHANNEL_NAME, stream=sys.stderr),
        validity_choices=config["validity"]["choices"],
    )


def cmd_version(args):
    """Show version information."""
    print(f"azure-blob-sas {VERSION}")


def cmd_sign(args):
    """Sign URLs given on the command line and print the results."""
    from azure_blob_sas.sas.domains.editor import TextDocument, TextEditor
    from azure_blob_sas.sas.domains.models import Position, Selection

    validate_urls(args.urls)
    urls = [url.strip() for url in args.urls]

    document = TextDocument("\n".join(urls))
    selections = [
        Selection(Position(line, 0), Position(line, len(url)))
        for line, url in enumerate(urls)
    ]
    editor = TextEditor(document, selections)

    result = _build_command(args).run(editor, strict=args.strict or None)

    if not result.succeeded:
        sys.exit(1)

    print(document.text)
    if result.skipped:
        print(f"Warning: {result.skipped} URL(s) left unchanged", file=sys.stderr)
    sys.exit(0)


def cmd_rewrite(args):
    """Rewrite storage URIs inside a file."""
    from azure_blob_sas.sas.domains.editor import TextDocument, TextEditor
    from azure_blob_sas.sas.domains.locator import find_blob_uris

    path = Path(args.path)
    if not path.is_file():
        print(f"Error: File does not exist: {path}", file=sys.stderr)
        sys.exit(1)

    document = TextDocument.from_path(path)

    if args.select:
        selections = [parse_selection(text) for text in args.select]
    elif args.find:
        selections = find_blob_uris(document)
    else:
        print("Error: Use --select LINE:COL-LINE:COL or --find to choose URIs", file=sys.stderr)
        sys.exit(2)

    for selection in selections:
        try:
            document.get_text(selection)
        except ValueError as e:
            print(f"Error: Selection outside {path}: {e}", file=sys.stderr)
            sys.exit(2)

    editor = TextEditor(document, selections)
    result = _build_command(args).run(editor, strict=args.strict or None)

    if not result.succeeded:
        sys.exit(1)

    if args.stdout:
        sys.stdout.write(document.text)
    elif result.rewritten:
        document.save(path)
        print(f"Rewrote {result.rewritten} URI(s) in {path}", file=sys.stderr)
    else:
        print(f"No URI rewritten in {path}", file=sys.stderr)

    if result.skipped:
        print(f"Warning: {result.skipped} selection(s) left unchanged", file=sys.stderr)
    sys.exit(0)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blobsas",
        description="Replace Azure Blob Storage URIs with time-limited SAS URLs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
  0 - Success
  1 - Runtime error (run failed or was cancelled, file not found, invalid config)
  2 - Usage error (invalid arguments, invalid selection range)

Configuration:
  Read from ~/.config/azure-blob-sas/config.yml when present,
  or from the file given with --config. Nothing is written to disk.

Account keys are asked for interactively and kept in memory for the current run only.
        """
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging on stderr"
    )
    common.add_argument(
        "--config",
        metavar="PATH",
        help="Read configuration from PATH instead of ~/.config/azure-blob-sas/config.yml"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # version command
    subparsers.add_parser(
        "version",
        help="Show version information",
        description="Display the current version of azure-blob-sas"
    )

    # sign command
    sign_parser = subparsers.add_parser(
        "sign",
        parents=[common],
        help="Sign one or more blob URLs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Turn blob URLs into SAS URLs and print them, one per line.

Behavior:
  1. Asks once for the key of every storage account involved
  2. Asks once for the validity window and the permissions
  3. Prints each URL with its query replaced by the SAS token

With several URLs, invalid ones are printed unchanged.
With a single URL, any failure aborts with exit code 1.
        """
    )
    sign_parser.add_argument(
        "urls",
        nargs="+",
        metavar="URL",
        help="Blob URL (https://<account>.blob.core.windows.net/<container>/<blob>)"
    )
    sign_parser.add_argument(
        "--strict",
        action="store_true",
        help="Abort on the first invalid URL even when several are given"
    )

    # rewrite command
    rewrite_parser = subparsers.add_parser(
        "rewrite",
        parents=[common],
        help="Rewrite storage URIs inside a file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Replace highlighted storage URIs in a text file with SAS URLs.

Choose the URIs with one or more --select ranges (1-based LINE:COL-LINE:COL,
end column exclusive) or let --find locate every storage URI in the file.
The file is rewritten in place unless --stdout is given.
        """
    )
    rewrite_parser.add_argument(
        "path",
        help="Text file containing storage URIs"
    )
    rewrite_parser.add_argument(
        "--select",
        action="append",
        metavar="LINE:COL-LINE:COL",
        help="Range to rewrite (repeatable)"
    )
    rewrite_parser.add_argument(
        "--find",
        action="store_true",
        help="Select every storage URI found in the file"
    )
    rewrite_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the rewritten document instead of saving it"
    )
    rewrite_parser.add_argument(
        "--strict",
        action="store_true",
        help="Abort on the first invalid URI even when several are selected"
    )

    return parser


def main(argv=None):
    """Main CLI entrypoint.

    Exit codes:
        0 - Success
        1 - Runtime errors (failed or cancelled run, missing file, invalid config)
        2 - Usage errors (invalid arguments, invalid selection range)
    """
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    # If no command provided, show help and exit with usage error code
    if not args.command:
        parser.print_help()
        sys.exit(2)

    try:
        if args.command == "version":
            cmd_version(args)
        elif args.command == "sign":
            cmd_sign(args)
        elif args.command == "rewrite":
            cmd_rewrite(args)
        else:
            parser.print_help()
            sys.exit(2)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
