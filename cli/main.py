"""CLI entry point: the interactive shell, or a single command given on the command line."""

import argparse
import os
import shlex
from typing import Optional, Sequence

from common.logging_config import setup_logging
from cli.commands import use_client
from cli.config import Config, ConfigError, parse_server_address
from cli.parser import ParseError, parse_command
from cli.repl import dispatch_command, repl_loop
from cli.store_client import FileStoreClient


def _server_address(value: str):
    try:
        return parse_server_address(value)
    except ConfigError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='filehost',
        description='Upload, list, download, rename and delete files on a file server.',
    )
    parser.add_argument('--debug', action='store_true', help='log debug output')
    parser.add_argument(
        '--server',
        metavar='HOST[:PORT]',
        type=_server_address,
        help='server to use for this session (overrides the config file)',
    )
    parser.add_argument(
        '--save',
        action='store_true',
        help='store the --server address in the config file',
    )
    parser.add_argument(
        'command',
        nargs=argparse.REMAINDER,
        help='run one command, e.g. "list" or "download a.txt", then exit',
    )
    return parser


def run_once(words: Sequence[str]) -> int:
    """Run a single command and print its result. Returns the process exit status."""
    try:
        cmd_obj = parse_command(shlex.join(words))
    except ParseError as e:
        print(f"Error: {e}")
        return 2
    result = dispatch_command(cmd_obj)
    print(result)
    return 1 if any(line.startswith('Error') for line in result.splitlines()) else 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for CLI."""
    args = build_parser().parse_args(argv)

    log_level = 'DEBUG' if args.debug else os.getenv('LOG_LEVEL', 'WARNING')
    logger = setup_logging('cli', log_level=log_level)
    logger.debug("Debug logging enabled")

    if args.server:
        config = Config()
        host, port = args.server
        config.set_server(host, port)
        if args.save:
            config.save()
        logger.info(f"Using server {config.get_base_url()}")
        use_client(FileStoreClient(config))

    try:
        if args.command:
            return run_once(args.command)
        repl_loop()
        return 0
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    raise SystemExit(main())
