#!/usr/bin/env python3
"""
Kodi Remote

Sends single commands to Kodi's JSON-RPC interface.

Usage:
  krm --host=<kodi-address> --port=<kodi-port>   # configure once
  krm <command> [parameter ...]
  krm help [command]

Examples:
  krm pause
  krm seek 01:23:45
  krm seek --
  krm down 3
"""

import argparse
import logging
import sys

from kodiremote.commands import DEFAULT_REGISTRY, CommandDescriptor, CommandRegistry
from kodiremote.errors import ConfigurationError, KodiRemoteError
from kodiremote.services.config import ConfigService
from kodiremote.services.kodi import KodiClient

logger = logging.getLogger(__name__)

PROG = "krm"
SETTING_PREFIXES = ("--host=", "--port=", "--timeout=")
VERBOSE_FLAGS = ("-v", "--verbose")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROG, add_help=False)
    parser.add_argument("--host", help="Address of the Kodi host")
    parser.add_argument("--port", help="Port of Kodi's web server")
    parser.add_argument("--timeout", help="Seconds to wait for an answer")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log requests and responses")
    return parser


def split_arguments(argv: list[str]) -> tuple[list[str], list[str]]:
    """Separate option tokens from the command and its parameters.

    Only the options go through argparse, so seek steps like "-" and "--"
    reach the command untouched.
    """
    options, args = [], []
    for arg in argv:
        if arg.startswith(SETTING_PREFIXES) or arg in VERBOSE_FLAGS:
            options.append(arg)
        else:
            args.append(arg)
    return options, args


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def print_usage(registry: CommandRegistry):
    print(f"Usage: {PROG} command [parameter ...]")
    print(f"To get help type {PROG} help")
    print(f"To get help for a specific command type {PROG} help <command>")
    print()
    print("List of all available commands:")
    for descriptor in registry:
        print(f"  {descriptor.name:<8} {descriptor.description}")


def print_help(registry: CommandRegistry):
    print("If you run the tool the first time you need to configure it. Therefore you "
          "need to call it with --host=<kodi-address> and --port=<kodi-port>, e.g.")
    print(f"  {PROG} --host=192.168.0.10 --port=8080")
    print("Optionally --timeout=<seconds> sets how long to wait for Kodi to answer.")
    print()
    print("Once configured, pass the name of the command followed by its parameters.")
    print(f"Cursor movements take an optional repeat count, e.g. '{PROG} down 3'.")
    print()
    print_usage(registry)


def print_command_help(descriptor: CommandDescriptor):
    print(f"Help for command {descriptor.name}")
    print(f"Description: {descriptor.description}")
    if descriptor.parameters:
        print("Parameters:")
        for param, desc in descriptor.parameters.items():
            print(f"  {param} - {desc}")


def show_help(args: list[str], registry: CommandRegistry) -> int:
    """Handle `help` and `help <command>`"""
    index = args.index("help")
    if index == len(args) - 1:
        print_help(registry)
        return 0

    name = args[index + 1]
    if name not in registry:
        print(f"The command {name} is not supported.")
        return 1
    print_command_help(registry.lookup(name))
    return 0


def run(argv: list[str], config_service: ConfigService | None = None,
        registry: CommandRegistry = DEFAULT_REGISTRY) -> int:
    """Run the remote with the given arguments and return the exit status"""
    option_args, args = split_arguments(argv)
    options = build_parser().parse_args(option_args)
    configure_logging(options.verbose)

    settings = {
        key: value
        for key, value in (("host", options.host), ("port", options.port), ("timeout", options.timeout))
        if value is not None
    }

    if not args and not settings:
        print_usage(registry)
        return 1

    if "help" in args:
        return show_help(args, registry)

    config_service = config_service or ConfigService()

    try:
        if settings:
            config_service.update(**settings)
            print(f"Configuration saved to {config_service.config_file}")
            return 0

        config = config_service.config
        if not config.host:
            raise ConfigurationError(
                'No host configured. Please see "help" to learn about how to configure the remote.'
            )

        client = KodiClient(config, registry)
        sent = client.execute(args[0], args[1:])
        logger.debug("%s: %d request(s) sent to %s", args[0], sent, client.url)
    except KodiRemoteError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.repeat_count > 1:
            print(f"  (stopped after {e.completed} of {e.repeat_count} repeats)", file=sys.stderr)
        return 1

    return 0


def main():
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
