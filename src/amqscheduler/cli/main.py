#!/usr/bin/env python3
"""Entry point for the amqsched CLI."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from textwrap import dedent
from typing import Callable, NoReturn

from amqscheduler import __version__
from amqscheduler.adapters.stomp_channel import connect_channel
from amqscheduler.app.scheduler import ReceiveTimeouts, SchedulerCommandService
from amqscheduler.domain.scheduler import (
    Browse,
    ConfigurationError,
    ControlCommand,
    DisplayMode,
    InvalidArgument,
    RemoveAll,
    RemoveOne,
    TransportError,
    display_mode_from_flags,
)
from amqscheduler.settings import RuntimeSettings, load_settings
from amqscheduler.utils.log import LOG_LEVELS, configure_logging, get_logger

logger = get_logger(__name__)

HELP_OVERVIEW = dedent(
    """
    Inspect and clean up the message scheduler of an ActiveMQ broker.

    Commands:
      - amqsched list -url stomp://host:61613        - list scheduled messages
      - amqsched list -url ... -t                    - totals per destination
      - amqsched rm -url ... -i <job id> | -a        - remove one or all

    The scheduler is local to each broker: in a network of brokers run the
    command against every broker to get the complete picture.
    """
)


class UsageError(ConfigurationError):
    def __init__(self, message: str, help_text: str) -> None:
        super().__init__(message)
        self.help_text = help_text


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise UsageError(message, self.format_help())


@dataclass(frozen=True)
class BrokerOptions:
    url: str
    user: str | None = None
    password: str | None = None


@dataclass(frozen=True)
class CommandConfig:
    broker: BrokerOptions
    command: ControlCommand
    settings: RuntimeSettings
    mode: DisplayMode | None = None

    @property
    def timeouts(self) -> ReceiveTimeouts:
        return ReceiveTimeouts(
            initial=self.settings.initial_receive_timeout,
            subsequent=self.settings.receive_timeout,
        )


def _add_broker_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-url", "--broker-url", dest="broker_url", required=True, help="ActiveMQ broker URL (STOMP)")
    parser.add_argument("-user", "--broker-user", dest="broker_user", help="ActiveMQ user name if using authentication")
    parser.add_argument("-pw", "--broker-password", dest="broker_password", help="ActiveMQ password (requires -user)")
    parser.add_argument("--initial-timeout", type=float, help="Seconds to wait for the first browse reply")
    parser.add_argument("--receive-timeout", type=float, help="Seconds of silence that end the browse stream")
    parser.add_argument("--log-level", choices=sorted(LOG_LEVELS), help="Log level for diagnostics on stderr")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="amqsched",
        description=HELP_OVERVIEW,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"amqsched {__version__}")

    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List messages held by the broker scheduler")
    _add_broker_arguments(list_cmd)
    list_cmd.add_argument("-c", "--show-content", action="store_true", help="Show message content")
    list_cmd.add_argument("-p", "--show-properties", action="store_true", help="Show message properties")
    list_cmd.add_argument(
        "-t",
        "--totals-per-queue",
        action="store_true",
        help="Show totals per queue (overrides -c and -p)",
    )
    list_cmd.set_defaults(func=_list_config, help_text=list_cmd.format_help())

    rm_cmd = sub.add_parser("rm", help="Remove scheduled messages")
    _add_broker_arguments(rm_cmd)
    target = rm_cmd.add_mutually_exclusive_group()
    target.add_argument("-a", "--all", dest="remove_all", action="store_true", help="Remove ALL scheduled messages")
    target.add_argument("-i", "--id", dest="job_id", help="Remove specific scheduled message")
    rm_cmd.set_defaults(func=_rm_config, help_text=rm_cmd.format_help())

    return parser


def _broker_options(args: argparse.Namespace) -> BrokerOptions:
    if args.broker_password is not None and args.broker_user is None:
        raise ConfigurationError("option -pw requires option -user")
    return BrokerOptions(url=args.broker_url, user=args.broker_user, password=args.broker_password)


def _settings_for(args: argparse.Namespace, base: RuntimeSettings) -> RuntimeSettings:
    return base.with_overrides(
        initial_receive_timeout=args.initial_timeout,
        receive_timeout=args.receive_timeout,
        log_level=args.log_level,
    )


def _list_config(args: argparse.Namespace, settings: RuntimeSettings) -> CommandConfig:
    mode = display_mode_from_flags(
        show_content=args.show_content,
        show_properties=args.show_properties,
        show_totals=args.totals_per_queue,
    )
    return CommandConfig(
        broker=_broker_options(args),
        command=Browse(),
        settings=_settings_for(args, settings),
        mode=mode,
    )


def _rm_config(args: argparse.Namespace, settings: RuntimeSettings) -> CommandConfig:
    if args.remove_all:
        command: ControlCommand = RemoveAll()
    elif args.job_id is not None:
        try:
            command = RemoveOne(args.job_id)
        except InvalidArgument as exc:
            raise ConfigurationError(str(exc)) from exc
    else:
        raise ConfigurationError("Please specify scheduler job id (-i id) or all (-a)!")
    return CommandConfig(broker=_broker_options(args), command=command, settings=_settings_for(args, settings))


def parse_config(argv: list[str] | None, settings: RuntimeSettings | None = None) -> CommandConfig:
    """Parse and validate the command line; raises :class:`ConfigurationError`."""

    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args, settings if settings is not None else load_settings())
    except UsageError:
        raise
    except ConfigurationError as exc:
        raise UsageError(str(exc), args.help_text) from exc


def _print_configuration_error(exc: ConfigurationError) -> None:
    print(f"Error: {exc}", file=sys.stderr)
    help_text = getattr(exc, "help_text", None)
    if help_text:
        print("The supported options are:", file=sys.stderr)
        print(help_text, file=sys.stderr)


def run(config: CommandConfig, sink: Callable[[str], None] = print) -> int:
    broker = config.broker
    try:
        with connect_channel(
            broker.url,
            broker.user,
            broker.password,
            management_destination=config.settings.management_destination,
        ) as channel:
            service = SchedulerCommandService(channel, config.timeouts)
            service.execute(config.command, mode=config.mode, sink=sink)
    except TransportError as exc:
        logger.error("scheduler.command.failed", command=type(config.command).__name__, error=str(exc))
        print("Failed!", file=sys.stderr)
        print(f"  cause: {exc}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    try:
        config = parse_config(argv)
    except ConfigurationError as exc:
        _print_configuration_error(exc)
        return 2
    configure_logging(config.settings.log_level)
    return run(config)


def list_main() -> int:
    return main(["list", *sys.argv[1:]])


def rm_main() -> int:
    return main(["rm", *sys.argv[1:]])


if __name__ == "__main__":
    sys.exit(main())
