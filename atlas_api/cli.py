"""Command line front-end for the RIPE Atlas API.

Usage::

    atlas ip
    atlas probes info 666
    atlas probes list country_code=fr --area
    atlas credits list --type transactions
    atlas --config ./atlas.toml keys list
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Callable, Sequence

from loguru import logger
from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from atlas_api.client import Client, version
from atlas_api.config import Settings, get_settings, load_settings
from atlas_api.errors import AtlasError
from atlas_api.models import (
    Anchor,
    Credits,
    ExpenseItem,
    IncomeItem,
    Key,
    Measurement,
    Member,
    Probe,
    Transaction,
    Transfer,
)
from atlas_api.request import Return, ReturnKind
from atlas_api.routing import CREDITS_TYPES

console = Console()
err_console = Console(stderr=True)
log = logger.bind(module="atlas_api.cli")

_CREDITS_MODELS: dict[str, type[BaseModel]] = {
    "expense-items": ExpenseItem,
    "income-items": IncomeItem,
    "members": Member,
    "transactions": Transaction,
    "transfer": Transfer,
}

# Columns shown by `list` commands; everything else is available via `info`.
_COLUMNS: dict[type[BaseModel], tuple[str, ...]] = {
    Probe: ("id", "country_code", "asn_v4", "asn_v6", "description"),
    Key: ("uuid", "label", "is_active", "valid_to"),
    Anchor: ("id", "fqdn", "country", "city"),
    Measurement: ("id", "kind", "target", "description"),
    Transaction: ("id", "timestamp", "amount", "description"),
    IncomeItem: ("date", "kind", "amount", "probe"),
    ExpenseItem: ("date", "kind", "amount", "measurement"),
    Transfer: ("id", "timestamp", "recipient", "amount"),
    Member: ("uuid", "email", "is_active"),
}


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), backtrace=False, diagnose=False)


def _render(result: Return[Any], model: type[BaseModel]) -> None:
    if result.is_null:
        console.print("[dim]No content.[/]")
        return
    if result.kind is ReturnKind.SINGLE:
        item = result.unwrap_single()
        console.print_json(item.model_dump_json(by_alias=True, exclude_none=True))
        return

    items = result.unwrap_paged()
    columns = _COLUMNS.get(model, ("id",))
    table = Table(title=f"{model.__name__} ({len(items)})")
    for column in columns:
        table.add_column(column)
    for item in items:
        table.add_row(*("" if getattr(item, c, None) is None else str(getattr(item, c)) for c in columns))
    console.print(table)


# Commands -------------------------------------------------------------


def _probes(client: Client, args: argparse.Namespace) -> Return[Any]:
    if args.action == "info":
        probe_id = args.id if args.id is not None else client.default_probe
        return client.probes().get(probe_id).call(Probe)
    builder = client.probes()
    if args.area:
        builder = builder.with_options(client.probe_set_options())
    return builder.list(list(args.query)).call(Probe)


def _keys(client: Client, args: argparse.Namespace) -> Return[Any]:
    if args.action == "info":
        return client.keys().get(args.uuid).call(Key)
    return client.keys().list().call(Key)


def _credits(client: Client, args: argparse.Namespace) -> Return[Any]:
    if args.action == "info":
        return client.credits().info().call(Credits)
    return client.credits().list().with_options({"type": args.type}).call(_CREDITS_MODELS[args.type])


def _anchors(client: Client, args: argparse.Namespace) -> Return[Any]:
    if args.action == "info":
        return client.anchors().get(args.id).call(Anchor)
    return client.anchors().list().call(Anchor)


def _measurements(client: Client, args: argparse.Namespace) -> Return[Any]:
    if args.action == "info":
        return client.measurements().get(args.id).call(Measurement)
    return client.measurements().list().call(Measurement)


_Runner = Callable[[Client, argparse.Namespace], Return[Any]]
_Renderer = Callable[[Return[Any], argparse.Namespace], None]


def _ip(client: Client, args: argparse.Namespace) -> Return[Any]:
    probe_id = args.id if args.id is not None else client.default_probe
    return client.probes().get(probe_id).call(Probe)


def _render_ip(result: Return[Any], _args: argparse.Namespace) -> None:
    probe = result.unwrap_single()
    console.print(f"Probe {probe.id} has the following IP:")
    console.print(
        f"IPv4: {probe.address_v4 or 'None'} IPv6: {probe.address_v6 or 'None'}",
        highlight=False,
        emoji=False,
    )


def _render_as(model_for: Callable[[argparse.Namespace], type[BaseModel]]) -> _Renderer:
    return lambda result, args: _render(result, model_for(args))


_COMMANDS: dict[str, tuple[_Runner, _Renderer]] = {
    "ip": (_ip, _render_ip),
    "probes": (_probes, _render_as(lambda a: Probe)),
    "keys": (_keys, _render_as(lambda a: Key)),
    "credits": (
        _credits,
        _render_as(lambda a: Credits if a.action == "info" else _CREDITS_MODELS[a.type]),
    ),
    "anchors": (_anchors, _render_as(lambda a: Anchor)),
    "measurements": (_measurements, _render_as(lambda a: Measurement)),
}


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="atlas",
        description="Query the RIPE Atlas API.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--config", default=None, help="Path to a TOML configuration file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("version", help="Print the library version.")

    ip = sub.add_parser("ip", help="Show the addresses of a probe (default probe from config).")
    ip.add_argument("id", nargs="?", type=int, default=None)

    probes = sub.add_parser("probes", help="Probe information.").add_subparsers(dest="action", required=True)
    p_info = probes.add_parser("info", help="Show one probe (default probe from config).")
    p_info.add_argument("id", nargs="?", type=int, default=None)
    p_list = probes.add_parser("list", help="List probes matching query fragments (k=v).")
    p_list.add_argument("query", nargs="*", default=[])
    p_list.add_argument("--area", action="store_true", help="Apply the configured area/tag filters.")

    keys = sub.add_parser("keys", help="API key information.").add_subparsers(dest="action", required=True)
    keys.add_parser("info", help="Show one key.").add_argument("uuid")
    keys.add_parser("list", help="List keys.")

    credits = sub.add_parser("credits", help="Credits information.").add_subparsers(dest="action", required=True)
    credits.add_parser("info", help="Show the credits summary.")
    credits.add_parser("list", help="List one credits view.").add_argument(
        "--type", required=True, choices=sorted(CREDITS_TYPES)
    )

    for name, help_text in (("anchors", "Anchor information."), ("measurements", "Measurement information.")):
        group = sub.add_parser(name, help=help_text).add_subparsers(dest="action", required=True)
        group.add_parser("info", help="Show one entry.").add_argument("id", type=int)
        group.add_parser("list", help="List entries.")

    return parser


def _load(config: str | None) -> Settings:
    if config:
        return load_settings(config)
    return get_settings()


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(list(argv) if argv is not None else None)

    if args.command == "version":
        console.print(version())
        return 0

    try:
        settings = _load(args.config)
        _configure_logging("DEBUG" if args.verbose or settings.verbose else settings.log_level)
        runner, render = _COMMANDS[args.command]
        with Client.from_settings(settings, reuse_connections=True) as client:
            result = runner(client, args)
    except AtlasError as exc:
        title = getattr(exc, "title", type(exc).__name__)
        detail = getattr(exc, "detail", str(exc))
        err_console.print(f"[bold red]{title}[/]: {detail}")
        log.debug("Command {} failed: {!r}", args.command, exc)
        return 1

    render(result, args)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
