#!/usr/bin/env python3
"""
Command-line access to Blockchair chain statistics.

Usage:
    python -m explorer.cli <command> [args] [options]

Examples:
    python -m explorer.cli stats
    python -m explorer.cli chain ethereum
    python -m explorer.cli transactions bitcoin --limit 10
    python -m explorer.cli address 1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa
    python -m explorer.cli -c ethereum -o json tx 0xabc...
"""

import click

from explorer import config as cfg
from explorer import output as out
from explorer.client import BlockchairClient
from explorer.errors import BlockchairError
from explorer.formatting import (
    KNOWN_CHAINS,
    chain_meta,
    format_number,
    format_percentage,
    format_price,
    time_ago,
)
from explorer.models import StatsSnapshot


# =============================================================================
# CLI Context
# =============================================================================


class Context:
    """CLI context holding configuration and the API client."""

    def __init__(self):
        self.api_key: str | None = None
        self.chain: str = "bitcoin"
        self.recent_limit_setting = None
        self.output_format: str = "table"
        self._client: BlockchairClient | None = None

    @property
    def client(self) -> BlockchairClient:
        if self._client is None:
            self._client = BlockchairClient(self.api_key)
        return self._client

    @property
    def recent_limit(self) -> int:
        """Configured transaction count; exits if the config value is unusable."""
        try:
            limit = int(self.recent_limit_setting or 5)
        except (TypeError, ValueError):
            limit = 0
        if limit < 1:
            out.error("recent_limit in config must be a positive integer")
            raise SystemExit(1)
        return limit


pass_context = click.make_pass_decorator(Context, ensure=True)


def fail(e: BlockchairError) -> None:
    """Report a client error with its fixed message and exit."""
    out.error(e.message)
    raise SystemExit(1)


# =============================================================================
# Main CLI Group
# =============================================================================


@click.group()
@click.option(
    "--api-key", "-k",
    envvar=cfg.API_KEY_ENV,
    default=None,
    help="Blockchair API key (overrides config)",
)
@click.option(
    "--chain", "-c",
    default=None,
    help=f"Chain to query (default from config). Known: {', '.join(KNOWN_CHAINS)}",
)
@click.option(
    "--output", "-o",
    type=click.Choice(["table", "json", "yaml"]),
    default="table",
    help="Output format",
)
@pass_context
def cli(ctx: Context, api_key: str | None, chain: str | None, output: str):
    """Blockchain statistics from the Blockchair API."""
    config = cfg.load_config()
    ctx.api_key = cfg.resolve_api_key(api_key, config)
    ctx.chain = chain or config.get("chain") or "bitcoin"
    ctx.recent_limit_setting = config.get("recent_limit")
    ctx.output_format = output


# =============================================================================
# Config Commands
# =============================================================================


@cli.command("config")
@click.argument("action", required=False, type=click.Choice(["show", "set"]))
@click.argument("args", nargs=-1)
def config_cmd(action: str | None, args: tuple):
    """Manage CLI configuration.

    Without arguments: interactive setup.

    \b
    Examples:
        chainstats config              # Interactive setup
        chainstats config show         # Show current config
        chainstats config set chain ethereum
    """
    if action is None:
        config_path = cfg.find_config()
        if config_path:
            out.info(f"Config file found: {config_path}")
            current = {**cfg.get_default_config(), **cfg.load_config()}
        else:
            out.info("No config file found. Creating new config.")
            current = cfg.get_default_config()

        api_key = click.prompt(
            "Blockchair API key",
            default=current.get("api_key", ""),
            show_default=False,
            hide_input=True,
        )
        chain = click.prompt("Default chain", default=current.get("chain", "bitcoin"))
        recent_limit = click.prompt(
            "Recent transactions limit",
            default=current.get("recent_limit", 5),
            type=int,
        )

        new_config = {
            "api_key": api_key,
            "chain": chain,
            "recent_limit": recent_limit,
        }

        save_path = cfg.save_config(new_config)
        out.success(f"Configuration saved to {save_path}")

    elif action == "show":
        config_path = cfg.find_config()
        if config_path is None:
            out.info("No configuration file found.")
            out.info("Run 'chainstats config' to create one.")
            return

        config = cfg.load_config()
        out.info(f"Config file: {config_path}")
        out.info("")
        for key, value in config.items():
            if key == "api_key":
                value = cfg.mask_secret(value)
            out.info(f"  {key}: {value}")

    elif action == "set":
        if len(args) != 2:
            out.error("Usage: chainstats config set <key> <value>")
            raise SystemExit(1)

        key, value = args
        if key not in cfg.VALID_KEYS:
            out.error(f"Unknown config key: {key}")
            out.info(f"Valid keys: {', '.join(sorted(cfg.VALID_KEYS))}")
            raise SystemExit(1)

        if key == "recent_limit":
            if not value.isdigit() or int(value) < 1:
                out.error("recent_limit must be a positive integer")
                raise SystemExit(1)
            value = int(value)

        config = cfg.load_config()
        config[key] = value
        save_path = cfg.save_config(config)
        shown = cfg.mask_secret(value) if key == "api_key" else value
        out.success(f"Set {key} = {shown}")
        out.info(f"Saved to {save_path}")


# =============================================================================
# Statistics Commands
# =============================================================================


def snapshot_rows(snapshot: StatsSnapshot) -> list[dict]:
    """Flatten a snapshot into display rows, one per chain with stats."""
    rows = []
    for chain, stats in snapshot.available():
        meta = chain_meta(chain)
        rows.append({
            "chain": chain,
            "name": meta.name,
            "price": format_price(stats.market_price_usd),
            "change": format_percentage(stats.market_price_usd_change_24h_percentage),
            "blocks": format_number(stats.blocks),
            "block_age": time_ago(stats.best_block_time),
            "market_cap": format_price(stats.market_cap_usd),
        })
    return rows


@cli.command("stats")
@pass_context
def stats(ctx: Context):
    """Show statistics for every chain."""
    try:
        snapshot = ctx.client.get_general_stats()
    except BlockchairError as e:
        fail(e)

    if ctx.output_format == "table":
        columns = [
            ("chain", "Chain", 14),
            ("price", "Price", 14),
            ("change", "24h", 9),
            ("blocks", "Blocks", 13),
            ("block_age", "Latest Block", 20),
            ("market_cap", "Market Cap", 22),
        ]
        out.output(snapshot_rows(snapshot), "table", columns)
    else:
        out.output(snapshot.to_dict(), ctx.output_format)


@cli.command("chain")
@click.argument("chain", required=False)
@pass_context
def chain_show(ctx: Context, chain: str | None):
    """Show statistics for a single chain."""
    chain = chain or ctx.chain
    try:
        stats_record = ctx.client.get_chain_stats(chain)
    except BlockchairError as e:
        fail(e)

    data = stats_record.model_dump(exclude_none=ctx.output_format == "table")
    if ctx.output_format == "table":
        out.info(f"\n{chain_meta(chain).name}\n")
    out.output(data, ctx.output_format)


@cli.command("transactions")
@click.argument("chain", required=False)
@click.option("--limit", "-n", type=click.IntRange(min=1), default=None, help="Number of transactions")
@pass_context
def transactions(ctx: Context, chain: str | None, limit: int | None):
    """List the latest transactions on a chain."""
    chain = chain or ctx.chain
    try:
        txs = ctx.client.get_recent_transactions(chain, limit or ctx.recent_limit)
    except BlockchairError as e:
        fail(e)

    columns = [
        ("hash", "Hash", 24),
        ("block_id", "Block", 10),
        ("time", "Time", 20),
        ("fee", "Fee", 12),
        ("output_total", "Output Total", 18),
    ]
    out.output(txs, ctx.output_format, columns)


# =============================================================================
# Lookup Commands
# =============================================================================


@cli.command("address")
@click.argument("address")
@pass_context
def address_show(ctx: Context, address: str):
    """Look up an address on the selected chain."""
    try:
        record = ctx.client.get_address(ctx.chain, address)
    except BlockchairError as e:
        fail(e)

    fmt = "json" if ctx.output_format == "table" else ctx.output_format
    out.output(record, fmt)


@cli.command("tx")
@click.argument("txid")
@pass_context
def transaction_show(ctx: Context, txid: str):
    """Look up a transaction on the selected chain."""
    try:
        record = ctx.client.get_transaction(ctx.chain, txid)
    except BlockchairError as e:
        fail(e)

    fmt = "json" if ctx.output_format == "table" else ctx.output_format
    out.output(record, fmt)


if __name__ == "__main__":
    cli()
