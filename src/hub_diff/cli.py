"""hub-diff command line."""
from __future__ import annotations

import json
from pathlib import Path

import click

from hub_core.protocol import DEFAULT_FETCH_TIMEOUT, DEFAULT_RPC_PORT
from hub_core.sync_id import SyncIdType, decode_sync_id, describe, parse_sync_id_text
from hub_core.window import resolve_time_window

from .differ import HubStateDiffer
from .export import CANONICAL_JSON_KW, verify_diff_export, write_diff_export
from .report import GRANULARITIES, render_report
from .sources import HttpSyncIdSource, RpcEndpoint, SnapshotFileSource


def _fatal(e: Exception) -> None:
    # Fail closed with a single-line reason, no stack trace.
    click.echo(f"FATAL: {e}")
    raise SystemExit(1)


def _check_side(side: str, endpoint: str | None, path: Path | None) -> None:
    if (endpoint is None) == (path is None):
        raise click.UsageError(f"Give exactly one of --{side}-endpoint or --{side}-file")


def _source(endpoint: str | None, port: int, http: bool, https: bool, path: Path | None, timeout: float):
    if path is not None:
        return SnapshotFileSource(path)
    return HttpSyncIdSource.from_endpoint(RpcEndpoint(endpoint, port=port, http=http, https=https), timeout=timeout)


def _endpoint_options(side: str):
    def deco(f):
        f = click.option(f"--{side}-file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
                         help=f"Read {side} sync ids from a JSON snapshot instead of a hub")(f)
        f = click.option(f"--{side}-https", is_flag=True, default=False)(f)
        f = click.option(f"--{side}-http/--no-{side}-http", default=True)(f)
        f = click.option(f"--{side}-port", type=int, default=DEFAULT_RPC_PORT, show_default=True)(f)
        f = click.option(f"--{side}-endpoint", help=f"{side.capitalize()} hub host")(f)
        return f
    return deco


@click.group()
def main():
    pass


@main.command("diff")
@_endpoint_options("source")
@_endpoint_options("target")
@click.option("--event-type", help="Only compare one record type (message, fname, onchain-event)")
@click.option("--from-day", help="YYYY-MM-DD")
@click.option("--to-day", help="YYYY-MM-DD")
@click.option("--from-hour", help="HH:MM:SS, today (UTC)")
@click.option("--to-hour", help="HH:MM:SS, today (UTC)")
@click.option("--bucket", type=click.Choice(sorted(GRANULARITIES)), default="hour", show_default=True)
@click.option("--timeout", type=float, default=DEFAULT_FETCH_TIMEOUT, show_default=True)
@click.option("--export", "export_dir", type=click.Path(file_okay=False, path_type=Path),
              help="Also write the diff as Parquet into this directory")
def diff_cmd(
    source_endpoint, source_port, source_http, source_https, source_file,
    target_endpoint, target_port, target_http, target_https, target_file,
    event_type, from_day, to_day, from_hour, to_hour, bucket, timeout, export_dir,
):
    """Compare the sync ids two hubs hold for a time window."""
    _check_side("source", source_endpoint, source_file)
    _check_side("target", target_endpoint, target_file)

    try:
        source = _source(source_endpoint, source_port, source_http, source_https, source_file, timeout)
        target = _source(target_endpoint, target_port, target_http, target_https, target_file, timeout)
        record_type = SyncIdType.from_name(event_type) if event_type else None
        window = resolve_time_window(from_day, to_day, from_hour, to_hour)
        click.echo(f"Performing diff between {window.start} and {window.end}", err=True)

        differ = HubStateDiffer(source, target)
        report = differ.diff_sync_ids(window, record_type)
        click.echo(
            f"Fetched {differ.fetch_stats['source']} source / {differ.fetch_stats['target']} target sync ids",
            err=True,
        )

        click.echo(render_report(report, bucket))

        if export_dir is not None:
            manifest = write_diff_export(report, export_dir)
            click.echo(f"Exported diff to {export_dir} (root {manifest['integrity']['root']})", err=True)
    except Exception as e:
        _fatal(e)


@main.command("verify-export")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
def verify_export_cmd(path: Path):
    """Check an exported diff's Parquet files against its manifest."""
    result = verify_diff_export(path)
    click.echo(json.dumps(result, **CANONICAL_JSON_KW))
    if result["status"] != "PASS":
        raise SystemExit(1)


@main.group("parse")
def parse_group():
    """Decode protocol values."""


@parse_group.command("sync-id")
@click.argument("sync_id")
def parse_sync_id_cmd(sync_id: str):
    """Decode a sync id given as comma-separated bytes, e.g. 48,49,48,...,1,0,0,7,243."""
    try:
        decoded = decode_sync_id(parse_sync_id_text(sync_id))
    except Exception as e:
        _fatal(e)
    click.echo(json.dumps(describe(decoded), **CANONICAL_JSON_KW))


if __name__ == "__main__":
    main()
