from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Tuple

import click
from rich import box
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from appspider.enterprise.cli.config_builder import build_auth_model, build_client_config
from appspider.enterprise.clients import EnterpriseRestClient
from appspider.enterprise.interfaces import AppSpiderException, ScanStatus, ScanTimeoutError
from appspider.enterprise.logger import init_logger
from appspider.enterprise.report import ReportDownloader
from appspider.enterprise.scan_monitor import DEFAULT_POLL_INTERVAL, ScanMonitor

console = Console()


@contextmanager
def open_session(ctx: click.Context) -> Iterator[Tuple[EnterpriseRestClient, str]]:
    """설정 해석 -> 클라이언트 생성 -> 로그인. 실패 시 ClickException"""
    opts = ctx.obj
    try:
        config = build_client_config(
            opts["url"],
            timeout=opts["timeout"],
            retry=opts["retry"],
            verify_ssl=opts["verify_ssl"],
        )
        auth_model = build_auth_model(opts["username"], opts["password"], opts["client_id"])
    except AppSpiderException as exc:
        raise click.ClickException(exc.message)

    with EnterpriseRestClient(config) as client:
        token = client.login(auth_model)
        if token is None:
            raise click.ClickException(f"Authentication failed for {auth_model.username} at {client.get_url()}")
        yield client, token


def _name_table(title: str, header: str, names) -> Table:
    table = Table(title=title, title_style="bold cyan", box=box.MINIMAL_HEAVY_HEAD, header_style="bold white")
    table.add_column(header)
    for name in names:
        table.add_row(name)
    return table


# CLI Root
@click.group()
@click.option("--url", help="Enterprise REST endpoint (env: APPSPIDER_URL)")
@click.option("--username", help="Username (env: APPSPIDER_USERNAME)")
@click.option("--password", help="Password (env: APPSPIDER_PASSWORD)")
@click.option("--client-id", help="Client (tenant) id (env: APPSPIDER_CLIENT_ID)")
@click.option("--timeout", default=30.0, show_default=True, help="Request timeout in seconds")
@click.option("--retry", default=1, show_default=True, help="Retries on network errors")
@click.option("--no-verify-ssl", is_flag=True, help="Disable TLS certificate verification")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option("--log-file", help="Log file path")
@click.pass_context
def cli(ctx, url, username, password, client_id, timeout, retry, no_verify_ssl, verbose, log_file):
    """AppSpider Enterprise REST client"""
    init_logger(verbose, log_file)
    ctx.obj = {
        "url": url,
        "username": username,
        "password": password,
        "client_id": client_id,
        "timeout": timeout,
        "retry": retry,
        "verify_ssl": not no_verify_ssl,
    }


@cli.command("test-auth")
@click.pass_context
def test_auth(ctx):
    """Check that the credentials are accepted"""
    with open_session(ctx) as (client, _token):
        console.print(f"[green]✅ Authenticated against {client.get_url()}[/]")


@cli.command("engine-groups")
@click.pass_context
def engine_groups(ctx):
    """List engine group names"""
    with open_session(ctx) as (client, token):
        names = client.get_engine_group_names_for_client(token)
        if names is None:
            raise click.ClickException("Failed to fetch engine groups")
        console.print(_name_table("⚙️ Engine Groups", "Name", names))


@cli.command("configs")
@click.pass_context
def configs(ctx):
    """List scan config names"""
    with open_session(ctx) as (client, token):
        names = client.get_config_names(token)
        if names is None:
            raise click.ClickException("Failed to fetch scan configs")
        console.print(_name_table("🗂 Scan Configs", "Name", names))


@cli.command("clients")
@click.pass_context
def clients(ctx):
    """List accessible clients (tenants)"""
    with open_session(ctx) as (client, token):
        pairs = client.get_client_name_id_pairs(token)
        if pairs is None:
            raise click.ClickException("Failed to fetch clients")
        table = Table(title="🏢 Clients", title_style="bold cyan", box=box.MINIMAL_HEAVY_HEAD, header_style="bold white")
        table.add_column("Id")
        table.add_column("Name")
        for pair in pairs:
            table.add_row(pair.id, pair.name)
        console.print(table)


@cli.command("save-config")
@click.option("--name", required=True, help="Scan config name")
@click.option("--target-url", required=True, help="Target URL to scan")
@click.option("--engine-group", required=True, help="Engine group name")
@click.pass_context
def save_config(ctx, name, target_url, engine_group):
    """Create or update a scan config"""
    with open_session(ctx) as (client, token):
        engine_group_id = client.get_engine_group_id_from_name(token, engine_group)
        if engine_group_id is None:
            raise click.ClickException(f"Engine group not found: {engine_group}")
        if not client.save_config(token, name, target_url, engine_group_id):
            raise click.ClickException(f"Failed to save config {name}")
        console.print(f"[green]💾 Saved config[/] [bold]{name}[/] → {target_url}")


def _download(client, token: str, scan_id: str, output_dir: Path) -> None:
    paths = ReportDownloader(client, output_dir).download_all(token, scan_id)
    if not paths:
        raise click.ClickException(f"No report available for scan {scan_id}")
    for path in paths:
        console.print(f"📄 {path}")


@cli.command("run")
@click.option("--config-name", required=True, help="Scan config to run")
@click.option("--wait", is_flag=True, help="Wait for the scan to finish")
@click.option("--poll-interval", type=click.FloatRange(min=0, min_open=True), default=DEFAULT_POLL_INTERVAL, show_default=True, help="Seconds between status checks")
@click.option("--max-wait", type=float, default=None, help="Give up waiting after N seconds")
@click.option("-o", "--output-dir", type=click.Path(file_okay=False, path_type=Path), help="Download reports here after the scan")
@click.pass_context
def run(ctx, config_name, wait, poll_interval, max_wait, output_dir):
    """Start a scan from a saved config"""
    with open_session(ctx) as (client, token):
        result = client.run_scan_by_config_name(token, config_name)
        if not result.success:
            raise click.ClickException(f"Failed to start scan for config {config_name}")
        console.print(f"🚀 Scan started: [bold]{result.scan_id}[/]")

        if not wait:
            return

        progress = Progress(
            SpinnerColumn(style="bold cyan"),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        )
        monitor = ScanMonitor(client, poll_interval=poll_interval, timeout=max_wait)
        with progress:
            task = progress.add_task("🧭 Waiting for scan", total=None)
            try:
                status = monitor.wait(
                    token,
                    result.scan_id,
                    on_status=lambda s: progress.update(task, description=f"🧭 {s or 'Unknown'}"),
                )
            except ScanTimeoutError as exc:
                raise click.ClickException(exc.message)
        console.print(f"🏁 Scan {result.scan_id} finished: [bold]{status or 'Unknown'}[/]")

        if output_dir:
            _download(client, token, result.scan_id, output_dir)


@cli.command("status")
@click.option("--scan-id", required=True)
@click.pass_context
def status(ctx, scan_id):
    """Show scan status"""
    with open_session(ctx) as (client, token):
        current = client.get_scan_status(token, scan_id)
        if current is None:
            raise click.ClickException(f"Failed to fetch status for scan {scan_id}")
        finished = client.is_scan_finished(token, scan_id)
        table = Table(title="🔎 Scan Status", title_style="bold magenta", box=box.SIMPLE_HEAVY, show_header=False)
        table.add_row("🆔 Scan ID", scan_id)
        style = "green" if ScanStatus.is_terminal(current) else "yellow"
        table.add_row("📌 Status", f"[bold {style}]{current}[/]")
        table.add_row("🏁 Finished", "yes" if finished else "no")
        table.add_row("📄 Report", "yes" if finished and client.has_report(token, scan_id) else "no")
        console.print(table)


@cli.command("report")
@click.option("--scan-id", required=True)
@click.option("-o", "--output-dir", required=True, type=click.Path(file_okay=False, path_type=Path))
@click.pass_context
def report(ctx, scan_id, output_dir):
    """Download the vulnerability summary XML and report zip"""
    with open_session(ctx) as (client, token):
        _download(client, token, scan_id, output_dir)


if __name__ == "__main__":
    cli()
