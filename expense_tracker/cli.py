# expense_tracker/cli.py
import json
import logging
import os

import click
from dotenv import load_dotenv

from expense_tracker.config import DEFAULT_CONFIG, load_config, save_config
from expense_tracker.core.models import EXPENSE, INCOME, KINDS
from expense_tracker.credentials import create_user, find_by_email
from expense_tracker.dashboard import compute_dashboard
from expense_tracker.database import list_transactions
from expense_tracker.errors import ExpenseTrackerError
from expense_tracker.outputs.excel_output import export_report


def _user_or_fail(cfg, email):
    user = find_by_email(cfg['db_path'], email)
    if user is None:
        raise click.ClickException(f"No user registered with {email}")
    return user


@click.group()
@click.option(
    '--config', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional YAML config file'
)
@click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file (JWT_SECRET, EXPENSE_TRACKER_DB, ...)'
)
@click.pass_context
def main(ctx, config_path, env_file):
    """
    Personal income and expense tracker: run the API or manage data locally.
    """
    if env_file:
        load_dotenv(env_file)
    cfg = load_config(config_path)
    logging.basicConfig(
        level=cfg['log_level'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    ctx.obj = cfg


@main.command()
@click.option('--host', default='127.0.0.1', show_default=True, help='Host to bind')
@click.option('--port', default=8000, type=int, show_default=True, help='Port to bind')
@click.pass_obj
def serve(cfg, host, port):
    """Run the REST API."""
    import uvicorn
    from webapp.main import create_app

    try:
        app = create_app(cfg)
    except RuntimeError as e:
        raise click.ClickException(str(e))
    click.echo(f"Expense tracker API running at http://{host}:{port}{cfg['api_prefix']} (db: {cfg['db_path']})")
    uvicorn.run(app, host=host, port=port, log_level=cfg['log_level'].lower())


@main.command('create-user')
@click.option('--full-name', required=True, help='Display name')
@click.option('--email', required=True, help='Login email')
@click.password_option('--password', help='Password (prompted when omitted)')
@click.pass_obj
def create_user_cmd(cfg, full_name, email, password):
    """Register a user."""
    try:
        user = create_user(cfg['db_path'], full_name, email, password, rounds=cfg['bcrypt_rounds'])
    except ExpenseTrackerError as e:
        raise click.ClickException(e.message)
    click.echo(f"Created user {user.id} <{user.email}>")


@main.command()
@click.option('--email', required=True, help='Owner of the transactions')
@click.option(
    '--kind',
    required=True,
    type=click.Choice(sorted(KINDS)),
    help='Which transactions to export'
)
@click.option(
    '--out', 'out_path',
    default=None,
    type=click.Path(dir_okay=False, writable=True),
    help='Output file (default: <kind>_report.xlsx)'
)
@click.pass_obj
def export(cfg, email, kind, out_path):
    """Write a user's income or expenses to an Excel workbook."""
    user = _user_or_fail(cfg, email)
    tx_kind = KINDS[kind]
    txs = list_transactions(cfg['db_path'], tx_kind, user.id)
    out_path = out_path or tx_kind.report_filename
    with open(out_path, 'wb') as f:
        f.write(export_report(txs, tx_kind))
    click.echo(f"Written {len(txs)} {tx_kind.name} record(s) to {out_path}")


@main.command()
@click.option('--email', required=True, help='User to summarize')
@click.pass_obj
def dashboard(cfg, email):
    """Print a user's dashboard summary as JSON."""
    user = _user_or_fail(cfg, email)
    summary = compute_dashboard(
        user.id,
        list_transactions(cfg['db_path'], INCOME, user.id),
        list_transactions(cfg['db_path'], EXPENSE, user.id),
    )
    click.echo(json.dumps(summary.to_dict(), indent=2))


@main.command('init-config')
@click.argument('path', type=click.Path(dir_okay=False, writable=True))
@click.option('--force', is_flag=True, help='Overwrite an existing file')
def init_config(path, force):
    """Write a config file holding the default settings."""
    if os.path.exists(path) and not force:
        raise click.ClickException(f"{path} already exists (use --force to overwrite)")
    save_config(DEFAULT_CONFIG, path)
    click.echo(f"Wrote default config to {path}")
