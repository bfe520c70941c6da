# finance_tracker/cli.py
from contextlib import contextmanager
from datetime import date

import click
from dotenv import load_dotenv

from finance_tracker import database as db
from finance_tracker.config import configure_logging, load_config
from finance_tracker.core.aggregator import category_breakdown, month_totals, monthly_series, total_balance
from finance_tracker.core.categories import CategoryIndex
from finance_tracker.core.models import to_decimal
from finance_tracker.core.savings import goal_progress, split_goals
from finance_tracker.formatting import format_currency, format_percentage, settings_for_currency
from finance_tracker.loaders import get_loader
from finance_tracker.manual import load_manual_transactions
from finance_tracker.outputs import get_output
from finance_tracker.reports import build_report

KINDS = click.Choice(['income', 'expense'])


@contextmanager
def _reported_errors():
    """Turn store and validation errors into a one-line CLI error."""
    try:
        yield
    except (KeyError, ValueError, FileNotFoundError, RuntimeError) as exc:
        message = exc.args[0] if exc.args else str(exc)
        raise click.ClickException(str(message)) from exc


def _parse_amount(ctx, param, value):
    if value is None:
        return None
    try:
        return to_decimal(value)
    except ValueError as exc:
        raise click.ClickException(f"Invalid {param.name}: {exc}") from exc


def _parse_month(ctx, param, value):
    if value is None:
        return date.today()
    try:
        year, month = map(int, value.split('-'))
        return date(year, month, 1)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not in YYYY-MM format")


month_option = click.option(
    '--month', callback=_parse_month, default=None,
    help='Reference month as YYYY-MM (default: current month)'
)


class AppContext:
    def __init__(self, config, db_path, user_id):
        self.config = config
        self.db_path = db_path
        self.user_id = user_id
        self._settings = None

    def settings(self):
        if self._settings is not None:
            return self._settings
        try:
            currency = db.get_profile(self.db_path, self.user_id).currency
        except KeyError:
            currency = self.config.get('currency', 'BRL')
        self._settings = settings_for_currency(currency)
        return self._settings

    def money(self, amount):
        return format_currency(amount, self.settings())

    def snapshot(self):
        return (
            db.fetch_transactions(self.db_path, self.user_id),
            db.list_categories(self.db_path, self.user_id),
        )

    def resolve_category(self, value, kind):
        """Match a category by id, or by name within *kind* (case-insensitive)."""
        if not value:
            return None
        index = CategoryIndex(db.list_categories(self.db_path, self.user_id))
        if value in index:
            return value
        wanted = value.strip().lower()
        for c in index.of_kind(kind):
            if c.name.lower() == wanted:
                return c.id
        raise KeyError(f"No {kind} category named '{value}'")


pass_app = click.make_pass_decorator(AppContext)


@click.group()
@click.option(
    '--config', 'config_path',
    default='config.yaml',
    type=click.Path(dir_okay=False),
    help='Path to config.yaml (defaults are used when it does not exist)'
)
@click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file with FINANCE_TRACKER_* settings'
)
@click.option(
    '--db', 'db_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='SQLite database file (overrides config)'
)
@click.option('--user', 'user_id', default=None, help='User id (overrides config)')
@click.pass_context
def main(ctx, config_path, env_file, db_path, user_id):
    """
    Track income and expenses, savings goals and a piggy bank, and report
    monthly totals and category breakdowns.
    """
    if env_file:
        load_dotenv(env_file)
    configure_logging()
    with _reported_errors():
        cfg = load_config(config_path)
    ctx.obj = AppContext(
        cfg,
        db_path or cfg['db_path'],
        user_id or cfg['user_id'],
    )


@main.command()
@click.option('--name', default='', help='Display name')
@click.option('--email', default='', help='Contact email')
@click.option('--currency', default=None, help='Currency code, e.g. BRL, USD, EUR')
@pass_app
def init(app, name, email, currency):
    """Create the database and seed default categories."""
    profile = db.bootstrap_user(
        app.db_path, app.user_id, name=name, email=email,
        currency=currency or app.config.get('currency', 'BRL'),
    )
    click.echo(f"Ready: {app.db_path} (user {profile.user_id}, currency {profile.currency}).")


@main.command()
@click.option('--name', default=None)
@click.option('--email', default=None)
@click.option('--currency', default=None)
@pass_app
def profile(app, name, email, currency):
    """Show or update the profile."""
    with _reported_errors():
        p = db.update_profile(app.db_path, app.user_id, name=name, email=email, currency=currency)
    click.echo(f"{p.name or '-'} <{p.email or '-'}> currency {p.currency}")


@main.command()
@click.argument('kind', type=KINDS)
@click.argument('amount', callback=_parse_amount)
@click.option('--date', 'tx_date', type=click.DateTime(formats=['%Y-%m-%d']), default=None,
              help='Transaction date (default: today)')
@click.option('--category', default=None, help='Category id or name')
@click.option('--description', default=None)
@pass_app
def add(app, kind, amount, tx_date, category, description):
    """Record an income or expense."""
    with _reported_errors():
        tx = db.add_transaction(
            app.db_path, app.user_id, kind, amount,
            tx_date.date() if tx_date else date.today(),
            category_id=app.resolve_category(category, kind),
            description=description,
        )
    click.echo(f"Added {tx.kind.value} {app.money(tx.amount)} on {tx.date.isoformat()} ({tx.id}).")


@main.command()
@click.argument('transaction_id')
@pass_app
def delete(app, transaction_id):
    """Delete a transaction."""
    with _reported_errors():
        db.delete_transaction(app.db_path, app.user_id, transaction_id)
    click.echo("Transaction deleted.")


@main.command(name='list')
@click.option('--limit', default=10, show_default=True, type=int)
@pass_app
def list_transactions(app, limit):
    """Show the most recent transactions."""
    txs = db.recent_transactions(app.db_path, app.user_id, limit=limit)
    if not txs:
        click.echo("No transactions.")
        return
    for tx in txs:
        sign = '+' if tx.kind.value == 'income' else '-'
        click.echo(
            f"{tx.date.isoformat()}  {sign}{app.money(tx.amount):>14}  "
            f"{tx.description or ''}  [{tx.id}]"
        )


@main.command(name='import')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--format', 'fmt', default=None, type=click.Choice(['yaml', 'csv']),
              help='File format (default: guessed from extension)')
@pass_app
def import_transactions(app, path, fmt):
    """Import transactions from a YAML file or a bank CSV export."""
    fmt = fmt or ('csv' if path.lower().endswith('.csv') else 'yaml')
    with _reported_errors():
        if fmt == 'csv':
            entries = list(get_loader('csv', app.config).load(path))
        else:
            entries = load_manual_transactions(path)

    imported, skipped = 0, 0
    for entry in entries:
        try:
            category_id = app.resolve_category(entry.category, entry.kind.value)
            db.add_transaction(
                app.db_path, app.user_id, entry.kind, entry.amount, entry.date,
                category_id=category_id, description=entry.description,
            )
            imported += 1
        except (KeyError, ValueError) as e:
            skipped += 1
            click.echo(f"Skipping {entry.date} {entry.amount}: {e.args[0]}", err=True)
    click.echo(f"Imported {imported} transaction(s), skipped {skipped}.")


@main.command()
@month_option
@pass_app
def summary(app, month):
    """Totals for a month and the all-time balance."""
    transactions, _ = app.snapshot()
    totals = month_totals(transactions, month)
    click.echo(f"{month:%B %Y}")
    click.echo(f"  Income:  {app.money(totals.income)}")
    click.echo(f"  Expense: {app.money(totals.expense)}")
    click.echo(f"  Balance: {app.money(totals.balance)}")
    click.echo(f"Total balance: {app.money(total_balance(transactions))}")


@main.command()
@month_option
@click.option('--count', default=None, type=int, help='Number of months (default: report_months)')
@pass_app
def series(app, month, count):
    """Income and expense per month, oldest first."""
    transactions, _ = app.snapshot()
    with _reported_errors():
        if count is None:
            count = int(app.config['report_months'])
        months = monthly_series(transactions, month, count)
    for m in months:
        click.echo(
            f"{m.label} {m.year}  income {app.money(m.income)}  "
            f"expense {app.money(m.expense)}  balance {app.money(m.balance)}"
        )


@main.command()
@month_option
@click.option('--kind', default='expense', type=KINDS, show_default=True)
@pass_app
def breakdown(app, month, kind):
    """Per-category totals for a month."""
    transactions, categories = app.snapshot()
    stats = category_breakdown(transactions, categories, month, kind)
    if not stats:
        click.echo(f"No {kind} transactions in {month:%B %Y}.")
        return
    for s in stats:
        noun = 'transaction' if s.count == 1 else 'transactions'
        click.echo(
            f"{s.name:<16} {app.money(s.total):>14}  {format_percentage(s.percentage):>6}  "
            f"{s.count} {noun}"
        )


@main.command()
@month_option
@click.option('--output', 'output_format', default='csv', type=click.Choice(['csv', 'excel']),
              help='Output target: csv or excel')
@pass_app
def export(app, month, output_format):
    """Write the report for a month to CSV or Excel."""
    transactions, categories = app.snapshot()
    report = build_report(transactions, categories, month, int(app.config['report_months']))
    path = get_output(output_format, app.config).write(report)
    click.echo(f"Exported {output_format.upper()} report to {path}.")


@main.command()
@click.option('--yes', is_flag=True, default=False, help='Do not ask for confirmation')
@pass_app
def clear(app, yes):
    """Delete transactions, goals and piggy bank history."""
    if not yes:
        click.confirm('This removes all transactions, goals and piggy bank history. Continue?',
                      abort=True)
    db.clear_all_data(app.db_path, app.user_id)
    click.echo("All data cleared.")


# -----------------------------------------------------------------------------
# Categories
# -----------------------------------------------------------------------------

@main.group()
def category():
    """Manage categories."""


@category.command(name='list')
@click.option('--kind', default=None, type=KINDS)
@pass_app
def category_list(app, kind):
    for c in db.list_categories(app.db_path, app.user_id, kind=kind):
        click.echo(f"{c.kind.value:<8} {c.name:<16} {c.icon:<16} {c.color}  [{c.id}]")


@category.command(name='add')
@click.argument('name')
@click.option('--kind', required=True, type=KINDS)
@click.option('--icon', default='Circle', show_default=True)
@click.option('--color', default='#888888', show_default=True)
@pass_app
def category_add(app, name, kind, icon, color):
    with _reported_errors():
        c = db.add_category(app.db_path, app.user_id, name, icon, color, kind)
    click.echo(f"Added category {c.name} ({c.id}).")


@category.command(name='update')
@click.argument('category_id')
@click.option('--name', default=None)
@click.option('--icon', default=None)
@click.option('--color', default=None)
@click.option('--kind', default=None, type=KINDS)
@pass_app
def category_update(app, category_id, name, icon, color, kind):
    with _reported_errors():
        c = db.update_category(app.db_path, app.user_id, category_id,
                               name=name, icon=icon, color=color, kind=kind)
    click.echo(f"Updated category {c.name}.")


@category.command(name='delete')
@click.argument('category_id')
@pass_app
def category_delete(app, category_id):
    with _reported_errors():
        db.delete_category(app.db_path, app.user_id, category_id)
    click.echo("Category deleted.")


# -----------------------------------------------------------------------------
# Savings goals
# -----------------------------------------------------------------------------

@main.group()
def goal():
    """Manage savings goals."""


@goal.command(name='list')
@pass_app
def goal_list(app):
    active, completed = split_goals(db.list_savings_goals(app.db_path, app.user_id))
    if not active and not completed:
        click.echo("No savings goals.")
        return
    for g in active:
        deadline = f" until {g.deadline.isoformat()}" if g.deadline else ''
        click.echo(
            f"{g.name}: {app.money(g.current_amount)} of {app.money(g.target_amount)} "
            f"({goal_progress(g):.0f}%){deadline}  [{g.id}]"
        )
    for g in completed:
        click.echo(f"{g.name}: completed ({app.money(g.target_amount)})  [{g.id}]")


@goal.command(name='add')
@click.argument('name')
@click.argument('target', callback=_parse_amount)
@click.option('--deadline', type=click.DateTime(formats=['%Y-%m-%d']), default=None)
@click.option('--icon', default=None)
@click.option('--color', default=None)
@pass_app
def goal_add(app, name, target, deadline, icon, color):
    with _reported_errors():
        g = db.add_savings_goal(app.db_path, app.user_id, name, target, icon=icon, color=color,
                                deadline=deadline.date() if deadline else None)
    click.echo(f"Created goal {g.name} ({g.id}).")


@goal.command(name='contribute')
@click.argument('goal_id')
@click.argument('amount', callback=_parse_amount)
@pass_app
def goal_contribute(app, goal_id, amount):
    with _reported_errors():
        g = db.contribute_to_goal(app.db_path, app.user_id, goal_id, amount)
    if g.is_completed:
        click.echo(f"Goal {g.name} reached!")
    else:
        click.echo(f"+{app.money(amount)} added to {g.name} ({goal_progress(g):.0f}%).")


@goal.command(name='delete')
@click.argument('goal_id')
@pass_app
def goal_delete(app, goal_id):
    with _reported_errors():
        db.delete_savings_goal(app.db_path, app.user_id, goal_id)
    click.echo("Goal deleted.")


# -----------------------------------------------------------------------------
# Piggy bank
# -----------------------------------------------------------------------------

@main.group()
def piggy():
    """Piggy bank deposits and withdrawals."""


@piggy.command(name='show')
@click.option('--limit', default=10, show_default=True, type=int)
@pass_app
def piggy_show(app, limit):
    with _reported_errors():
        bank = db.get_piggy_bank(app.db_path, app.user_id)
    click.echo(f"Piggy bank balance: {app.money(bank.balance)}")
    for entry in db.list_piggy_bank_entries(app.db_path, app.user_id)[:limit]:
        sign = '+' if entry.kind.value == 'deposit' else '-'
        click.echo(f"  {entry.created_at:%Y-%m-%d}  {sign}{app.money(entry.amount)}  {entry.description or ''}")


@piggy.command(name='deposit')
@click.argument('amount', callback=_parse_amount)
@click.option('--description', default=None)
@pass_app
def piggy_deposit(app, amount, description):
    with _reported_errors():
        bank = db.deposit_to_piggy_bank(app.db_path, app.user_id, amount, description)
    click.echo(f"+{app.money(amount)} deposited. Balance: {app.money(bank.balance)}")


@piggy.command(name='withdraw')
@click.argument('amount', callback=_parse_amount)
@click.option('--description', default=None)
@pass_app
def piggy_withdraw(app, amount, description):
    with _reported_errors():
        bank = db.withdraw_from_piggy_bank(app.db_path, app.user_id, amount, description)
    click.echo(f"{app.money(amount)} withdrawn. Balance: {app.money(bank.balance)}")


if __name__ == '__main__':
    main()
