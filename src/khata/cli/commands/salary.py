"""Salary commands."""

import click
from khata.cli.error_handling import handle_domain_error
from khata.cli.formatting import money
from khata.cli.input_parsing import parse_amount_or_exit, parse_date_or_exit
from khata.domain import salary as salary_domain
from khata.domain.salary import SalaryService, current_pay_period


@click.group()
def salary_group():
    """Pay salaries and see what is still due."""
    pass


@salary_group.command("pay")
@click.argument("employee")
@click.option("--amount", required=True, help="Amount paid")
@click.option("--date", default="today", show_default=True, help="Payment date")
@click.option("--comment", help="Optional note")
@click.pass_context
def pay(ctx, employee: str, amount: str, date: str, comment: str | None):
    """Record a salary payment.

    Examples:
        khata salary pay "Suresh" --amount 5000
        khata salary pay "Suresh" --amount 2000 --date 2024-03-10 --comment Advance
    """
    service = SalaryService(ctx.obj["db"])
    salary_amount = parse_amount_or_exit(ctx, amount)
    salary_date = parse_date_or_exit(ctx, date)

    try:
        salary_id = service.pay_salary(employee, salary_amount, salary_date, comment=comment)
        remaining = service.remaining_salary(employee)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded salary payment {salary_id} of {money(salary_amount)} to {employee}")
    click.echo(f"Remaining this period: {money(remaining)}")


@salary_group.command("history")
@click.argument("employee", required=False)
@click.pass_context
def history(ctx, employee: str | None):
    """List salary payments, newest first."""
    service = SalaryService(ctx.obj["db"])

    try:
        salaries = service.salary_history(employee)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not salaries:
        click.echo("No salary payments found.")
        return

    click.echo(f"\n{'ID':<6} {'Date':<12} {'Employee':<24} {'Amount':>14}  {'Comment'}")
    click.echo("-" * 80)
    for s in salaries:
        click.echo(
            f"{s.id:<6} {str(s.date):<12} {s.employee_name[:24]:<24} "
            f"{money(s.amount):>14}  {s.comment or ''}"
        )


@salary_group.command("remaining")
@click.argument("employee")
@click.option("--as-of", help="Reference date (default: today)")
@click.pass_context
def remaining(ctx, employee: str, as_of: str | None):
    """Show salary still due for the current pay period.

    Examples:
        khata salary remaining "Suresh"
        khata salary remaining "Suresh" --as-of 2024-03-15
    """
    service = SalaryService(ctx.obj["db"])
    today = parse_date_or_exit(ctx, as_of, "as-of date") if as_of else salary_domain.date_today()

    try:
        amount = service.remaining_salary(employee, today=today)
        record = service.employees.require_employee(employee)
    except ValueError as e:
        handle_domain_error(ctx, e)

    period = current_pay_period(record, today)
    if period is not None:
        click.echo(f"Pay period: {period[0]} to {period[1]}")
    click.echo(f"Remaining salary for {record.name}: {money(amount)}")


def register_commands(cli):
    """Register salary commands with main CLI."""
    cli.add_command(salary_group, name="salary")
