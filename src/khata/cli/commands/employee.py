"""Employee management commands."""

import click
from khata.cli.error_handling import handle_domain_error
from khata.cli.formatting import money
from khata.cli.input_parsing import parse_amount_or_exit
from khata.domain.employee import EmployeeService

DAY = click.IntRange(1, 31)


@click.group()
def employee_group():
    """Manage employees and their salary terms."""
    pass


@employee_group.command("add")
@click.argument("name")
@click.option("--basic-salary", help="Basic salary per pay period")
@click.option("--period-start", type=DAY, help="Day of month the pay period starts")
@click.option("--period-end", type=DAY, help="Day of month the pay period ends")
@click.pass_context
def add_employee(
    ctx,
    name: str,
    basic_salary: str | None,
    period_start: int | None,
    period_end: int | None,
):
    """Add an employee.

    Examples:
        khata employee add "Suresh" --basic-salary 18000 --period-start 1 --period-end 30
        khata employee add "Meena" --basic-salary 15000 --period-start 25 --period-end 24
    """
    service = EmployeeService(ctx.obj["db"])
    salary = parse_amount_or_exit(ctx, basic_salary, "basic salary") if basic_salary else None

    try:
        employee_id = service.create_employee(
            name,
            basic_salary=salary,
            salary_period_start=period_start,
            salary_period_end=period_end,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created employee '{name.strip()}' (ID: {employee_id})")


@employee_group.command("list")
@click.pass_context
def list_employees(ctx):
    """List employees with their salary terms."""
    employees = EmployeeService(ctx.obj["db"]).list_employees()
    if not employees:
        click.echo("No employees found.")
        return

    click.echo(f"\n{'Name':<24} {'Basic salary':>14}  {'Pay period'}")
    click.echo("-" * 56)
    for e in employees:
        if e.salary_period_start is not None:
            period = f"day {e.salary_period_start} to day {e.salary_period_end}"
        else:
            period = "-"
        click.echo(f"{e.name[:24]:<24} {money(e.basic_salary):>14}  {period}")


@employee_group.command("terms")
@click.argument("name")
@click.option("--basic-salary", required=True, help="Basic salary per pay period")
@click.option("--period-start", type=DAY, help="Day of month the pay period starts")
@click.option("--period-end", type=DAY, help="Day of month the pay period ends")
@click.pass_context
def update_terms(
    ctx,
    name: str,
    basic_salary: str,
    period_start: int | None,
    period_end: int | None,
):
    """Set an employee's basic salary and pay period.

    Examples:
        khata employee terms "Suresh" --basic-salary 20000 --period-start 1 --period-end 30
    """
    service = EmployeeService(ctx.obj["db"])
    salary = parse_amount_or_exit(ctx, basic_salary, "basic salary")

    try:
        service.update_salary_terms(name, salary, period_start, period_end)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated salary terms for '{name}'")


def register_commands(cli):
    """Register employee commands with main CLI."""
    cli.add_command(employee_group, name="employee")
