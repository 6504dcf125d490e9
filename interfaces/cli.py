"""
Command-line interface for the finsun toolkit.

This CLI provides access to:
- Annuity valuation (payment, term, present value, future value, NPV)
- Periodic rate solving
- Sunrise and sunset estimation
"""

import logging
from datetime import datetime

import click

from finsun.core import annuity
from finsun.core.exceptions import SolverError
from finsun.solvers.rate import solve_rate
from finsun.solvers.solar_event import solve_event

timing_option = click.option(
    "--begin/--end", "at_start", default=False, help="Payments at period start (default: end)"
)


@click.group()
@click.version_option(version="1.0.0")
@click.option("--verbose", "-v", is_flag=True, help="Log solver progress")
def cli(verbose):
    """finsun - annuity formulas, rate solving and sunrise/sunset times."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--rate", "-r", type=float, required=True, help="Periodic rate")
@click.option("--nper", "-n", type=float, required=True, help="Number of periods")
@click.option("--pv", "-p", type=float, required=True, help="Present value")
@click.option("--fv", "-f", type=float, default=0.0, help="Future value")
@timing_option
def pmt(rate, nper, pv, fv, at_start):
    """Payment per period."""
    try:
        value = annuity.pmt(rate, nper, pv, fv, at_start)
        click.echo(f"\nPayment: {value:.4f}")
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)


@cli.command()
@click.option("--rate", "-r", type=float, required=True, help="Periodic rate")
@click.option("--pmt", "-y", type=float, required=True, help="Payment per period")
@click.option("--pv", "-p", type=float, required=True, help="Present value")
@click.option("--fv", "-f", type=float, default=0.0, help="Future value")
@timing_option
def nper(rate, pmt, pv, fv, at_start):
    """Number of periods."""
    try:
        value = annuity.nper(rate, pmt, pv, fv, at_start)
        click.echo(f"\nPeriods: {value:.4f}")
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)


@cli.command()
@click.option("--rate", "-r", type=float, required=True, help="Periodic rate")
@click.option("--nper", "-n", type=float, required=True, help="Number of periods")
@click.option("--pmt", "-y", type=float, required=True, help="Payment per period")
@click.option("--fv", "-f", type=float, default=0.0, help="Future value")
@timing_option
def pv(rate, nper, pmt, fv, at_start):
    """Present value."""
    try:
        value = annuity.pv(rate, nper, pmt, fv, at_start)
        click.echo(f"\nPresent Value: {value:.4f}")
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)


@cli.command()
@click.option("--rate", "-r", type=float, required=True, help="Periodic rate")
@click.option("--nper", "-n", type=float, required=True, help="Number of periods")
@click.option("--pmt", "-y", type=float, required=True, help="Payment per period")
@click.option("--pv", "-p", type=float, default=0.0, help="Present value")
@timing_option
def fv(rate, nper, pmt, pv, at_start):
    """Future value."""
    try:
        value = annuity.fv(rate, nper, pmt, pv, at_start)
        click.echo(f"\nFuture Value: {value:.4f}")
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)


@cli.command()
@click.option("--rate", "-r", type=float, required=True, help="Discount rate per period")
@click.argument("cashflows", type=float, nargs=-1, required=True)
def npv(rate, cashflows):
    """Net present value of CASHFLOWS (first flow discounted one period)."""
    try:
        value = annuity.npv(rate, cashflows)
        click.echo(f"\nNet Present Value: {value:.4f}")
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)


@cli.command()
@click.option("--nper", "-n", type=float, required=True, help="Number of periods")
@click.option("--pmt", "-y", type=float, required=True, help="Payment per period")
@click.option("--pv", "-p", type=float, required=True, help="Present value")
@click.option("--fv", "-f", type=float, default=0.0, help="Future value")
@click.option("--guess", "-g", type=float, default=0.1, help="Seed rate in (0, 1)")
@click.option("--method", "-m", type=click.Choice(["auto", "secant", "brent"]), default="auto")
@timing_option
def rate(nper, pmt, pv, fv, guess, method, at_start):
    """Solve for the periodic interest rate."""
    result = solve_rate(nper, pmt, pv, fv, at_start, guess, method)

    if result.success:
        click.echo(f"\nRate: {result.rate:.8f} ({result.rate*100:.4f}% per period)")
        click.echo(f"Method: {result.method}")
        click.echo(f"Iterations: {result.iterations}")
    else:
        click.echo(f"\nSolver failed: {result.message}", err=True)


def _solar_command(event):
    @click.option("--lat", "latitude", type=float, required=True, help="Latitude (degrees, north positive)")
    @click.option("--lng", "longitude", type=float, required=True, help="Longitude (degrees, east positive)")
    @click.option("--date", "-d", "day", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
                  help="Date (YYYY-MM-DD), default today")
    @click.option("--zone", "-z", type=int, default=None, help="UTC offset in hours, default from longitude")
    def command(latitude, longitude, day, zone):
        day = (day or datetime.now()).date()
        try:
            result = solve_event(latitude, longitude, day, event, zone_offset=zone)
        except (ValueError, SolverError) as e:
            click.echo(f"\nError: {e}", err=True)
            return

        if result.success:
            click.echo(f"\nSun{event}: {result.local_time.isoformat(timespec='minutes')}")
            click.echo(f"UT: {result.utc_hours:.4f} h (zone {result.zone_offset:+d})")
        else:
            click.echo(f"\nSolver failed: {result.message}", err=True)

    command.__doc__ = f"Local time of sun{event}."
    return command


cli.command(name="sunrise")(_solar_command("rise"))
cli.command(name="sunset")(_solar_command("set"))


if __name__ == "__main__":
    cli()
