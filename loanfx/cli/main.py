from __future__ import annotations

import asyncio
from typing import Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table

from loanfx.config import load_config
from loanfx.currency.catalog import CurrencyCatalog
from loanfx.currency.models import ConversionResult, ExchangeRateSet
from loanfx.health import get_health_status
from loanfx.loan.engine import compute
from loanfx.loan.models import LoanCalculationResult, LoanDetails
from loanfx.session import LoanFxSession
from loanfx.utils.errors import LoanFxError, RateUnavailable


app = typer.Typer(add_completion=False, help="Loan amortization and currency conversion")
console = Console()


def _money(value: float) -> str:
    return f"{value:,.2f}"


def _yearly_table(result: LoanCalculationResult) -> Table:
    df = result.to_frame()
    df["year"] = (df.index - 1) // 12 + 1
    yearly = df.groupby("year").agg(
        payments=("payment_amount", "sum"),
        principal=("principal_paid", "sum"),
        interest=("interest_paid", "sum"),
        balance=("remaining_balance", "last"),
    )

    table = Table(title="Yearly totals")
    for name in ("Year", "Payments", "Principal", "Interest", "Balance"):
        table.add_column(name, justify="right")
    for year, row in yearly.iterrows():
        table.add_row(
            str(year),
            _money(row["payments"]),
            _money(row["principal"]),
            _money(row["interest"]),
            _money(row["balance"]),
        )
    return table


def _schedule_table(result: LoanCalculationResult, limit: Optional[int]) -> Table:
    rows = result.schedule if limit is None else result.schedule[:limit]
    table = Table(title="Amortization schedule")
    for name in ("#", "Payment", "Principal", "Interest", "Balance"):
        table.add_column(name, justify="right")
    for row in rows:
        table.add_row(
            str(row.payment_number),
            _money(row.payment_amount),
            _money(row.principal_paid),
            _money(row.interest_paid),
            _money(row.remaining_balance),
        )
    return table


@app.command("schedule")
def schedule(
    principal: float = typer.Option(..., "--principal", "-p", help="Loan amount"),
    rate: float = typer.Option(..., "--rate", "-r", help="Annual interest rate in percent"),
    term: int = typer.Option(..., "--term", "-t", help="Term in months"),
    yearly: bool = typer.Option(False, "--yearly", help="Show yearly totals instead of every payment"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Show only the first N payments"),
):
    """Compute a monthly amortization schedule."""
    try:
        result = compute(LoanDetails(principal=principal, annual_interest_rate=rate, term_months=term))
    except LoanFxError as e:
        typer.secho(f"Invalid loan: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    summary = Table(show_header=False, box=None)
    summary.add_column("Metric", style="bold")
    summary.add_column("Value", justify="right")
    summary.add_row("Monthly payment", _money(result.monthly_payment))
    summary.add_row("Total payment", _money(result.total_payment))
    summary.add_row("Total interest", _money(result.total_interest))
    console.print(summary)
    console.print(_yearly_table(result) if yearly else _schedule_table(result, limit))


async def _convert(amount: float, from_code: str, to_code: str, base: Optional[str]) -> ConversionResult:
    session = LoanFxSession.from_config(load_config())
    async with session:
        if base:
            session.rates.set_base_currency(base)
        state = await session.rates.wait()
        if state.rates is None and state.error is not None:
            raise state.error
        return session.converter.convert(amount, from_code, to_code)


@app.command("convert")
def convert(
    amount: float = typer.Argument(..., help="Amount to convert"),
    from_code: str = typer.Argument(..., help="Source currency code"),
    to_code: str = typer.Argument(..., help="Target currency code"),
    base: Optional[str] = typer.Option(None, "--base", "-b", help="Pivot currency to fetch rates for"),
):
    """Convert an amount using live exchange rates."""
    try:
        result = asyncio.run(_convert(amount, from_code, to_code, base))
    except LoanFxError as e:
        typer.secho(f"Conversion failed: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    typer.echo(
        f"{_money(result.amount)} {result.from_code} = "
        f"{_money(result.converted_amount)} {result.to_code} (rate {result.rate:.6f})"
    )


async def _load_rates(base: Optional[str]) -> Tuple[ExchangeRateSet, CurrencyCatalog]:
    session = LoanFxSession.from_config(load_config())
    async with session:
        if base:
            session.rates.set_base_currency(base)
        state = await session.rates.wait()
    if state.rates is None or state.rates.base_code != state.base_code:
        raise state.error or RateUnavailable(f"No exchange rates loaded for {state.base_code}")
    return state.rates, session.catalog


@app.command("rates")
def rates(
    base: Optional[str] = typer.Option(None, "--base", "-b", help="Pivot currency to list rates for"),
):
    """List every exchange rate for the pivot currency."""
    try:
        rate_set, catalog = asyncio.run(_load_rates(base))
    except LoanFxError as e:
        typer.secho(f"Failed to load rates: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    table = Table(title=f"Exchange rates for 1 {rate_set.base_code}")
    table.add_column("Code", style="bold")
    table.add_column("Name")
    table.add_column("Rate", justify="right")
    for code in rate_set.codes:
        name = catalog.get(code).name if code in catalog else ""
        table.add_row(code, name, f"{rate_set.rate_for(code):,.6f}")
    console.print(table)


async def _load_session() -> LoanFxSession:
    session = LoanFxSession.from_config(load_config())
    await session.start()
    await session.rates.wait()
    await session.stop()
    return session


@app.command("currencies")
def currencies():
    """List the supported currencies."""
    try:
        session = asyncio.run(_load_session())
    except LoanFxError as e:
        typer.secho(f"Failed to load currencies: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    if session.catalog.error is not None:
        typer.secho(f"Warning: {session.catalog.error}", fg=typer.colors.YELLOW)

    table = Table(title="Currencies")
    table.add_column("Code", style="bold")
    table.add_column("Symbol")
    table.add_column("Name")
    for currency in session.catalog.currencies:
        table.add_row(currency.code, currency.symbol, currency.name)
    console.print(table)


@app.command("health")
def health():
    """Show catalog and exchange rate status."""
    try:
        session = asyncio.run(_load_session())
    except LoanFxError as e:
        typer.secho(f"Health check failed: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    report = get_health_status(session)
    colors = {"healthy": "green", "degraded": "yellow", "unhealthy": "red"}
    console.print(f"[bold {colors[report['status']]}]{report['status'].upper()}[/]")
    for name, component in report["components"].items():
        console.print(f"  {name}: [{colors[component['status']]}]{component['status']}[/] - {component['message']}")


if __name__ == "__main__":
    app()
