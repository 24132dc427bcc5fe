"""Portfolio rebalancing CLI tool.

Computes the trades that move a portfolio toward its target allocation and
prints them with plan metrics.

Examples:
    # Rebalance a portfolio file with the default configuration
    rebalance-portfolio rebalance portfolio.yaml

    # Clamp oversized sells and list assets that could not be traded
    rebalance-portfolio rebalance portfolio.yaml --clamp-sells --show-skipped

    # Use a custom configuration file
    rebalance-portfolio rebalance portfolio.yaml --config config/custom.yaml
"""

import sys
from typing import Optional

import click

from rebalancer.api.rebalance_api import RebalanceAPI
from rebalancer.portfolio.balancer import Rebalancer
from rebalancer.utils.config import get_clamp_sells, load_config
from rebalancer.utils.exceptions import RebalancerError
from rebalancer.utils.logging import setup_logging_from_config


@click.group()
def cli():
    """Portfolio Rebalancer"""
    pass


@cli.command()
@click.argument("portfolio_file", type=click.Path(dir_okay=False))
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Configuration file")
@click.option(
    "--clamp-sells/--no-clamp-sells",
    default=None,
    help="Limit sells to the quantity held (overrides configuration)",
)
@click.option("--log-level", type=str, help="Logging level (overrides configuration)")
@click.option("--show-skipped", is_flag=True, help="List assets that produced no trade")
def rebalance(
    portfolio_file: str,
    config_path: Optional[str],
    clamp_sells: Optional[bool],
    log_level: Optional[str],
    show_skipped: bool,
):
    """Compute rebalancing transactions for a portfolio file.

    PORTFOLIO_FILE: YAML file with holdings, prices and strategy sections

    Examples:

        \b
        rebalance-portfolio rebalance portfolio.yaml --show-skipped
    """
    try:
        config = load_config(config_path)
        setup_logging_from_config(config, level=log_level)

        if clamp_sells is None:
            clamp_sells = get_clamp_sells(config)

        api = RebalanceAPI(config=config, rebalancer=Rebalancer({"clamp_sells": clamp_sells}))
        plan = api.rebalance_file(portfolio_file)
    except (RebalancerError, FileNotFoundError) as e:
        click.echo(f"✗ Error: {e}")
        sys.exit(1)

    report = plan["report"]
    metrics = plan["metrics"]

    click.echo("=" * 70)
    click.echo("PORTFOLIO REBALANCE")
    click.echo("=" * 70)
    click.echo(f"Portfolio:    {portfolio_file}")
    click.echo(f"Total value:  {report.total:,.2f}")
    click.echo(f"Clamp sells:  {'yes' if clamp_sells else 'no'}")
    click.echo("=" * 70)
    click.echo()

    if not report.transactions:
        click.echo("No transactions needed")
    else:
        for _, row in plan["summary"].iterrows():
            click.echo(
                f"{row['action']:4s} | {row['asset']:8s} | "
                f"{int(abs(row['units'])):>8d} units @ {row['price']:>10,.2f} "
                f"= {row['estimated_value']:>12,.2f}"
            )

    click.echo()
    click.echo(f"Buys:            {metrics['buy_count']} ({metrics['buy_value']:,.2f})")
    click.echo(f"Sells:           {metrics['sell_count']} ({metrics['sell_value']:,.2f})")
    click.echo(f"Net cash impact: {metrics['net_cash_impact']:,.2f}")
    click.echo(f"Turnover:        {metrics['turnover']:.2%}")

    if report.clamped:
        click.echo()
        for note in report.clamped:
            click.echo(f"! {note.asset}: {note.detail}")

    if show_skipped and report.skipped:
        click.echo()
        click.echo("SKIPPED")
        for note in report.skipped:
            click.echo(f"- {note.asset}: {note.reason.value} ({note.detail})")


if __name__ == "__main__":
    cli()
