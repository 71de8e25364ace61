"""Dashboard commands: MSL achievement for a period, daily recap and overview."""

import asyncio
from typing import Optional

import typer

from fieldsales.achievement import collect_store_facts, compute_achievement, daily_recap, load_msl_index, overview_stats

from .shared import console, get_store, logger, parse_day, print_achievement

SALESMAN = typer.Option(None, "--salesman", "-s", help="Only visits by this salesman")


def achievement(
    start: Optional[str] = typer.Option(None, "--from", help="First day, YYYY-MM-DD (default today)"),
    end: Optional[str] = typer.Option(None, "--to", help="Last day, YYYY-MM-DD (default --from)"),
    salesman: Optional[str] = SALESMAN,
    all_stores: bool = typer.Option(False, "--all-stores", help="Score unvisited stores too"),
    owner: Optional[str] = typer.Option(None, "--owner", help="Only stores created by this user"),
) -> None:
    """Per-store and overall MSL achievement over a period."""
    first = parse_day(start)
    last = parse_day(end) if end else first
    if last < first:
        raise typer.BadParameter("--to is before --from")

    async def _compute():
        store = get_store()
        msl_index = await load_msl_index(store)
        facts = await collect_store_facts(
            store, first, last, salesman_id=salesman, include_unvisited=all_stores, owner_id=owner
        )
        return compute_achievement(msl_index, facts)

    result = asyncio.run(_compute())
    print_achievement(result, title=f"MSL Achievement {first.isoformat()} .. {last.isoformat()}")
    logger.info("dashboard.achievement", start=first.isoformat(), end=last.isoformat(), overall=result.overall)


def recap(
    day: Optional[str] = typer.Option(None, "--date", "-d", help="YYYY-MM-DD (default today)"),
    salesman: Optional[str] = SALESMAN,
) -> None:
    """Daily recap: visits, effective calls, sales and MSL achievement."""
    the_day = parse_day(day)
    stats = asyncio.run(daily_recap(get_store(), the_day, salesman_id=salesman))
    ec_rate = round(stats.effective_calls / stats.total_visits * 100) if stats.total_visits else 0
    console.print(f"\n[bold]Daily recap {the_day.isoformat()}[/bold]")
    console.print(f"  Total visits:    {stats.total_visits}")
    console.print(f"  Effective calls: {stats.effective_calls} ({ec_rate}%)")
    console.print(f"  Total sales:     {stats.total_sales:,.0f}")
    console.print(f"  MSL achievement: {stats.msl_achievement:.1f}%")


def overview(
    day: Optional[str] = typer.Option(None, "--date", "-d", help="YYYY-MM-DD (default today)"),
    salesman: Optional[str] = SALESMAN,
    owner: Optional[str] = typer.Option(None, "--owner", help="Only stores created by this user"),
) -> None:
    """Today's calls and MSL achievement over all stores, plus month-to-date sales."""
    the_day = parse_day(day)
    stats = asyncio.run(overview_stats(get_store(), the_day, salesman_id=salesman, owner_id=owner))
    console.print(f"\n[bold]Overview {the_day.isoformat()}[/bold]")
    console.print(f"  Total calls:     {stats.total_calls}")
    console.print(f"  Effective calls: {stats.effective_calls}")
    console.print(f"  MSL achievement: {stats.msl_achievement:.1f}%")
    console.print(f"  Monthly sales:   {stats.monthly_sales:,.0f}")
