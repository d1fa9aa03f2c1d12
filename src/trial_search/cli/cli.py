"""Command-line interface for trial-search."""

import asyncio
import logging

import click
import uvicorn

from trial_search.config import get_settings
from trial_search.data_sources.base_client import ClientConfig, DataSourceError
from trial_search.data_sources.clinical_trials import ClinicalTrialsClient
from trial_search.services.search import InvalidPageError, parse_page, run_search


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.version_option(package_name="trial-search")
def main():
    """trial-search: browse ClinicalTrials.gov search results."""
    _configure_logging(get_settings().log_level)


@main.command()
@click.option("--host", default=None, help="Bind address [default: $HOST or 0.0.0.0]")
@click.option(
    "-p", "--port", type=int, default=None, help="Port [default: $PORT or 3000]"
)
def serve(host: str | None, port: int | None):
    """Run the web front-end."""
    from trial_search.api.main import create_app

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port
    click.echo(f"Serving on http://{host}:{port}")
    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.log_level.lower())


@main.command()
@click.argument("expr")
@click.option("--page", default="", help="Results page to fetch  [default: 1]")
def search(expr: str, page: str):
    """Run a single search and print the results page."""
    try:
        page_number = parse_page(page)
    except InvalidPageError as e:
        raise click.BadParameter(str(e), param_hint="--page")

    settings = get_settings()

    async def _run():
        async with ClinicalTrialsClient(
            base_url=settings.upstream_base_url,
            page_size=settings.page_size,
            max_rank=settings.max_rank,
            config=ClientConfig(timeout_seconds=settings.upstream_timeout_seconds),
        ) as client:
            return await run_search(client, expr, page_number, settings.page_size)

    try:
        state = asyncio.run(_run())
    except DataSourceError as e:
        raise click.ClickException(str(e))

    results = state.results
    click.echo(f"{results.n_studies_returned} results for: {expr}")
    click.echo(f"Page {state.current_page()} of {state.total_pages}")
    for i, study in enumerate(results.studies, 1):
        nct = f" [{study.nct_id}]" if study.nct_id else ""
        click.echo(f"  {i}. {study.brief_title}{nct}")
        click.echo(f"     {study.org_full_name} - {study.overall_status}")

    if not state.is_last_page():
        click.echo(f"\nNext page: {state.next_page}")


if __name__ == "__main__":
    main()
