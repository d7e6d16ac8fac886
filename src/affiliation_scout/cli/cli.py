"""Command-line interface for AffiliationScout."""

import asyncio
import json
import logging
from pathlib import Path

import click

from affiliation_scout.config import get_settings
from affiliation_scout.data_sources.base_client import ClientConfig
from affiliation_scout.data_sources.pubmed import PubMedClient
from affiliation_scout.db.session import get_db, init_db
from affiliation_scout.models.model_pubmed_record import PubmedRecord
from affiliation_scout.services.search_service import run_search
from affiliation_scout.services.store import list_recent_searches


@click.group()
@click.version_option(package_name="affiliation-scout")
def main():
    """AffiliationScout: find industry-affiliated authors on PubMed."""
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@main.command()
@click.option("--host", default=None, help="Bind address (defaults to settings.host)")
@click.option("--port", default=None, type=int, help="Port (defaults to settings.port)")
def serve(host: str | None, port: int | None):
    """Run the HTTP API under uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "affiliation_scout.api.main:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


async def _search(query: str) -> list[PubmedRecord]:
    settings = get_settings()
    config = ClientConfig(
        api_key=settings.ncbi_api_key, timeout_seconds=settings.request_timeout
    )
    db = next(get_db())
    try:
        async with PubMedClient(config, max_results=settings.max_results) as client:
            return await run_search(query, db, client)
    finally:
        db.close()


@main.command()
@click.option("-q", "--query", required=True, help="PubMed search query")
@click.option("-o", "--output", type=click.Path(), help="Output file path (JSON)")
def search(query: str, output: str | None):
    """Search PubMed and list authors with non-academic affiliations."""
    init_db()
    records = asyncio.run(_search(query))

    click.echo(f"{len(records)} results for: {query}")
    for i, record in enumerate(records, 1):
        click.echo(f"  {i}. [{record.pmid}] {record.title} ({record.publication_date})")
        if record.non_academic_authors:
            click.echo(f"     authors: {'; '.join(record.non_academic_authors)}")
        if record.company_affiliations:
            click.echo(f"     companies: {'; '.join(record.company_affiliations)}")
        if record.corresponding_author_email:
            click.echo(f"     email: {record.corresponding_author_email}")

    if output:
        Path(output).write_text(
            json.dumps(
                {"query": query, "results": [r.model_dump() for r in records]},
                indent=2,
            )
        )
        click.echo(f"\nResults saved to: {output}")


@main.command()
def history():
    """Show the most recent searches."""
    init_db()
    db = next(get_db())
    try:
        searches = list_recent_searches(db)
    finally:
        db.close()

    for entry in searches:
        click.echo(f"  {entry.id}\t{entry.timestamp:%Y-%m-%d %H:%M:%S}\t{entry.query}")


if __name__ == "__main__":
    main()
