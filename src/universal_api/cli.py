"""CLI entry point for universal-api."""

import logging
import sys
from pathlib import Path

import click
import httpx

from universal_api.config import Settings, load_settings
from universal_api.exceptions import NetworkError, UniversalApiError
from universal_api.fetcher import HttpFetcher
from universal_api.parser import strategy_for_name
from universal_api.pipeline import extract
from universal_api.ratelimit import DomainRateLimiter
from universal_api.service import SubmissionService
from universal_api.storage import FileStorage

SUFFIX_CONTENT_TYPES = {
    ".json": "application/json",
    ".yaml": "application/yaml",
    ".yml": "application/yaml",
    ".html": "text/html",
    ".htm": "text/html",
}


def _content_type_for(file_path: Path) -> str:
    """Guess a content-type hint from the file suffix; empty means sniff."""
    return SUFFIX_CONTENT_TYPES.get(file_path.suffix.lower(), "")


def _store(settings: Settings, store_dir: Path | None) -> FileStorage:
    return FileStorage(store_dir or settings.store_dir)


def _report(exc: UniversalApiError) -> int:
    click.echo(f"Error: {exc}", err=True)
    return exc.exit_code


def _fail(exc: UniversalApiError):
    sys.exit(_report(exc))


@click.group()
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Config file (JSON or YAML).")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool):
    """Universal API: extract canonical API descriptions from OpenAPI and HTML docs."""
    try:
        settings = load_settings(config_path)
    except UniversalApiError as exc:
        _fail(exc)
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    ctx.obj = settings


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--content-type", default=None, help="Content-type hint (default: guessed from the file suffix).")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "json", "yaml", "html"]), help="Force a document format.")
@click.option("--description", default="", help="Override the extracted description.")
@click.option("--url", default="", help="Source URL to record on the document.")
@click.option("--fallback/--no-fallback", default=None, help="Fall back to HTML extraction when OpenAPI parsing fails.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write the JSON document here instead of stdout.")
@click.pass_obj
def parse(settings: Settings, doc_path: Path, content_type: str | None, fmt: str, description: str, url: str, fallback: bool | None, output: Path | None):
    """Extract a canonical document from a local file."""
    content = doc_path.read_bytes()
    hint = content_type if content_type is not None else _content_type_for(doc_path)
    try:
        strategy = None if fmt == "auto" else strategy_for_name(fmt)
        doc = extract(
            content,
            hint,
            url=url,
            description=description,
            strategy=strategy,
            fallback=settings.fallback_to_html if fallback is None else fallback,
        )
    except UniversalApiError as exc:
        _fail(exc)

    if output is None:
        click.echo(doc.to_json())
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(doc.to_json() + "\n", encoding="utf-8")
    click.echo(f"Found {len(doc.endpoints)} endpoints. Saved to {output}", err=True)


@main.command()
@click.argument("urls", nargs=-1, required=True)
@click.option("--description", default="", help="Override the extracted description.")
@click.option("--store", "store_dir", default=None, type=click.Path(file_okay=False, path_type=Path), help="Document store directory.")
@click.option("--fallback/--no-fallback", default=None, help="Fall back to HTML extraction when OpenAPI parsing fails.")
@click.pass_obj
def scrape(settings: Settings, urls: tuple[str, ...], description: str, store_dir: Path | None, fallback: bool | None):
    """Fetch each URL, extract its API description, and store it.

    URLs on the same host share one rate-limit window for the run. A failed
    URL is reported and skipped; the exit code is that of the last failure.
    """
    service = SubmissionService(
        fetcher=HttpFetcher(timeout=settings.fetch_timeout, user_agent=settings.user_agent),
        storage=_store(settings, store_dir),
        limiter=DomainRateLimiter(settings.rate_limit_requests, settings.rate_limit_window),
        fallback=settings.fallback_to_html if fallback is None else fallback,
    )
    exit_code = 0
    for url in urls:
        try:
            doc = service.submit(url, description=description)
        except UniversalApiError as exc:
            exit_code = _report(exc)
            continue
        except httpx.RequestError as exc:
            click.echo(f"Error: request to {url} failed: {exc}", err=True)
            exit_code = NetworkError.exit_code
            continue
        click.echo(doc.to_json())
    if exit_code:
        sys.exit(exit_code)


@main.command(name="list")
@click.option("--store", "store_dir", default=None, type=click.Path(file_okay=False, path_type=Path), help="Document store directory.")
@click.pass_obj
def list_docs(settings: Settings, store_dir: Path | None):
    """List stored documents."""
    try:
        docs = _store(settings, store_dir).list_all()
    except UniversalApiError as exc:
        _fail(exc)
    for doc in docs:
        click.echo(f"{doc.id}\t{len(doc.endpoints)}\t{doc.title}")


@main.command()
@click.argument("doc_id")
@click.option("--store", "store_dir", default=None, type=click.Path(file_okay=False, path_type=Path), help="Document store directory.")
@click.pass_obj
def show(settings: Settings, doc_id: str, store_dir: Path | None):
    """Print a stored document as JSON."""
    try:
        doc = _store(settings, store_dir).get(doc_id)
    except UniversalApiError as exc:
        _fail(exc)
    click.echo(doc.to_json())
