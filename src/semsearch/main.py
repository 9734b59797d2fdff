import asyncio
import logging

from typer import Typer, Option
from typing import Annotated, Optional
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.table import Table

from .config import SearchSettings
from .indexing import IndexingResult, IndexProgress
from .ingest import load_documents
from .search import SearchResponse, highlight
from .session import SearchSession

app = Typer(help="Semantic search over documents with cached embeddings.")
console = Console()


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def build_session(settings: SearchSettings) -> SearchSession:
    return SearchSession(settings)


@app.callback()
def main(
    verbose: Annotated[
        bool, Option("--verbose", "-v", help="Enable debug logging.")
    ] = False,
) -> None:
    configure_logging(verbose)


async def run_indexing(session: SearchSession, file: str | None) -> IndexingResult | None:
    if file:
        session.prepare_documents(documents=load_documents(file))
    else:
        session.prepare_documents("builtin")
    await session.start()

    with Progress(
        TextColumn("[bold cyan]Indexing"),
        BarColumn(),
        TaskProgressColumn(),
        TextColumn("{task.completed}/{task.total} documents"),
        console=console,
        transient=True,
    ) as progress:
        task_id = progress.add_task("index", total=session.total_docs)

        def _on_progress(event: IndexProgress) -> None:
            progress.update(task_id, completed=event.indexed_count)

        return await session.index_documents(on_progress=_on_progress)


def print_index_summary(session: SearchSession, result: IndexingResult | None) -> None:
    if result is None:
        console.print("[bold yellow]Indexing is already running.[/]")
        return
    avg = f"{result.average_latency_ms} ms" if result.average_latency_ms is not None else "n/a"
    load = f"{session.model_load_ms} ms" if session.model_load_ms is not None else "n/a"
    content = (
        f"Indexed documents: {result.indexed_count}/{result.total_docs}\n"
        f"Cache hits: {result.cache_hits}   Embedded: {result.cache_misses}\n"
        f"Average embedding latency: {avg}\n"
        f"Model load time: {load}\n"
        f"Cache entries: {result.cache_count}"
    )
    console.print(
        Panel(content, title="Index built", title_align="left", border_style="bold green")
    )


def print_results(response: SearchResponse) -> None:
    if not response.results:
        console.print(f"[bold red]No results for[/] {response.query!r}")
        return
    table = Table(title=f"Results for {response.query!r} ({response.latency_ms} ms)")
    table.add_column("#", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("Text")
    table.add_column("Tags")
    for rank, result in enumerate(response.results, start=1):
        table.add_row(
            str(rank),
            f"{result.score:.3f}",
            escape(result.title),
            highlight(
                escape(result.text),
                response.query,
                open_tag="[reverse]",
                close_tag="[/reverse]",
            ),
            ", ".join(result.tags),
        )
    console.print(table)


async def run_index_command(settings: SearchSettings, file: str | None) -> None:
    session = build_session(settings)
    try:
        result = await run_indexing(session, file)
        print_index_summary(session, result)
    finally:
        session.close()


async def run_search_command(
    settings: SearchSettings,
    query: str,
    file: str | None,
    top_k: int | None,
    min_score: float | None,
) -> None:
    session = build_session(settings)
    try:
        await run_indexing(session, file)
        response = await session.run_search(query, top_k=top_k, min_score=min_score)
        print_results(response)
    finally:
        session.close()


async def run_cache_stats(settings: SearchSettings) -> int:
    session = build_session(settings)
    try:
        return await session.refresh_cache_count()
    finally:
        session.close()


@app.command()
def index(
    file: Annotated[
        Optional[str],
        Option("--file", "-f", help="JSON, CSV or plain-text file of documents. Defaults to the builtin corpus."),
    ] = None,
    db_path: Annotated[
        Optional[str], Option("--db-path", help="Embedding cache path.")
    ] = None,
    max_tokens: Annotated[
        Optional[int], Option("--max-tokens", help="Token cap applied before embedding.")
    ] = None,
) -> None:
    """Embed documents, reusing cached embeddings where possible."""
    settings = SearchSettings.from_env(db_path=db_path, max_tokens=max_tokens)
    asyncio.run(run_index_command(settings, file))


@app.command()
def search(
    query: Annotated[str, Option("--query", "-q", help="Natural language query.")],
    file: Annotated[
        Optional[str],
        Option("--file", "-f", help="JSON, CSV or plain-text file of documents. Defaults to the builtin corpus."),
    ] = None,
    top_k: Annotated[
        Optional[int], Option("--top-k", "-k", help="Maximum number of results.")
    ] = None,
    min_score: Annotated[
        Optional[float], Option("--min-score", help="Minimum cosine similarity.")
    ] = None,
    db_path: Annotated[
        Optional[str], Option("--db-path", help="Embedding cache path.")
    ] = None,
    max_tokens: Annotated[
        Optional[int], Option("--max-tokens", help="Token cap applied before embedding.")
    ] = None,
) -> None:
    """Index documents and print the best matches for a query."""
    settings = SearchSettings.from_env(db_path=db_path, max_tokens=max_tokens)
    asyncio.run(run_search_command(settings, query, file, top_k, min_score))


@app.command()
def demo(
    db_path: Annotated[
        Optional[str], Option("--db-path", help="Embedding cache path.")
    ] = None,
) -> None:
    """Index the builtin corpus."""
    settings = SearchSettings.from_env(db_path=db_path)
    asyncio.run(run_index_command(settings, None))


@app.command("cache-stats")
def cache_stats(
    db_path: Annotated[
        Optional[str], Option("--db-path", help="Embedding cache path.")
    ] = None,
) -> None:
    """Print the number of cached embeddings."""
    settings = SearchSettings.from_env(db_path=db_path)
    count = asyncio.run(run_cache_stats(settings))
    console.print(f"[bold]Cache entries:[/] {count}  ({settings.db_path})")


@app.command()
def serve(
    host: Annotated[str, Option("--host", help="Bind address.")] = "127.0.0.1",
    port: Annotated[int, Option("--port", help="Bind port.")] = 8000,
) -> None:
    """Run the HTTP API."""
    from .server import run_server

    run_server(host=host, port=port)
