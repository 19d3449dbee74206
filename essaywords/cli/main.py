from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import typer

from essaywords.core.config import RunSettings, build_settings, load_config_file, merge_config
from essaywords.core.errors import ConfigError, EssayWordsError
from essaywords.infra.logging import init_logging, log_error
from essaywords.scrape.scheduler import partition
from essaywords.services.pipeline import render_json, run_pipeline, save_result
from essaywords.services.sources import load_essay_urls

app = typer.Typer(help="essaywords: top word frequencies across a list of essays")


def _echo(s: str) -> None:
    typer.echo(s)


def _settings(config: Optional[Path], overrides: Dict[str, Any]) -> RunSettings:
    try:
        return build_settings(merge_config(load_config_file(config), overrides))
    except ConfigError as exc:
        typer.secho(f"Invalid configuration: {exc.message}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)


@app.callback()
def main() -> None:
    init_logging()


@app.command()
def run(
    urls_file: Optional[Path] = typer.Option(None, "--urls-file", "-u", dir_okay=False, help="Newline-delimited essay URLs"),
    dictionary: Optional[str] = typer.Option(None, "--dictionary", "-d", help="Word list URL or local path"),
    top_k: Optional[int] = typer.Option(None, "--top-k", "-k", min=0),
    max_batch: Optional[int] = typer.Option(None, "--max-batch", min=1, help="Essays fetched concurrently per batch"),
    min_delay: Optional[float] = typer.Option(None, "--min-delay", min=0.0, help="Seconds"),
    max_delay: Optional[float] = typer.Option(None, "--max-delay", min=0.0, help="Seconds"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Per-request timeout in seconds"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", dir_okay=False, help="Also write the JSON result here"),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False, readable=True),
) -> None:
    """Fetch every essay and print the top words as pretty JSON."""
    settings = _settings(
        config,
        {
            "urls_file": str(urls_file) if urls_file else None,
            "dictionary_source": dictionary,
            "top_k": top_k,
            "max_batch": max_batch,
            "min_delay": min_delay,
            "max_delay": max_delay,
            "timeout": timeout,
        },
    )

    try:
        results = run_pipeline(settings)
    except EssayWordsError as exc:
        log_error("cli", "run", exc, "run failed")
        raise typer.Exit(code=1)

    _echo(render_json(results.top))
    if output:
        save_result(results.top, output)


@app.command()
def plan(
    urls_file: Optional[Path] = typer.Option(None, "--urls-file", "-u", dir_okay=False),
    max_batch: Optional[int] = typer.Option(None, "--max-batch", min=1),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False, readable=True),
) -> None:
    """Show how the essay list would be split into batches. No network access."""
    settings = _settings(
        config,
        {"urls_file": str(urls_file) if urls_file else None, "max_batch": max_batch},
    )
    try:
        urls = load_essay_urls(settings.urls_file)
    except EssayWordsError as exc:
        log_error("cli", "plan", exc)
        raise typer.Exit(code=1)

    batches = partition(urls, settings.max_batch)
    _echo(f"{len(urls)} essays in {len(batches)} batches of up to {settings.max_batch}")
    for n, batch in enumerate(batches, start=1):
        _echo(f"batch {n}: {len(batch)}")


if __name__ == "__main__":  # pragma: no cover - CLI glue
    app()
