"""imputation-qc: imputation quality summaries from per-chromosome info files."""

import json
import logging
import time
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from . import __version__
from .config import ConfigValidationError, build_config, read_config_file
from .errors import ImputationQCError
from .export import format_value, write_maf_bins_tsv, write_summary_tsv, write_variants_tsv
from .parsers.imputation import detect_info_format
from .pipeline import PipelineResult, run_pipeline
from .utils.chromosomes import parse_chromosome_range

DEFAULT_CHROMOSOMES = "1:22"


def version_callback(value: bool) -> None:
    if value:
        print(__version__)
        raise typer.Exit()


app = typer.Typer(
    name="imputation-qc", help="Summarize imputation quality from per-chromosome info files"
)
console = Console()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version", callback=version_callback, is_eager=True, help="Show version and exit"
        ),
    ] = None,
) -> None:
    pass


def setup_logging(verbose: bool, quiet: bool, log_level: str | None = None) -> None:
    """Configure logging based on verbosity flags."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    elif log_level:
        level = getattr(logging, log_level.upper())
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("imputation_qc").setLevel(level)


def _collect_settings(config_file: Path | None, cli_values: dict[str, Any]) -> dict[str, Any]:
    """Merge TOML settings with CLI options; options given on the command line win."""
    settings = read_config_file(config_file) if config_file else {}
    settings.update({k: v for k, v in cli_values.items() if v is not None})
    return settings


def _render_summary(result: PipelineResult, thousands: bool) -> Table:
    table = Table(title="Imputation quality by chromosome")
    columns = list(result.summary[0].to_dict())
    for column in columns:
        table.add_column(column, justify="left" if column == "chromosome" else "right")
    for row in result.summary:
        style = "bold" if row.label in ("Mean", "Total") else None
        table.add_row(
            *[format_value(value, thousands) for value in row.to_dict().values()], style=style
        )
    return table


@app.command()
def summarize(
    directory: Path = typer.Argument(..., help="Directory with per-chromosome info files"),
    chromosomes: Annotated[
        str | None,
        typer.Option("--chromosomes", "-C", help="Chromosome range, e.g. '1:22' or '3:5,7'"),
    ] = None,
    maf_cutoff: Annotated[
        float | None, typer.Option("--maf", help="MAF cutoff between rare and common variants")
    ] = None,
    rsq_common: Annotated[
        float | None, typer.Option("--rsq", help="Minimum Rsq for common variants")
    ] = None,
    rsq_rare: Annotated[
        float | None,
        typer.Option("--rsq-rare", help="Minimum Rsq for rare variants (default: typed only)"),
    ] = None,
    sample_size: Annotated[
        int | None, typer.Option("--sample-size", "-k", help="Target sample size per subset")
    ] = None,
    workers: Annotated[
        int | None, typer.Option("--workers", "-w", help="Parallel workers (1 = sequential)")
    ] = None,
    chunk_size: Annotated[
        int | None, typer.Option("--chunk-size", "-b", help="Lines read per chunk")
    ] = None,
    seed: Annotated[int | None, typer.Option("--seed", help="Sampling seed")] = None,
    file_pattern: Annotated[
        str | None, typer.Option("--pattern", help="Glob for info files (default '*.info.gz')")
    ] = None,
    output: Annotated[
        Path, typer.Option("--output", "-o", help="Summary table output (TSV)")
    ] = Path("imputation_summary.tsv"),
    bins_output: Annotated[
        Path | None, typer.Option("--bins-output", help="Write MAF-bin breakdown (TSV)")
    ] = None,
    sample_output: Annotated[
        Path | None, typer.Option("--sample-output", help="Write sampled variants (TSV)")
    ] = None,
    thousands: bool = typer.Option(
        False, "--thousands/--no-thousands", help="Use thousands separators in the summary"
    ),
    config_file: Annotated[
        Path | None, typer.Option("--config", "-c", help="TOML configuration file")
    ] = None,
    report: Annotated[
        Path | None, typer.Option("--report", "-r", help="Write JSON report to file")
    ] = None,
    log_file: Annotated[Path | None, typer.Option("--log", help="Write log to file")] = None,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-error output"),
    progress: bool = typer.Option(True, "--progress/--no-progress", help="Show progress bar"),
) -> None:
    """Summarize imputation quality for a directory of info files.

    Writes per-chromosome counts of tested, passing and included variants,
    followed by Mean and Total rows.
    """
    try:
        settings = _collect_settings(
            config_file,
            {
                "chromosomes": chromosomes,
                "maf_cutoff": maf_cutoff,
                "rsq_common": rsq_common,
                "rsq_rare": rsq_rare,
                "sample_size": sample_size,
                "workers": workers,
                "chunk_size": chunk_size,
                "seed": seed,
                "file_pattern": file_pattern,
            },
        )
        config = build_config(settings)
        requested = parse_chromosome_range(settings.get("chromosomes", DEFAULT_CHROMOSOMES))
    except (ConfigValidationError, ImputationQCError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    setup_logging(verbose, quiet, settings.get("log_level"))

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        logging.getLogger("imputation_qc").addHandler(file_handler)

    if not directory.is_dir():
        console.print(f"[red]Error: Info file directory not found: {directory}[/red]")
        raise typer.Exit(1)

    try:
        if progress and not quiet:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=console,
            ) as progress_bar:
                task = progress_bar.add_task("Reading info files...", total=None)

                def update_progress(chromosome: int, path: Path, total: int) -> None:
                    progress_bar.update(
                        task, advance=1, description=f"chr{chromosome}: {total:,} variants"
                    )

                result = run_pipeline(directory, requested, config, update_progress)
        else:
            result = run_pipeline(directory, requested, config)
    except ImputationQCError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    write_summary_tsv(result.summary, output, thousands=thousands)
    if bins_output:
        write_maf_bins_tsv(result.maf_bins, bins_output)
    if sample_output:
        write_variants_tsv(result.sample, sample_output)

    if not quiet:
        console.print(_render_summary(result, thousands))
        if result.missing:
            console.print(
                "[yellow]Missing chromosomes:[/yellow] "
                + ", ".join(str(c) for c in result.missing)
            )
        if result.rare_policy_note:
            console.print(f"[yellow]Note:[/yellow] {result.rare_policy_note}")
        console.print(
            f"[green]✓[/green] {result.n_variants:,} variants from {len(result.files)} files "
            f"in {result.elapsed_seconds:.1f}s"
        )
        console.print(f"  Variants with Rsq = 0: {result.zero_quality_count:,}")
        console.print(f"  Sampled variants: {len(result.sample):,}")
        console.print(f"  Summary: {output}")

    if report:
        inclusion = config.inclusion
        report_data = {
            "status": "success",
            "directory": str(directory),
            "chromosomes": sorted(result.files),
            "missing_chromosomes": result.missing,
            "variants": result.n_variants,
            "zero_quality_variants": result.zero_quality_count,
            "sampled_variants": len(result.sample),
            "settings": {
                "maf_cutoff": inclusion.maf_cutoff,
                "rsq_common": inclusion.rsq_common,
                "rsq_rare": inclusion.rsq_rare,
                "sample_size": config.sample_size,
                "workers": config.workers,
                "seed": config.seed,
            },
            "summary": [row.to_dict() for row in result.summary],
            "elapsed_seconds": round(result.elapsed_seconds, 3),
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        }
        with open(report, "w") as f:
            json.dump(report_data, f, indent=2)
            f.write("\n")
        if not quiet:
            console.print(f"  Report: {report}")


@app.command()
def detect(
    info_path: Path = typer.Argument(..., help="Path to an info file (.info, .info.gz)"),
) -> None:
    """Report whether an info file uses the annotated or flat layout."""
    if not info_path.exists():
        console.print(f"[red]Error: Info file not found: {info_path}[/red]")
        raise typer.Exit(1)

    try:
        info_format = detect_info_format(info_path)
    except ImputationQCError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    console.print(f"{info_path.name}: {info_format.value}")


if __name__ == "__main__":
    app()
