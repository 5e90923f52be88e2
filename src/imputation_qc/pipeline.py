"""End-to-end imputation quality summarization."""

import logging
import time
from collections.abc import Callable, Iterable
from concurrent.futures import Executor, Future, ProcessPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from .aggregate import count_zero_quality, summarize_chromosomes, summarize_maf_bins
from .classifier import classify_records
from .config import PipelineConfig
from .inclusion import warn_rare_policy
from .models import ChromosomeSummary, ClassifiedVariant, MafBinSummary
from .parsers.info_file import normalize_file
from .sampling import stratified_sample
from .selector import select_chromosome_files

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, Path, int], None]


class SequentialExecutor(Executor):
    """Executor that runs each task inline when it is submitted.

    After a task fails, later submissions are cancelled instead of run.
    """

    def __init__(self) -> None:
        self._failed = False

    def submit(self, fn, /, *args, **kwargs) -> Future:
        future: Future = Future()
        if self._failed:
            future.cancel()
            return future

        future.set_running_or_notify_cancel()
        try:
            result = fn(*args, **kwargs)
        except Exception as e:
            self._failed = True
            future.set_exception(e)
        else:
            future.set_result(result)
        return future


def make_executor(workers: int) -> Executor:
    """Return a process pool for ``workers > 1``, otherwise a SequentialExecutor."""
    if workers > 1:
        return ProcessPoolExecutor(max_workers=workers)
    return SequentialExecutor()


def process_file(path: Path, chunk_size: int) -> list[ClassifiedVariant]:
    """Normalize and classify one info file."""
    records = normalize_file(path, chunk_size=chunk_size)
    return classify_records(records, source=path)


@dataclass
class PipelineResult:
    """Everything one run hands to reporting."""

    files: dict[int, Path]
    missing: list[int]
    variants: list[ClassifiedVariant]
    summary: list[ChromosomeSummary]
    maf_bins: list[MafBinSummary]
    sample: list[ClassifiedVariant]
    zero_quality_count: int
    rare_policy_note: str | None = None
    elapsed_seconds: float = 0.0
    records_per_file: dict[int, int] = field(default_factory=dict)

    @property
    def n_variants(self) -> int:
        return len(self.variants)


def load_variants(
    files: dict[int, Path],
    config: PipelineConfig,
    executor: Executor | None = None,
    progress_callback: ProgressCallback | None = None,
) -> tuple[list[ClassifiedVariant], dict[int, int]]:
    """Read and classify every selected file.

    Files are processed on the executor but combined in the order of
    ``files``, so sequential and parallel runs return the same list. The first
    failure cancels outstanding work and is re-raised.

    Returns:
        Tuple of (classified variants, record count per chromosome)
    """
    owns_executor = executor is None
    if executor is None:
        executor = make_executor(config.workers)

    variants: list[ClassifiedVariant] = []
    records_per_file: dict[int, int] = {}
    try:
        futures = {
            chromosome: executor.submit(process_file, path, config.chunk_size)
            for chromosome, path in files.items()
        }
        for chromosome, future in futures.items():
            batch = future.result()
            variants.extend(batch)
            records_per_file[chromosome] = len(batch)
            if progress_callback is not None:
                progress_callback(chromosome, files[chromosome], len(variants))
    except BaseException:
        if owns_executor:
            executor.shutdown(wait=False, cancel_futures=True)
        raise

    if owns_executor:
        executor.shutdown()
    return variants, records_per_file


def run_pipeline(
    directory: Path | str,
    chromosomes: Iterable[int],
    config: PipelineConfig | None = None,
    progress_callback: ProgressCallback | None = None,
) -> PipelineResult:
    """Summarize imputation quality for the requested chromosomes.

    Args:
        directory: Directory holding one info file per chromosome
        chromosomes: Requested chromosomes, already expanded
        config: Run settings; defaults to PipelineConfig()
        progress_callback: Called with (chromosome, path, variants so far)
            after each file is read

    Returns:
        PipelineResult with the summary table, MAF-bin breakdown and sample

    Raises:
        EmptyDatasetError: If no requested chromosome has a file or nothing is tested
        SchemaViolationError: If any file is malformed
    """
    config = config or PipelineConfig()
    start = time.perf_counter()

    requested = list(chromosomes)
    files = select_chromosome_files(directory, requested, config.file_pattern)
    missing = [c for c in requested if c not in files]

    logger.info(
        "Processing %d info files from %s (%s)",
        len(files),
        directory,
        f"{config.workers} workers" if config.parallel else "sequential",
    )
    variants, records_per_file = load_variants(files, config, progress_callback=progress_callback)

    rare_policy_note = warn_rare_policy(config.inclusion)
    summary = summarize_chromosomes(variants, config.inclusion)
    maf_bins = summarize_maf_bins(variants, config.inclusion)
    zero_quality = count_zero_quality(variants)
    sample = stratified_sample(variants, config.sample_size, seed=config.seed)

    elapsed = time.perf_counter() - start
    logger.info(
        "Processed %d variants in %.1fs (%d with Rsq = 0, %d sampled)",
        len(variants),
        elapsed,
        zero_quality,
        len(sample),
    )

    return PipelineResult(
        files=files,
        missing=missing,
        variants=variants,
        summary=summary,
        maf_bins=maf_bins,
        sample=sample,
        zero_quality_count=zero_quality,
        rare_policy_note=rare_policy_note,
        elapsed_seconds=elapsed,
        records_per_file=records_per_file,
    )
