"""Resolve requested chromosomes against info files on disk."""

import logging
import re
import warnings
from collections.abc import Iterable
from pathlib import Path

from .errors import EmptyDatasetError, MissingChromosomeWarning

logger = logging.getLogger(__name__)

DEFAULT_FILE_PATTERN = "*.info.gz"

CHROMOSOME_IN_NAME = re.compile(r"chr(?:om(?:osome)?)?[._-]?0*(\d{1,2})(?!\d)", re.IGNORECASE)


def chromosome_from_filename(name: str) -> int | None:
    """Extract the embedded chromosome number from a file name.

    Recognises ``chr7``, ``chrom7`` and ``chromosome_7`` anywhere in the name
    (e.g. ``chr7.info.gz``, ``study.chrom07.info.gz``).
    """
    match = CHROMOSOME_IN_NAME.search(name)
    if not match:
        return None
    return int(match.group(1))


def find_info_files(
    directory: Path | str, file_pattern: str = DEFAULT_FILE_PATTERN
) -> dict[int, list[Path]]:
    """Index info files in a directory by the chromosome in their name."""
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Info file directory not found: {directory}")

    found: dict[int, list[Path]] = {}
    for path in sorted(directory.glob(file_pattern)):
        chromosome = chromosome_from_filename(path.name)
        if chromosome is None:
            logger.debug("Skipping %s: no chromosome number in file name", path.name)
            continue
        found.setdefault(chromosome, []).append(path)
    return found


def select_chromosome_files(
    directory: Path | str,
    chromosomes: Iterable[int],
    file_pattern: str = DEFAULT_FILE_PATTERN,
) -> dict[int, Path]:
    """Pick one info file per requested chromosome.

    Chromosomes without a file emit a MissingChromosomeWarning and are left
    out; the remaining chromosomes keep their requested order.

    Args:
        directory: Directory holding the per-chromosome info files
        chromosomes: Requested chromosomes, already expanded
        file_pattern: Glob pattern for candidate files

    Returns:
        Ordered mapping of chromosome to info file path

    Raises:
        FileNotFoundError: If the directory does not exist
        EmptyDatasetError: If no requested chromosome has a file
    """
    found = find_info_files(directory, file_pattern)
    requested = list(chromosomes)

    selected: dict[int, Path] = {}
    for chromosome in requested:
        candidates = found.get(chromosome)
        if not candidates:
            message = (
                f"No info file for chromosome {chromosome} in {directory} "
                f"(pattern '{file_pattern}'); skipping it"
            )
            logger.warning(message)
            warnings.warn(message, MissingChromosomeWarning, stacklevel=2)
            continue

        if len(candidates) > 1:
            logger.warning(
                "Chromosome %d matches %d files (%s); using %s",
                chromosome,
                len(candidates),
                ", ".join(p.name for p in candidates),
                candidates[0].name,
            )
        selected[chromosome] = candidates[0]

    if not selected:
        raise EmptyDatasetError(
            f"None of the requested chromosomes ({len(requested)}) have an info file "
            f"in {directory} matching '{file_pattern}'"
        )
    return selected
