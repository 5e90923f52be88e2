"""Streaming readers for per-chromosome imputation info files."""

import csv
import logging
from collections.abc import Iterator
from pathlib import Path

from ..errors import SchemaViolationError
from ..models import InfoFormat, VariantRecord
from .imputation import (
    build_variant_id,
    detect_info_format,
    extract_info_metrics,
    is_missing,
    open_text,
    parse_genotyped_flag,
    parse_maf,
    parse_optional_float,
    parse_position,
    parse_rsq,
    split_variant_id,
)

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 50_000

ANNOTATED_COLUMN_ALIASES = {
    "#chrom": "chromosome",
    "chrom": "chromosome",
    "chr": "chromosome",
    "pos": "position",
    "position": "position",
    "ref": "ref",
    "alt": "alt",
    "info": "info",
}

# Standard VCF column order when no #CHROM header is present
ANNOTATED_DEFAULT_INDICES = {
    "chromosome": 0,
    "position": 1,
    "ref": 3,
    "alt": 4,
    "info": 7,
}

FLAT_COLUMN_ALIASES = {
    "snp": "id",
    "id": "id",
    "marker": "id",
    "maf": "maf",
    "rsq": "rsq",
    "r2": "rsq",
    "emprsq": "empirical_rsq",
    "er2": "empirical_rsq",
    "genotyped": "genotyped",
    "typed": "genotyped",
}

FLAT_REQUIRED_COLUMNS = {"id", "maf", "rsq", "genotyped"}


class InfoFileParser:
    """Base class for info file readers producing VariantRecords."""

    format: InfoFormat

    def __init__(self, path: Path | str, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.path = Path(path)
        self.chunk_size = chunk_size

    def iter_records(self) -> Iterator[VariantRecord]:
        raise NotImplementedError

    def iter_batches(self) -> Iterator[list[VariantRecord]]:
        """Yield records in lists of at most ``chunk_size``."""
        batch: list[VariantRecord] = []
        for record in self.iter_records():
            batch.append(record)
            if len(batch) >= self.chunk_size:
                yield batch
                batch = []
        if batch:
            yield batch

    def _context(self, line_num: int) -> str:
        return f"{self.path}:{line_num}"


class AnnotatedInfoFile(InfoFileParser):
    """Reader for VCF-style info files with metrics packed in the INFO column."""

    format = InfoFormat.ANNOTATED

    def iter_records(self) -> Iterator[VariantRecord]:
        indices = dict(ANNOTATED_DEFAULT_INDICES)

        with open_text(self.path) as f:
            reader = csv.reader(f, delimiter="\t", quoting=csv.QUOTE_NONE)
            for line_num, row in enumerate(reader, start=1):
                if not row or row[0].startswith("##"):
                    continue
                if row[0].startswith("#"):
                    indices = self._parse_header(row, line_num)
                    continue

                yield self._parse_row(row, indices, line_num)

    def _parse_header(self, header: list[str], line_num: int) -> dict[str, int]:
        indices = {}
        for idx, col in enumerate(header):
            canonical = ANNOTATED_COLUMN_ALIASES.get(col.strip().lower())
            if canonical is not None and canonical not in indices:
                indices[canonical] = idx

        missing = set(ANNOTATED_DEFAULT_INDICES) - set(indices)
        if missing:
            raise SchemaViolationError(
                f"{self._context(line_num)}: header is missing required columns: "
                f"{', '.join(sorted(missing))}"
            )
        return indices

    def _parse_row(self, row: list[str], indices: dict[str, int], line_num: int) -> VariantRecord:
        context = self._context(line_num)

        if len(row) <= max(indices.values()):
            raise SchemaViolationError(
                f"{context}: expected at least {max(indices.values()) + 1} columns, "
                f"found {len(row)}"
            )

        chromosome = row[indices["chromosome"]].strip()
        position = parse_position(row[indices["position"]].strip(), context)
        ref = row[indices["ref"]].strip()
        alt = row[indices["alt"]].strip()
        metrics = extract_info_metrics(row[indices["info"]].strip(), context)

        return VariantRecord(
            id=build_variant_id(chromosome, position, ref, alt),
            chromosome=None if is_missing(chromosome) else chromosome,
            position=position,
            maf=metrics["maf"],
            rsq=metrics["rsq"],
            empirical_rsq=metrics["empirical_rsq"],
            genotyped=metrics["genotyped"],
        )


class FlatInfoFile(InfoFileParser):
    """Reader for tab-separated info files with pre-split metric columns."""

    format = InfoFormat.FLAT

    def iter_records(self) -> Iterator[VariantRecord]:
        with open_text(self.path) as f:
            reader = csv.reader(f, delimiter="\t", quoting=csv.QUOTE_NONE)
            try:
                header = next(reader)
            except StopIteration:
                raise SchemaViolationError(f"{self.path}: file is empty, no header line") from None

            indices = self._parse_header(header)

            for line_num, row in enumerate(reader, start=2):
                if not row:
                    continue
                yield self._parse_row(row, indices, line_num)

    def _parse_header(self, header: list[str]) -> dict[str, int]:
        indices = {}
        for idx, col in enumerate(header):
            canonical = FLAT_COLUMN_ALIASES.get(col.strip().lower())
            if canonical is not None and canonical not in indices:
                indices[canonical] = idx

        missing = FLAT_REQUIRED_COLUMNS - set(indices)
        if missing:
            raise SchemaViolationError(
                f"{self._context(1)}: header is missing required columns: "
                f"{', '.join(sorted(missing))}"
            )
        return indices

    def _parse_row(self, row: list[str], indices: dict[str, int], line_num: int) -> VariantRecord:
        context = self._context(line_num)

        def get_value(col: str) -> str | None:
            if col not in indices:
                return None
            idx = indices[col]
            if idx >= len(row):
                raise SchemaViolationError(
                    f"{context}: row has {len(row)} columns, missing field '{col}'"
                )
            return row[idx]

        # id, chromosome and position come from the decomposed id column
        chromosome, position, ref, alt = split_variant_id(get_value("id"), context)

        return VariantRecord(
            id=build_variant_id(chromosome, position, ref, alt),
            chromosome=None if is_missing(chromosome) else chromosome,
            position=position,
            maf=parse_maf(get_value("maf"), "MAF", context),
            rsq=parse_rsq(get_value("rsq"), "Rsq", context),
            empirical_rsq=parse_optional_float(get_value("empirical_rsq"), "EmpRsq", context),
            genotyped=parse_genotyped_flag(get_value("genotyped")),
        )


PARSERS: dict[InfoFormat, type[InfoFileParser]] = {
    InfoFormat.ANNOTATED: AnnotatedInfoFile,
    InfoFormat.FLAT: FlatInfoFile,
}


def open_info_file(path: Path | str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> InfoFileParser:
    """Detect the layout of an info file and return the matching reader."""
    info_format = detect_info_format(path)
    logger.debug("Detected %s format for %s", info_format.value, path)
    return PARSERS[info_format](path, chunk_size=chunk_size)


def normalize_file(path: Path | str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[VariantRecord]:
    """Read every record of an info file into memory, one chunk at a time."""
    parser = open_info_file(path, chunk_size=chunk_size)

    records: list[VariantRecord] = []
    for batch_num, batch in enumerate(parser.iter_batches(), start=1):
        records.extend(batch)
        logger.debug(
            "%s: chunk %d, %d records (%d total)",
            parser.path.name,
            batch_num,
            len(batch),
            len(records),
        )

    logger.info(
        "Read %d records from %s (%s)",
        len(records),
        parser.path.name,
        parser.format.value,
    )
    return records
