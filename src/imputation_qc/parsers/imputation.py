"""Imputation info field parsing.

Supports the two per-chromosome info layouts written by imputation servers:

- Annotated (Minimac4): VCF-style rows whose INFO column packs the quality
  metrics as ``MAF=0.1;R2=0.85;ER2=0.9;TYPED``
- Flat (Minimac3): tab-separated columns with the metrics already split out

Field mapping:
| Layout    | MAF | Rsq | Empirical Rsq | Genotyped flag | Missing |
|-----------|-----|-----|---------------|----------------|---------|
| Annotated | MAF | R2  | ER2           | TYPED (flag)   | .       |
| Flat      | MAF | Rsq | EmpRsq        | Genotyped      | -       |
"""

import gzip
import math
from pathlib import Path
from typing import IO

from ..errors import SchemaViolationError
from ..models import InfoFormat

ANNOTATED_HEADER_MARKERS = ("##fileformat=VCF", "#CHROM")

FLAG_VALUE = "TRUE"

INFO_KEY_FIELDS = {
    "MAF": "maf",
    "R2": "rsq",
    "ER2": "empirical_rsq",
    "TYPED": "genotyped",
}

# Compared case-insensitively
MISSING_VALUES = {"", "-", ".", "na", "nan"}

MAF_MAX = 0.5
RSQ_MAX = 1.0

GENOTYPED_TRUE = {"1", "true", "t", "genotyped", "typed", "yes"}
GENOTYPED_FALSE = {"0", "false", "f", "imputed", "no"}


def open_text(path: Path | str) -> IO[str]:
    """Open an info file for text reading, decompressing ``.gz`` files."""
    if str(path).endswith(".gz"):
        return gzip.open(path, "rt")
    return open(path)


def detect_info_format(path: Path | str) -> InfoFormat:
    """Detect the info file layout from its first line.

    Args:
        path: Path to the info file (plain or gzipped)

    Returns:
        InfoFormat.ANNOTATED if the first line is a VCF header, else InfoFormat.FLAT

    Raises:
        SchemaViolationError: If the file is empty
    """
    with open_text(path) as f:
        first_line = f.readline()

    return detect_info_format_from_line(first_line, source=path)


def detect_info_format_from_line(first_line: str, source: Path | str | None = None) -> InfoFormat:
    """Classify a first line as annotated or flat layout."""
    if not first_line.strip():
        raise SchemaViolationError(f"{source or 'info file'}: file is empty, no header line")

    if first_line.startswith(ANNOTATED_HEADER_MARKERS):
        return InfoFormat.ANNOTATED
    return InfoFormat.FLAT


def split_info_field(info: str) -> list[tuple[str, str]]:
    """Split a semicolon-delimited INFO field into ordered (key, value) pairs.

    Entries are split on the first '='; bare flags get the value "TRUE".

    Args:
        info: Raw INFO string, e.g. "MAF=0.1;R2=0.85;TYPED"

    Returns:
        List of (key, value) pairs in the order they appear
    """
    if is_missing(info):
        return []

    pairs = []
    for entry in info.split(";"):
        if not entry:
            continue
        key, sep, value = entry.partition("=")
        pairs.append((key, value if sep else FLAG_VALUE))
    return pairs


def is_missing(value: str) -> bool:
    return value.strip().lower() in MISSING_VALUES


def parse_optional_float(value: str | None, field: str, context: str) -> float | None:
    """Parse a numeric field, treating missing-value sentinels as absent.

    Raises:
        SchemaViolationError: If the value is present but not a finite number
    """
    if value is None or is_missing(value):
        return None
    value = value.strip()

    try:
        number = float(value)
    except ValueError:
        raise SchemaViolationError(
            f"{context}: field '{field}' has non-numeric value '{value}'"
        ) from None
    if not math.isfinite(number):
        raise SchemaViolationError(f"{context}: field '{field}' is not finite ('{value}')")
    return number


def parse_bounded(value: str | None, field: str, context: str, upper: float) -> float | None:
    """Parse a numeric field that must lie in [0, upper] (MAF, Rsq)."""
    number = parse_optional_float(value, field, context)
    if number is not None and not 0.0 <= number <= upper:
        raise SchemaViolationError(
            f"{context}: field '{field}' must be between 0 and {upper}, got {value}"
        )
    return number


def parse_maf(value: str | None, field: str, context: str) -> float | None:
    return parse_bounded(value, field, context, MAF_MAX)


def parse_rsq(value: str | None, field: str, context: str) -> float | None:
    return parse_bounded(value, field, context, RSQ_MAX)


def parse_genotyped_flag(value: str | None) -> bool | str:
    """Map a genotyped indicator to a boolean.

    Recognised encodings are 1/0, TRUE/FALSE and Genotyped/Typed/Imputed in
    any case. Anything else is returned unchanged so classification can
    reject it with the offending value.
    """
    if value is None:
        return False
    normalized = value.strip().lower()
    if normalized in GENOTYPED_TRUE:
        return True
    if normalized in GENOTYPED_FALSE:
        return False
    return value


def extract_info_metrics(info: str, context: str) -> dict[str, float | bool | str | None]:
    """Project the known INFO keys into typed fields.

    Unknown keys are discarded. TYPED is a flag: present as TRUE means
    genotyped, absent means imputed.

    Args:
        info: Raw INFO string
        context: File and line description used in error messages

    Returns:
        Dict with maf, rsq, empirical_rsq and genotyped values
    """
    raw: dict[str, str] = {}
    for key, value in split_info_field(info):
        if key in INFO_KEY_FIELDS:
            raw[INFO_KEY_FIELDS[key]] = value

    typed = raw.get("genotyped")
    if typed is None:
        genotyped: bool | str = False
    elif typed.upper() == FLAG_VALUE:
        genotyped = True
    else:
        genotyped = typed

    return {
        "maf": parse_maf(raw.get("maf"), "MAF", context),
        "rsq": parse_rsq(raw.get("rsq"), "R2", context),
        "empirical_rsq": parse_optional_float(raw.get("empirical_rsq"), "ER2", context),
        "genotyped": genotyped,
    }


def split_variant_id(variant_id: str, context: str) -> tuple[str, int, str, str]:
    """Decompose a ``CHR:POS:REF:ALT`` identifier.

    Raises:
        SchemaViolationError: If the id does not have exactly four parts or
            the position is not a non-negative integer
    """
    parts = variant_id.strip().split(":")
    if len(parts) != 4:
        raise SchemaViolationError(
            f"{context}: variant id '{variant_id}' is not in CHR:POS:REF:ALT form"
        )

    chromosome, position, ref, alt = parts
    return chromosome, parse_position(position, context), ref, alt


def parse_position(value: str, context: str) -> int:
    try:
        position = int(value)
    except ValueError:
        raise SchemaViolationError(
            f"{context}: field 'position' has non-integer value '{value}'"
        ) from None
    if position < 0:
        raise SchemaViolationError(f"{context}: field 'position' is negative ({value})")
    return position


def build_variant_id(chromosome: str, position: int, ref: str, alt: str) -> str:
    return f"{chromosome}:{position}:{ref}:{alt}"
