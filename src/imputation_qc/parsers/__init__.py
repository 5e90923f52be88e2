"""Info file parsing modules."""

from .imputation import (
    detect_info_format,
    extract_info_metrics,
    parse_genotyped_flag,
    split_info_field,
    split_variant_id,
)
from .info_file import (
    AnnotatedInfoFile,
    FlatInfoFile,
    InfoFileParser,
    normalize_file,
    open_info_file,
)

__all__ = [
    "AnnotatedInfoFile",
    "FlatInfoFile",
    "InfoFileParser",
    "detect_info_format",
    "extract_info_metrics",
    "normalize_file",
    "open_info_file",
    "parse_genotyped_flag",
    "split_info_field",
    "split_variant_id",
]
