"""imputation-qc: imputation quality summaries from per-chromosome info files."""

__version__ = "0.1.0"
