"""Exceptions and warnings raised while summarizing imputation quality."""


class ImputationQCError(Exception):
    """Base class for fatal imputation-qc errors."""

    pass


class MissingChromosomeWarning(UserWarning):
    """A requested chromosome has no info file on disk."""

    pass


class InvalidRangeError(ImputationQCError, ValueError):
    """Raised when a chromosome range expression cannot be expanded."""

    pass


class SchemaViolationError(ImputationQCError):
    """Raised when an info file does not match its expected schema."""

    pass


class UnrecognizedGenotypeFlag(SchemaViolationError):
    """Raised when a genotyped indicator is neither true nor false."""

    pass


class InvalidChromosome(SchemaViolationError):
    """Raised when a chromosome label is not an autosome 1-22."""

    pass


class EmptyDatasetError(ImputationQCError):
    """Raised when there is nothing left to summarize."""

    pass
