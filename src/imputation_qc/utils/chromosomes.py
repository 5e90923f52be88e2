"""Chromosome label and range utilities."""

import re

from ..errors import InvalidChromosome, InvalidRangeError

MIN_AUTOSOME = 1
MAX_AUTOSOME = 22

RANGE_TOKEN_PATTERN = re.compile(r"^(\d+)(?::(\d+))?$")


def parse_chromosome_range(expression: str) -> list[int]:
    """Expand a chromosome range expression.

    The expression is a comma-separated list of tokens, each either a bare
    chromosome number or an inclusive ``start:end`` range.

    Args:
        expression: Range expression such as ``"1:22"`` or ``"3:5,7"``

    Returns:
        Strictly ascending list of autosome numbers without duplicates

    Raises:
        InvalidRangeError: If a token is malformed, reversed, or outside 1-22
    """
    if expression is None or expression.strip() == "":
        raise InvalidRangeError("Chromosome range expression is empty")

    chromosomes: set[int] = set()

    for raw_token in expression.split(","):
        token = raw_token.strip().replace(" ", "")
        match = RANGE_TOKEN_PATTERN.match(token)
        if not match:
            raise InvalidRangeError(
                f"Invalid chromosome range token: '{raw_token.strip()}'. "
                f"Expected an integer or 'start:end' (e.g. '1:22' or '3:5,7')"
            )

        start = int(match.group(1))
        end = int(match.group(2)) if match.group(2) is not None else start

        for value in (start, end):
            if not MIN_AUTOSOME <= value <= MAX_AUTOSOME:
                raise InvalidRangeError(
                    f"Chromosome {value} in '{token}' is outside "
                    f"{MIN_AUTOSOME}-{MAX_AUTOSOME}"
                )
        if start > end:
            raise InvalidRangeError(f"Chromosome range '{token}' has start greater than end")

        chromosomes.update(range(start, end + 1))

    return sorted(chromosomes)


def normalize_chromosome(label: str | int) -> int:
    """Reduce a chromosome label to its autosome number.

    Args:
        label: Chromosome label with or without 'chr' prefix (e.g. "chr7", "7", 7)

    Returns:
        Autosome number in 1-22

    Raises:
        InvalidChromosome: If the label is not an autosome
    """
    if isinstance(label, int) and not isinstance(label, bool):
        number = label
    else:
        text = str(label).strip()
        if text.lower().startswith("chr"):
            text = text[3:]
        try:
            number = int(text)
        except ValueError:
            raise InvalidChromosome(
                f"Chromosome '{label}' is not an autosome ({MIN_AUTOSOME}-{MAX_AUTOSOME})"
            ) from None

    if not MIN_AUTOSOME <= number <= MAX_AUTOSOME:
        raise InvalidChromosome(
            f"Chromosome '{label}' is outside {MIN_AUTOSOME}-{MAX_AUTOSOME}"
        )
    return number
