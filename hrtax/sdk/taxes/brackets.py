"""Progressive bracket evaluation.

Reproduces the reference ``calculate_withholding_tax`` bracket walk exactly:
brackets are sorted by lower bound, income equal to a lower bound has not yet
reached that bracket, an unbounded bracket is capped at the income itself, and
the total is rounded once at the end.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List

from .models import ZERO, BracketSlice, RateBracket, to_decimal

CENT = Decimal("0.01")


def round_cents(amount) -> Decimal:
    """Round half away from zero to 2 decimal places.

    Decimal's ROUND_HALF_UP rounds ties away from zero for both signs, which
    is what the payroll records were computed with.
    Example: 395.835 -> 395.84, -0.005 -> -0.01
    """
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def bracket_slices(taxable_income, brackets: Iterable[RateBracket]) -> List[BracketSlice]:
    """Split taxable income across brackets.

    Args:
        taxable_income: Annualized taxable base
        brackets: Bracket table in any order

    Returns:
        Slices with a positive taxable amount, lowest bracket first. Taxes
        are not rounded.
    """
    income = to_decimal(taxable_income)
    slices: List[BracketSlice] = []
    if income <= 0:
        return slices

    for bracket in sorted(brackets, key=lambda b: to_decimal(b.min)):
        lower = to_decimal(bracket.min)

        # Income hasn't reached this bracket yet
        if income <= lower:
            continue

        upper = to_decimal(bracket.max) if bracket.max is not None else income
        taxable_in_bracket = min(income, upper) - lower

        if taxable_in_bracket > 0:
            slices.append(BracketSlice(
                bracket=bracket,
                taxable_amount=taxable_in_bracket,
                tax=taxable_in_bracket * to_decimal(bracket.rate),
            ))

    return slices


def progressive_tax(taxable_income, brackets: Iterable[RateBracket]) -> Decimal:
    """Calculate annual tax on an annualized taxable base.

    Args:
        taxable_income: Annualized taxable base (any real number)
        brackets: Bracket table, possibly empty or unsorted

    Returns:
        Annual tax rounded to cents, or exactly 0 when income is not positive
        or the table is empty
    """
    income = to_decimal(taxable_income)
    brackets = list(brackets)
    if income <= 0 or not brackets:
        return ZERO

    total = sum((s.tax for s in bracket_slices(income, brackets)), ZERO)
    return round_cents(total)
