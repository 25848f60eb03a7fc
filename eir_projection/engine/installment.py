"""Level installment (annuity payment) sizing."""

from eir_projection.exceptions import InvalidInputError


def periodic_rate(annual_rate: float, months_per_installment: int) -> float:
    """Convert a nominal annual rate (fraction) to a per-installment rate."""
    return annual_rate * months_per_installment / 12


def installment_amount(rate: float, periods: int, principal: float) -> float:
    """Level payment that amortizes ``principal`` over ``periods`` at ``rate``.

    Parameters
    ----------
    rate : float
        Periodic interest rate as a fraction.
    periods : int
        Number of installments.
    principal : float
        Amount to amortize.

    Returns
    -------
    float
        Payment per period, as a positive magnitude.

    Raises
    ------
    InvalidInputError
        If ``periods`` is not positive.
    """
    if periods <= 0:
        raise InvalidInputError(f"Installment count must be positive, got {periods}")
    if rate == 0:
        return principal / periods
    try:
        growth = (1 + rate) ** periods
    except OverflowError:
        # Payment tends to the interest-only amount as the term grows
        return rate * principal
    return rate * principal * growth / (growth - 1)
