"""Saturating conversion of user-typed digit runs."""


def bounded_int(digits: str, cap: int) -> int:
    """Convert a run of decimal digits, saturating at cap.

    Runs with more significant digits than cap are never handed to int(), so
    arbitrarily long input cannot hit the interpreter's digit limit.

    Args:
        digits: Decimal digits without a sign (e.g., "252", "0004")
        cap: Largest value to return; must be non-negative

    Returns:
        min(cap, value of digits)

    Examples:
        >>> bounded_int("300", 252)
        252
        >>> bounded_int("9" * 5000, 252)
        252
    """
    significant = digits.lstrip("0") or "0"
    if len(significant) > len(str(cap)):
        return cap
    return min(cap, int(significant))


def bounded_signed_int(text: str, floor: int, cap: int) -> int:
    """Convert "+N", "-N" or "N" into floor..cap without unbounded int().

    Args:
        text: Optional sign followed by decimal digits
        floor: Smallest value to return; must be non-positive
        cap: Largest value to return; must be non-negative
    """
    if text.startswith("-"):
        return -bounded_int(text[1:], -floor)
    return bounded_int(text.lstrip("+"), cap)
