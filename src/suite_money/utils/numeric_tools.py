from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import TypeAlias

# Use where optimal type is `Decimal`, but other types are also acceptable (and will be converted to `Decimal`)
DecimalLike: TypeAlias = Decimal | int | str | float


def as_decimal(value: DecimalLike) -> Decimal:
    """Converts input to `Decimal` safely.

    Ensures floats are converted via string to avoid precision noise.

    Args:
        value: Input value as `DecimalLike`.

    Returns:
        Value converted to `Decimal`.

    Raises:
        TypeError: If $value is a bool or not a `DecimalLike` scalar.
        ValueError: If $value is not a finite number.
    """
    # Raise: bool is an int subclass, but never a monetary amount
    if isinstance(value, bool) or not isinstance(value, (Decimal, int, str, float)):
        raise TypeError(f"$value must be Decimal, int, str or float, but provided value is: {value!r}")

    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ValueError(f"$value ({value!r}) cannot be converted to Decimal") from e

    # Raise: NaN and infinities are not amounts
    if not result.is_finite():
        raise ValueError(f"$value must be a finite number, but provided value is: {value!r}")

    return result
