"""
Ray Math Model for the Sprout staking system.

This module provides the fixed-point primitives used by the generation engine.
Values are unsigned integers scaled by RAY (10**27). Token amounts use the WAD
scale (10**18) and are lifted to RAY before any rate is applied.

Rounding:
    ray_mul and ray_div round half up, exactly like the on-chain library:
    - ray_mul: (a * b + HALF_RAY) // RAY
    - ray_div: (a * RAY + b // 2) // b

Python integers never overflow, so the 256-bit envelope of the ledger is
enforced explicitly. A value that would not fit in a uint256 is rejected with
RayOverflow instead of wrapping around.
"""

RAY = 10**27
HALF_RAY = RAY // 2

WAD = 10**18

# Ratio to convert between wad and ray
WAD_RAY_RATIO = 10**9
HALF_WAD_RAY_RATIO = WAD_RAY_RATIO // 2

MAX_UINT256 = 2**256 - 1


class RayOverflow(OverflowError):
    """Raised when a ray computation leaves the uint256 range."""

    def __init__(self, operation, value):
        self.operation = operation
        self.value = value
        super().__init__(f"{operation} overflow: result does not fit in 256 bits")


class RayDivisionByZero(ZeroDivisionError):
    """Raised by ray_div on a zero denominator."""

    def __init__(self):
        super().__init__("ray_div by zero")


def _check_unsigned(operation, *values):
    for value in values:
        if value < 0:
            raise ValueError(f"{operation} operands must be unsigned, got {value}")
        if value > MAX_UINT256:
            raise RayOverflow(operation, value)


def _checked(operation, value):
    if value > MAX_UINT256:
        raise RayOverflow(operation, value)
    return value


def ray_mul(a: int, b: int) -> int:
    """
    Multiply two ray values, rounding half up.

    Args:
        a: Ray-scaled multiplicand
        b: Ray-scaled multiplier

    Returns:
        The ray-scaled product

    Raises:
        RayOverflow: If a * b + HALF_RAY exceeds 256 bits
    """
    _check_unsigned("ray_mul", a, b)
    return _checked("ray_mul", a * b + HALF_RAY) // RAY


def ray_div(a: int, b: int) -> int:
    """
    Divide two ray values, rounding half up.

    Args:
        a: Ray-scaled numerator
        b: Ray-scaled denominator

    Returns:
        The ray-scaled quotient

    Raises:
        RayDivisionByZero: If b is zero
        RayOverflow: If a * RAY + b // 2 exceeds 256 bits
    """
    _check_unsigned("ray_div", a, b)
    if b == 0:
        raise RayDivisionByZero()
    return _checked("ray_div", a * RAY + b // 2) // b


def wad_to_ray(a: int) -> int:
    """Lift a wad amount to ray precision."""
    _check_unsigned("wad_to_ray", a)
    return _checked("wad_to_ray", a * WAD_RAY_RATIO)


def ray_to_wad(a: int) -> int:
    """Descale a ray amount back to wad precision, rounding half up."""
    _check_unsigned("ray_to_wad", a)
    result, remainder = divmod(a, WAD_RAY_RATIO)
    if remainder >= HALF_WAD_RAY_RATIO:
        result += 1
    return result
