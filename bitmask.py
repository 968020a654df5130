from typing import Tuple

BOOL_WIDTH = 1  #: Width of the boolean container
WIDTHS: Tuple[int, ...] = (8, 16, 32, 64)  #: Supported integer containers


def mask(n: int, width: int = 64) -> int:
    """Return a value with the low ``n`` bits set.

    For ``n == width`` the result is the maximal value of the container
    (all of its bits set).

    :param n: Number of low bits to set.
    :type n: int
    :param width: Width of the target container in bits.
    :type width: int
    :returns: The mask.
    :rtype: int
    :raises ValueError: If ``n`` is negative or larger than ``width``.
    """
    if n < 0 or n > width:
        raise ValueError(f"Mask of {n} bits does not fit {width}-bit container")
    return (1 << n) - 1


def container_for(bit_count: int) -> int:
    """Pick the smallest container able to hold ``bit_count`` bits.

    :param bit_count: Field width in bits (0-64).
    :type bit_count: int
    :returns: One of ``1, 8, 16, 32, 64`` (``8`` for a zero-width field).
    :rtype: int
    :raises ValueError: If ``bit_count`` is negative or above 64.
    """
    if bit_count < 0:
        raise ValueError(f"Negative bit count: {bit_count}")
    if bit_count == BOOL_WIDTH:
        return BOOL_WIDTH
    for width in WIDTHS:
        if bit_count <= width:
            return width
    raise ValueError(f"Bit count too big: {bit_count} (max {WIDTHS[-1]})")
