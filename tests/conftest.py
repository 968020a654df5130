import sys
import random
from pathlib import Path
import importlib
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture()
def m():
    """Lazily import the main module for tests to avoid module-level import."""
    return importlib.import_module("main")


@pytest.fixture()
def rng():
    """Seeded random generator so failures are reproducible."""
    return random.Random(0xB17DA7A)


@pytest.fixture()
def small_fields_data():
    """Bytes holding a 6-bit, a 5-bit and a 4-bit field (15 bits, 2 bytes)."""
    from bitops import BitWriter

    w = BitWriter()
    w.write8(0b111111, 6)
    w.write8(0b11111, 5)
    w.write8(0b1111, 4)
    return w.bit_data()


def random_fields(rng: random.Random, count: int):
    """Return ``count`` ``(bit_count, value)`` pairs with 1-64 bit widths."""
    fields = []
    for _ in range(count):
        bit_count = rng.randint(1, 64)
        fields.append((bit_count, rng.getrandbits(bit_count)))
    return fields


@pytest.fixture()
def random_fields_fn():
    """
    Fixture that provides the random_fields helper without importing conftest.
    """
    return random_fields
