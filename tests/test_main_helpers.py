import pytest

from bitops import BitReader
from sticky import StickyBitReader


def test_parse_field_accepts_prefixes(m):
    assert m._parse_field("5:0b11101") == (5, 0b11101)
    assert m._parse_field("12:0xABC") == (12, 0xABC)
    assert m._parse_field("4:6") == (4, 6)
    assert m._parse_field("0:0") == (0, 0)


@pytest.mark.parametrize("text", ["abc", "5", "x:1", "3:8", "65:1", "-1:0", "8:-1"])
def test_parse_field_rejects_invalid(text, m):
    with pytest.raises(ValueError):
        _ = m._parse_field(text)


def test_parse_hex(m):
    assert m._parse_hex("dd7815") == bytes([0xDD, 0x78, 0x15])
    assert m._parse_hex(" 0xDD 78 15 ") == bytes([0xDD, 0x78, 0x15])
    with pytest.raises(ValueError):
        _ = m._parse_hex("zz")


def test_fmt_bits(m):
    assert m._fmt_bits(0) == "0 bits (0 bytes)"
    assert m._fmt_bits(8) == "8 bits (1 byte)"
    assert m._fmt_bits(21) == "21 bits (3 bytes)"


def test_pack_fields_uses_smallest_containers(m):
    data = m.pack_fields([(5, 0b11101), (4, 0b0110), (12, 0xABC)])
    assert data == bytes([0xDD, 0x78, 0x15])
    assert m.pack_fields([(1, 1), (1, 0), (1, 1)]) == bytes([0b101])


def test_unpack_fields_with_both_readers(m):
    data = bytes([0xDD, 0x78, 0x15])
    widths = [5, 4, 12]
    expected = [0b11101, 0b0110, 0xABC]
    assert m.unpack_fields(BitReader(data), widths) == expected
    assert m.unpack_fields(StickyBitReader(data), widths) == expected


def test_unpack_fields_direct_reader_raises(m):
    with pytest.raises(EOFError):
        _ = m.unpack_fields(BitReader(b"\xFF"), [8, 1])


def test_cli_parser_accepts_subcommands(m):
    parser = m.get_parser()
    ns = parser.parse_args(["pack", "5:1", "3:2", "-o", "out.bin"])
    assert ns.cmd in ("pack", "p")
    assert ns.fields == ["5:1", "3:2"]
    ns2 = parser.parse_args(["u", "5", "3", "-x", "ff"])
    assert ns2.cmd in ("unpack", "u")
    assert ns2.widths == [5, 3]
    with pytest.raises(SystemExit):
        parser.parse_args(["unpack", "5"])
