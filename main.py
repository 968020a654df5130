import argparse
import sys

from typing import List, Optional, Tuple
from bitmask import BOOL_WIDTH, container_for
from bitops import BitWriter, SupportsBitRead
from sticky import StickyBitReader


def get_parser():
    """Create and configure the CLI argument parser.

    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Pack integers of 1-64 bits into a dense byte sequence"
    )
    subparsers = parser.add_subparsers(
        title="subcommands", dest="cmd", required=True
    )

    pack = subparsers.add_parser(
        "pack", aliases=["p"], help="Pack BITS:VALUE fields into bytes"
    )
    pack.add_argument(
        "fields",
        nargs="+",
        help="Fields to pack in order, e.g. 5:0b11101 4:6 12:0xABC",
    )
    pack.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write packed bytes to this file (default: print hex)",
    )

    unpack = subparsers.add_parser(
        "unpack", aliases=["u"], help="Unpack fields of the given bit widths"
    )
    unpack.add_argument(
        "widths",
        nargs="+",
        type=int,
        help="Bit width of each field, in the order they were packed",
    )
    source = unpack.add_mutually_exclusive_group(required=True)
    source.add_argument("-i", "--input", help="File holding packed bytes")
    source.add_argument("-x", "--hex", help="Packed bytes as a hex string")

    return parser


def _parse_field(text: str) -> Tuple[int, int]:
    """Parse a ``BITS:VALUE`` field given on the command line.

    ``VALUE`` accepts ``0x``/``0o``/``0b`` prefixes.

    :param text: Field specification.
    :type text: str
    :returns: ``(bit_count, value)``.
    :rtype: Tuple[int, int]
    :raises ValueError: If the syntax is invalid, the width is out of range
        or the value does not fit the width.
    """
    bits, sep, value_text = text.partition(":")
    if not sep:
        raise ValueError(f"Invalid field (expected BITS:VALUE): {text}")
    try:
        bit_count = int(bits)
        value = int(value_text, 0)
    except ValueError:
        raise ValueError(f"Invalid field (expected BITS:VALUE): {text}") from None
    container_for(bit_count)
    if value < 0 or value >> bit_count:
        raise ValueError(f"Value {value_text} does not fit in {bit_count} bits")
    return bit_count, value


def _parse_hex(text: str) -> bytes:
    """Decode a hex string, tolerating whitespace and a ``0x`` prefix.

    :param text: Hex digits.
    :type text: str
    :returns: Decoded bytes.
    :rtype: bytes
    :raises ValueError: If ``text`` is not valid hex.
    """
    text = text.strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise ValueError(f"Invalid hex data: {text}") from None


def _fmt_bits(n_bits: int) -> str:
    """Format a bit count with the number of bytes it occupies.

    :param n_bits: Number of bits.
    :type n_bits: int
    :returns: Human-readable string like ``21 bits (3 bytes)``.
    :rtype: str
    """
    n_bytes = (n_bits + 7) // 8
    unit = "byte" if n_bytes == 1 else "bytes"
    return f"{n_bits} bits ({n_bytes} {unit})"


def _write_field(writer: BitWriter, value: int, bit_count: int) -> None:
    """Write one field through the smallest container that fits it."""
    width = container_for(bit_count)
    if width == BOOL_WIDTH:
        writer.write_bool(value == 1)
    elif width == 8:
        writer.write8(value, bit_count)
    elif width == 16:
        writer.write16(value, bit_count)
    elif width == 32:
        writer.write32(value, bit_count)
    else:
        writer.write64(value, bit_count)


def _read_field(reader: SupportsBitRead, bit_count: int) -> int:
    """Read one field through the smallest container that fits it."""
    width = container_for(bit_count)
    if width == BOOL_WIDTH:
        return int(reader.read_bool())
    if width == 8:
        return reader.read8(bit_count)
    if width == 16:
        return reader.read16(bit_count)
    if width == 32:
        return reader.read32(bit_count)
    return reader.read64(bit_count)


def pack_fields(fields: List[Tuple[int, int]]) -> bytes:
    """Pack ``(bit_count, value)`` pairs in order.

    :param fields: Fields to pack.
    :type fields: List[Tuple[int, int]]
    :returns: Packed bytes.
    :rtype: bytes
    """
    writer = BitWriter()
    for bit_count, value in fields:
        _write_field(writer, value, bit_count)
    return writer.bit_data()


def unpack_fields(reader: SupportsBitRead, widths: List[int]) -> List[int]:
    """Read one value per entry of ``widths``, in order.

    :param reader: Reader positioned at the first field.
    :type reader: SupportsBitRead
    :param widths: Bit width of each field.
    :type widths: List[int]
    :returns: Values read.
    :rtype: List[int]
    """
    return [_read_field(reader, bit_count) for bit_count in widths]


def pack_command(field_texts: List[str], output_path: Optional[str]) -> int:
    """Pack fields given on the command line.

    Prints the packed bytes as hex, or writes them to ``output_path``.

    :param field_texts: ``BITS:VALUE`` field specifications.
    :type field_texts: List[str]
    :param output_path: Destination file, or ``None`` to print hex.
    :type output_path: Optional[str]
    :returns: Exit status.
    :rtype: int
    """
    try:
        fields = [_parse_field(text) for text in field_texts]
    except ValueError as e:
        print(f"[!] {e}")
        return 1
    data = pack_fields(fields)
    if output_path is None:
        print(data.hex())
        return 0
    with open(output_path, "wb") as out:
        out.write(data)
    total_bits = sum(bit_count for bit_count, _ in fields)
    print(f"Packed {len(fields)} fields: {_fmt_bits(total_bits)}")
    return 0


def unpack_command(
    widths: List[int], input_path: Optional[str], hex_text: Optional[str]
) -> int:
    """Unpack fields of the given widths and print one per line.

    All reads are issued unconditionally; failure is checked once at the end.

    :param widths: Bit width of each field.
    :type widths: List[int]
    :param input_path: File holding packed bytes.
    :type input_path: Optional[str]
    :param hex_text: Packed bytes as hex, used when ``input_path`` is None.
    :type hex_text: Optional[str]
    :returns: Exit status.
    :rtype: int
    """
    try:
        for bit_count in widths:
            container_for(bit_count)
        if input_path is not None:
            with open(input_path, "rb") as f:
                data = f.read()
        else:
            data = _parse_hex(hex_text or "")
    except FileNotFoundError:
        print(f"[!] Input file not found: {input_path}")
        return 1
    except ValueError as e:
        print(f"[!] {e}")
        return 1

    reader = StickyBitReader(data)
    values = unpack_fields(reader, widths)
    if reader.error is not None:
        print(f"[!] Decoding failed: {reader.error}")
        return 1
    for bit_count, value in zip(widths, values):
        print(f"{bit_count}: {value} (0x{value:X})")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI tool.

    :param argv: Arguments to parse (default: ``sys.argv[1:]``).
    :type argv: Optional[List[str]]
    :returns: Exit status.
    :rtype: int
    """
    parser = get_parser()
    args = parser.parse_args(argv)

    if args.cmd in ["pack", "p"]:
        return pack_command(args.fields, args.output)
    return unpack_command(args.widths, args.input, args.hex)


if __name__ == "__main__":
    sys.exit(main())
