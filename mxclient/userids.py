"""Encoding and decoding of Matrix user ID localparts."""

from __future__ import annotations

_UNENCODED = frozenset(
    b"-._0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
)
_VALID_ESCAPED = frozenset(b"_abcdefghijklmnopqrstuvwxyz")
_VALID = _VALID_ESCAPED | frozenset(b"0123456789.=-")
_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")
_UNDERSCORE = ord("_")
_EQUALS = ord("=")


def encode_user_localpart(text: str) -> str:
    """Encode text into the Matrix-compliant localpart form ``a-z0-9._=-``.

    Upper-case letters become ``_`` followed by the lower-case letter, a literal
    underscore becomes ``__`` and every other byte outside the allowed range is
    written as ``=`` followed by two lower-case hex digits.
    """
    parts = []
    for byte in text.encode("utf-8", "surrogateescape"):
        if byte not in _UNENCODED:
            parts.append(f"={byte:02x}")
        elif byte == _UNDERSCORE:
            parts.append("__")
        elif ord("A") <= byte <= ord("Z"):
            parts.append("_" + chr(byte + 0x20))
        else:
            parts.append(chr(byte))
    return "".join(parts)


def decode_user_localpart(text: str) -> str:
    """Decode a localpart produced by :func:`encode_user_localpart`.

    Raises ``ValueError`` if the text holds characters outside ``a-z0-9._=-``,
    an invalid hex pair after ``=`` or an invalid character after ``_``.
    """
    data = text.encode("utf-8", "surrogateescape")
    out = bytearray()
    pos = 0
    while pos < len(data):
        byte = data[pos]
        if byte not in _VALID:
            raise ValueError(f"Byte pos {pos}: Invalid byte")
        if byte == _UNDERSCORE:
            if pos + 1 >= len(data):
                raise ValueError(
                    f"Byte pos {pos}: expected _[a-z_] encoding but ran out of string"
                )
            following = data[pos + 1]
            if following not in _VALID_ESCAPED:
                raise ValueError(f"Byte pos {pos}: expected _[a-z_] encoding")
            out.append(_UNDERSCORE if following == _UNDERSCORE else following - 0x20)
            pos += 2
        elif byte == _EQUALS:
            if pos + 2 >= len(data):
                raise ValueError(
                    f"Byte pos: {pos}: expected quote-printable encoding "
                    "but ran out of string"
                )
            pair = data[pos + 1 : pos + 3]
            if not all(digit in _HEX_DIGITS for digit in pair):
                raise ValueError(f"Byte pos {pos}: invalid hex byte {pair!r}")
            out.append(int(pair, 16))
            pos += 3
        else:
            out.append(byte)
            pos += 1
    return bytes(out).decode("utf-8", "surrogateescape")


def extract_user_localpart(user_id: str) -> str:
    """Return the localpart of a user ID such as ``@alice:example.org``."""
    if not user_id.startswith("@"):
        raise ValueError(f"{user_id} is not a valid user id")
    return user_id.split(":", 1)[0].removeprefix("@")