"""Hex dump rendering for message payloads."""

from __future__ import annotations

BYTES_PER_LINE = 16


def _printable(byte: int) -> str:
    return chr(byte) if 0x20 <= byte < 0x7F else "."


def hex_dump(data: bytes) -> str:
    """Render ``data`` as offset, two groups of eight hex bytes and an ASCII gutter."""

    lines: list[str] = []
    for offset in range(0, len(data), BYTES_PER_LINE):
        chunk = data[offset : offset + BYTES_PER_LINE]
        cells = [f"{byte:02X}" for byte in chunk]
        cells += ["  "] * (BYTES_PER_LINE - len(chunk))
        left = " ".join(cells[:8])
        right = " ".join(cells[8:])
        text = "".join(_printable(byte) for byte in chunk)
        lines.append(f"{offset:04X}: {left}  {right}  {text}")
    return "\n".join(lines)


__all__ = ["BYTES_PER_LINE", "hex_dump"]
