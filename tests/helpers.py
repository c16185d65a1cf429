from aibe.constants import SCALAR_BYTES


def field_spans(layout, group):
    """(offset, width) of every field of a blob laid out as e.g. ["g1", "gt"]."""
    widths = {
        "scalar": SCALAR_BYTES,
        "g1": group.g1_bytes,
        "g2": group.g2_bytes,
        "gt": group.gt_bytes,
    }
    spans = []
    offset = 0
    for kind in layout:
        spans.append((offset, widths[kind]))
        offset += widths[kind]
    return spans


def flip_bit(blob: bytes, offset: int, width: int) -> bytes:
    buf = bytearray(blob)
    buf[offset + width // 2] ^= 0x01
    return bytes(buf)
