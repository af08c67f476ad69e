def find_new_line_pos(buffer):
    """Offset of the last line break in ``buffer``, or None.

    The scan runs backwards: with blocks much larger than a line the last
    break is almost always a few bytes from the end.
    """
    pos = buffer.rfind(b"\n")
    return None if pos == -1 else pos


def split_last_line(buffer):
    """Split ``buffer`` into complete lines and the trailing partial record."""
    pos = find_new_line_pos(buffer)
    if pos is None:
        return buffer[:0], buffer
    return buffer[: pos + 1], buffer[pos + 1 :]
