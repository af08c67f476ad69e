from onebrc.errors import ParseError


def parse_float(raw):
    try:
        return float(raw)
    except ValueError:
        raise ParseError(bytes(raw)) from None


def iter_records(chunk):
    """Yield ``(name, value)`` for every record in ``chunk``.

    A record is ``name;value`` followed by a line break; the last record may
    lack the break when the input does not end with one.
    """
    find = chunk.find
    end_of_chunk = len(chunk)
    cursor = 0
    while True:
        sep = find(b";", cursor)
        if sep == -1:
            return
        end = find(b"\n", sep)
        if end == -1:
            end = end_of_chunk
        try:
            value = parse_float(chunk[sep + 1 : end])
        except ParseError as exc:
            raise ParseError(exc.raw, cursor) from None
        yield chunk[cursor:sep], value
        cursor = end + 1
