from onebrc.errors import OutputEncodingError


def decode_name(name):
    try:
        return name.decode("utf-8")
    except UnicodeDecodeError:
        raise OutputEncodingError(bytes(name)) from None


def format_entry(name, summary):
    return f"{decode_name(name)}={summary.min:.1f}/{summary.mean:.1f}/{summary.max:.1f}"


def format_results(summaries):
    """Render ``{Name=min/mean/max, ...}`` with names in byte order."""
    return "{" + ", ".join(format_entry(name, summaries[name]) for name in sorted(summaries)) + "}"


def parse_results(text):
    """Read a result line back into ``{name: (min, mean, max)}``."""
    # {Adelaide=15.0/15.0/15.0, Cabo San Lucas=14.9/14.9/14.9} => Adelaide=15.0/15.0/15.0, ...
    body = text.strip().removeprefix("{").removesuffix("}")
    result = {}
    if not body:
        return result
    for entry in body.split(", "):
        name, _, values = entry.rpartition("=")
        minimum, mean, maximum = (float(v) for v in values.split("/"))
        result[name] = (minimum, mean, maximum)
    return result
