"""Convert timedeltas to and from Go-style duration strings, such as "25ms" or "1m30s"."""
import datetime
import decimal
import re

UNITS = {
    "h": datetime.timedelta(hours=1),
    "m": datetime.timedelta(minutes=1),
    "s": datetime.timedelta(seconds=1),
    "ms": datetime.timedelta(milliseconds=1),
    "us": datetime.timedelta(microseconds=1),
}

# ms has to be tried before m
COMPONENT = re.compile(r"(\d+(?:\.\d*)?)(h|ms|m|s|us)")


def _trim(val: decimal.Decimal) -> str:
    return format(val.normalize(), "f")


def format_duration(val: datetime.timedelta) -> str:
    if val == datetime.timedelta():
        return "0"
    sign = ""
    if val < datetime.timedelta():
        sign = "-"
        val = -val

    # under a second, a single fractional unit reads better
    if val < UNITS["ms"]:
        return f"{sign}{val.microseconds}us"
    if val < UNITS["s"]:
        return f"{sign}{_trim(decimal.Decimal(val.microseconds) / 1000)}ms"

    parts = [sign]
    hours, val = divmod(val, UNITS["h"])
    minutes, val = divmod(val, UNITS["m"])
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if val:
        seconds = decimal.Decimal(val.seconds) + decimal.Decimal(val.microseconds) / 1000000
        parts.append(f"{_trim(seconds)}s")
    return "".join(parts)


def parse_duration(val: str) -> datetime.timedelta:
    sign = 1
    if val[:1] in ("-", "+"):
        sign = -1 if val[0] == "-" else 1
        val = val[1:]
    if not val:
        raise ValueError("Empty duration string")
    if val == "0":
        return datetime.timedelta()

    accum = datetime.timedelta()
    pos = 0
    while pos < len(val):
        match = COMPONENT.match(val, pos)
        if match is None:
            raise ValueError(f"Invalid duration string {val!r} at position {pos}")
        number = decimal.Decimal(match.group(1))
        num, denom = number.as_integer_ratio()
        accum += num * UNITS[match.group(2)] / denom
        pos = match.end()
    return sign * accum
