"""
Wire-level helpers for the NUT network protocol.

Values in NUT replies are double-quoted; inside the quotes a backslash
escapes the following character, so ``"say \\"hi\\""`` carries ``say "hi"``.
"""

DEFAULT_PORT = 3493
ENCODING = "utf-8"


class QuotingError(ValueError):
    """Raised when a value does not follow the NUT quoting convention."""


def quote(value: str) -> str:
    """Quote a value the way upsd does."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def unquote(value: str) -> str:
    """
    Remove NUT quoting from a value.

    Args:
        value: The raw value, including the surrounding double quotes.

    Returns:
        The unquoted string.

    Raises:
        QuotingError: If the delimiters are missing, an inner quote is not
            escaped, or the value ends in a lone backslash.
    """
    if len(value) < 2 or value[0] != '"' or value[-1] != '"':
        raise QuotingError(f"value is not quoted: {value!r}")

    body = value[1:-1]
    out = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\":
            if i + 1 == len(body):
                raise QuotingError(f"dangling escape in {value!r}")
            out.append(body[i + 1])
            i += 2
            continue
        if ch == '"':
            raise QuotingError(f"unescaped quote in {value!r}")
        out.append(ch)
        i += 1
    return "".join(out)


def split_address(address: str) -> tuple[str, int]:
    """
    Split ``host[:port]`` into its parts, using the default NUT port if none is given.

    IPv6 literals may be given bare (``::1``) or bracketed (``[::1]:3493``).

    Raises:
        ValueError: If the port is not a valid TCP port number.
    """
    if address.startswith("["):
        host, sep, rest = address[1:].partition("]")
        if not sep:
            raise ValueError(f"missing ']' in address {address!r}")
        if not rest:
            return host, DEFAULT_PORT
        if not rest.startswith(":"):
            raise ValueError(f"unexpected text after ']' in address {address!r}")
        port_text = rest[1:]
    elif address.count(":") == 1:
        host, _, port_text = address.partition(":")
    else:
        # bare hostname or bare IPv6 literal
        return address, DEFAULT_PORT

    if not port_text.isdigit() or not 0 < int(port_text) < 65536:
        raise ValueError(f"invalid port in address {address!r}")
    return host, int(port_text)


def normalize_address(address: str) -> str:
    """Return ``address`` with the default NUT port appended when it has none."""
    host, port = split_address(address)
    if ":" in host:
        host = f"[{host}]"
    return f"{host}:{port}"
