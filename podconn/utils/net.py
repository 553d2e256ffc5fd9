from __future__ import annotations
import binascii, socket, string

from ..errors import DecodeError, MalformedField

ADDRESS_LENGTHS = {"inet": 4}


def reverse_bytes(b: bytes) -> bytes:
    return b[::-1]


def ipv4_from_le_bytes(b: bytes) -> str:
    # /proc/net tables store the address in host (little-endian) byte order
    return socket.inet_ntoa(reverse_bytes(b))


def decode_address(family: str, raw: str) -> str:
    """Decode a /proc/net 'HEXADDR:HEXPORT' field into 'ip:port'.

    '0100007F:1538' -> '127.0.0.1:5432'
    Raises MalformedField if there is not exactly one ':' and DecodeError for
    anything else that cannot be decoded.
    """
    parts = raw.split(":")
    if len(parts) != 2:
        raise MalformedField(raw)
    addr, port_hex = parts

    if not port_hex or any(c not in string.hexdigits for c in port_hex):
        raise DecodeError(raw, "invalid port")
    port = int(port_hex, 16)
    if port > 0xFFFF:
        raise DecodeError(raw, "invalid port")

    try:
        decoded = binascii.unhexlify(addr)
    except (binascii.Error, ValueError):
        raise DecodeError(addr, "decode error") from None

    want = ADDRESS_LENGTHS.get(family)
    if want is None:
        raise DecodeError(raw, f"unsupported address family {family}")
    if len(decoded) != want:
        raise DecodeError(raw, f"invalid {family} address length {len(decoded)}")

    return f"{ipv4_from_le_bytes(decoded)}:{port}"


def get_fqdn() -> str:
    """Best-effort fully qualified host name, falling back to the plain hostname."""
    hostname = socket.gethostname()
    try:
        infos = socket.getaddrinfo(hostname, None, socket.AF_INET)
    except OSError:
        return hostname
    for info in infos:
        ip = info[4][0]
        try:
            fqdn, _, _ = socket.gethostbyaddr(ip)
        except OSError:
            return hostname
        return fqdn.rstrip(".")
    return hostname
