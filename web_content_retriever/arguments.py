"""
Argument decoding for get_web_content_as_markdown.

Arguments are validated with a pydantic model and returned as either
``Decoded`` or ``DecodeFailure``; nothing here raises.

``is_valid_url`` follows the WHATWG URL parser's accept/reject decisions
(what ``new URL(value)`` accepts), not RFC 3986.
"""
from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Union
from urllib.parse import unquote

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError, field_validator


_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):(.*)$", re.DOTALL)
_SPECIAL_SCHEMES = {"http", "https", "ws", "wss", "ftp", "file"}
# Leading/trailing C0 controls and space are stripped, tab and newlines removed anywhere
_C0_OR_SPACE = "".join(chr(c) for c in range(0x21))
_TAB_OR_NEWLINE_RE = re.compile(r"[\t\n\r]")
_FORBIDDEN_HOST = set("\x00\t\n\r #/:<>?@[\\]^|")
_FORBIDDEN_DOMAIN = _FORBIDDEN_HOST | {chr(c) for c in range(0x20)} | {"%", "\x7f"}
_WINDOWS_DRIVE_RE = re.compile(r"^[A-Za-z][:|]$")


def _parse_ipv4_number(part: str) -> Optional[int]:
    if not part:
        return None
    radix = 10
    if part[:2] in ("0x", "0X"):
        radix, part = 16, part[2:]
    elif len(part) > 1 and part[0] == "0":
        radix, part = 8, part[1:]
    if not part:
        return 0
    try:
        return int(part, radix) if part.isascii() and part.isalnum() else None
    except ValueError:
        return None


def _ends_in_number(host: str) -> bool:
    parts = host.split(".")
    if parts[-1] == "" and len(parts) > 1:
        parts.pop()
    last = parts[-1]
    if last and last.isascii() and last.isdigit():
        return True
    return last[:2] in ("0x", "0X") and _parse_ipv4_number(last) is not None


def _valid_ipv4(host: str) -> bool:
    parts = host.split(".")
    if parts[-1] == "" and len(parts) > 1:
        parts.pop()
    if len(parts) > 4:
        return False
    numbers: List[int] = []
    for part in parts:
        number = _parse_ipv4_number(part)
        if number is None:
            return False
        numbers.append(number)
    if any(n > 255 for n in numbers[:-1]):
        return False
    return numbers[-1] < 256 ** (5 - len(numbers))


def _valid_domain(host: str) -> bool:
    decoded = unquote(host, errors="replace")
    labels = []
    for label in decoded.split("."):
        if label and not label.isascii():
            try:
                label = label.encode("idna").decode("ascii")
            except UnicodeError:
                return False
        labels.append(label.lower())
    ascii_host = ".".join(labels)
    if not ascii_host or any(ch in _FORBIDDEN_DOMAIN for ch in ascii_host):
        return False
    if _ends_in_number(ascii_host):
        return _valid_ipv4(ascii_host)
    return True


def _valid_host(host: str, special: bool) -> bool:
    if host.startswith("["):
        if not host.endswith("]") or "%" in host:
            return False
        try:
            ipaddress.IPv6Address(host[1:-1])
        except ValueError:
            return False
        return True
    if special:
        return _valid_domain(host)
    return not any(ch in _FORBIDDEN_HOST for ch in host)


def _valid_authority(authority: str, special: bool) -> bool:
    hostport = authority.rpartition("@")[2]
    if "@" in authority and not hostport:
        return False
    if hostport.startswith("["):
        end = hostport.find("]")
        if end == -1:
            return False
        host, tail = hostport[:end + 1], hostport[end + 1:]
        if tail and not tail.startswith(":"):
            return False
        has_port, port = bool(tail), tail[1:]
    else:
        host, sep, port = hostport.partition(":")
        has_port = bool(sep)
    if not host:
        # Empty host is only allowed for non-special schemes without a port
        return not special and not has_port
    if port and not (port.isascii() and port.isdigit() and int(port) <= 65535):
        return False
    return _valid_host(host, special)


def is_valid_url(value: str) -> bool:
    """Syntactic check only, no reachability."""
    candidate = _TAB_OR_NEWLINE_RE.sub("", value.strip(_C0_OR_SPACE))
    match = _SCHEME_RE.match(candidate)
    if not match:
        return False
    scheme, rest = match.group(1).lower(), match.group(2)

    if scheme == "file":
        if len(rest) >= 2 and rest[0] in "/\\" and rest[1] in "/\\":
            host = re.split(r"[/\\?#]", rest[2:], maxsplit=1)[0]
            if not host or _WINDOWS_DRIVE_RE.match(host):
                return True
            return _valid_host(host, special=True)
        return True

    if scheme in _SPECIAL_SCHEMES:
        # Any run of slashes/backslashes (including none) introduces the authority
        authority = re.split(r"[/\\?#]", rest.lstrip("/\\"), maxsplit=1)[0]
        return _valid_authority(authority, special=True)

    if rest.startswith("//"):
        authority = re.split(r"[/?#]", rest[2:], maxsplit=1)[0]
        return _valid_authority(authority, special=False)
    return True


class GetWebContentArgs(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: StrictStr

    @field_validator("url")
    @classmethod
    def _syntactic_url(cls, value: str) -> str:
        if not is_valid_url(value):
            raise ValueError("not a valid URL")
        return value


@dataclass(frozen=True)
class Decoded:
    args: GetWebContentArgs


@dataclass(frozen=True)
class DecodeFailure:
    reason: str


DecodeResult = Union[Decoded, DecodeFailure]


def _describe(exc: ValidationError) -> str:
    error = exc.errors()[0]
    kind = error.get("type", "")
    if kind == "missing":
        return "url is required"
    if kind == "string_type":
        return "url must be a string"
    if kind == "model_type":
        return "arguments must be an object"
    return "url is not a valid URL"


def decode_arguments(arguments: Any) -> DecodeResult:
    try:
        return Decoded(GetWebContentArgs.model_validate(arguments))
    except ValidationError as exc:
        return DecodeFailure(_describe(exc))
