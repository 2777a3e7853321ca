from __future__ import annotations

import ipaddress
import secrets
from dataclasses import dataclass
from functools import lru_cache

from fastapi import Request

INTERNAL_TOKEN_HEADER = "X-Internal-Token"
FORWARDED_FOR_HEADER = "X-Forwarded-For"

IPNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network


def normalize_ip(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    try:
        return str(ipaddress.ip_address(value.strip()))
    except ValueError:
        return None


@lru_cache(maxsize=32)
def parse_networks(spec: str) -> tuple[IPNetwork, ...]:
    """Parses "10.0.0.0/8, 127.0.0.1" style lists; bare hosts become /32 or /128.

    Unparseable entries are dropped, so a typo narrows access instead of widening it.
    """
    networks: list[IPNetwork] = []
    for entry in (part.strip() for part in spec.split(",")):
        if not entry:
            continue
        try:
            networks.append(ipaddress.ip_network(entry, strict=False))
        except ValueError:
            continue
    return tuple(networks)


def tokens_match(*, expected: str, received: str | None) -> bool:
    if not expected or not received:
        return False
    return secrets.compare_digest(expected.encode(), received.encode())


@dataclass(frozen=True, slots=True)
class InternalAccessPolicy:
    token: str
    allowlist: str
    trusted_proxies: str = ""

    def client_ip(self, request: Request) -> str | None:
        peer = normalize_ip(request.client.host if request.client is not None else None)
        forwarded = request.headers.get(FORWARDED_FOR_HEADER)
        if forwarded and self._is_in(peer, self.trusted_proxies):
            return normalize_ip(forwarded.split(",", maxsplit=1)[0])
        return peer

    def allows_ip(self, client_ip: str | None) -> bool:
        return self._is_in(client_ip, self.allowlist)

    def has_valid_token(self, request: Request) -> bool:
        return tokens_match(expected=self.token, received=request.headers.get(INTERNAL_TOKEN_HEADER))

    @staticmethod
    def _is_in(ip: str | None, spec: str) -> bool:
        normalized = normalize_ip(ip)
        if normalized is None:
            return False
        address = ipaddress.ip_address(normalized)
        return any(address in network for network in parse_networks(spec))
