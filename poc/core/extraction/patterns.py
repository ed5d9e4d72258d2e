"""Format helpers for the values pulled out of diagnostic command output."""

import ipaddress
import re
from typing import Optional


PLACEHOLDER_ADDRESS = '0.0.0.0'
LINK_LOCAL_PREFIX = 'fe80'

# Six hex pairs with one consistent separator, not part of a longer run
MAC_RE = re.compile(
    r'(?<![0-9A-Fa-f])(?<![0-9A-Fa-f][:-])'
    r'[0-9A-Fa-f]{2}([:-])(?:[0-9A-Fa-f]{2}\1){4}[0-9A-Fa-f]{2}'
    r'(?![:-]?[0-9A-Fa-f])'
)
IPV4_RE = re.compile(r'(?<![\d.])(\d{1,3}(?:\.\d{1,3}){3})(?![\d]|\.\d)')


def extract_mac(text: Optional[str]) -> Optional[str]:
    """Return the first MAC address in text, canonical lowercase colon form"""
    if not text:
        return None
    m = MAC_RE.search(text)
    if not m:
        return None
    return m.group(0).replace('-', ':').lower()


def is_mac(text: Optional[str]) -> bool:
    if not text:
        return False
    m = MAC_RE.fullmatch(text.strip())
    return m is not None


def is_ipv4(text: Optional[str]) -> bool:
    if not text:
        return False
    try:
        ipaddress.IPv4Address(text)
    except ValueError:
        return False
    return True


def extract_ipv4(text: Optional[str]) -> Optional[str]:
    """
    Return the first dotted-quad in text.

    Only the first candidate is considered; if it is the placeholder address
    or not a valid IPv4 address the line yields nothing.
    """
    if not text:
        return None
    m = IPV4_RE.search(text)
    if not m:
        return None
    candidate = m.group(1)
    if candidate == PLACEHOLDER_ADDRESS or not is_ipv4(candidate):
        return None
    return candidate


def is_link_local_candidate(token: str) -> bool:
    return ':' in token or token.lower().startswith(LINK_LOCAL_PREFIX)
