"""
Platform extractors for WifiScout

Each extractor is a fixed, sequential pipeline of diagnostic commands. Every
step either fills one NetworkIdentity field or records why it could not;
no step failure stops the steps after it.
"""

import logging
import re
from typing import Callable, Optional, Tuple

from .command_runner import CommandResult, CommandRunner, DEFAULT_TIMEOUT
from .identity import ExtractionContext, Outcome
from .line_scanner import LineScanner, LinePredicate, contains, labelled
from .patterns import extract_ipv4, extract_mac, is_link_local_candidate, is_mac


logger = logging.getLogger(__name__)

# Windows command surface
NETSH_INTERFACES = 'netsh wlan show interfaces'
NETSH_NETWORKS = 'netsh wlan show networks mode=Bssid'
IPCONFIG = 'ipconfig'

# Posix command surface
IWGETID = 'iwgetid -r'
IP_ROUTE_DEFAULT = 'ip route | grep default'

SSID_FIELD = labelled('SSID')
LINK_LOCAL_VALUE_RE = re.compile(r'([0-9a-fA-F:]+(?:%\d+)?)')
NETWORK_HEADER_RE = re.compile(r'^\s*SSID \d+\s*:(.*)$')


def wifi_section_start(line: str) -> bool:
    return 'Wireless LAN adapter Wi-Fi' in line or 'adapter Wi-Fi:' in line


def wifi_section_end(line: str) -> bool:
    """Next adapter header that is not the Wi-Fi adapter"""
    return 'adapter' in line and 'Wi-Fi' not in line


WIFI_ADAPTER_SECTION = LineScanner(wifi_section_start, wifi_section_end)


def parse_link_local(line: str) -> Optional[str]:
    """Value of a "Link-local IPv6 Address . . : fe80::...%12" line"""
    if ':' not in line:
        return None
    value = line.split(':', 1)[1].strip()
    m = LINK_LOCAL_VALUE_RE.match(value)
    if m and ':' in m.group(1):
        return m.group(1)
    # The label split left nothing usable; try the token after the last colon
    tail = line[line.rfind(':') + 1:].strip()
    if tail and is_link_local_candidate(tail):
        return tail
    return None


def network_header(line: str) -> Optional[str]:
    """Network name of an "SSID n : <name>" scan header, None for any other line"""
    m = NETWORK_HEADER_RE.match(line)
    return m.group(1).strip() if m else None


def is_bssid_line(line: str) -> bool:
    return line.strip().lower().startswith('bssid')


def bssid_after_label(line: str) -> Optional[str]:
    """MAC from a "BSSID : aa:bb:..." line, the whole value must be a MAC"""
    stripped = line.strip()
    if not stripped.lower().startswith('bssid') or ':' not in stripped:
        return None
    value = stripped.split(':', 1)[1].strip()
    if not is_mac(value):
        return None
    return extract_mac(value)


def has_value(line: str) -> bool:
    """False for a "Label . . . :" line with nothing after the colon"""
    if ':' not in line:
        return bool(line.strip())
    return bool(line.split(':', 1)[1].strip())


def scan_field(scanner: LineScanner, text: str, is_candidate: LinePredicate,
               convert: Callable[[str], Optional[str]],
               last: bool = False) -> Tuple[Optional[str], Outcome]:
    """
    First converted value among candidate lines, plus the step outcome.

    With last=True every candidate is tried and the final converted value
    wins. Candidate lines with an empty value are not counted. Lines that
    fail conversion are dropped; if there were some but none converted the
    outcome is MALFORMED_CANDIDATE, if there were none it is NO_MATCH.
    """
    candidates = 0
    value = None
    for line in scanner.lines(text):
        if not is_candidate(line) or not has_value(line):
            continue
        candidates += 1
        converted = convert(line)
        if converted:
            value = converted
            if not last:
                break
    if value:
        return value, Outcome.OK
    return None, Outcome.MALFORMED_CANDIDATE if candidates else Outcome.NO_MATCH


class PlatformExtractor:
    """Base class for per-platform extraction pipelines"""

    name = 'abstract'

    def __init__(self, runner: CommandRunner, timeout: float = DEFAULT_TIMEOUT):
        self.runner = runner
        self.timeout = timeout

    async def extract(self, ctx: ExtractionContext) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    async def _run(self, command_line: str) -> CommandResult:
        return await self.runner.run(command_line, timeout=self.timeout)

    @staticmethod
    def _record_failure(ctx: ExtractionContext, step: str, result: CommandResult) -> None:
        logger.debug("%s step %r degraded: %s", result.command, step, result.failure.value)
        ctx.record(step, result.failure.outcome, f"{result.command}: {result.failure.value}")


class WindowsExtractor(PlatformExtractor):
    """netsh + ipconfig pipeline"""

    name = 'windows'

    async def extract(self, ctx: ExtractionContext) -> None:
        await self._extract_ssid(ctx)
        await self._extract_bssid(ctx)
        await self._extract_addresses(ctx)

    async def _extract_ssid(self, ctx: ExtractionContext) -> None:
        result = await self._run(NETSH_INTERFACES)
        if not result.ok:
            self._record_failure(ctx, 'ssid', result)
            return
        ssid = LineScanner().find_field(result.stdout, SSID_FIELD)
        if ssid and ctx.identity.set_once('ssid', ssid):
            ctx.record('ssid', Outcome.OK)
        else:
            ctx.record('ssid', Outcome.NO_MATCH)

    async def _extract_bssid(self, ctx: ExtractionContext) -> None:
        ssid = ctx.identity.get('ssid')
        if not ssid:
            ctx.record('bssid', Outcome.SKIPPED, 'no ssid to locate the network block')
            return

        result = await self._run(NETSH_NETWORKS)
        if not result.ok:
            self._record_failure(ctx, 'bssid', result)
            await self._extract_bssid_from_interfaces(ctx)
            return

        # Block for our network runs from its "SSID n : <name>" header to the next SSID header
        scanner = LineScanner(
            section_start=lambda line: network_header(line) == ssid,
            section_end=lambda line: network_header(line) not in (None, ssid),
        )
        bssid, outcome = scan_field(scanner, result.stdout, contains('BSSID'), extract_mac)
        if bssid:
            ctx.identity.set_once('bssid', bssid)
        ctx.record('bssid', outcome)

    async def _extract_bssid_from_interfaces(self, ctx: ExtractionContext) -> None:
        result = await self._run(NETSH_INTERFACES)
        if not result.ok:
            self._record_failure(ctx, 'bssid_fallback', result)
            return
        bssid, outcome = scan_field(LineScanner(), result.stdout, is_bssid_line, bssid_after_label)
        if bssid:
            ctx.identity.set_once('bssid', bssid)
        ctx.record('bssid_fallback', outcome)

    async def _extract_addresses(self, ctx: ExtractionContext) -> None:
        result = await self._run(IPCONFIG)
        if not result.ok:
            for step in ('ipv4', 'gateway', 'link_local'):
                self._record_failure(ctx, step, result)
            return
        text = result.stdout

        ipv4, outcome = scan_field(WIFI_ADAPTER_SECTION, text, contains('IPv4 Address'), extract_ipv4)
        if ipv4:
            ctx.identity.set_once('address', ipv4)
        ctx.record('ipv4', outcome)

        # A gateway in the same section takes precedence over the interface address;
        # with several gateway lines the last valid one is kept
        gateway, outcome = scan_field(
            WIFI_ADAPTER_SECTION, text, contains('Default Gateway'), extract_ipv4, last=True
        )
        if gateway:
            ctx.identity.overwrite('address', gateway)
        ctx.record('gateway', outcome)

        link_local, outcome = scan_field(
            WIFI_ADAPTER_SECTION, text, contains('Link-local IPv6 Address'), parse_link_local
        )
        if link_local:
            ctx.identity.set_once('link_local_address', link_local)
        ctx.record('link_local', outcome)


class PosixExtractor(PlatformExtractor):
    """iwgetid + ip route pipeline. BSSID and link-local are not available here."""

    name = 'posix'

    async def extract(self, ctx: ExtractionContext) -> None:
        await self._extract_ssid(ctx)
        await self._extract_address(ctx)

    async def _extract_ssid(self, ctx: ExtractionContext) -> None:
        result = await self._run(IWGETID)
        if not result.ok:
            self._record_failure(ctx, 'ssid', result)
            return
        if ctx.identity.set_once('ssid', result.stdout.strip()):
            ctx.record('ssid', Outcome.OK)
        else:
            ctx.record('ssid', Outcome.NO_MATCH, 'empty output')

    async def _extract_address(self, ctx: ExtractionContext) -> None:
        result = await self._run(IP_ROUTE_DEFAULT)
        if not result.ok:
            self._record_failure(ctx, 'gateway', result)
            return
        gateway, outcome = scan_field(LineScanner(), result.stdout, contains('default'), extract_ipv4)
        if gateway:
            ctx.identity.set_once('address', gateway)
        ctx.record('gateway', outcome)
