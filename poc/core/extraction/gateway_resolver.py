"""
Gateway resolver for WifiScout

Resolves only the default-route address of the wireless interface. Used as
a secondary source for NetworkIdentity.address and by the gateway endpoint.
"""

import logging
from typing import Optional

from .command_runner import CommandRunner, DEFAULT_TIMEOUT
from .identity import ExtractionContext, Outcome
from .line_scanner import LineScanner, contains
from .patterns import PLACEHOLDER_ADDRESS, extract_ipv4, is_ipv4
from .platform_extractors import IPCONFIG, IP_ROUTE_DEFAULT, WIFI_ADAPTER_SECTION, scan_field


logger = logging.getLogger(__name__)

NET_ROUTE_QUERY = (
    'Get-NetRoute -DestinationPrefix "0.0.0.0/0" '
    '| Where-Object { $_.InterfaceAlias -like "*Wi-Fi*" -or $_.InterfaceAlias -like "*Wireless*" } '
    '| Select-Object -First 1 | Select-Object -ExpandProperty NextHop'
)
POWERSHELL_NET_ROUTE = f'powershell -Command "{NET_ROUTE_QUERY}"'


class GatewayResolver:
    """Resolve the wireless default gateway. resolve() never raises."""

    def __init__(self, runner: CommandRunner, timeout: float = DEFAULT_TIMEOUT):
        self.runner = runner
        self.timeout = timeout

    async def resolve(self, ctx: Optional[ExtractionContext] = None) -> Optional[str]:  # pragma: no cover - interface
        raise NotImplementedError

    @staticmethod
    def _record(ctx: Optional[ExtractionContext], step: str, outcome: Outcome, detail: str = '') -> None:
        if ctx is not None:
            ctx.record(step, outcome, detail)


class WindowsGatewayResolver(GatewayResolver):

    async def resolve(self, ctx: Optional[ExtractionContext] = None) -> Optional[str]:
        gateway = await self._from_ipconfig(ctx)
        if gateway:
            return gateway
        return await self._from_route_table(ctx)

    async def _from_ipconfig(self, ctx: Optional[ExtractionContext]) -> Optional[str]:
        result = await self.runner.run(IPCONFIG, timeout=self.timeout)
        if not result.ok:
            self._record(ctx, 'gateway_ipconfig', result.failure.outcome, result.failure.value)
            return None
        gateway, outcome = scan_field(WIFI_ADAPTER_SECTION, result.stdout, contains('Default Gateway'), extract_ipv4)
        self._record(ctx, 'gateway_ipconfig', outcome)
        return gateway

    async def _from_route_table(self, ctx: Optional[ExtractionContext]) -> Optional[str]:
        result = await self.runner.run(POWERSHELL_NET_ROUTE, timeout=self.timeout)
        if not result.ok:
            self._record(ctx, 'gateway_route_table', result.failure.outcome, result.failure.value)
            return None
        candidate = result.stdout.strip()
        if not candidate:
            self._record(ctx, 'gateway_route_table', Outcome.NO_MATCH)
            return None
        if candidate == PLACEHOLDER_ADDRESS or not is_ipv4(candidate):
            logger.debug("route table next hop %r rejected", candidate)
            self._record(ctx, 'gateway_route_table', Outcome.MALFORMED_CANDIDATE, candidate)
            return None
        self._record(ctx, 'gateway_route_table', Outcome.OK)
        return candidate


class PosixGatewayResolver(GatewayResolver):

    async def resolve(self, ctx: Optional[ExtractionContext] = None) -> Optional[str]:
        result = await self.runner.run(IP_ROUTE_DEFAULT, timeout=self.timeout)
        if not result.ok:
            self._record(ctx, 'gateway_route', result.failure.outcome, result.failure.value)
            return None
        gateway, outcome = scan_field(LineScanner(), result.stdout, contains('default'), extract_ipv4)
        self._record(ctx, 'gateway_route', outcome)
        return gateway
