"""
Extraction facade for WifiScout

Single entry point for the HTTP shell and the client: picks the platform
pipeline, runs it, and layers in the gateway resolver where the platform
pipeline left the address empty. extract() always returns an identity; the
only error that escapes is an unsupported platform.
"""

import logging
import sys
from typing import Dict, List, Optional, Type

from .command_runner import CommandRunner, DEFAULT_TIMEOUT, ShellCommandRunner
from .gateway_resolver import GatewayResolver, PosixGatewayResolver, WindowsGatewayResolver
from .identity import ExtractionContext, ExtractionReport, NetworkIdentity
from .platform_extractors import PlatformExtractor, PosixExtractor, WindowsExtractor


logger = logging.getLogger(__name__)

POSIX_PLATFORMS = ('linux', 'darwin', 'freebsd', 'openbsd', 'netbsd', 'cygwin', 'sunos', 'aix')


class ExtractionError(Exception):
    """Internal fault of the extraction engine (not "no data found")"""


class UnsupportedPlatformError(ExtractionError):
    def __init__(self, platform: str):
        self.platform = platform
        super().__init__(f"No extractor for platform {platform!r}")


def platform_family(platform: str) -> str:
    """Map a sys.platform-style identity to 'windows' or 'posix'"""
    ident = (platform or '').lower()
    if ident.startswith('win'):
        return 'windows'
    if ident.startswith(POSIX_PLATFORMS):
        return 'posix'
    raise UnsupportedPlatformError(platform)


_EXTRACTORS: Dict[str, Type[PlatformExtractor]] = {
    'windows': WindowsExtractor,
    'posix': PosixExtractor,
}

_GATEWAY_RESOLVERS: Dict[str, Type[GatewayResolver]] = {
    'windows': WindowsGatewayResolver,
    'posix': PosixGatewayResolver,
}


def select_extractor(platform: str, runner: CommandRunner,
                     timeout: float = DEFAULT_TIMEOUT) -> PlatformExtractor:
    return _EXTRACTORS[platform_family(platform)](runner, timeout)


class ExtractionFacade:
    """Drive one platform pipeline per call. Holds no per-call state."""

    def __init__(self, platform: Optional[str] = None, runner: Optional[CommandRunner] = None,
                 timeout: float = DEFAULT_TIMEOUT):
        self.platform = platform or sys.platform
        self.runner = runner or ShellCommandRunner(default_timeout=timeout)
        self.timeout = timeout

    @property
    def family(self) -> str:
        return platform_family(self.platform)

    def _gateway_resolver(self) -> GatewayResolver:
        return _GATEWAY_RESOLVERS[self.family](self.runner, self.timeout)

    async def extract_report(self) -> ExtractionReport:
        extractor = select_extractor(self.platform, self.runner, self.timeout)
        ctx = ExtractionContext()
        await extractor.extract(ctx)

        if ctx.identity.get('address') is None and self.family == 'windows':
            gateway = await self._gateway_resolver().resolve(ctx)
            ctx.identity.set_once('address', gateway)

        report = ctx.freeze()
        logger.debug("extraction on %s: %s", extractor.name,
                     ', '.join(f"{o.step}={o.outcome.value}" for o in report.outcomes))
        return report

    async def extract(self) -> NetworkIdentity:
        report = await self.extract_report()
        return report.identity

    async def resolve_gateway(self) -> Optional[str]:
        return await self._gateway_resolver().resolve()


async def extract(platform: Optional[str] = None, runner: Optional[CommandRunner] = None,
                  timeout: float = DEFAULT_TIMEOUT) -> NetworkIdentity:
    return await ExtractionFacade(platform, runner, timeout).extract()


async def extract_report(platform: Optional[str] = None, runner: Optional[CommandRunner] = None,
                         timeout: float = DEFAULT_TIMEOUT) -> ExtractionReport:
    return await ExtractionFacade(platform, runner, timeout).extract_report()


def describe_identity(identity: NetworkIdentity) -> List[str]:
    """Human-readable status lines, printed by the server at startup"""
    lines = []
    if identity.ssid:
        lines.append(f"SSID: {identity.ssid}")
    if identity.bssid:
        lines.append(f"BSSID: {identity.bssid}")
    if identity.hardware_address:
        lines.append(f"MAC: {identity.hardware_address}")
    if identity.address:
        lines.append(f"IP/Gateway: {identity.address}")
    if identity.link_local_address:
        lines.append(f"Link-local IPv6: {identity.link_local_address}")
    if not identity.has_any():
        lines.append("No Wi-Fi information found")
    return lines
