import asyncio

from extraction.command_runner import CommandFailure
from extraction.gateway_resolver import POWERSHELL_NET_ROUTE, PosixGatewayResolver, WindowsGatewayResolver
from extraction.identity import ExtractionContext, Outcome
from extraction.platform_extractors import IPCONFIG, IP_ROUTE_DEFAULT


def resolve(resolver, ctx=None):
    return asyncio.run(resolver.resolve(ctx))


def test_windows_gateway_from_ipconfig_section(fake_runner, fixture_text):
    runner = fake_runner({IPCONFIG: fixture_text('ipconfig.txt')})
    assert resolve(WindowsGatewayResolver(runner)) == '192.168.1.1'
    assert POWERSHELL_NET_ROUTE not in runner.calls


def test_windows_falls_back_to_route_table(fake_runner, fixture_text):
    runner = fake_runner({
        IPCONFIG: fixture_text('ipconfig_two_sections.txt'),
        POWERSHELL_NET_ROUTE: '192.168.50.1\r\n',
    })
    ctx = ExtractionContext()
    assert resolve(WindowsGatewayResolver(runner), ctx) == '192.168.50.1'
    assert ctx.freeze().outcome_of('gateway_route_table') is Outcome.OK


def test_windows_route_table_placeholder_rejected(fake_runner):
    runner = fake_runner({IPCONFIG: CommandFailure.TIMEOUT, POWERSHELL_NET_ROUTE: '0.0.0.0\n'})
    ctx = ExtractionContext()
    assert resolve(WindowsGatewayResolver(runner), ctx) is None
    report = ctx.freeze()
    assert report.outcome_of('gateway_ipconfig') is Outcome.COMMAND_TIMEOUT
    assert report.outcome_of('gateway_route_table') is Outcome.MALFORMED_CANDIDATE


def test_windows_route_table_garbage_rejected(fake_runner):
    runner = fake_runner({POWERSHELL_NET_ROUTE: 'Get-NetRoute : access denied\n'})
    assert resolve(WindowsGatewayResolver(runner)) is None


def test_posix_gateway(fake_runner, fixture_text):
    runner = fake_runner({IP_ROUTE_DEFAULT: fixture_text('ip_route_default.txt')})
    assert resolve(PosixGatewayResolver(runner)) == '10.0.0.1'


def test_posix_gateway_missing_route(fake_runner):
    assert resolve(PosixGatewayResolver(fake_runner({IP_ROUTE_DEFAULT: CommandFailure.NON_ZERO_EXIT}))) is None
