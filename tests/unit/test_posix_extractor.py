import asyncio

from extraction.command_runner import CommandFailure
from extraction.identity import ExtractionContext, Outcome
from extraction.platform_extractors import IP_ROUTE_DEFAULT, IWGETID, PosixExtractor


def extract(runner):
    ctx = ExtractionContext()
    asyncio.run(PosixExtractor(runner).extract(ctx))
    return ctx.freeze()


def test_minimal_posix_identity(fake_runner, fixture_text):
    report = extract(fake_runner({
        IWGETID: 'CafeWifi\n',
        IP_ROUTE_DEFAULT: fixture_text('ip_route_default.txt'),
    }))
    assert report.identity.ssid == 'CafeWifi'
    assert report.identity.address == '10.0.0.1'
    assert report.identity.bssid is None
    assert report.identity.link_local_address is None


def test_blank_ssid_output_is_absent(fake_runner):
    report = extract(fake_runner({IWGETID: '   \n', IP_ROUTE_DEFAULT: CommandFailure.NON_ZERO_EXIT}))
    assert report.identity.ssid is None
    assert report.outcome_of('ssid') is Outcome.NO_MATCH
    assert report.outcome_of('gateway') is Outcome.COMMAND_UNAVAILABLE


def test_placeholder_route_is_rejected(fake_runner):
    report = extract(fake_runner({
        IWGETID: CommandFailure.TIMEOUT,
        IP_ROUTE_DEFAULT: 'default via 0.0.0.0 dev wlan0\n',
    }))
    assert report.identity.address is None
    assert report.outcome_of('ssid') is Outcome.COMMAND_TIMEOUT
    assert report.outcome_of('gateway') is Outcome.MALFORMED_CANDIDATE


def test_second_default_route_used_when_first_is_placeholder(fake_runner):
    routes = 'default via 0.0.0.0 dev tun0\ndefault via 192.168.0.1 dev wlan0 metric 600\n'
    report = extract(fake_runner({IP_ROUTE_DEFAULT: routes}))
    assert report.identity.address == '192.168.0.1'
