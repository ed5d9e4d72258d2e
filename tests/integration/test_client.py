import types

import pytest

from extraction import NetworkIdentity


@pytest.fixture()
def client_module(add_core_to_path):
    import wifiscout_client
    return wifiscout_client


def test_report_posts_identity(monkeypatch, client_module):
    sent = {}

    class DummySession:
        def get(self, url, *a, **k):
            return types.SimpleNamespace(status_code=200, json=lambda: {'server': 'online'})

        def post(self, url, json=None, *a, **k):
            sent['url'] = url
            sent['json'] = json
            return types.SimpleNamespace(status_code=200, json=lambda: {'success': True})

    import requests
    monkeypatch.setattr(requests, 'Session', lambda: DummySession())

    c = client_module.WifiScoutClient(server_url='http://dummy:3000/')
    assert c.check_connection() is True
    result = c.report(NetworkIdentity(ssid='Phone', address='192.168.43.1'))
    assert result == {'success': True}
    assert sent['url'] == 'http://dummy:3000/api/wifi-ip'
    assert sent['json'] == {'ssid': 'Phone', 'bssid': None, 'ip': '192.168.43.1', 'linkLocalIPv6': None}


def test_network_errors_become_error_dicts(monkeypatch, client_module):
    import requests

    class FailingSession:
        def get(self, *a, **k):
            raise requests.ConnectionError('refused')

        def post(self, *a, **k):
            raise requests.ConnectionError('refused')

    monkeypatch.setattr(requests, 'Session', lambda: FailingSession())
    c = client_module.WifiScoutClient(server_url='http://dummy')
    assert c.check_connection() is False
    assert 'refused' in c.report(NetworkIdentity())['error']
    assert 'error' in c.server_wifi()


def test_dry_run_prints_local_identity(monkeypatch, capsys, client_module):
    monkeypatch.setattr(client_module, 'inspect_local',
                        lambda platform=None, timeout=10.0: NetworkIdentity(ssid='CafeWifi'))
    assert client_module.main(['--dry-run']) == 0
    assert 'SSID: CafeWifi' in capsys.readouterr().out
