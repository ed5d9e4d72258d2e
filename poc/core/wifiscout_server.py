#!/usr/bin/env python3
"""
WifiScout Server - reports the Wi-Fi identity of the machine it runs on
and accepts identity reports pushed by clients that inspect themselves
"""

import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

# Imports (do not auto-install; fail with guidance)
try:
    from dotenv import load_dotenv
    from flask import Flask, request, jsonify
    from flask_cors import CORS
    from werkzeug.middleware.proxy_fix import ProxyFix
except ImportError:
    print("Missing dependencies for WifiScout server: flask[async], flask-cors, python-dotenv")
    print("Activate your venv and run: pip install 'flask[async]' flask-cors python-dotenv")
    sys.exit(1)

# Ensure the extraction package resolves when running as a script
if str(Path(__file__).parent) not in sys.path:
    sys.path.insert(0, str(Path(__file__).parent))

from extraction import (
    ClientReport,
    ExtractionError,
    ExtractionFacade,
    NetworkIdentity,
    describe_identity,
)
from extraction.identity import NOT_AVAILABLE

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).lower() in ('1', 'true', 'yes', 'on')


def _env_number(name: str, default, cast):
    try:
        return cast(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return default


# Configuration
CONFIG = {
    'port': _env_number('PORT', 3000, int),
    'bind_host': os.getenv('WS_BIND_HOST', '0.0.0.0'),
    'command_timeout': _env_number('WS_COMMAND_TIMEOUT', 10.0, float),
    'trust_proxy': _env_flag('WS_TRUST_PROXY', True),
    'platform': os.getenv('WS_PLATFORM') or sys.platform,
    'log_level': os.getenv('LOG_LEVEL', 'INFO').upper(),
}

logging.basicConfig(
    level=CONFIG['log_level'],
    format="[%(asctime)s] [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger('wifiscout')

app = Flask(__name__)
CORS(app)  # Allow cross-origin requests
if CONFIG['trust_proxy']:
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1)


def get_facade() -> ExtractionFacade:
    """Fresh facade per request; nothing is shared between extractions"""
    return ExtractionFacade(platform=CONFIG['platform'], timeout=CONFIG['command_timeout'])


def _public_wifi(identity: NetworkIdentity) -> Dict[str, str]:
    """Identity as served on /api/wifi-ip, absent fields as N/A"""
    return {
        'ssid': identity.ssid or NOT_AVAILABLE,
        'bssid': identity.bssid or identity.hardware_address or NOT_AVAILABLE,
        'ip': identity.address or NOT_AVAILABLE,
        'linkLocalIPv6': identity.link_local_address or NOT_AVAILABLE,
    }


def _client_ip() -> str:
    """Caller address as seen by the server (proxy-aware when trust_proxy is on)"""
    if request.remote_addr:
        return request.remote_addr
    forwarded = request.headers.get('X-Forwarded-For', '')
    if forwarded.split(',')[0].strip():
        return forwarded.split(',')[0].strip()
    return request.headers.get('X-Real-IP') or 'unknown'


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def _error(exc: Exception, status: int = 500):
    return jsonify({'success': False, 'error': str(exc)}), status


@app.after_request
def _security_headers(response):
    response.headers.setdefault('X-Content-Type-Options', 'nosniff')
    response.headers.setdefault('X-Frame-Options', 'DENY')
    return response


# Flask Routes

@app.route('/')
async def home():
    """Describe the API and include the server's own Wi-Fi identity"""
    try:
        identity = await get_facade().extract()
    except ExtractionError as e:
        logger.error("extraction failed: %s", e)
        return _error(e)
    return jsonify({
        'message': 'WiFi information API for all devices',
        'endpoints': {
            'GET /api/wifi-ip': 'WiFi information of the server (if the server has a WiFi adapter)',
            'POST /api/wifi-ip': 'Client pushes its own WiFi information (body: {ssid, bssid, ip, linkLocalIPv6})',
            'GET /api/wifi-gateway': 'Default gateway of the server WiFi interface',
            'GET /api/status': 'Server status',
        },
        'serverWifi': identity.to_dict(),
        'note': 'Cloud servers have no WiFi adapter. Clients should collect their own information and POST it.',
    })


@app.route('/api/status', methods=['GET'])
def api_status():
    """Return server status"""
    return jsonify({
        'server': 'online',
        'timestamp': _now_iso(),
        'platform': CONFIG['platform'],
        'command_timeout': CONFIG['command_timeout'],
        'trust_proxy': CONFIG['trust_proxy'],
    })


@app.route('/api/wifi-ip', methods=['GET'])
async def api_wifi_ip():
    """Server's own Wi-Fi identity. ?debug=1 adds per-step outcomes."""
    try:
        report = await get_facade().extract_report()
    except ExtractionError as e:
        logger.error("extraction failed: %s", e)
        return _error(e)

    payload = {'success': True, 'data': _public_wifi(report.identity)}
    if request.args.get('debug', '').lower() in ('1', 'true', 'yes', 'on'):
        payload['steps'] = [o.to_dict() for o in report.outcomes]
    return jsonify(payload)


@app.route('/api/wifi-ip', methods=['POST'])
def api_wifi_ip_report():
    """Echo a client-pushed identity with the caller address and a timestamp"""
    data = request.get_json(silent=True)
    if data is None:
        # Only an empty body counts as an empty report
        if request.is_json and request.get_data():
            return _error(ValueError('Malformed JSON body'), 400)
        data = {}
    if not isinstance(data, dict):
        return _error(ValueError('Expected a JSON object'), 400)

    report = ClientReport.from_payload(data, client_ip=_client_ip(), timestamp=_now_iso())
    logger.info("report from %s: ssid=%s", report.client_ip, report.ssid)
    return jsonify({
        'success': True,
        'message': 'WiFi information received from device',
        'data': report.to_dict(),
    })


@app.route('/api/wifi-gateway', methods=['GET'])
async def api_wifi_gateway():
    """Default gateway of the wireless interface"""
    try:
        gateway: Optional[str] = await get_facade().resolve_gateway()
    except ExtractionError as e:
        logger.error("gateway resolution failed: %s", e)
        return _error(e)
    return jsonify({'success': True, 'data': {'gateway': gateway or NOT_AVAILABLE}})


def print_startup_status(identity: NetworkIdentity) -> None:
    """Post-start status dump of the server's own Wi-Fi identity"""
    print("WiFi information:")
    for line in describe_identity(identity):
        print(f"   {line}")


if __name__ == '__main__':
    import asyncio

    print(f"\n✓ WifiScout server starting on port {CONFIG['port']}")
    bind = CONFIG['bind_host']
    if bind == '0.0.0.0':
        print(f"  • http://localhost:{CONFIG['port']}")
    else:
        print(f"  • http://{bind}:{CONFIG['port']}")
    print(f"✓ Platform: {CONFIG['platform']}")

    try:
        print_startup_status(asyncio.run(get_facade().extract()))
    except ExtractionError as e:
        print(f"Could not read WiFi information: {e}")
    print("\nPress Ctrl+C to stop\n")

    app.run(
        host=CONFIG['bind_host'],
        port=CONFIG['port'],
        debug=False
    )
