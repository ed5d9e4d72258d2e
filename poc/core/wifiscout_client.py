#!/usr/bin/env python3
"""
WifiScout Client - run this on the device whose Wi-Fi should be reported
Inspects its own network stack and pushes the result to the WifiScout server
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional

import requests
from dotenv import load_dotenv

if str(Path(__file__).parent) not in sys.path:
    sys.path.insert(0, str(Path(__file__).parent))

from extraction import ExtractionError, ExtractionFacade, NetworkIdentity, describe_identity


logger = logging.getLogger('wifiscout.client')

DEFAULT_SERVER_URL = 'http://localhost:3000'


class WifiScoutClient:
    def __init__(self, server_url: Optional[str] = None, timeout: float = 5.0):
        """Initialize client with server URL"""
        self.server_url = (server_url or os.getenv('WS_SERVER_URL') or DEFAULT_SERVER_URL).rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()
        self.connected = False

    def check_connection(self) -> bool:
        """Verify the server answers /api/status"""
        try:
            response = self.session.get(f"{self.server_url}/api/status", timeout=self.timeout)
            if response.status_code == 200:
                self.connected = response.json().get('server') == 'online'
                return self.connected
        except (requests.RequestException, ValueError) as e:
            logger.warning("connection to %s failed: %s", self.server_url, e)
        self.connected = False
        return False

    def report(self, identity: NetworkIdentity) -> Dict:
        """Push this device's identity to the server"""
        payload = {
            'ssid': identity.ssid,
            'bssid': identity.bssid,
            'ip': identity.address,
            'linkLocalIPv6': identity.link_local_address,
        }
        try:
            response = self.session.post(
                f"{self.server_url}/api/wifi-ip",
                json=payload,
                timeout=self.timeout
            )
            return response.json()
        except (requests.RequestException, ValueError) as e:
            return {'error': str(e)}

    def server_wifi(self) -> Dict:
        """Wi-Fi identity the server sees on its own host"""
        try:
            response = self.session.get(f"{self.server_url}/api/wifi-ip", timeout=self.timeout)
            return response.json()
        except (requests.RequestException, ValueError) as e:
            return {'error': str(e)}


def inspect_local(platform: Optional[str] = None, timeout: float = 10.0) -> NetworkIdentity:
    return asyncio.run(ExtractionFacade(platform=platform, timeout=timeout).extract())


def main(argv=None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description='Report this device\'s Wi-Fi identity to a WifiScout server')
    parser.add_argument('--server', help='Server URL (default: $WS_SERVER_URL or http://localhost:3000)')
    parser.add_argument('--dry-run', action='store_true', help='Only print the local identity')
    parser.add_argument('--timeout', type=float, default=10.0, help='Timeout per diagnostic command')
    args = parser.parse_args(argv)

    logging.basicConfig(level=os.getenv('LOG_LEVEL', 'INFO').upper(),
                        format="[%(asctime)s] [%(levelname)s] %(message)s")

    try:
        identity = inspect_local(timeout=args.timeout)
    except ExtractionError as e:
        print(f"❌ {e}")
        return 2

    for line in describe_identity(identity):
        print(f"  {line}")
    if args.dry_run:
        return 0

    client = WifiScoutClient(args.server)
    if not client.check_connection():
        print(f"❌ No WifiScout server at {client.server_url}")
        return 1

    result = client.report(identity)
    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0 if result.get('success') else 1


if __name__ == '__main__':
    sys.exit(main())
