#!/usr/bin/env python3
"""
Capture diagnostic command output as parser fixtures

Runs every command the extraction engine uses on this platform, saves each
stdout under the fixtures directory and prints the identity parsed from the
saved files, so a changed tool output format shows up as a fixture diff.

Usage:
  python3 tools/capture_fixtures.py                      # capture into tests/fixtures/captured
  python3 tools/capture_fixtures.py --out /tmp/wifi      # capture elsewhere
"""

import argparse
import asyncio
import json
import re
import sys
from pathlib import Path
from typing import Dict

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / 'poc' / 'core'))

from extraction import CommandResult, CommandRunner, ExtractionFacade, ShellCommandRunner  # noqa: E402


class RecordingRunner(CommandRunner):
    """Delegate to the real shell and keep every successful stdout"""

    def __init__(self, inner: CommandRunner):
        self.inner = inner
        self.captured: Dict[str, str] = {}

    async def run(self, command_line, timeout=None) -> CommandResult:
        result = await self.inner.run(command_line, timeout=timeout)
        if result.ok:
            self.captured[command_line] = result.stdout
        return result


def fixture_name(command_line: str) -> str:
    return re.sub(r'[^A-Za-z0-9]+', '_', command_line).strip('_').lower()[:60] + '.txt'


async def capture(timeout: float) -> RecordingRunner:
    runner = RecordingRunner(ShellCommandRunner(default_timeout=timeout))
    facade = ExtractionFacade(runner=runner, timeout=timeout)
    await facade.extract()
    await facade.resolve_gateway()
    return runner


def main():
    parser = argparse.ArgumentParser(description='Capture WifiScout parser fixtures from this machine')
    parser.add_argument('--out', default=str(Path(__file__).resolve().parent.parent / 'tests' / 'fixtures' / 'captured'),
                        help='Directory for captured outputs')
    parser.add_argument('--timeout', type=float, default=10.0, help='Timeout per command')
    args = parser.parse_args()

    runner = asyncio.run(capture(args.timeout))
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    index = {}
    for command_line, stdout in runner.captured.items():
        name = fixture_name(command_line)
        (out_dir / name).write_text(stdout, encoding='utf-8')
        index[name] = command_line
        print(f"✓ {command_line} -> {name}")
    (out_dir / 'index.json').write_text(json.dumps(index, indent=2), encoding='utf-8')

    if not index:
        print("No command succeeded on this machine; nothing captured")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
