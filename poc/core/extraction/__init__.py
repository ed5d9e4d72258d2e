"""
WifiScout extraction engine

Discovers the host's active wireless network identity by running platform
diagnostic commands and parsing their text output.
"""

from .command_runner import CommandError, CommandFailure, CommandResult, CommandRunner, ShellCommandRunner
from .facade import (
    ExtractionError,
    ExtractionFacade,
    UnsupportedPlatformError,
    describe_identity,
    extract,
    extract_report,
)
from .identity import ClientReport, ExtractionReport, NetworkIdentity, Outcome, StepOutcome
from .line_scanner import LineScanner, find_field

__all__ = [
    'ClientReport',
    'CommandError',
    'CommandFailure',
    'CommandResult',
    'CommandRunner',
    'ExtractionError',
    'ExtractionFacade',
    'ExtractionReport',
    'LineScanner',
    'NetworkIdentity',
    'Outcome',
    'ShellCommandRunner',
    'StepOutcome',
    'UnsupportedPlatformError',
    'describe_identity',
    'extract',
    'extract_report',
    'find_field',
]
