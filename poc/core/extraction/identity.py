"""
Network identity value objects for WifiScout

NetworkIdentity is the normalized result of one extraction. It is built
field-by-field through IdentityBuilder while the platform pipeline runs and
frozen before it is handed back to the caller.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, List, Optional, Tuple


NOT_AVAILABLE = 'N/A'


@dataclass(frozen=True)
class NetworkIdentity:
    """Snapshot of the host's active wireless network"""
    ssid: Optional[str] = None
    bssid: Optional[str] = None
    address: Optional[str] = None
    link_local_address: Optional[str] = None
    hardware_address: Optional[str] = None

    def has_any(self) -> bool:
        return bool(self.ssid or self.bssid or self.address)

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Wire form consumed by the HTTP shell"""
        return {
            'ssid': self.ssid,
            'bssid': self.bssid,
            'ip': self.address,
            'linkLocalIPv6': self.link_local_address,
            'mac': self.hardware_address,
        }


class IdentityBuilder:
    """Per-call mutable accumulator for NetworkIdentity fields"""

    _FIELDS = ('ssid', 'bssid', 'address', 'link_local_address', 'hardware_address')

    def __init__(self):
        self._values: Dict[str, Optional[str]] = {name: None for name in self._FIELDS}

    def get(self, name: str) -> Optional[str]:
        return self._values[name]

    def set_once(self, name: str, value: Optional[str]) -> bool:
        """Set a field only if it is still absent. Empty values are ignored."""
        if self._values[name] is not None:
            return False
        return self.overwrite(name, value)

    def overwrite(self, name: str, value: Optional[str]) -> bool:
        if name not in self._values:
            raise KeyError(name)
        if value is None or not value.strip():
            return False
        self._values[name] = value.strip()
        return True

    def build(self) -> NetworkIdentity:
        return NetworkIdentity(**self._values)


class Outcome(str, Enum):
    """How a single pipeline step ended. None of these abort an extraction."""
    OK = 'ok'
    COMMAND_UNAVAILABLE = 'command_unavailable'
    COMMAND_TIMEOUT = 'command_timeout'
    NO_MATCH = 'no_match'
    MALFORMED_CANDIDATE = 'malformed_candidate'
    SKIPPED = 'skipped'


@dataclass(frozen=True)
class StepOutcome:
    step: str
    outcome: Outcome
    detail: str = ''

    def to_dict(self) -> Dict[str, str]:
        return {'step': self.step, 'outcome': self.outcome.value, 'detail': self.detail}


@dataclass(frozen=True)
class ExtractionReport:
    identity: NetworkIdentity
    outcomes: Tuple[StepOutcome, ...] = ()

    def outcome_of(self, step: str) -> Optional[Outcome]:
        for item in self.outcomes:
            if item.step == step:
                return item.outcome
        return None


class ExtractionContext:
    """Builder plus the ordered record of step outcomes for one extraction"""

    def __init__(self):
        self.identity = IdentityBuilder()
        self.outcomes: List[StepOutcome] = []

    def record(self, step: str, outcome: Outcome, detail: str = '') -> None:
        self.outcomes.append(StepOutcome(step, outcome, detail))

    def freeze(self) -> ExtractionReport:
        return ExtractionReport(identity=self.identity.build(), outcomes=tuple(self.outcomes))


@dataclass
class ClientReport:
    """Identity pushed by a remote client. Echoed as-is, never validated."""
    ssid: Optional[str] = None
    bssid: Optional[str] = None
    ip: Optional[str] = None
    link_local_ipv6: Optional[str] = None
    client_ip: str = 'unknown'
    timestamp: str = ''

    @classmethod
    def from_payload(cls, payload: Dict, client_ip: str, timestamp: str) -> 'ClientReport':
        return cls(
            ssid=payload.get('ssid'),
            bssid=payload.get('bssid'),
            ip=payload.get('ip'),
            link_local_ipv6=payload.get('linkLocalIPv6'),
            client_ip=client_ip,
            timestamp=timestamp,
        )

    def to_dict(self) -> Dict:
        data = asdict(self)
        return {
            'ssid': data['ssid'] or NOT_AVAILABLE,
            'bssid': data['bssid'] or NOT_AVAILABLE,
            'ip': data['ip'] or NOT_AVAILABLE,
            'linkLocalIPv6': data['link_local_ipv6'] or NOT_AVAILABLE,
            'clientIP': self.client_ip,
            'timestamp': self.timestamp,
        }
