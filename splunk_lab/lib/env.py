from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Paths:
    state_default: str = "/var/lib/splunk-lab/state.json"
    log_default: str = "/var/log/splunk-lab.log"
    lock_default: str = "/run/splunk-lab.lock"


PATHS = Paths()
