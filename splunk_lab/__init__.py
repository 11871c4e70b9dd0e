"""Splunk lab VM provisioning (Python-first, state-driven).

Two entry points:
- splunk-lab-install: installs Splunk, keeps it running, ingests the demo dataset
- splunk-lab-provision: prepares the lab user, sudo grant and login banners

Core design goals:
- Idempotent steps, safe to re-run any number of times
- Splunk itself always runs as the unprivileged service account
- Centralized logging
"""

__all__ = []
