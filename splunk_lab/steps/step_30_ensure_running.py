from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import FatalError

logger = logging.getLogger(__name__)


class EnsureRunningStep:
    step_id = "30_ensure_running"
    title = "Ensure Splunk is running"
    one_time = False

    def run(self, ctx, state: Dict[str, Any]) -> Dict[str, Any]:
        splunk = ctx.splunk
        if not splunk.is_running():
            splunk.start()
            if not splunk.is_running():
                raise FatalError("Splunk is not running after start attempt.")
        # A seed left by an interrupted first start is spent once Splunk is up.
        splunk.remove_seed()
        ctx.console.ok(f"Splunk running as user '{ctx.cfg.service_user}'.")
        return state
