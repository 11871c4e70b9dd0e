from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.net import get_lab_ip

logger = logging.getLogger(__name__)


class AccessInfoStep:
    step_id = "50_access_info"
    title = "Access information"
    one_time = False

    def run(self, ctx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.cfg
        ip = get_lab_ip()
        state.setdefault("host", {})["ip"] = ip

        url = f"http://{ip or '<server-ip>'}:{cfg.web_port}"
        creds = f"{cfg.admin_user} / {cfg.admin_pass}"

        c = ctx.console
        c.line()
        c.line(c.bold("Splunk is running."))
        c.line(f"URL: {c.bold(url)}")
        c.line(f"Credentials: {c.bold(creds)}")
        c.line()
        return state
