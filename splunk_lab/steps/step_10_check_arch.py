from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.sysinfo import check_arch, normalize_arch

logger = logging.getLogger(__name__)


class CheckArchStep:
    step_id = "10_check_arch"
    title = "Architecture check"
    one_time = False

    def run(self, ctx, state: Dict[str, Any]) -> Dict[str, Any]:
        machine = check_arch(ctx.cfg.allowed_arches)
        state.setdefault("host", {})["arch"] = normalize_arch(machine)
        ctx.console.ok(f"{machine} confirmed.")
        return state
