from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..lib.net import download_file

logger = logging.getLogger(__name__)


class IngestSampleDataStep:
    """Upload the demo dataset exactly once.

    Completion is recorded by the pipeline (state file) and by the legacy
    marker file; neither is written unless the upload succeeded.
    """

    step_id = "40_ingest_sample_data"
    title = "Ingest lab data (pokemon.csv)"
    one_time = True

    def run(self, ctx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.cfg
        marker = Path(cfg.ingest_marker)

        if marker.exists() and not ctx.force:
            ctx.console.ok(f"{cfg.dataset_name} already ingested (marker present).")
            return state

        Path(cfg.data_dir).mkdir(parents=True, exist_ok=True)
        download_file(cfg.dataset_url, cfg.dataset_path, console=ctx.console)
        ctx.splunk.add_oneshot(cfg.dataset_path)

        marker.parent.mkdir(parents=True, exist_ok=True)
        marker.touch()
        ctx.console.ok("Data uploaded.")
        return state
