from .step_10_check_arch import CheckArchStep
from .step_20_install_splunk import InstallSplunkStep
from .step_30_ensure_running import EnsureRunningStep
from .step_40_ingest_sample_data import IngestSampleDataStep
from .step_50_access_info import AccessInfoStep

__all__ = [
    "CheckArchStep",
    "InstallSplunkStep",
    "EnsureRunningStep",
    "IngestSampleDataStep",
    "AccessInfoStep",
]
