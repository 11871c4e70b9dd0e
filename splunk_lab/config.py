from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from .lib.env import PATHS

SPLUNK_DEB = "splunk-10.2.0-d749cb17ea65-linux-amd64.deb"
SPLUNK_URL = f"https://download.splunk.com/products/splunk/releases/10.2.0/linux/{SPLUNK_DEB}"
DATASET_URL = "https://drive.google.com/uc?export=download&id=129XqTtIrR04SFES0F2FfVU9Rj9WkzGEs"


@dataclass(frozen=True)
class InstallerConfig:
    service_user: str = "splunk"
    splunk_home: str = "/opt/splunk"
    splunk_deb: str = SPLUNK_DEB
    splunk_url: str = SPLUNK_URL
    download_dir: str = "/tmp"

    admin_user: str = "admin"
    admin_pass: str = "admin"
    web_port: int = 8000

    dataset_url: str = DATASET_URL
    data_dir: str = "/tmp/splunk_lab_data"
    dataset_name: str = "pokemon.csv"
    ingest_marker: str = "/var/tmp/.splunk_pokedex_ingested"
    ingest_index: str = "main"
    ingest_sourcetype: str = "pokedex"
    ingest_source: str = "Pokedex"
    ingest_host: str = "Pokedex"

    allowed_arches: Tuple[str, ...] = ("x86_64", "amd64")
    min_free_gb: int = 40
    disk_check_fallback: str = "/opt"
    lock_path: str = PATHS.lock_default

    @property
    def splunk_bin(self) -> str:
        return str(Path(self.splunk_home) / "bin" / "splunk")

    @property
    def deb_path(self) -> str:
        return str(Path(self.download_dir) / self.splunk_deb)

    @property
    def seed_path(self) -> str:
        return str(Path(self.splunk_home) / "etc" / "system" / "local" / "user-seed.conf")

    @property
    def dataset_path(self) -> str:
        return str(Path(self.data_dir) / self.dataset_name)


def load_installer_config(path: Optional[str] = None) -> InstallerConfig:
    """Defaults, optionally overridden by a YAML mapping of field names."""

    if path is None:
        return InstallerConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("installer config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the installer config") from e

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError("installer config must contain a mapping/object")

    known = {f.name for f in dataclasses.fields(InstallerConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown installer config keys: {', '.join(unknown)}")

    if "allowed_arches" in raw:
        raw["allowed_arches"] = tuple(raw["allowed_arches"] or ())
    return InstallerConfig(**raw)


def _flag(value: str) -> bool:
    return value.strip() == "1"


@dataclass(frozen=True)
class ProvisionConfig:
    lab_user: str = "splunk"
    lab_pass: str = "Password.1!!"
    script_src: str = "./InstallSplunk.sh"
    set_password: bool = True
    configure_ssh_banner: bool = True

    home_root: str = "/home"
    sudoers_file: str = "/etc/sudoers.d/lab-splunk"
    issue_file: str = "/etc/issue"
    motd_file: str = "/etc/motd"
    profile_banner: str = "/etc/profile.d/lab-banner.sh"
    sshd_config: str = "/etc/ssh/sshd_config"
    issue_net: str = "/etc/issue.net"
    lock_path: str = PATHS.lock_default

    @property
    def script_name(self) -> str:
        return Path(self.script_src).name

    @property
    def script_dest(self) -> str:
        return f"{self.home_root}/{self.lab_user}/{self.script_name}"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> "ProvisionConfig":
        """Resolve LAB_USER, LAB_PASS, SPLUNK_SCRIPT_SRC, SET_PASSWORD, CONFIGURE_SSH_BANNER."""

        env = os.environ if environ is None else environ
        d = cls()
        values: Dict[str, Any] = {
            "lab_user": env.get("LAB_USER", d.lab_user),
            "lab_pass": env.get("LAB_PASS", d.lab_pass),
            "script_src": env.get("SPLUNK_SCRIPT_SRC", d.script_src),
            "set_password": _flag(env.get("SET_PASSWORD", "1")),
            "configure_ssh_banner": _flag(env.get("CONFIGURE_SSH_BANNER", "1")),
        }
        values.update(overrides)
        return cls(**values)
