from __future__ import annotations

import pytest

from splunk_lab.config import InstallerConfig, load_installer_config


def test_defaults():
    cfg = load_installer_config()
    assert cfg == InstallerConfig()
    assert cfg.splunk_bin == "/opt/splunk/bin/splunk"
    assert cfg.seed_path == "/opt/splunk/etc/system/local/user-seed.conf"
    assert cfg.deb_path.startswith("/tmp/splunk-10.2.0-")
    assert cfg.dataset_path == "/tmp/splunk_lab_data/pokemon.csv"
    assert cfg.min_free_gb == 40


def test_yaml_overrides(tmp_path):
    p = tmp_path / "lab.yaml"
    p.write_text(
        "splunk_home: /srv/splunk\n"
        "min_free_gb: 10\n"
        "allowed_arches: [x86_64]\n",
        encoding="utf-8",
    )

    cfg = load_installer_config(str(p))

    assert cfg.splunk_bin == "/srv/splunk/bin/splunk"
    assert cfg.min_free_gb == 10
    assert cfg.allowed_arches == ("x86_64",)
    assert cfg.admin_user == "admin"


def test_empty_yaml_means_defaults(tmp_path):
    p = tmp_path / "lab.yml"
    p.write_text("", encoding="utf-8")
    assert load_installer_config(str(p)) == InstallerConfig()


def test_unknown_keys_are_rejected(tmp_path):
    p = tmp_path / "lab.yaml"
    p.write_text("splunk_hom: /srv/splunk\n", encoding="utf-8")

    with pytest.raises(ValueError, match="splunk_hom"):
        load_installer_config(str(p))


def test_non_mapping_is_rejected(tmp_path):
    p = tmp_path / "lab.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError, match="mapping"):
        load_installer_config(str(p))


def test_only_yaml_is_accepted(tmp_path):
    p = tmp_path / "lab.json"
    p.write_text("{}", encoding="utf-8")

    with pytest.raises(ValueError, match="YAML"):
        load_installer_config(str(p))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_installer_config(str(tmp_path / "absent.yaml"))
