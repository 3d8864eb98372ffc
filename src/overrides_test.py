from __future__ import annotations

from uberdeploy.overrides import EnvOverrides


def test_from_environ_reads_known_variables_only():
    o = EnvOverrides.from_environ({"BACKUP": "false", "VIA": "sftp", "PATH": "/usr/bin"})

    assert o.backup == "false"
    assert o.via == "sftp"
    assert o.load is None
    assert not hasattr(o, "path")


def test_from_environ_defaults_to_process_env(monkeypatch):
    monkeypatch.setenv("DATA_DIR", "public/uploads")
    monkeypatch.delenv("RAILS_ENV", raising=False)

    o = EnvOverrides.from_environ()
    assert o.data_dir == "public/uploads"
    assert o.rails_env is None


def test_field_names_are_accepted_too():
    assert EnvOverrides(keep_remote_dump="yes").keep_remote_dump == "yes"
