import os
import sys

import pytest
from rich.console import Console

import playpromote.services.credentials as credentials_module
from playpromote.errors import ConfigurationError, PromoterError
from playpromote.services.credentials import CREDENTIALS_ENV_VAR, CredentialStager


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


def build_stager(tmp_path, environ, name="service-account.json"):
    return CredentialStager(
        logger=DummyLogger(),
        console=Console(record=True),
        credentials_file=str(tmp_path / name),
        environ=environ,
    )


def test_stage_writes_payload_and_exports_path(tmp_path):
    environ = {}
    stager = build_stager(tmp_path, environ)

    with stager.stage('{"type": "service_account"}') as path:
        assert environ[CREDENTIALS_ENV_VAR] == path
        assert os.path.isabs(path)
        with open(path, encoding="utf-8") as file_obj:
            assert file_obj.read() == '{"type": "service_account"}'

    assert not os.path.exists(path)
    assert CREDENTIALS_ENV_VAR not in environ


def test_stage_removes_file_and_restores_env_when_block_raises(tmp_path):
    environ = {CREDENTIALS_ENV_VAR: "/etc/other.json"}
    stager = build_stager(tmp_path, environ)

    with pytest.raises(RuntimeError):
        with stager.stage("{}") as path:
            raise RuntimeError("boom")

    assert not os.path.exists(path)
    assert environ[CREDENTIALS_ENV_VAR] == "/etc/other.json"


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions only")
def test_stage_restricts_file_permissions(tmp_path):
    stager = build_stager(tmp_path, {})

    with stager.stage("{}") as path:
        assert os.stat(path).st_mode & 0o777 == 0o600


def test_stage_removes_parent_directories_it_created(tmp_path):
    stager = build_stager(tmp_path, {}, name="nested/dir/key.json")

    with stager.stage("{}") as path:
        assert os.path.exists(path)

    assert not os.path.exists(path)
    assert not (tmp_path / "nested").exists()
    assert tmp_path.exists()


def test_stage_keeps_pre_existing_parent_directory(tmp_path):
    (tmp_path / "keys").mkdir()
    stager = build_stager(tmp_path, {}, name="keys/ci.json")

    with stager.stage("{}"):
        pass

    assert (tmp_path / "keys").is_dir()


def test_stage_refuses_to_overwrite_existing_file(tmp_path):
    existing = tmp_path / "service-account.json"
    existing.write_text('{"type": "checked-in"}', encoding="utf-8")
    environ = {}
    stager = build_stager(tmp_path, environ)

    with pytest.raises(PromoterError, match="Refusing to stage credentials"):
        with stager.stage("{}"):
            pass

    assert existing.read_text(encoding="utf-8") == '{"type": "checked-in"}'
    assert CREDENTIALS_ENV_VAR not in environ


def test_stage_rejects_payload_that_is_not_utf8(tmp_path):
    environ = {}
    stager = build_stager(tmp_path, environ, name="nested/key.json")

    with pytest.raises(ConfigurationError, match="not valid UTF-8"):
        with stager.stage('{"private_key": "\udcff"}'):
            pass

    assert list(tmp_path.iterdir()) == []
    assert CREDENTIALS_ENV_VAR not in environ


def test_stage_removes_partially_written_file_when_write_fails(tmp_path, monkeypatch):
    class FullDiskWriter:
        def __init__(self, fd):
            self.fd = fd

        def __enter__(self):
            return self

        def write(self, _data):
            raise OSError(28, "No space left on device")

        def __exit__(self, exc_type, exc, tb):
            os.close(self.fd)
            return False

    monkeypatch.setattr(credentials_module.os, "fdopen", lambda fd, _mode: FullDiskWriter(fd))
    environ = {}
    stager = build_stager(tmp_path, environ, name="keys/key.json")

    with pytest.raises(PromoterError, match="No space left on device"):
        with stager.stage("{}"):
            pass

    assert not (tmp_path / "keys" / "key.json").exists()
    assert not (tmp_path / "keys").exists()
    assert CREDENTIALS_ENV_VAR not in environ
