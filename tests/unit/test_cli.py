import pytest

from swarm_quorum.cli import main
from swarm_quorum.env import Env


@pytest.fixture
def clean_environment(monkeypatch, tmp_path):
    for envar_name in Env.types_map():
        monkeypatch.delenv(envar_name, raising=False)

    monkeypatch.chdir(tmp_path)

    return monkeypatch


class TestStartupFailures:
    def test_missing_service_id_exits(self, clean_environment, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert "Invalid configuration" in capsys.readouterr().err

    def test_missing_certificates_exits(self, clean_environment, tmp_path, capsys):
        clean_environment.setenv("SERVICE_ID", "web")
        clean_environment.setenv("QUORUM_TLS_DIRECTORY", str(tmp_path))

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert "Failed to load TLS certificates" in capsys.readouterr().err

    def test_invalid_local_address_exits(self, clean_environment, tmp_path, capsys):
        env_file = tmp_path / "quorum.env"
        env_file.write_text(
            "SERVICE_ID=web\n"
            "QUORUM_MEMBERSHIP_URL=http://127.0.0.1:2375/nodes\n"
            "LOCAL_ADDR=manager-1:4000\n"
        )

        with pytest.raises(SystemExit) as exc_info:
            main(env_file=str(env_file))

        assert exc_info.value.code == 1
        assert "LOCAL_ADDR must be an ip:port address" in capsys.readouterr().err

    def test_invalid_duration_exits(self, clean_environment, capsys):
        clean_environment.setenv("SERVICE_ID", "web")
        clean_environment.setenv("QUORUM_CYCLE_INTERVAL", "soon")

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert "Invalid configuration" in capsys.readouterr().err
