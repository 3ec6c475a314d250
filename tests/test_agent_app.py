"""
Tests for the system agent HTTP surface.
"""
import sys

import pytest
from fastapi.testclient import TestClient

from veer.agent.app import create_agent_app
from veer.agent.auth import TOKEN_HEADER
from veer.agent.history import HistoryBuffer
from veer.agent.platforms import Platform
from veer.agent.service import SystemAgent


def make_snapshot():
    return {
        "os": {"platform": "linux", "hostname": "devbox"},
        "cpu": {"cores": 8, "usage": 12.5},
        "memory": {"total": 16 * 1024 ** 3, "free": 8 * 1024 ** 3, "used": 8 * 1024 ** 3, "usagePercent": 50.0},
    }


def make_processes(limit):
    rows = [{"pid": i, "name": f"proc{i}", "cpu": 0.0, "memory": float(100 - i)} for i in range(1, 40)]
    return rows[:limit]


@pytest.fixture
def runner(runner_factory):
    return runner_factory()


@pytest.fixture
def agent(runner):
    return SystemAgent(
        runner=runner,
        platform=Platform.LINUX,
        history=HistoryBuffer(5),
        snapshot=make_snapshot,
        process_lister=make_processes,
    )


@pytest.fixture
def client(agent, settings_factory):
    app = create_agent_app(settings=settings_factory(), agent=agent, run_sampler=False)
    with TestClient(app) as test_client:
        yield test_client


class TestOpenEndpoints:
    """Tests for the unauthenticated status endpoints."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.text == "VEER System Agent running"

    def test_health(self, client):
        response = client.get("/health")
        assert response.json() == {"status": "ok", "platform": sys.platform}

    def test_security_headers(self, client):
        response = client.get("/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["Cross-Origin-Resource-Policy"] == "cross-origin"


class TestTokenGuard:
    """Tests for the x-veer-token check."""

    @pytest.fixture
    def secured(self, agent, settings_factory):
        app = create_agent_app(settings=settings_factory(system_agent_token="s3cret"), agent=agent, run_sampler=False)
        with TestClient(app) as test_client:
            yield test_client

    def test_missing_token_rejected(self, secured, runner):
        response = secured.post("/action", json={"action": "lock"})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid token"}
        # Nothing runs when the token is wrong
        assert runner.commands == []

    def test_wrong_token_rejected(self, secured):
        response = secured.get("/system-info", headers={TOKEN_HEADER: "nope"})
        assert response.status_code == 401

    def test_correct_token_accepted(self, secured, runner):
        response = secured.post("/action", json={"action": "lock"}, headers={TOKEN_HEADER: "s3cret"})
        assert response.status_code == 200
        assert runner.commands == ["loginctl lock-session"]

    def test_health_is_open(self, secured):
        assert secured.get("/health").status_code == 200

    def test_no_token_configured_allows_requests(self, client):
        assert client.get("/history").status_code == 200


class TestActions:
    """Tests for /action, /launch and /kill-process."""

    def test_action_runs_command(self, client, runner):
        runner.default_stdout = "done"
        response = client.post("/action", json={"action": "sleep"})
        assert response.status_code == 200
        assert response.json() == {"ok": True, "output": "done"}
        assert runner.commands == ["systemctl suspend"]

    def test_invalid_action(self, client, runner):
        response = client.post("/action", json={"action": "selfdestruct"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid action"}
        assert runner.commands == []

    def test_action_without_body(self, client):
        response = client.post("/action")
        assert response.status_code == 400

    def test_action_command_failure(self, client, runner):
        runner.default_returncode = 1
        response = client.post("/action", json={"action": "shutdown"})
        assert response.status_code == 500
        assert "Command failed" in response.json()["error"]

    def test_launch_website(self, client, runner):
        response = client.post("/launch", json={"type": "website", "target": "https://github.com"})
        assert response.status_code == 200
        assert response.json()["message"] == "Launched https://github.com"
        assert runner.commands == ["xdg-open https://github.com"]

    def test_launch_missing_target(self, client):
        response = client.post("/launch", json={"type": "website"})
        assert response.status_code == 400
        assert response.json() == {"error": "type and target are required"}

    def test_launch_failure_reports_stderr(self, client, runner):
        runner.results["nosuchapp"] = (127, "", "nosuchapp: not found")
        response = client.post("/launch", json={"type": "application", "target": "nosuchapp"})
        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Command failed: nosuchapp (exit 127)"
        assert body["message"] == "nosuchapp: not found"

    def test_kill_process(self, client, runner):
        response = client.post("/kill-process", json={"pid": 4242})
        assert response.json() == {"ok": True, "message": "Process 4242 terminated"}
        assert runner.commands == ["kill -9 4242"]

    def test_kill_rejects_injection(self, client, runner):
        response = client.post("/kill-process", json={"pid": "1; reboot"})
        assert response.status_code == 400
        assert response.json() == {"error": "PID must be a positive integer"}
        assert runner.commands == []

    def test_kill_requires_pid(self, client):
        response = client.post("/kill-process", json={})
        assert response.json() == {"error": "PID is required"}


class TestMedia:
    def test_media_volume(self, client, runner):
        response = client.post("/media", json={"action": "volume", "value": 30})
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert runner.commands == ["playerctl volume 0.3"]

    def test_media_invalid_action(self, client):
        response = client.post("/media", json={"action": "eject"})
        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid action. Valid actions:")

    def test_media_failure(self, client, runner):
        runner.default_returncode = 1
        response = client.post("/media", json={"action": "next"})
        assert response.status_code == 500
        assert response.json()["success"] is False

    def test_windows_media_failure_still_succeeds(self, runner, settings_factory):
        """Windows key presses exit oddly but still reach the player."""
        runner.default_returncode = 1
        agent = SystemAgent(runner=runner, platform=Platform.WINDOWS, snapshot=make_snapshot)
        app = create_agent_app(settings=settings_factory(), agent=agent, run_sampler=False)
        with TestClient(app) as client:
            response = client.post("/media", json={"action": "next"})
        assert response.status_code == 200
        assert response.json()["message"] == "Media command sent"

    def test_now_playing(self, client, runner):
        runner.default_stdout = "Massive Attack - Teardrop\n"
        response = client.get("/media")
        assert response.json() == {
            "available": True,
            "source": "playerctl",
            "artist": "Massive Attack",
            "title": "Teardrop",
        }

    def test_nothing_playing(self, client, runner):
        runner.default_returncode = 1
        response = client.get("/media")
        assert response.json()["available"] is False


class TestProbes:
    """Tests for the read-only probe endpoints."""

    def test_system_info_merges_disks(self, client, runner):
        runner.results["df -h /"] = (
            0,
            "Filesystem Size Used Avail Use% Mounted on\n/dev/sda1 100G 40G 60G 40% /\n",
            "",
        )
        data = client.get("/system-info").json()
        assert data["cpu"]["cores"] == 8
        assert data["disks"][0]["usedStr"] == "40G"
        assert "battery" not in data

    def test_system_info_without_disk_probe(self, client, runner):
        runner.default_returncode = 1
        data = client.get("/system-info").json()
        assert "disks" not in data
        assert data["memory"]["usagePercent"] == 50.0

    def test_processes_default_limit(self, client):
        data = client.get("/processes").json()
        assert len(data["processes"]) == 15

    def test_processes_limit(self, client):
        assert len(client.get("/processes?limit=3").json()["processes"]) == 3

    def test_processes_bad_limit_falls_back(self, client):
        assert len(client.get("/processes?limit=lots").json()["processes"]) == 15

    def test_processes_lister_failure(self, runner, settings_factory):
        def broken(limit):
            raise RuntimeError("access denied")

        agent = SystemAgent(runner=runner, platform=Platform.LINUX, snapshot=make_snapshot, process_lister=broken)
        app = create_agent_app(settings=settings_factory(), agent=agent, run_sampler=False)
        with TestClient(app) as client:
            assert client.get("/processes").json() == {"processes": []}

    def test_gpu_info(self, client, runner):
        runner.default_stdout = "00:02.0 VGA compatible controller: Intel Corporation UHD Graphics 620\n"
        assert client.get("/gpu-info").json() == {"gpus": [{"name": "Intel Corporation UHD Graphics 620"}]}

    def test_gpu_info_unavailable(self, client, runner):
        runner.default_returncode = 1
        assert client.get("/gpu-info").json() == {"gpus": []}

    def test_temperature(self, client, runner):
        runner.default_stdout = "52000\n"
        assert client.get("/temperature").json() == {"cpu": 52.0, "gpu": None, "available": True}

    def test_temperature_unavailable(self, client, runner):
        runner.default_returncode = 1
        assert client.get("/temperature").json() == {"cpu": None, "gpu": None, "available": False}

    def test_history(self, client, agent):
        agent.history.append(10.0, 20.0, timestamp_ms=1000)
        assert client.get("/history").json() == {
            "cpu": [10.0],
            "memory": [20.0],
            "timestamps": [1000],
            "maxPoints": 5,
        }


class TestCors:
    def test_preflight_allows_token_header(self, client):
        response = client.options(
            "/action",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "x-veer-token",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
