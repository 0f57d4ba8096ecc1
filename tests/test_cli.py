"""
Tests for the command-line interface.
"""

import json

import pytest
from click.testing import CliRunner

from cli import cli, parse_where


@pytest.fixture
def runner(api, monkeypatch):
    import chapel.api

    monkeypatch.setattr(chapel.api, "get_api", lambda admin=False: api)
    return CliRunner()


class TestCommands:

    def test_list_json(self, runner, backend):
        backend.seed("sermons", {"id": "s1", "title": "Hope", "sermon_date": "2024-01-01"})

        result = runner.invoke(cli, ["list", "sermons", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output)[0]["title"] == "Hope"

    def test_list_with_filters(self, runner, backend):
        backend.seed(
            "appointments",
            {"id": "a1", "status": "pending", "created_at": "2024-01-01"},
            {"id": "a2", "status": "confirmed", "created_at": "2024-01-02"},
        )

        result = runner.invoke(cli, ["list", "appointments", "--where", "status=pending", "--json"])

        assert result.exit_code == 0
        assert [a["id"] for a in json.loads(result.output)] == ["a1"]

    def test_list_private_prayer_requests(self, runner, backend):
        backend.seed(
            "prayer_requests",
            {"id": "pub", "is_public": True, "created_at": "2024-01-01"},
            {"id": "priv", "is_public": False, "created_at": "2024-01-02"},
        )

        result = runner.invoke(cli, ["list", "prayer-requests", "--where", "is_public=false", "--json"])

        assert result.exit_code == 0
        assert [p["id"] for p in json.loads(result.output)] == ["priv"]

    def test_admin_flag_uses_service_key(self, backend, monkeypatch):
        import chapel.db.client

        monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
        monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key")
        monkeypatch.setenv("SUPABASE_SERVICE_KEY", "service-key")
        keys = []

        def fake_create_client(url, key):
            keys.append(key)
            return backend

        monkeypatch.setattr(chapel.db.client, "create_client", fake_create_client)

        result = CliRunner().invoke(cli, ["--admin", "list", "sermons", "--json"])

        assert result.exit_code == 0
        assert keys == ["service-key"]

    def test_list_table(self, runner, backend):
        backend.seed("members", {"id": "m1", "name": "Esther", "created_at": "2024-01-01"})

        result = runner.invoke(cli, ["list", "members", "--columns", "id,name"])

        assert result.exit_code == 0
        assert "Esther" in result.output

    def test_demote_last_admin_exits_nonzero(self, runner, backend):
        backend.seed("profiles", {"id": "u1", "role": "admin"})

        result = runner.invoke(cli, ["demote", "u1"])

        assert result.exit_code == 1
        assert "last admin" in result.output
        assert backend.writes == []

    def test_promote(self, runner, backend):
        backend.seed("profiles", {"id": "u1", "email": "sam@example.org", "role": "user"})

        result = runner.invoke(cli, ["promote", "u1"])

        assert result.exit_code == 0
        assert backend.tables["profiles"][0]["role"] == "admin"

    def test_upload_and_delete_image(self, runner, backend, tmp_path):
        path = tmp_path / "banner.png"
        path.write_bytes(b"png")

        upload = runner.invoke(cli, ["upload-image", str(path), "--folder", "banners"])
        url = upload.output.strip()
        delete = runner.invoke(cli, ["delete-image", url])

        assert upload.exit_code == 0
        assert url.endswith(".png")
        assert delete.exit_code == 0
        assert backend.storage.objects == {}

    def test_delete_image_bad_url(self, runner, backend):
        result = runner.invoke(cli, ["delete-image", "https://cdn.example.org/files/x.png"])

        assert result.exit_code == 1
        assert backend.storage.calls == []

    def test_missing_configuration(self, monkeypatch):
        for name in ("SUPABASE_URL", "SUPABASE_ANON_KEY", "SUPABASE_SERVICE_KEY"):
            monkeypatch.delenv(name, raising=False)

        result = CliRunner().invoke(cli, ["list", "sermons"])

        assert result.exit_code == 1
        assert "SUPABASE_URL" in result.output


class TestParseWhere:

    def test_booleans(self):
        assert parse_where(("is_public=true", "name=Ann=B")) == {"is_public": True, "name": "Ann=B"}

    def test_rejects_missing_equals(self):
        import click

        with pytest.raises(click.BadParameter):
            parse_where(("status",))
