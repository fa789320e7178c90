"""Tests for the plannera CLI."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from plannera import cli


@pytest.fixture(autouse=True)
def _no_side_effects():
    with patch("plannera.cli.setup_logging"), patch("plannera.cli._init_mlflow"):
        yield


def _run(monkeypatch, *args: str) -> None:
    monkeypatch.setattr("sys.argv", ["plannera", *args])
    cli.main()


class TestCli:
    def test_no_args_prints_usage(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc_info:
            _run(monkeypatch)
        assert exc_info.value.code == 1
        assert "Usage:" in capsys.readouterr().out

    def test_help(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc_info:
            _run(monkeypatch, "--help")
        assert exc_info.value.code == 0

    def test_unknown_command(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc_info:
            _run(monkeypatch, "sepp")
        assert exc_info.value.code == 1
        assert "Unknown command: sepp" in capsys.readouterr().out

    def test_lep_json(self, monkeypatch, capsys, tmp_path, byron_xml):
        path = tmp_path / "byron.xml"
        path.write_text(byron_xml, encoding="utf-8")
        _run(monkeypatch, "lep", str(path))
        data = json.loads(capsys.readouterr().out)
        assert [z["zoneCode"] for z in data["zones"]] == ["RU1", "R2"]

    def test_lep_zone_block(self, monkeypatch, capsys, tmp_path, byron_xml):
        path = tmp_path / "byron.xml"
        path.write_text(byron_xml, encoding="utf-8")
        _run(monkeypatch, "lep", str(path), "--zone", "r2")
        out = capsys.readouterr().out
        assert out.splitlines() == [
            "Byron Local Environmental Plan 2014",
            "R2 – Low Density Residential",
            "Permitted with consent: Boarding houses",
            "Prohibited: Heavy industrial storage establishment",
        ]

    def test_lep_zone_not_found(self, monkeypatch, capsys, tmp_path, byron_xml):
        path = tmp_path / "byron.xml"
        path.write_text(byron_xml, encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            _run(monkeypatch, "lep", str(path), "--zone", "R3")
        assert exc_info.value.code == 1

    def test_lep_malformed_exits_2(self, monkeypatch, tmp_path):
        path = tmp_path / "broken.xml"
        path.write_text("<LEP><ZONE>", encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            _run(monkeypatch, "lep", str(path))
        assert exc_info.value.code == 2

    def test_missing_file(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc_info:
            _run(monkeypatch, "lep", "/nonexistent/lep.xml")
        assert exc_info.value.code == 1
        assert "File not found" in capsys.readouterr().out

    def test_dcp(self, monkeypatch, capsys, tmp_path):
        path = tmp_path / "dcp.txt"
        path.write_text("Byron DCP 2014\n1 Setbacks\nfront setback is 6 m.\n", encoding="utf-8")
        _run(monkeypatch, "dcp", str(path))
        out = capsys.readouterr().out
        assert "1 Setbacks" in out
        assert "Total: 2 sections" in out

    def test_fetch(self, monkeypatch, capsys):
        result = {"slug": "byron", "format": "xml", "source_url": "x", "used_fixture": False, "data": {}}
        with patch("plannera.pipeline.ingest.ingest_instrument", new=AsyncMock(return_value=result)) as mock_ingest:
            _run(monkeypatch, "fetch", "https://legislation.nsw.gov.au/view/html/inforce/current/epi-2014-0250",
                 "--slug", "byron")
        config = mock_ingest.call_args.args[0]
        assert config.slug == "byron"
        assert json.loads(capsys.readouterr().out)["slug"] == "byron"
