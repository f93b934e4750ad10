import json
from unittest.mock import patch

import pytest

from atlasopt.commands.status import print_status_overview, run, status_document
from atlasopt.errors import ProjectValidationError
from atlasopt.system import TOOL_NAMES, Architecture, AvailableTool, OperatingSystem, SystemInfo


def make_info(tools):
    return SystemInfo(
        os=OperatingSystem.LINUX,
        arch=Architecture.X86_64,
        cpu_cores=8,
        rust_version="rustc 1.75.0",
        cargo_version=None,
        available_tools=tools,
    )


def test_status_document_fields():
    tool = AvailableTool("mold", version="mold 2.0", path="/usr/bin/mold", is_installed=True)
    doc = status_document(make_info([tool]))
    assert doc["system"] == {
        "os": "Linux",
        "arch": "x86_64",
        "cpu_cores": 8,
        "rust_version": "rustc 1.75.0",
        "cargo_version": None,
    }
    assert doc["tools"] == [
        {"name": "mold", "version": "mold 2.0", "path": "/usr/bin/mold", "is_installed": True}
    ]


def test_run_json_without_tools(tmp_path, capsys):
    def missing(*args, **kwargs):
        raise FileNotFoundError("missing")

    with patch("shutil.which", return_value=None), patch("subprocess.run", side_effect=missing):
        run(as_json=True, project_dir=tmp_path)
    doc = json.loads(capsys.readouterr().out)
    assert doc["system"]["rust_version"] is None
    assert [tool["name"] for tool in doc["tools"]] == list(TOOL_NAMES)
    assert not any(tool["is_installed"] for tool in doc["tools"])


def test_run_outside_project_raises(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ProjectValidationError):
        run()


def test_overview_recommends_missing_tools(capsys):
    tools = [
        AvailableTool("mold", version="mold 2.0", path="/usr/bin/mold", is_installed=True),
        AvailableTool("zld"),
    ]
    print_status_overview(make_info(tools), detailed=True)
    out = capsys.readouterr().out
    assert "mold - ✅ Installed (mold 2.0)" in out
    assert "zld - ❌ Not installed" in out
    assert "    • zld" in out
    assert "Rust: rustc 1.75.0" in out
    assert "Cargo:" not in out


def test_overview_without_missing_tools(capsys):
    tools = [AvailableTool("mold", version="mold 2.0", path="/usr/bin/mold", is_installed=True)]
    print_status_overview(make_info(tools), detailed=False)
    out = capsys.readouterr().out
    assert "Recommendations" not in out
    assert "(mold 2.0)" not in out
    assert "Status check completed!" in out