"""
命令行入口测试
"""

import json

import pytest

from webexport.cli import main


@pytest.fixture
def runtime_dir(tmp_path, runtime_files):
    """把运行时库与模板写到磁盘"""
    root = tmp_path / "runtime"
    for path, content in runtime_files.items():
        target = root / path[len("/runtime/"):]
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def project_json(tmp_path):
    """磁盘上的项目文件（资源相对项目目录）"""
    project_dir = tmp_path / "game"
    (project_dir / "images").mkdir(parents=True)
    (project_dir / "images" / "player.png").write_bytes(b"\x89PNG player")
    path = project_dir / "game.json"
    path.write_text(
        json.dumps(
            {
                "name": "Disk Game",
                "first_layout": "Main",
                "layouts": [{"name": "Main", "compiled_events": "gdjs.MainCode = {};\n"}],
                "resources": [{"name": "player", "kind": "image", "file": "images/player.png"}],
            }
        ),
        encoding="utf-8",
    )
    return path


class TestCli:
    """命令行导出测试"""

    def test_export_web(self, tmp_path, runtime_dir, project_json, capsys):
        out = tmp_path / "build"
        code = main(
            [
                "export",
                "--target", "web",
                "--project", str(project_json),
                "--out", str(out),
                "--runtime-root", str(runtime_dir),
            ]
        )
        assert code == 0, capsys.readouterr().out
        assert (out / "index.html").is_file()
        assert (out / "code0.js").read_text(encoding="utf-8") == "gdjs.MainCode = {};\n"
        assert (out / "images" / "player.png").read_bytes() == b"\x89PNG player"
        assert "导出完成" in capsys.readouterr().out

    def test_export_preview_with_options(self, tmp_path, runtime_dir, project_json):
        out = tmp_path / "preview"
        options = json.dumps({"layout": "Main", "debugger_port": 3030})
        code = main(
            [
                "export",
                "--target", "preview",
                "--project", str(project_json),
                "--out", str(out),
                "--runtime-root", str(runtime_dir),
                "--options", options,
            ]
        )
        assert code == 0
        index_html = (out / "index.html").read_text(encoding="utf-8")
        assert "debuggerServerPort" in index_html
        assert "3030" in index_html

    def test_missing_runtime_fails(self, tmp_path, project_json, capsys):
        """测试运行时库缺失时返回 1 并输出失败阶段"""
        code = main(
            [
                "export",
                "--target", "web",
                "--project", str(project_json),
                "--out", str(tmp_path / "build"),
                "--runtime-root", str(tmp_path / "nowhere"),
            ]
        )
        assert code == 1
        assert "INCLUDES" in capsys.readouterr().out

    def test_unreadable_project(self, tmp_path, runtime_dir, capsys):
        code = main(
            [
                "export",
                "--target", "web",
                "--project", str(tmp_path / "none.json"),
                "--out", str(tmp_path / "build"),
                "--runtime-root", str(runtime_dir),
            ]
        )
        assert code == 1
        assert "无法读取项目" in capsys.readouterr().out
