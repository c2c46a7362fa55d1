"""
完整导出与导出门面测试
"""

import json
import re

import pytest

from webexport.interfaces import ConfigError
from webexport.models import (
    BuildFlags,
    IncludeSet,
    PreviewExportOptions,
    RendererKind,
    Resource,
    TargetKind,
)
from webexport.pipeline import ExporterHelper, FullExporter
from webexport.pipeline.stages import EXPORT_STAGES, ExportStage


def _script_sources(index_html: str) -> list[str]:
    return re.findall(r'<script src="([^"]+)" crossorigin="anonymous"></script>', index_html)


class TestFullExporter:
    """按目标完整导出"""

    def test_stage_order(self):
        assert EXPORT_STAGES[-1].name == ExportStage.PACKAGING

    def test_web_minified(self, fs, spec, runtime_config, sample_project, generator):
        """测试网页导出合并压缩为单个文件"""
        exporter = FullExporter(fs, generator, "/runtime", spec=spec, config=runtime_config)
        result = exporter.export(sample_project, "/out", TargetKind.WEB, minify=True)

        assert result.success, result.message
        assert result.includes == ["code.js"]
        assert _script_sources(fs.read_text("/out/index.html")) == ["code.js"]
        merged = fs.read_text("/out/code.js")
        assert merged.index("gdjs.Scene1Code") < merged.index("gdjs.Scene2Code") < merged.index("gdjs.projectData")

    def test_web_payload_is_empty_object(self, fs, spec, runtime_config, sample_project, generator):
        exporter = FullExporter(fs, generator, "/runtime", spec=spec, config=runtime_config)
        assert exporter.export(sample_project, "/out", TargetKind.WEB).success
        assert "new gdjs.RuntimeGame(gdjs.projectData, {});" in fs.read_text("/out/index.html")
        assert "gdjs.runtimeGameOptions" not in fs.read_text("/out/data.js")

    def test_cordova_includes_packaged_tools(self, fs, spec, runtime_config, sample_project, generator):
        exporter = FullExporter(fs, generator, "/runtime", spec=spec, config=runtime_config)
        result = exporter.export(sample_project, "/out", TargetKind.CORDOVA)

        assert result.success, result.message
        assert spec.include_order.packaged[0] in result.includes
        assert "config.xml" in result.claimed_files
        assert fs.exists("/out/config.xml")

    def test_cocos2d_uses_cocos_renderer(self, fs, spec, runtime_config, sample_project, generator):
        """测试 Cocos2d 目标只包含 cocos 渲染器文件"""
        exporter = FullExporter(fs, generator, "/runtime", spec=spec, config=runtime_config)
        result = exporter.export(sample_project, "/out", TargetKind.COCOS2D, debug_mode=True)

        assert result.success, result.message
        assert not any("pixi" in f for f in result.includes)
        assert any("cocos-renderers" in f for f in result.includes)
        project_json = json.loads(fs.read_text("/out/project.json"))
        assert project_json["jsList"] == result.includes
        assert project_json["debugMode"] == 1
        # Cocos2d 模板没有加载列表占位符，由 project.json 加载
        assert _script_sources(fs.read_text("/out/index.html")) == []

    def test_electron(self, fs, spec, runtime_config, sample_project, generator):
        exporter = FullExporter(fs, generator, "/runtime", spec=spec, config=runtime_config)
        result = exporter.export(sample_project, "/out", TargetKind.ELECTRON, minify=True)

        assert result.success, result.message
        manifest = json.loads(fs.read_text("/out/package.json"))
        assert manifest["files"][:3] == ["main.js", "index.html", "code.js"]
        assert "theme.ogg" in manifest["files"]

    def test_facebook_constraint_no_manifest(self, fs, spec, runtime_config, sample_project, generator):
        """测试违反平台限制时不写清单"""
        sample_project.resources.append(Resource(name="ad", file="https://ads.example.com/a.png"))
        exporter = FullExporter(fs, generator, "/runtime", spec=spec, config=runtime_config)
        result = exporter.export(sample_project, "/out", TargetKind.FACEBOOK)

        assert not result.success
        assert result.stage == ExportStage.PACKAGING.value
        assert result.error_kind == "constraint"
        assert not fs.exists("/out/fbapp-config.json")

    def test_facebook_success(self, fs, spec, runtime_config, sample_project, generator):
        exporter = FullExporter(fs, generator, "/runtime", spec=spec, config=runtime_config)
        result = exporter.export(sample_project, "/out", TargetKind.FACEBOOK)
        assert result.success, result.message
        assert "fbapp-config.json" in result.claimed_files

    def test_preview_target_rejected(self, fs, spec, runtime_config, sample_project, generator):
        exporter = FullExporter(fs, generator, "/runtime", spec=spec, config=runtime_config)
        with pytest.raises(ConfigError):
            exporter.export(sample_project, "/out", TargetKind.PREVIEW)

    def test_packaged_flag_mismatch(self, fs, spec, runtime_config, sample_project, generator):
        exporter = FullExporter(fs, generator, "/runtime", spec=spec, config=runtime_config)
        with pytest.raises(ConfigError):
            exporter.export(sample_project, "/out", TargetKind.CORDOVA, flags=BuildFlags(packaged=False))
        with pytest.raises(ConfigError):
            exporter.export(sample_project, "/out", TargetKind.COCOS2D, flags=BuildFlags(renderer=RendererKind.PIXI))

    def test_non_utf8_runtime_file(self, fs, spec, runtime_config, sample_project, generator):
        """运行时库不是 UTF-8：合并阶段报 io 错误，不抛出原始解码异常"""
        fs.write_binary("/runtime/gd.js", b"var s = '\xe9';\n")
        helper = ExporterHelper(fs, "/runtime", code_generator=generator, spec=spec, config=runtime_config)
        result = helper.export_whole_project(sample_project, "/out", TargetKind.WEB, minify=True)

        assert not result.success
        assert result.stage == ExportStage.INCLUDES.value
        assert result.error_kind == "io"
        assert "gd.js" in result.message
        assert helper.last_error == result.message
        assert not fs.exists("/out/index.html")


class TestExporterHelper:
    """导出门面测试"""

    def test_last_error_names_failure(self, fs, spec, runtime_config, sample_project, failing_generator):
        """测试失败保留信息"""
        helper = ExporterHelper(fs, "/runtime", code_generator=failing_generator("Scene1"), spec=spec, config=runtime_config)
        result = helper.export_project_for_preview(PreviewExportOptions(project=sample_project, export_path="/out"))
        assert not result
        assert "Scene1" in helper.last_error

    def test_last_error_cleared_on_success(self, fs, spec, runtime_config, sample_project):
        """测试成功清空"""
        helper = ExporterHelper(fs, "/runtime", spec=spec, config=runtime_config)
        includes = IncludeSet()
        assert helper.add_libs_include(True, True, False, includes) is False
        assert helper.last_error

        result = helper.export_whole_project(sample_project, "/out", TargetKind.WEB)
        assert result.success, result.message
        assert helper.last_error == ""

    def test_whole_project_config_error(self, fs, spec, runtime_config, sample_project):
        helper = ExporterHelper(fs, "/runtime", spec=spec, config=runtime_config)
        result = helper.export_whole_project(sample_project, "/out", TargetKind.PREVIEW)
        assert not result.success
        assert result.error_kind == "config"
        assert helper.last_error == result.message

    def test_step_by_step_export(self, fs, spec, runtime_config, sample_project):
        """测试单步操作组合出与流水线相同的结构"""
        helper = ExporterHelper(fs, "/runtime", spec=spec, config=runtime_config)
        helper.set_code_output_directory("/gen")
        includes = IncludeSet()

        assert helper.export_resources(sample_project, "/out")
        assert helper.add_libs_include(True, False, False, includes)
        helper.export_object_and_behaviors_includes(sample_project, includes)
        assert helper.export_effect_includes(sample_project, includes)
        assert helper.export_events_code(sample_project, "/gen", includes, export_for_preview=False)
        assert helper.export_project_data(sample_project, "/gen/data.js")
        includes.append("/gen/data.js")
        helper.remove_includes(False, True, includes)
        assert helper.export_includes_and_libs(includes, "/out", minify=False)
        assert helper.export_index_file(sample_project, "/runtime/index.html", "/out", includes)
        assert helper.export_cordova_files(sample_project, "/out")

        assert includes.to_list()[-3:] == ["code0.js", "code1.js", "data.js"]
        assert fs.exists("/out/index.html")
        assert fs.exists("/out/config.xml")
        assert helper.last_error == ""

    def test_export_index_file_missing_template(self, fs, spec, runtime_config, sample_project):
        helper = ExporterHelper(fs, "/runtime", spec=spec, config=runtime_config)
        assert helper.export_index_file(sample_project, "/runtime/none.html", "/out", []) is False
        assert "none.html" in helper.last_error

    def test_complete_index_file(self, fs, spec, runtime_config):
        helper = ExporterHelper(fs, "/runtime", spec=spec, config=runtime_config)
        content = helper.complete_index_file("<!--GDJS_CODE_FILES -->", ["a.js"])
        assert content == '\t<script src="a.js" crossorigin="anonymous"></script>\n'

    def test_deprecated_fonts(self, fs, spec, runtime_config, sample_project):
        helper = ExporterHelper(fs, "/runtime", spec=spec, config=runtime_config)
        sample_project.layouts[0].objects[1].font = "Retro.ttf"
        assert helper.add_deprecated_font_files_to_font_resources(sample_project) == ["Retro.ttf"]
