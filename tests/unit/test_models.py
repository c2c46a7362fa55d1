"""
数据模型单元测试
"""

import pytest

from webexport.interfaces import ConfigError, GenerationError, PathConflictError
from webexport.models import (
    BuildFlags,
    ExportResult,
    ExportState,
    ExportTree,
    FileOwner,
    IncludeSet,
    Layout,
    PreviewExportOptions,
    Project,
    RendererKind,
    Resource,
    TargetKind,
    content_hash,
)


class TestIncludeSet:
    """加载列表测试"""

    def test_append_dedup_keeps_first_position(self):
        """测试重复追加保持首次位置"""
        includes = IncludeSet(["a.js", "b.js"])
        assert includes.append("a.js") is False
        assert includes.append("c.js") is True
        assert includes.to_list() == ["a.js", "b.js", "c.js"]

    def test_remove_if_preserves_order(self):
        """测试移除后其余顺序不变"""
        includes = IncludeSet(["a.js", "x-1.js", "b.js", "x-2.js", "c.js"])
        removed = includes.remove_if(lambda p: p.startswith("x-"))
        assert removed == ["x-1.js", "x-2.js"]
        assert includes.to_list() == ["a.js", "b.js", "c.js"]

    def test_replace_in_place_moves_hash(self):
        """测试原位替换并迁移哈希"""
        includes = IncludeSet(["/gen/code0.js", "lib.js"])
        includes.set_hash("/gen/code0.js", "h0")
        includes.replace("/gen/code0.js", "code0.js")
        assert includes.to_list() == ["code0.js", "lib.js"]
        assert includes.get_hash("code0.js") == "h0"

    def test_replace_with_existing_entry_drops_duplicate(self):
        """测试替换为已有条目时不产生重复"""
        includes = IncludeSet(["code0.js", "lib.js", "/gen/code0.js"])
        includes.replace("/gen/code0.js", "code0.js")
        assert includes.to_list() == ["code0.js", "lib.js"]

    def test_reset(self):
        includes = IncludeSet(["a.js", "b.js"])
        includes.set_hash("a.js", "h")
        includes.reset(["code.js"])
        assert list(includes) == ["code.js"]
        assert includes.get_hash("a.js") is None

    def test_content_hash_is_sha256(self):
        """测试内容哈希"""
        assert content_hash(b"") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


class TestExportTree:
    """导出路径登记测试"""

    def test_same_owner_can_claim_twice(self):
        tree = ExportTree("/out")
        tree.claim("code0.js", FileOwner.CODE)
        assert tree.claim("./code0.js", FileOwner.CODE) == "code0.js"

    def test_conflict_between_owners(self):
        """测试资源与生成代码路径冲突"""
        tree = ExportTree("/out")
        tree.claim("code0.js", FileOwner.RESOURCE)
        with pytest.raises(PathConflictError) as exc_info:
            tree.claim("code0.js", FileOwner.CODE)
        assert "code0.js" in str(exc_info.value)
        assert exc_info.value.kind == "io"

    def test_files_sorted(self):
        tree = ExportTree("/out/")
        tree.claim("b.js", FileOwner.LIBRARY)
        tree.claim("a/x.png", FileOwner.RESOURCE)
        assert tree.files() == ["a/x.png", "b.js"]
        assert tree.absolute("a/x.png") == "/out/a/x.png"


class TestBuildFlags:
    """构建开关测试"""

    def test_from_switches_pixi(self):
        flags = BuildFlags.from_switches(pixi=True, cocos=False, minify=True)
        assert flags.renderer == RendererKind.PIXI
        assert flags.minify is True

    def test_from_switches_both_renderers(self):
        """测试同时启用两个渲染器"""
        with pytest.raises(ConfigError):
            BuildFlags.from_switches(pixi=True, cocos=True)

    def test_from_switches_no_renderer(self):
        with pytest.raises(ConfigError):
            BuildFlags.from_switches(pixi=False, cocos=False)

    def test_packaged_with_debugger_rejected(self):
        """测试安装包不能嵌入调试客户端"""
        with pytest.raises(ConfigError):
            BuildFlags(packaged=True, websocket_debugger=True)

    def test_for_target(self):
        assert BuildFlags.for_target(TargetKind.COCOS2D).renderer == RendererKind.COCOS
        assert BuildFlags.for_target(TargetKind.CORDOVA).packaged is True
        assert BuildFlags.for_target(TargetKind.WEB).packaged is False

    def test_frozen(self):
        flags = BuildFlags()
        with pytest.raises(Exception):
            flags.minify = True


class TestPreviewExportOptions:
    """预览参数测试"""

    def test_with_methods_return_new_instance(self):
        """测试修改方法返回新对象，原对象不变"""
        options = PreviewExportOptions(project=Project(name="P"), export_path="/out")
        updated = (
            options.with_debugger_server("localhost", 3030)
            .with_layout("Scene1")
            .with_include_file_hash("code0.js", "abc")
            .with_project_data_only()
        )
        assert options.debugger is None
        assert options.include_file_hashes == {}
        assert updated.debugger.port == "3030"
        assert updated.layout_name == "Scene1"
        assert updated.include_file_hashes == {"code0.js": "abc"}
        assert updated.project_data_only_export is True


class TestProject:
    """项目模型测试"""

    def test_add_resource_never_overwrites(self):
        project = Project(name="P", resources=[Resource(name="a", file="a.png")])
        assert project.add_resource(Resource(name="a", file="other.png")) is False
        assert project.get_resource("a").file == "a.png"

    def test_data_dict_excludes_internal_fields(self):
        """测试项目数据不包含预编译代码与项目目录"""
        project = Project(
            name="P",
            project_dir="/project",
            layouts=[Layout(name="Scene", compiled_events="code")],
        )
        data = project.to_data_dict()
        assert "project_dir" not in data
        assert "compiled_events" not in data["layouts"][0]
        assert data["layouts"][0]["name"] == "Scene"

    def test_url_resource(self):
        resource = Resource(name="r", file="https://example.com/a.png")
        assert resource.is_url
        assert not resource.has_file


class TestExportResult:
    """导出结果测试"""

    def test_mark_failed(self):
        result = ExportResult(target="web")
        result.mark_failed("CODE_GENERATION", GenerationError("场景 \"Scene1\" 代码生成失败"))
        assert result.state == ExportState.FAILED
        assert not result
        assert result.error_kind == "generation"
        assert "Scene1" in result.message

    def test_mark_succeeded(self):
        result = ExportResult()
        result.mark_succeeded()
        assert result.success
        assert result.message == ""
