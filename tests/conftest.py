"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(fs, sample_project, runtime_config):
        exporter = ResourceExporter(fs, runtime_config)
"""

from __future__ import annotations

from pathlib import Path

import pytest

from webexport.config import ExportSpec, RuntimeConfig, SpecLoader
from webexport.config.runtime_config import ConcurrencyConfig, MinifierConfig
from webexport.fs import MemoryFileSystem
from webexport.interfaces import GenerationError, ICodeGenerator
from webexport.models import (
    CodeUnit,
    Layout,
    Project,
    ProjectObject,
    Resource,
    ResourceKind,
)
from webexport.pipeline import PrecompiledCodeGenerator

RUNTIME_ROOT = "/runtime"
EXPORT_DIR = "/out"
PROJECT_DIR = "/project"

TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "webexport" / "runtime"


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def spec() -> ExportSpec:
    """加载导出规范（会话级别缓存）"""
    return SpecLoader.load()


@pytest.fixture
def runtime_config() -> RuntimeConfig:
    """运行期配置（多线程，rjsmin 压缩）"""
    return RuntimeConfig(
        concurrency=ConcurrencyConfig(max_workers=4),
        minifier=MinifierConfig(engine="rjsmin"),
    )


# ============================================================================
# 文件系统 Fixtures
# ============================================================================

def runtime_library_files(spec: ExportSpec) -> list[str]:
    """顺序表中出现的全部运行时库文件"""
    order = spec.include_order
    files = list(order.core)
    for renderer_files in order.renderers.values():
        files.extend(renderer_files)
    files.extend(order.debugger)
    files.extend(order.packaged)
    return files


def _template_files() -> dict[str, str]:
    templates = {}
    for path in TEMPLATE_DIR.rglob("*"):
        if path.is_file():
            relative = path.relative_to(TEMPLATE_DIR).as_posix()
            templates[f"{RUNTIME_ROOT}/{relative}"] = path.read_text(encoding="utf-8")
    return templates


@pytest.fixture
def runtime_files(spec: ExportSpec) -> dict[str, str | bytes]:
    """运行时根目录：库文件 + 模板"""
    files: dict[str, str | bytes] = {}
    for i, name in enumerate(runtime_library_files(spec)):
        files[f"{RUNTIME_ROOT}/{name}"] = f"// {name}\nvar lib{i} = {i};\n"
    files.update(_template_files())
    return files


@pytest.fixture
def project_files() -> dict[str, str | bytes]:
    """项目目录中的资源文件"""
    return {
        f"{PROJECT_DIR}/images/player.png": b"\x89PNG player",
        f"{PROJECT_DIR}/images/background.png": b"\x89PNG background",
        "/assets/music/theme.ogg": b"OggS theme",
    }


@pytest.fixture
def fs(runtime_files, project_files) -> MemoryFileSystem:
    """内存文件系统（已放入运行时库、模板和项目资源）"""
    files = dict(runtime_files)
    files.update(project_files)
    memory_fs = MemoryFileSystem(files)
    memory_fs.mkdir_all(EXPORT_DIR)
    return memory_fs


# ============================================================================
# 项目 Fixtures
# ============================================================================

@pytest.fixture
def sample_project() -> Project:
    """两个场景、无外部事件表的示例项目"""
    return Project(
        name="Test Game",
        package_name="com.example.testgame",
        version="1.2.3",
        author="Example Studio",
        first_layout="Scene1",
        project_dir=PROJECT_DIR,
        layouts=[
            Layout(
                name="Scene1",
                objects=[ProjectObject(name="Player"), ProjectObject(name="Score", type="TextObject::Text")],
                compiled_events="gdjs.Scene1Code = {};\ngdjs.Scene1Code.func = function() {};\n",
            ),
            Layout(
                name="Scene2",
                compiled_events="gdjs.Scene2Code = {};\ngdjs.Scene2Code.func = function() {};\n",
            ),
        ],
        resources=[
            Resource(name="player", kind=ResourceKind.IMAGE, file="images/player.png"),
            Resource(name="background", kind=ResourceKind.IMAGE, file="./images/background.png"),
            Resource(name="theme", kind=ResourceKind.AUDIO, file="/assets/music/theme.ogg"),
        ],
    )


@pytest.fixture
def generator() -> ICodeGenerator:
    return PrecompiledCodeGenerator()


class FailingGenerator(ICodeGenerator):
    """对指定场景抛出异常的生成器"""

    def __init__(self, failing: str):
        self.failing = failing
        self.inner = PrecompiledCodeGenerator()

    def generate(self, project: Project, unit: CodeUnit) -> str:
        if unit.name == self.failing:
            raise GenerationError(f"无法解析事件: {unit.name}")
        return self.inner.generate(project, unit)


@pytest.fixture
def failing_generator():
    """构造对指定场景失败的生成器"""
    return FailingGenerator
