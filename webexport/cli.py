"""
命令行入口

用法：
    webexport export --target web --project game.json --out build/ --runtime-root runtime/
    webexport export --target preview --project game.json --out preview/ \\
        --runtime-root runtime/ --options '{"layout": "Scene", "debugger_port": 3030}'

退出码：0 成功，1 失败（只在这里输出错误信息）
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from .config import RuntimeConfig, get_config, reload_config
from .fs import LocalFileSystem
from .interfaces import WebExportError
from .models import PreviewExportOptions, Project, TargetKind
from .pipeline import ExporterHelper, PrecompiledCodeGenerator


def _configure_logging(config: RuntimeConfig, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.logging.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=config.logging.log_format)


def _load_project(path: Path) -> Project:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    project = Project(**data)
    if not project.project_dir:
        project.project_dir = path.resolve().parent.as_posix()
    return project


def _preview_options(project: Project, export_dir: str, options: dict) -> PreviewExportOptions:
    preview = PreviewExportOptions(
        project=project,
        export_path=export_dir,
        layout_name=options.get("layout", ""),
        external_layout_name=options.get("external_layout", ""),
        include_file_hashes=options.get("include_file_hashes", {}),
        project_data_only_export=bool(options.get("project_data_only", False)),
    )
    if options.get("debugger_port"):
        preview = preview.with_debugger_server(
            options.get("debugger_host", "127.0.0.1"), options["debugger_port"]
        )
    return preview


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="webexport", description="HTML5 游戏导出")
    parser.add_argument("--config", default="", help="运行期配置文件（默认：webexport.yaml）")
    parser.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    sub = parser.add_subparsers(dest="command", required=True)

    export = sub.add_parser("export", help="导出项目")
    export.add_argument(
        "--target",
        required=True,
        choices=[t.value for t in TargetKind],
        help="导出目标",
    )
    export.add_argument("--project", required=True, help="项目 JSON 文件")
    export.add_argument("--out", required=True, help="导出目录")
    export.add_argument("--runtime-root", default="", help="运行时库目录（默认取配置 paths.runtime_root）")
    export.add_argument("--code-output-dir", default="", help="生成代码目录（默认为导出目录）")
    export.add_argument("--options", default="{}", help="附加选项（JSON）")
    export.add_argument("--minify", action="store_true", help="合并压缩加载文件")
    export.add_argument("--debug", action="store_true", help="调试版本（Cocos2d）")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = reload_config(args.config) if args.config else get_config()
    except (WebExportError, ValidationError, yaml.YAMLError) as e:
        print(f"错误: 配置文件无效: {e}")
        return 1
    _configure_logging(config, args.verbose)

    runtime_root = args.runtime_root or config.paths.runtime_root
    if not runtime_root:
        print("错误: 未指定运行时库目录（--runtime-root）")
        return 1

    try:
        project = _load_project(Path(args.project))
        options = json.loads(args.options)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        print(f"错误: 无法读取项目或选项: {e}")
        return 1

    export_dir = Path(args.out).resolve().as_posix()
    code_output_dir = args.code_output_dir or config.paths.code_output_dir
    helper = ExporterHelper(
        LocalFileSystem(),
        Path(runtime_root).resolve().as_posix(),
        Path(code_output_dir).resolve().as_posix() if code_output_dir else None,
        PrecompiledCodeGenerator(),
        config=config,
    )

    target = TargetKind(args.target)
    try:
        if target == TargetKind.PREVIEW:
            result = helper.export_project_for_preview(_preview_options(project, export_dir, options))
        else:
            result = helper.export_whole_project(
                project, export_dir, target, minify=args.minify, debug_mode=args.debug
            )
    except WebExportError as e:
        # 调试开关与目标矛盾等在构造参数时就会失败
        print(f"错误: {e}")
        return 1

    if not result.success:
        print(f"导出失败 [{result.stage}]: {helper.last_error}")
        return 1

    print(f"导出完成: {export_dir}（{len(result.claimed_files)} 个文件）")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
