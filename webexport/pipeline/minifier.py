"""
压缩器 - 将有序的 JS 文件拼接并压缩为一个文件

职责：
- 按加载顺序拼接（顶层定义必须先于使用执行）
- rjsmin 引擎：进程内压缩空白与注释
- closure 引擎：调用 Closure Compiler（java -jar），处理超时和错误
- none 引擎：只拼接

依赖：
- rjsmin
- Closure Compiler jar 与 java（路径由运行期配置指定，仅 closure 引擎需要）

测试要点：
- test_concatenate_keeps_order: 拼接顺序
- test_closure_missing_jar: jar 不存在
"""

from __future__ import annotations

import subprocess
import tempfile
from pathlib import Path

import rjsmin

from ..config import get_config
from ..config.runtime_config import MinifierConfig
from ..interfaces import ConfigError, MinifyError


class Minifier:
    """JS 拼接压缩器"""

    ENGINES = ("rjsmin", "closure", "none")

    def __init__(self, config: MinifierConfig | None = None):
        self.config = config or get_config().minifier
        if self.config.engine not in self.ENGINES:
            raise ConfigError(f"未知的压缩引擎: {self.config.engine}")

    @staticmethod
    def concatenate(sources: list[tuple[str, str]]) -> str:
        """按顺序拼接 (文件名, 内容)"""
        return "\n".join(code for _, code in sources) + "\n"

    def minify(self, sources: list[tuple[str, str]]) -> str:
        """
        拼接并压缩

        Args:
            sources: 按加载顺序排列的 (文件名, 内容)

        Returns:
            合并后的代码

        Raises:
            MinifyError: 外部压缩器失败
        """
        if self.config.engine == "closure":
            return self._run_closure(sources)
        concatenated = self.concatenate(sources)
        if self.config.engine == "rjsmin":
            return rjsmin.jsmin(concatenated)
        return concatenated

    def _ensure_closure(self) -> Path:
        jar = Path(self.config.closure_jar) if self.config.closure_jar else None
        if jar is None or not jar.exists():
            raise MinifyError(f"Closure Compiler 不存在: {self.config.closure_jar}")
        return jar

    def _run_closure(self, sources: list[tuple[str, str]]) -> str:
        jar = self._ensure_closure()

        with tempfile.TemporaryDirectory() as tmpdir:
            work_dir = Path(tmpdir)
            cmd = [str(self.config.java_exe), "-jar", str(jar)]
            for i, (_, code) in enumerate(sources):
                # 保持顺序：Closure 按 --js 参数顺序拼接
                source_path = work_dir / f"{i:04d}.js"
                source_path.write_text(code, encoding="utf-8")
                cmd += ["--js", str(source_path)]
            output_path = work_dir / "out.js"
            cmd += ["--js_output_file", str(output_path)]

            try:
                subprocess.run(
                    cmd,
                    capture_output=True,
                    text=True,
                    timeout=self.config.timeout_sec,
                    check=True,
                )
            except FileNotFoundError as e:
                raise MinifyError(f"java 不可用: {self.config.java_exe}") from e
            except subprocess.TimeoutExpired as e:
                raise MinifyError("Closure Compiler 压缩超时") from e
            except subprocess.CalledProcessError as e:
                detail = e.stderr or e.stdout or ""
                raise MinifyError(f"Closure Compiler 压缩失败: {detail}") from e

            if not output_path.exists():
                raise MinifyError(f"压缩后文件不存在: {output_path}")
            return output_path.read_text(encoding="utf-8")
