"""
Facebook Instant Games 打包器 - 托管平台

平台限制来自 export_spec.yaml 的 hosted_platform 段：
- 包总大小上限
- 文件数上限
- 外部资源只允许指定域名
- 不允许嵌入调试客户端

任一限制不满足时抛出 ConstraintError，不写出 fbapp-config.json

测试要点：
- test_bundle_too_large: 超出大小
- test_too_many_files: 超出文件数
- test_disallowed_domain: 非白名单域名
- test_facebook_constraint_no_manifest: 检查失败时不写清单
"""

from __future__ import annotations

import logging
from urllib.parse import urlparse

from ..interfaces import ConstraintError
from ..models import TargetKind
from .base import PackageRequest, TargetPackager

logger = logging.getLogger(__name__)


class FacebookPackager(TargetPackager):
    """Facebook Instant Games 平台文件"""

    target = TargetKind.FACEBOOK

    def _domain_allowed(self, host: str) -> bool:
        for domain in self.spec.hosted_platform.allowed_domains:
            if host == domain or host.endswith("." + domain):
                return True
        return False

    def validate(self, request: PackageRequest) -> None:
        platform = self.spec.hosted_platform

        if request.flags.websocket_debugger:
            raise ConstraintError(f"{platform.name} 不允许嵌入调试客户端")

        for resource in request.project.iter_resources():
            if not resource.is_url:
                continue
            host = urlparse(resource.file).hostname or ""
            if not self._domain_allowed(host):
                raise ConstraintError(
                    f"资源 \"{resource.name}\" 的域名不在 {platform.name} 允许列表中: {host}"
                )

        if request.tree is None:
            return

        files = request.tree.files()
        # 清单本身也计入文件数
        file_count = len(files) + (0 if platform.manifest_file in files else 1)
        if file_count > platform.max_file_count:
            raise ConstraintError(
                f"{platform.name} 文件数超出限制: {file_count} > {platform.max_file_count}"
            )

        total = 0
        for relative in files:
            total += len(self.fs.read_binary(request.tree.absolute(relative)))
        if total > platform.max_bundle_bytes:
            raise ConstraintError(
                f"{platform.name} 包大小超出限制: {total} 字节 > {platform.max_bundle_bytes} 字节"
            )
        logger.info(f"{platform.name} 限制检查通过: {file_count} 个文件，{total} 字节")

    def package(self, request: PackageRequest) -> list[str]:
        orientation = "PORTRAIT" if request.project.orientation == "portrait" else "LANDSCAPE"
        config = {
            "instant_games": {
                "platform_version": "RICH_GAMEPLAY",
                "custom_update_templates": {},
                "orientation": orientation,
                "navigation_menu_version": "NAV_FLOATING",
            }
        }
        return [self.write_json(request, self.spec.hosted_platform.manifest_file, config)]
