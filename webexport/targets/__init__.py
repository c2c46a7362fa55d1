"""
目标平台打包器

- web: 纯网页（无额外文件）
- cordova: 移动端安装包外壳
- cocos2d: 替代渲染后端
- electron: 桌面外壳
- facebook: 托管平台（带平台限制检查）
"""

from __future__ import annotations

from ..config import ExportSpec
from ..interfaces import ConfigError, IFileSystem
from ..models import TargetKind
from .base import PackageRequest, TargetPackager
from .cocos2d import Cocos2dPackager
from .cordova import CordovaPackager
from .electron import ElectronPackager
from .facebook import FacebookPackager

PACKAGERS: dict[TargetKind, type[TargetPackager]] = {
    TargetKind.WEB: TargetPackager,
    TargetKind.CORDOVA: CordovaPackager,
    TargetKind.COCOS2D: Cocos2dPackager,
    TargetKind.ELECTRON: ElectronPackager,
    TargetKind.FACEBOOK: FacebookPackager,
}


def get_packager(target: TargetKind, fs: IFileSystem, spec: ExportSpec | None = None) -> TargetPackager:
    """按目标获取打包器（预览没有打包器）"""
    try:
        packager_cls = PACKAGERS[target]
    except KeyError:
        raise ConfigError(f"目标没有打包器: {target.value}") from None
    return packager_cls(fs, spec)


__all__ = [
    "PackageRequest",
    "TargetPackager",
    "CordovaPackager",
    "Cocos2dPackager",
    "ElectronPackager",
    "FacebookPackager",
    "PACKAGERS",
    "get_packager",
]
