"""
webexport - HTML5 游戏导出流水线

模块结构：
- config/     导出规范与运行期配置
- models/     数据模型定义（项目/构建开关/加载列表/导出结果）
- fs/         文件系统适配（本地/内存）
- pipeline/   导出阶段编排（库文件/事件代码/资源/合并/外壳文档）
- targets/    目标平台打包（Cordova/Cocos2d/Electron/Facebook）
- cli.py      命令行入口
"""

__version__ = "0.1.0"
