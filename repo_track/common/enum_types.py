# ============================================================
# 模块说明：
# 本模块定义版本追踪过程中使用的枚举类型：
# 文件变更类型、行变更类型，以及匹配链接的来源阶段。
# ============================================================
from enum import Enum


class FileChangeType(str, Enum):
    ADD = "add"             # 新增文件（无旧文件）
    REMOVE = "remove"       # 删除文件（无新文件）
    MODIFY = "modify"       # 相对路径不变的修改
    RELOCATE = "relocate"   # 相对路径发生变化（重命名 / 移动）


class LineChangeType(str, Enum):
    INSERT = "insert"   # 行号相对于新文件
    DELETE = "delete"   # 行号相对于旧文件


class MatchKind(str, Enum):
    """
    Mapping 中一条 from → to 链接由哪个阶段产生。

    - SIGNATURE：签名完全相等
    - POSITION：范围翻译后位置兼容
    """
    SIGNATURE = "signature"
    POSITION = "position"
