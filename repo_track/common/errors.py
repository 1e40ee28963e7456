"""
本模块定义 repo_track 的异常层次以及参数 / 状态校验辅助函数。

异常分类：
- InvalidArgumentError：调用方违反前置条件（如版本不匹配），立即失败，不产生部分结果
- IllegalStateError：内部不变量被破坏（编程或数据完整性错误），不可恢复
- BinaryFileError：对二进制文件请求文本内容或 diff

读取内容时产生的 I/O 错误（OSError）不做包装，直接向调用方传播。
"""


class RepoTrackError(Exception):
    """repo_track 所有异常的基类。"""


class InvalidArgumentError(RepoTrackError, ValueError):
    pass


class IllegalStateError(RepoTrackError, RuntimeError):
    pass


class BinaryFileError(RepoTrackError, OSError):
    pass


def check_argument(condition: bool, message: str, *args) -> None:
    """
    校验调用参数，条件不成立时抛出 InvalidArgumentError。

    :param condition: 需要成立的条件
    :param message: 错误信息，可包含 % 格式化占位符
    :param args: 格式化参数
    """
    if not condition:
        raise InvalidArgumentError(message % args if args else message)


def check_state(condition: bool, message: str, *args) -> None:
    """
    校验内部状态，条件不成立时抛出 IllegalStateError。

    :param condition: 需要成立的条件
    :param message: 错误信息，可包含 % 格式化占位符
    :param args: 格式化参数
    """
    if not condition:
        raise IllegalStateError(message % args if args else message)
