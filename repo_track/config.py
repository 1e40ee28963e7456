"""
全局配置模块

本模块集中定义 repo_track 运行时使用的常量配置，
并允许通过环境变量（或项目根目录下的 .env 文件）覆盖默认值。

配置项说明：
- DEFAULT_TAB_SIZE：计算列号时制表符的默认宽度
- LOG_LEVEL：包级 logger 的日志级别
- DEFAULT_ENCODING：磁盘文件读取时使用的字符编码
- CSV_DELIMITER / CSV_HEADER：Lifespan 导出为 CSV 时的格式
- BINARY_RATIO_THRESHOLD*：二进制文件判定阈值
"""

import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_TAB_SIZE = int(os.getenv("REPO_TRACK_TAB_SIZE", "4"))

LOG_LEVEL = os.getenv("REPO_TRACK_LOG_LEVEL", "INFO").upper()

DEFAULT_ENCODING = os.getenv("REPO_TRACK_ENCODING", "utf-8")

"""For lifespan export"""
CSV_DELIMITER = ";"
CSV_HEADER = ["ordinal", "revision", "changed", "num_changes", "metadata", "locations"]

"""For binary detection"""
# 源码文件中非 ASCII 字节占比超过该阈值即视为二进制
BINARY_RATIO_THRESHOLD = 0.3
# 其他文件使用更宽松的阈值
BINARY_RATIO_THRESHOLD_OTHER = 0.95
SOURCE_SUFFIXES = (
    ".c", ".h", ".cc", ".hh", ".cpp", ".hpp", ".cxx", ".hxx",
    ".css", ".cs", ".groovy", ".html", ".java", ".js", ".xhtml",
    ".kt", ".md", ".php", ".py", ".scala", ".tex", ".ts",
)
