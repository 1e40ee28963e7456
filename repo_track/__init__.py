"""
repo_track：跨版本追踪源码实体的生命周期。

给定一串按顺序排列的版本步骤（RevisionRange），以及外部分析器在每个版本上
检测到的实体（Mappable），本包负责：
1. 文本位置与范围的代数运算（Position / Range）
2. 基于行级 diff 的范围坐标翻译
3. 相邻版本之间实体的匹配（Mapping）
4. 将匹配结果累积为每个逻辑实体的生命周期（Tracker / Lifespan / Entity）
"""

import logging

from repo_track.config import LOG_LEVEL

# 包级 logger，各模块通过 `from repo_track import logger` 使用
logger = logging.getLogger("repo_track")
if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(_handler)
logger.setLevel(LOG_LEVEL)

from repo_track.common.enum_types import FileChangeType, LineChangeType, MatchKind
from repo_track.common.errors import (
    RepoTrackError,
    InvalidArgumentError,
    IllegalStateError,
    BinaryFileError,
)
from repo_track.text.position import Position, Range
from repo_track.vcs.file import VCSFile, InMemoryFile, DiskFile
from repo_track.vcs.change import LineChange, FileChange, DiffFileChange
from repo_track.vcs.revision import Commit, RevisionRange
from repo_track.mapping.mappable import Mappable, BasicMappable
from repo_track.mapping.translator import translate_range
from repo_track.mapping.mapping import Mapping, MappingResult
from repo_track.tracking.entity import Entity, Location
from repo_track.tracking.lifespan import Lifespan
from repo_track.tracking.tracker import Tracker, TrackerState, contents_differ

__version__ = "0.1.0"
__all__ = [
    "logger",
    "FileChangeType",
    "LineChangeType",
    "MatchKind",
    "RepoTrackError",
    "InvalidArgumentError",
    "IllegalStateError",
    "BinaryFileError",
    "Position",
    "Range",
    "VCSFile",
    "InMemoryFile",
    "DiskFile",
    "LineChange",
    "FileChange",
    "DiffFileChange",
    "Commit",
    "RevisionRange",
    "Mappable",
    "BasicMappable",
    "translate_range",
    "Mapping",
    "MappingResult",
    "Entity",
    "Location",
    "Lifespan",
    "Tracker",
    "TrackerState",
    "contents_differ",
]
