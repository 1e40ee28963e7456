"""
本模块提供追踪结果的持久化辅助函数。

主要功能包括：
1. JSON 文件的加载与保存（自动创建目录，异常记录日志后继续抛出）
2. 将一组 Lifespan 导出为 JSON
3. 将单个 Lifespan 导出为 CSV（每个快照一行，位置信息以 JSON 字符串保存）

核心追踪流程本身从不写文件，这些函数仅供调用方使用。
"""

import csv
import json
import os
from typing import Iterable

from repo_track import logger
from repo_track.config import CSV_DELIMITER, CSV_HEADER
from repo_track.tracking.lifespan import Lifespan


def _ensure_parent_dir(file_path: str):
    dir_path = os.path.dirname(file_path)
    # 若目录不存在则递归创建
    if dir_path and not os.path.exists(dir_path):
        os.makedirs(dir_path)


def save_json(file_path: str, data):
    """
    将数据保存为 JSON 文件。

    :param file_path: JSON 文件保存路径
    :param data: 需要序列化并保存的数据
    """
    try:
        _ensure_parent_dir(file_path)
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        logger.info(f"Saved json file: {file_path}")
    except Exception as e:
        logger.exception(f"Error saving json file: {e}")
        raise


def load_json(file_path: str):
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except Exception as e:
        logger.exception(f"Error loading json file: {e}")
        raise


def save_lifespans_json(file_path: str, lifespans: Iterable[Lifespan]):
    save_json(file_path, [lifespan.to_json() for lifespan in lifespans])


def save_lifespan_csv(file_path: str, lifespan: Lifespan):
    """
    将 Lifespan 导出为 CSV 文件。

    列：ordinal;revision;changed;num_changes;metadata;locations
    - changed：该快照相对前一个快照内容是否发生变化（首个快照为 false）
    - metadata / locations：JSON 字符串

    :param file_path: CSV 文件保存路径
    :param lifespan: 需要导出的 Lifespan
    """
    try:
        _ensure_parent_dir(file_path)
        with open(file_path, 'w', encoding='utf-8', newline='') as f:
            writer = csv.writer(f, delimiter=CSV_DELIMITER)
            writer.writerow(CSV_HEADER)
            previous = None
            for entity in lifespan:
                changed = previous is not None and entity.num_changes > previous.num_changes
                writer.writerow([
                    entity.ordinal,
                    entity.revision_id,
                    str(changed).lower(),
                    entity.num_changes,
                    json.dumps(entity.metadata, default=str),
                    json.dumps([location.to_json() for location in entity.locations]),
                ])
                previous = entity
        logger.info(f"Saved lifespan csv: {file_path}")
    except Exception as e:
        logger.exception(f"Error saving lifespan csv: {e}")
        raise
