from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Iterable

from recipe_steps.src.common.utils import atomic_write_text
from recipe_steps.src.constants import FILE_DEFAULT_ENCODING, MAKE_DIR_DEFAULT_MODE

logger = logging.getLogger(__name__)


class Filesystem:
    """
    文件系统原语（copy/mkdir/mirror/dump/read/remove）。

    失败统一抛 OSError（含 shutil.Error）或 UnicodeDecodeError，由 handler 转为 success=false。
    handler 通过 ExecutionContext 注入实例，测试可替换为 mock。
    """

    def __init__(self, encoding: str = FILE_DEFAULT_ENCODING):
        self.encoding = encoding

    def copy(self, origin: str, target: str) -> None:
        """复制单个文件；目标存在时覆盖，父目录不存在时自动创建。"""
        source = Path(origin)
        if not source.is_file():
            raise FileNotFoundError(f'Failed to copy "{origin}" because file does not exist.')
        destination = Path(target)
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)

    def mkdir(self, directory: str, mode: int = MAKE_DIR_DEFAULT_MODE, exact_mode: bool = False) -> None:
        """
        递归创建目录；目录已存在视为成功（不修改其权限）。

        exact_mode=True 时新建的末级目录在创建后 chmod 为 mode，不受 umask 影响；
        否则与 mkdir(2) 一致，实际权限为 mode & ~umask。中间目录沿用默认权限。
        """
        existed = os.path.isdir(directory)
        os.makedirs(directory, mode=mode, exist_ok=True)
        if exact_mode and not existed:
            os.chmod(directory, mode)

    def mirror(self, origin: str, target: str) -> None:
        """把 origin 目录下的全部内容复制到 target（target 可已存在）。"""
        if not os.path.isdir(origin):
            raise FileNotFoundError(f'The origin directory "{origin}" was not found.')
        shutil.copytree(origin, target, symlinks=True, dirs_exist_ok=True)

    def dump_file(self, filename: str, content: str) -> None:
        atomic_write_text(filename, content, encoding=self.encoding)

    def read_file(self, filename: str) -> str:
        with open(filename, "r", encoding=self.encoding, newline="") as handle:
            return handle.read()

    def remove(self, paths: Iterable[str]) -> None:
        """删除文件/目录（递归）/符号链接；不存在的路径直接跳过。"""
        for path in paths:
            if os.path.islink(path) or os.path.isfile(path):
                os.remove(path)
            elif os.path.isdir(path):
                shutil.rmtree(path)
            else:
                logger.debug("remove skipped missing path=%s", path)
