# -*- coding: utf-8 -*-
"""
方法名常量。

定义 recipe 步骤可调用的全部方法（method）名称。
"""

from typing import Final

# 系统模块
METHOD_RUN: Final = "run"

# 文件系统模块
METHOD_COPY_FILE: Final = "copy_file"
METHOD_DOWNLOAD_FILE: Final = "download_file"
METHOD_MAKE_DIR: Final = "make_dir"
METHOD_MIRROR_DIR: Final = "mirror_dir"
METHOD_WRITE_FILE: Final = "write_file"
METHOD_READ_FILE: Final = "read_file"
METHOD_REMOVE: Final = "remove"

# 方法所属模块
MODULE_SYSTEM: Final = "system"
MODULE_FILESYSTEM: Final = "filesystem"
