# -*- coding: utf-8 -*-
"""
常量统一出口：业务代码统一 `from recipe_steps.src.constants import XXX`。
"""

from recipe_steps.src.constants.method_types import *  # noqa: F401,F403
from recipe_steps.src.constants.misc_config import *  # noqa: F401,F403
