"""
actions.handlers

每个方法（method）的执行逻辑拆成独立模块，避免 executor.py 成为上帝类。

约定：
- 每个 handler 只负责一个方法的执行；参数契约已由 executor 在调用前校验；
- handler 返回 ExecutionResult；执行失败（文件系统/进程/网络）只体现为 success=false，不抛异常。
"""
