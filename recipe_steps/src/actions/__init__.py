"""
步骤方法执行层：把 recipe 中的一步（方法名 + 参数）转成真实的系统行为。

说明：
- registry 负责“有哪些方法、参数契约是什么”
- handlers 负责“真正去做”（跑命令/下载/文件操作）
"""
