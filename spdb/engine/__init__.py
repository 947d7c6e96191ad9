"""
Engine 子系统：语句准备与执行。

模块清单：
- statement: 元命令与语句准备
- executor: insert / select 执行
"""
