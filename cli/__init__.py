"""
命令行前端：交互式主循环与进程入口。
"""
