# -*- coding: utf-8 -*-
"""
存储层异常定义。

存储层只有一种异常：不可恢复的致命错误（文件打开/读/写/定位/关闭失败、
越界访问页、刷新未加载的页）。内部各层只负责抛出，不负责退出进程；
只有顶层入口（cli/main.py）捕获它并终止进程。
"""
from typing import Optional


class DatabaseFatalError(Exception):
    """致命错误：不重试，不做部分恢复"""

    def __init__(self, message: str, errno: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.errno = errno

    def __str__(self):
        if self.errno is not None:
            return f"{self.message}: {self.errno}"
        return self.message
