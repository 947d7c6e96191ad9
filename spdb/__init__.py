"""
spdb：基于分页文件的单表记录存储。

作为库导入时默认不输出日志，由调用方 logger.enable("spdb") 打开。
"""

from loguru import logger

__version__ = "0.1.0"

logger.disable("spdb")
