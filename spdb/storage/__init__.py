"""
Storage 子系统：行编解码、页管理器与表。

模块清单：
- row: 行记录与定长二进制编解码
- pager: 页缓存与数据库文件读写
- table: 行号寻址与打开/关闭持久化协议
- exceptions: 致命错误
"""
