# -*- coding: utf-8 -*-
"""
页管理器（Pager）。

职责：
- 持有数据库文件句柄，以及打开时记录下的文件长度（之后不再重新查询）
- 按页号缓存页缓冲区（bytearray），首次访问时从磁盘加载，之后不再重读、不淘汰
- 按需把页的前 size 个字节写回磁盘

所有 I/O 错误、越界访问都是致命错误（DatabaseFatalError），本层不重试。
"""

import os
from typing import Dict, List, Optional

from loguru import logger

from .exceptions import DatabaseFatalError
from .row import ROW_SIZE

PAGE_SIZE = 4096        # 与大多数操作系统页大小一致
TABLE_MAX_PAGES = 100


class Pager:
    """
    页缓存与数据库文件之间的中介。
    页 N 在文件中的位置为 [N * page_size, (N + 1) * page_size)。
    """
    def __init__(self, path: str, page_size: int = PAGE_SIZE, max_pages: int = TABLE_MAX_PAGES,
                 row_size: int = ROW_SIZE):
        """
        打开（不存在则创建）数据库文件。
        :param path: 数据库文件路径
        :param page_size: 页大小（字节）
        :param max_pages: 最多缓存的页数
        :param row_size: 行宽，用于计算每页行数和表容量
        """
        if row_size <= 0 or row_size > page_size:
            raise ValueError(f"Row size {row_size} does not fit in page size {page_size}")
        self.path = path
        self.page_size = page_size
        self.max_pages = max_pages
        self.row_size = row_size
        self.rows_per_page = page_size // row_size
        self.max_rows = max_pages * self.rows_per_page
        self.pages: Dict[int, bytearray] = {}  # 页号 -> 页缓冲区
        self._file = None

        try:
            # 'r+b' 要求文件已存在，新文件先用 'w+b' 创建；已有文件不能截断
            if not os.path.exists(path):
                self._file = open(path, 'w+b')
            else:
                self._file = open(path, 'r+b')
            self.file_length = self._file.seek(0, os.SEEK_END)
        except OSError as e:
            logger.error(f"无法打开数据库文件 {path}: {e}")
            if self._file is not None:
                self._file.close()
                self._file = None
            raise DatabaseFatalError("Unable to open file", e.errno) from e
        logger.debug(f"打开数据库文件 {path}，长度 {self.file_length} 字节")

    @classmethod
    def open(cls, path: str, page_size: int = PAGE_SIZE, max_pages: int = TABLE_MAX_PAGES,
             row_size: int = ROW_SIZE) -> 'Pager':
        return cls(path, page_size=page_size, max_pages=max_pages, row_size=row_size)

    @property
    def num_pages(self) -> int:
        """打开时文件覆盖的页数，最后不完整的页也算一页"""
        num_pages = self.file_length // self.page_size
        if self.file_length % self.page_size:
            num_pages += 1
        return num_pages

    @property
    def closed(self) -> bool:
        return self._file is None

    def get_page(self, page_num: int) -> bytearray:
        """
        获取页缓冲区，缓存未命中时分配并从文件加载。
        上界与表的行容量（max_rows）比较而不是页容量，保持原有行为。
        """
        if page_num < 0 or page_num > self.max_rows:
            logger.error(f"页号越界: {page_num} (上界 {self.max_rows})")
            raise DatabaseFatalError(f"Tried to fetch page number out of bounds. {page_num} > {self.max_rows}")
        if self._file is None:
            raise DatabaseFatalError("Pager is closed")

        page = self.pages.get(page_num)
        if page is None:
            # 缓存未命中：分配页并从文件读取
            page = bytearray(self.page_size)
            if page_num <= self.num_pages:
                try:
                    self._file.seek(page_num * self.page_size)
                    data = self._file.read(self.page_size)
                except OSError as e:
                    logger.error(f"读取第 {page_num} 页失败: {e}")
                    raise DatabaseFatalError("Error reading file", e.errno) from e
                # 超出文件末尾的部分保持分配时的内容
                page[:len(data)] = data
                logger.debug(f"加载第 {page_num} 页，读取 {len(data)} 字节")
            self.pages[page_num] = page
        return page

    def flush(self, page_num: int, size: int) -> None:
        """把第 page_num 页的前 size 个字节写回文件"""
        page = self.pages.get(page_num)
        if page is None:
            logger.error(f"刷新未加载的页: {page_num}")
            raise DatabaseFatalError("Tried to flush null page")
        if self._file is None:
            raise DatabaseFatalError("Pager is closed")

        offset = page_num * self.page_size
        try:
            self._file.seek(offset)
        except OSError as e:
            logger.error(f"定位到偏移 {offset} 失败: {e}")
            raise DatabaseFatalError("Error seeking", e.errno) from e
        try:
            self._file.write(memoryview(page)[:size])
            self._file.flush()
        except OSError as e:
            logger.error(f"写入第 {page_num} 页失败: {e}")
            raise DatabaseFatalError("Error writing", e.errno) from e
        logger.debug(f"刷新第 {page_num} 页：偏移 {offset}，{size} 字节")

    def is_loaded(self, page_num: int) -> bool:
        return page_num in self.pages

    def loaded_pages(self) -> List[int]:
        return sorted(self.pages)

    def release(self, page_num: int) -> Optional[bytearray]:
        """释放页缓冲区（不写回）"""
        return self.pages.pop(page_num, None)

    def close(self) -> None:
        """关闭文件句柄，失败为致命错误。已关闭时什么也不做。"""
        if self._file is None:
            return
        try:
            self._file.close()
        except OSError as e:
            logger.error(f"关闭数据库文件失败: {e}")
            raise DatabaseFatalError("Error closing db file.", e.errno) from e
        finally:
            self._file = None
        logger.debug(f"关闭数据库文件 {self.path}")

    def __repr__(self) -> str:
        return (f"<Pager path={self.path} length={self.file_length} "
                f"loaded={len(self.pages)} closed={self.closed}>")
