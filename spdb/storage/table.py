# -*- coding: utf-8 -*-
"""
表：行号到 (页号, 页内偏移) 的映射，以及打开/关闭时的持久化协议。

行不跨页：第 N 页存放行 [N * rows_per_page, (N + 1) * rows_per_page)，
每页末尾不足一行的字节永远不会被写入。
"""

from dataclasses import dataclass

from loguru import logger

from .pager import Pager, PAGE_SIZE, TABLE_MAX_PAGES
from .row import ROW_SIZE


@dataclass
class RowSlot:
    """一行在页中的位置。page 是页缓冲区本身，只应在本次访问内使用。"""
    page_num: int
    byte_offset: int
    page: bytearray


class Table:
    """
    单表。独占一个 Pager，并维护当前行数 num_rows。
    """
    def __init__(self, pager: Pager):
        self.pager = pager
        self.row_size = pager.row_size
        self.rows_per_page = pager.rows_per_page
        self.max_rows = pager.max_rows
        self.num_rows = self._rows_in_file(pager.file_length)
        logger.debug(f"打开表 {pager.path}：{self.num_rows} 行，每页 {self.rows_per_page} 行")

    def _rows_in_file(self, file_length: int) -> int:
        # 每个完整页末尾有不足一行的空隙，按页计算；最后不完整的一行不可见
        page_size = self.pager.page_size
        full_pages, remainder = divmod(file_length, page_size)
        return full_pages * self.rows_per_page + min(remainder // self.row_size, self.rows_per_page)

    @classmethod
    def open(cls, path: str, page_size: int = PAGE_SIZE, max_pages: int = TABLE_MAX_PAGES) -> 'Table':
        pager = Pager.open(path, page_size=page_size, max_pages=max_pages, row_size=ROW_SIZE)
        return cls(pager)

    @property
    def closed(self) -> bool:
        return self.pager.closed

    def row_slot(self, row_num: int) -> RowSlot:
        """唯一的地址转换函数，insert 和 select 都经过这里"""
        page_num = row_num // self.rows_per_page
        page = self.pager.get_page(page_num)
        row_offset = row_num % self.rows_per_page
        byte_offset = row_offset * self.row_size
        return RowSlot(page_num, byte_offset, page)

    def close(self) -> None:
        """
        写回所有页并关闭文件：
        1. 完整页按 page_size 写回
        2. 最后一个不完整页只写回实际存有数据的字节
        3. 关闭文件，再释放剩余的页（例如越界读取时加载的页）
        """
        if self.closed:
            return
        pager = self.pager
        full_page_num = self.num_rows // self.rows_per_page
        for page_num in range(full_page_num):
            if not pager.is_loaded(page_num):
                continue
            pager.flush(page_num, pager.page_size)
            pager.release(page_num)

        # 文件末尾可能还有一个部分填充的页
        num_rows_left = self.num_rows % self.rows_per_page
        if num_rows_left > 0:
            page_num = full_page_num
            if pager.is_loaded(page_num):
                pager.flush(page_num, num_rows_left * self.row_size)
                pager.release(page_num)

        pager.close()
        for page_num in pager.loaded_pages():
            pager.release(page_num)
        logger.debug(f"关闭表 {pager.path}：{self.num_rows} 行")


def db_open(path: str, page_size: int = PAGE_SIZE, max_pages: int = TABLE_MAX_PAGES) -> Table:
    """打开数据库文件并根据文件长度恢复行数"""
    return Table.open(path, page_size=page_size, max_pages=max_pages)


def db_close(table: Table) -> None:
    table.close()
