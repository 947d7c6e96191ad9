# -*- coding: utf-8 -*-
"""
行记录与定长二进制编解码。

行布局（字段均为定长，无长度前缀）：

    字段        大小    偏移
    sl_no       4       0
    year        4       4
    company     32      8
    model       128     40
    power       4       168
    合计        172

数值字段使用本机字节序（struct 的 '=' 前缀），因此文件不能跨字节序主机移植。
"""

import struct
from dataclasses import dataclass
from typing import Dict, List, Tuple, Union

COLUMN_COMPANY_SIZE = 32   # company 字段字节数
COLUMN_MODEL_SIZE = 128    # model 字段字节数

# (字段名, struct 格式)，顺序即磁盘上的顺序
ROW_COLUMNS: List[Tuple[str, str]] = [
    ('sl_no', 'I'),
    ('year', 'I'),
    ('company', f'{COLUMN_COMPANY_SIZE}s'),
    ('model', f'{COLUMN_MODEL_SIZE}s'),
    ('power', 'f'),
]


def _column_layout(columns: List[Tuple[str, str]]) -> Dict[str, Tuple[int, int]]:
    """字段名 -> (偏移, 大小)，偏移为前面所有字段宽度之和"""
    layout = {}
    offset = 0
    for name, fmt in columns:
        size = struct.calcsize('=' + fmt)
        layout[name] = (offset, size)
        offset += size
    return layout


COLUMN_LAYOUT = _column_layout(ROW_COLUMNS)

SL_NO_OFFSET, SL_NO_SIZE = COLUMN_LAYOUT['sl_no']
YEAR_OFFSET, YEAR_SIZE = COLUMN_LAYOUT['year']
COMPANY_OFFSET, COMPANY_SIZE = COLUMN_LAYOUT['company']
MODEL_OFFSET, MODEL_SIZE = COLUMN_LAYOUT['model']
POWER_OFFSET, POWER_SIZE = COLUMN_LAYOUT['power']
ROW_SIZE = SL_NO_SIZE + YEAR_SIZE + COMPANY_SIZE + MODEL_SIZE + POWER_SIZE


@dataclass
class Row:
    """一条记录。power 以 32 位浮点存储。"""
    sl_no: int
    year: int
    company: str
    model: str
    power: float


def _decode_text(raw: bytes) -> str:
    # 文本以第一个 NUL 或字段宽度为界，之后的字节忽略
    return raw.split(b'\x00', 1)[0].decode('utf-8', errors='replace')


class RowSerializer:
    """
    按固定偏移把 Row 拷进/拷出字节缓冲区。
    只做定长原样拷贝：文本长度是否合规由调用方（语句准备阶段）保证，
    超出字段宽度的部分会被截掉。
    """
    def __init__(self):
        self.format_string = '=' + ''.join(fmt for _, fmt in ROW_COLUMNS)
        self._struct = struct.Struct(self.format_string)
        self.record_size = self._struct.size

    def serialize(self, row: Row, destination: Union[bytearray, memoryview], offset: int = 0) -> None:
        """把 row 写入 destination[offset:offset + record_size]"""
        self._struct.pack_into(
            destination, offset,
            row.sl_no,
            row.year,
            row.company.encode('utf-8'),
            row.model.encode('utf-8'),
            row.power,
        )

    def deserialize(self, source: Union[bytes, bytearray, memoryview], offset: int = 0) -> Row:
        """从 source[offset:] 读出一条 Row"""
        sl_no, year, company, model, power = self._struct.unpack_from(source, offset)
        return Row(sl_no, year, _decode_text(company), _decode_text(model), power)

    def get_record_size(self) -> int:
        return self.record_size


_default_serializer = RowSerializer()


def serialize_row(row: Row, destination: Union[bytearray, memoryview], offset: int = 0) -> None:
    _default_serializer.serialize(row, destination, offset)


def deserialize_row(source: Union[bytes, bytearray, memoryview], offset: int = 0) -> Row:
    return _default_serializer.deserialize(source, offset)
