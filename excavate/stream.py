"""NBT字节流读取模块.

该模块提供 `DataReader`, 在任意二进制文件对象 (可能是解压适配器) 之上
按 NBT 线上格式读取定长字段.
"""

import struct
import zlib
from typing import IO, cast

from .exceptions import NbtIOError, NbtPartialDataError
from .options import NbtOption

# 预编译的结构体打包器,用于性能优化
_STRUCT_b = struct.Struct(">b")
_STRUCT_h = struct.Struct(">h")
_STRUCT_H = struct.Struct(">H")
_STRUCT_i = struct.Struct(">i")
_STRUCT_q = struct.Struct(">q")
_STRUCT_f = struct.Struct(">f")
_STRUCT_d = struct.Struct(">d")

_STRUCT_h_LE = struct.Struct("<h")
_STRUCT_H_LE = struct.Struct("<H")
_STRUCT_i_LE = struct.Struct("<i")
_STRUCT_q_LE = struct.Struct("<q")
_STRUCT_f_LE = struct.Struct("<f")
_STRUCT_d_LE = struct.Struct("<d")

# 单次读取上限, 避免伪造的长度头导致一次性分配巨大缓冲区
_CHUNK_SIZE = 1024 * 1024


class DataReader:
    """NBT二进制数据的顺序读取器.

    包装一个二进制文件对象, 记录已消耗的字节数, 并把底层的
    I/O 和解压错误统一转换为 `NbtIOError`.
    """

    __slots__ = ("_fp", "_little_endian", "_pos")

    _fp: IO[bytes]
    _pos: int
    _little_endian: bool

    def __init__(self, fp: IO[bytes], option: int = 0):
        """初始化DataReader.

        Args:
            fp: 要读取的二进制文件对象.
            option: 选项位掩码.
        """
        self._fp = fp
        self._pos = 0
        self._little_endian = bool(option & NbtOption.LITTLE_ENDIAN)

    @property
    def pos(self) -> int:
        """已读取的字节数."""
        return self._pos

    def _read(self, length: int) -> bytes:
        """读取至多 length 个字节, 数据不足时返回较短的结果."""
        chunks = []
        remaining = length
        try:
            while remaining > 0:
                chunk = self._fp.read(min(remaining, _CHUNK_SIZE))
                if not chunk:
                    break
                chunks.append(chunk)
                remaining -= len(chunk)
        except (OSError, EOFError, zlib.error) as e:
            raise NbtIOError(f"Failed to read from stream: {e}", pos=self._pos) from e

        data = b"".join(chunks)
        self._pos += len(data)
        return data

    def read_bytes(self, length: int) -> bytes:
        """读取字节序列.

        Args:
            length: 要读取的字节数.

        Returns:
            包含数据的bytes.

        Raises:
            NbtPartialDataError: 如果没有足够的数据可用.
        """
        data = self._read(length)
        if len(data) != length:
            raise NbtPartialDataError(
                f"Not enough data to read bytes: expected {length}, got {len(data)}",
                pos=self._pos,
            )
        return data

    def read_available(self, length: int) -> bytes:
        """读取至多 length 个字节, 不因数据不足而报错."""
        return self._read(length)

    def try_read_u8(self) -> int | None:
        """读取无符号8位整数, 在流末尾返回 None."""
        data = self._read(1)
        return data[0] if data else None

    def read_u8(self) -> int:
        """读取无符号8位整数."""
        val = self.try_read_u8()
        if val is None:
            raise NbtPartialDataError("Not enough data to read u8", pos=self._pos)
        return val

    def read_i8(self) -> int:
        """读取有符号8位整数."""
        return cast(int, _STRUCT_b.unpack(self.read_bytes(1))[0])

    def read_i16(self) -> int:
        """读取有符号16位整数."""
        s = _STRUCT_h_LE if self._little_endian else _STRUCT_h
        return cast(int, s.unpack(self.read_bytes(2))[0])

    def read_u16(self) -> int:
        """读取无符号16位整数 (仅用于字符串长度)."""
        s = _STRUCT_H_LE if self._little_endian else _STRUCT_H
        return cast(int, s.unpack(self.read_bytes(2))[0])

    def read_i32(self) -> int:
        """读取有符号32位整数."""
        s = _STRUCT_i_LE if self._little_endian else _STRUCT_i
        return cast(int, s.unpack(self.read_bytes(4))[0])

    def read_i64(self) -> int:
        """读取有符号64位整数."""
        s = _STRUCT_q_LE if self._little_endian else _STRUCT_q
        return cast(int, s.unpack(self.read_bytes(8))[0])

    def read_f32(self) -> float:
        """读取4字节浮点数."""
        s = _STRUCT_f_LE if self._little_endian else _STRUCT_f
        return cast(float, s.unpack(self.read_bytes(4))[0])

    def read_f64(self) -> float:
        """读取8字节双精度浮点数."""
        s = _STRUCT_d_LE if self._little_endian else _STRUCT_d
        return cast(float, s.unpack(self.read_bytes(8))[0])

    def unpack_array(self, fmt: str, data: bytes) -> tuple[int, ...]:
        """按当前字节序将定宽元素块解包为整数元组.

        Args:
            fmt: 单个元素的 struct 格式字符 ('b', 'i', 'q').
            data: 长度为元素宽度整数倍的字节块.
        """
        width = struct.calcsize(f"<{fmt}")
        endian = "<" if self._little_endian else ">"
        return struct.unpack(f"{endian}{len(data) // width}{fmt}", data)
