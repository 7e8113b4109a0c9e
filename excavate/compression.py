"""NBT压缩格式检测模块.

NBT 没有专门的容器头, 通过数据流的第一个字节区分压缩格式:
    - 0x1F: gzip
    - 0x78: zlib
    - 0x0A: 未压缩 (根 Compound 的类型 ID)

检测只 peek 不消耗, 因为未压缩时该字节还要作为标签流的一部分再次读取.
"""

import gzip
import io
import zlib
from enum import Enum
from typing import IO, Optional

from .const import GZIP_MAGIC, TAG_COMPOUND, ZLIB_MAGIC
from .exceptions import InvalidCompressionFormat, NbtIOError, NbtPartialDataError
from .log import logger


class Compression(Enum):
    """NBT 支持的三种压缩格式."""

    NONE = "None"
    GZIP = "Gzip"
    ZLIB = "Zlib"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_byte(cls, value: int) -> Optional["Compression"]:
        """根据首字节判断压缩格式, 无法识别时返回 None."""
        return _MAGIC_BYTES.get(value)

    @classmethod
    def from_str(cls, name: str) -> "Compression":
        """解析压缩格式名称 ("None", "Gzip", "Zlib").

        Raises:
            ValueError: 名称无效.
        """
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Invalid Compression type: {name!r}") from None


_MAGIC_BYTES = {
    TAG_COMPOUND: Compression.NONE,
    GZIP_MAGIC: Compression.GZIP,
    ZLIB_MAGIC: Compression.ZLIB,
}


class ZlibReader(io.RawIOBase):
    """基于 `zlib.decompressobj` 的增量解压读取器.

    每次只从底层流读取一个块, 解压输出受调用方缓冲区大小限制.
    """

    def __init__(self, fp: IO[bytes], chunk_size: int = io.DEFAULT_BUFFER_SIZE):
        self._fp = fp
        self._chunk_size = chunk_size
        self._decompressor = zlib.decompressobj()

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:  # type: ignore[no-untyped-def]
        with memoryview(b) as view, view.cast("B") as byte_view:
            data = self._decompress(len(byte_view))
            byte_view[: len(data)] = data
        return len(data)

    def _decompress(self, size: int) -> bytes:
        d = self._decompressor
        while True:
            if d.unconsumed_tail:
                data = d.decompress(d.unconsumed_tail, size)
            elif d.eof:
                return b""
            else:
                raw = self._fp.read(self._chunk_size)
                if not raw:
                    raise EOFError(
                        "Compressed stream ended before the end-of-stream marker was reached"
                    )
                data = d.decompress(raw, size)
            if data:
                return data


def detect_compression(stream: IO[bytes]) -> Compression:
    """peek 首字节并判断压缩格式.

    Args:
        stream: 支持 `peek()` 的二进制流 (如 `io.BufferedReader`).

    Returns:
        Compression: 检测到的压缩格式.

    Raises:
        InvalidCompressionFormat: 首字节不是 0x1F / 0x78 / 0x0A.
        NbtPartialDataError: 流为空.
        NbtIOError: 底层读取失败.
    """
    try:
        head = stream.peek(1)  # type: ignore[attr-defined]
    except OSError as e:
        raise NbtIOError(f"Failed to peek compression type: {e}") from e

    if not head:
        raise NbtPartialDataError("Failed to peek compression type: empty stream")

    compression = Compression.from_byte(head[0])
    if compression is None:
        raise InvalidCompressionFormat(head[0])

    logger.debug("[Compression] 首字节 0x%02X -> %s", head[0], compression)
    return compression


def open_decompressed(stream: IO[bytes], compression: Compression) -> IO[bytes]:
    """按压缩格式包装数据流, 之后的读取得到解压后的字节.

    Args:
        stream: 原始二进制流.
        compression: `detect_compression` 的结果.

    Returns:
        IO[bytes]: 解压适配器; 未压缩时原样返回 stream.
    """
    if compression is Compression.GZIP:
        return gzip.GzipFile(fileobj=stream, mode="rb")
    if compression is Compression.ZLIB:
        return io.BufferedReader(ZlibReader(stream))
    return stream
