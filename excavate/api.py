"""NBT API模块.

提供用于 NBT 反序列化的高级接口 `read_file`, `load`, `loads`.
每次调用都是字节输入到 `NBTFile` 的纯函数, 不共享任何进程级状态.
"""

import io
from typing import IO

from .compression import detect_compression, open_decompressed
from .config import DecodeConfig
from .decoder import TagDecoder
from .exceptions import NbtIOError
from .log import logger
from .options import NbtOption
from .types import NBTFile


def _ensure_peekable(fp: IO[bytes]) -> IO[bytes]:
    """确保数据流支持 `peek()`, 否则读入内存后包装."""
    if hasattr(fp, "peek"):
        return fp
    try:
        data = fp.read()
    except OSError as e:
        raise NbtIOError(f"Failed to read from stream: {e}") from e
    return io.BufferedReader(io.BytesIO(data))  # type: ignore[arg-type]


def read_file(
    fp: IO[bytes],
    option: NbtOption = NbtOption.NONE,
    *,
    max_depth: int | None = None,
) -> NBTFile:
    """从二进制流解码一个完整的 NBT 文件.

    先 peek 首字节确定压缩格式, 再在 (可能解压后的) 数据流上读取根 Compound.

    Args:
        fp: 打开的二进制文件对象. 最好支持 `peek()` (如 `open(path, "rb")`),
            否则会先整体读入内存.
        option: 解码选项 (如 `NbtOption.LITTLE_ENDIAN`, `NbtOption.STRICT`).
        max_depth: 最大嵌套深度, None 表示默认值 512.

    Returns:
        NBTFile: 压缩格式, 根名称和根 Compound.

    Raises:
        InvalidCompressionFormat: 首字节无法识别.
        NbtDecodeError: 数据格式错误.
        NbtIOError: 读取或解压失败.

    Examples:
        >>> with open("level.dat", "rb") as f:
        ...     nbt = read_file(f)
        >>> nbt.root["Data"]["LevelName"].value
        'World'
    """
    config = DecodeConfig.from_params(option=option, max_depth=max_depth)
    stream = _ensure_peekable(fp)
    compression = detect_compression(stream)

    payload = open_decompressed(stream, compression)
    try:
        name, root = TagDecoder.from_stream(payload, config).read_root()
    finally:
        if payload is not stream:
            payload.close()

    logger.debug("[read_file] 解码完成, 压缩格式: %s", compression)
    return NBTFile(compression=compression, root=root, name=name)


load = read_file


def loads(
    data: bytes | bytearray | memoryview,
    option: NbtOption = NbtOption.NONE,
    *,
    max_depth: int | None = None,
) -> NBTFile:
    """从内存中的字节解码一个完整的 NBT 文件.

    Args:
        data: 输入的二进制数据 (bytes, bytearray 或 memoryview).
        option: 解码选项.
        max_depth: 最大嵌套深度.

    Returns:
        NBTFile: 解码结果.
    """
    logger.debug("[loads] 输入 %d 字节", len(data))
    stream = io.BufferedReader(io.BytesIO(data))  # type: ignore[arg-type]
    return read_file(stream, option, max_depth=max_depth)
