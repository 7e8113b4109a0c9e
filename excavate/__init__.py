"""NBT (Named Binary Tag) 解码库.

提供压缩格式检测、标签流解码 (read_file / loads) 和不可变的标签数据模型.
"""

from .api import load, loads, read_file
from .compression import Compression, detect_compression, open_decompressed
from .config import DecodeConfig
from .decoder import TagDecoder, read_compound, read_tag
from .exceptions import (
    InvalidCompressionFormat,
    InvalidHeaderLength,
    InvalidTagType,
    NbtDecodeError,
    NbtError,
    NbtIOError,
    NbtPartialDataError,
    NbtUnicodeError,
    UnexpectedElement,
)
from .options import NbtOption
from .stream import DataReader
from .types import (
    TAG_TYPES,
    Byte,
    ByteArray,
    Compound,
    Double,
    End,
    Float,
    Int,
    IntArray,
    List,
    Long,
    LongArray,
    NBTFile,
    Short,
    String,
    Tag,
    tag_class,
)

__version__ = "0.1.0"

__all__ = [
    "TAG_TYPES",
    "Byte",
    "ByteArray",
    "Compound",
    "Compression",
    "DataReader",
    "DecodeConfig",
    "Double",
    "End",
    "Float",
    "Int",
    "IntArray",
    "InvalidCompressionFormat",
    "InvalidHeaderLength",
    "InvalidTagType",
    "List",
    "Long",
    "LongArray",
    "NBTFile",
    "NbtDecodeError",
    "NbtError",
    "NbtIOError",
    "NbtOption",
    "NbtPartialDataError",
    "NbtUnicodeError",
    "Short",
    "String",
    "Tag",
    "TagDecoder",
    "UnexpectedElement",
    "__version__",
    "detect_compression",
    "load",
    "loads",
    "open_decompressed",
    "read_compound",
    "read_file",
    "read_tag",
    "tag_class",
]
