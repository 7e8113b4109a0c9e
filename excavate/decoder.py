"""NBT解码器实现.

该模块提供递归下降的 `TagDecoder`, 单次前向读取字节流并构造不可变的标签树.

语法:
    Entry    := TypeId(1) [TypeId != 0x00 -> Name(String) Payload(TypeId)]
    Compound := Entry* End
    List     := TypeId(1) Count(i32) Element(TypeId){Count}
    String   := Length(u16) UTF8Bytes(Length)
    Array    := Count(i32) Element(FixedWidth){Count}
"""

import contextlib
from collections.abc import Callable, Iterator
from typing import IO

from .config import DecodeConfig
from .const import (
    MAX_CONTAINER_SIZE,
    TAG_BYTE,
    TAG_BYTE_ARRAY,
    TAG_COMPOUND,
    TAG_DOUBLE,
    TAG_END,
    TAG_FLOAT,
    TAG_INT,
    TAG_INT_ARRAY,
    TAG_LIST,
    TAG_LONG,
    TAG_LONG_ARRAY,
    TAG_SHORT,
    TAG_STRING,
)
from .exceptions import (
    InvalidHeaderLength,
    InvalidTagType,
    NbtDecodeError,
    NbtPartialDataError,
    NbtUnicodeError,
    UnexpectedElement,
)
from .log import logger
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
    Short,
    String,
    Tag,
)


class TagDecoder:
    """NBT标签流的递归下降解码器.

    每个 `read_<type>` 方法恰好消耗该类型在线上格式中的字节.
    任何错误都会立即向上传播, 不会返回部分结果.
    """

    __slots__ = ("_config", "_depth", "_dispatch", "_reader")

    _reader: DataReader
    _config: DecodeConfig
    _depth: int
    _dispatch: dict[int, Callable[[], Tag]]

    def __init__(self, reader: DataReader, config: DecodeConfig | None = None):
        self._reader = reader
        self._config = config if config is not None else DecodeConfig()
        self._depth = 0
        self._dispatch = {
            TAG_END: End,
            TAG_BYTE: self.read_byte,
            TAG_SHORT: self.read_short,
            TAG_INT: self.read_int,
            TAG_LONG: self.read_long,
            TAG_FLOAT: self.read_float,
            TAG_DOUBLE: self.read_double,
            TAG_BYTE_ARRAY: self.read_byte_array,
            TAG_STRING: self.read_string,
            TAG_LIST: self.read_list,
            TAG_COMPOUND: self.read_compound,
            TAG_INT_ARRAY: self.read_int_array,
            TAG_LONG_ARRAY: self.read_long_array,
        }

    @classmethod
    def from_stream(
        cls, fp: IO[bytes], config: DecodeConfig | None = None
    ) -> "TagDecoder":
        """在二进制文件对象上创建解码器."""
        config = config if config is not None else DecodeConfig()
        return cls(DataReader(fp, option=config.flags), config)

    @property
    def reader(self) -> DataReader:
        """底层的 DataReader."""
        return self._reader

    def read_root(self) -> tuple[str, Compound]:
        """读取根标签: 类型 ID (必须为 Compound), 名称和 Compound 负载.

        Returns:
            tuple[str, Compound]: (根名称, 根 Compound).

        Raises:
            UnexpectedElement: 根标签不是 Compound.
        """
        logger.debug("[TagDecoder] 开始解码根标签")
        try:
            type_id = self._reader.read_u8()
            if type_id != TAG_COMPOUND:
                raise UnexpectedElement("Root", type_id)
            name = self._read_str()
            root = self.read_compound()
        except NbtDecodeError as e:
            if e.pos is None:
                e.pos = self._reader.pos
            raise
        except RecursionError as e:
            raise _recursion_error(self._reader.pos) from e

        logger.debug(
            "[TagDecoder] 成功解码根标签 %r, 共 %d 字节", name, self._reader.pos
        )
        return name, root

    def read_payload(self, type_id: int) -> Tag:
        """按类型 ID 读取一个标签负载.

        End 类型不消耗任何字节.

        Raises:
            InvalidTagType: 类型 ID 不属于 NBT 规范.
        """
        reader = self._dispatch.get(type_id)
        if reader is None:
            raise InvalidTagType(type_id)
        return reader()

    def read_compound(self) -> Compound:
        """读取 Compound 负载: 零个或多个命名条目, 以 End 结束.

        返回值的最后一项总是 `("", End())`. 最外层 Compound 在条目边界
        恰好遇到 EOF 时视为隐式 End (宽松模式), 或在 `NbtOption.STRICT` 下报错.
        嵌套的 Compound (条目负载或 List 元素) 遇到 EOF 总是报错.
        """
        entries: list[tuple[str, Tag]] = []
        with self._nested():
            while True:
                type_id = self._reader.try_read_u8()
                if type_id is None:
                    self._handle_eof()
                    break
                if type_id == TAG_END:
                    break

                name = self._read_str()
                # 直接分派, 每层嵌套只占用一个调用栈帧
                read_value = self._dispatch.get(type_id)
                try:
                    if read_value is None:
                        raise InvalidTagType(type_id)
                    tag = read_value()
                except NbtDecodeError as e:
                    self._locate(e, name)
                    raise
                entries.append((name, tag))

        entries.append(("", End()))
        return Compound(tuple(entries))

    def read_list(self) -> List:
        """读取 List 负载: 元素类型, 有符号长度, 然后是同类型的元素.

        Raises:
            UnexpectedElement: 元素类型未知.
            InvalidHeaderLength: 长度为负数.
            NbtDecodeError: 长度超过 MAX_CONTAINER_SIZE.
        """
        element_type = self._reader.read_u8()
        length = self._reader.read_i32()
        if element_type not in TAG_TYPES:
            raise UnexpectedElement("List", element_type)
        if length < 0:
            raise InvalidHeaderLength(length)
        if length > MAX_CONTAINER_SIZE:
            raise NbtDecodeError(
                f"List length {length} exceeds max limit {MAX_CONTAINER_SIZE}",
                pos=self._reader.pos,
            )

        if element_type == TAG_END:
            return List((End(),) * length, element_type=TAG_END)

        read_element = self._dispatch[element_type]
        items: list[Tag] = []
        with self._nested():
            for index in range(length):
                try:
                    items.append(read_element())
                except NbtDecodeError as e:
                    self._locate(e, index)
                    raise

        return List(tuple(items), element_type=element_type)

    def read_byte(self) -> Byte:
        return Byte(self._reader.read_i8())

    def read_short(self) -> Short:
        return Short(self._reader.read_i16())

    def read_int(self) -> Int:
        return Int(self._reader.read_i32())

    def read_long(self) -> Long:
        return Long(self._reader.read_i64())

    def read_float(self) -> Float:
        return Float(self._reader.read_f32())

    def read_double(self) -> Double:
        return Double(self._reader.read_f64())

    def read_string(self) -> String:
        """读取字符串 (无符号 16 位长度前缀)."""
        return String(self._read_str())

    def read_byte_array(self) -> ByteArray:
        return ByteArray(self._read_array("b", 1))

    def read_int_array(self) -> IntArray:
        return IntArray(self._read_array("i", 4))

    def read_long_array(self) -> LongArray:
        return LongArray(self._read_array("q", 8))

    def _read_str(self) -> str:
        # 长度是无符号的, 0xFFFF 表示 65535 字节
        length = self._reader.read_u16()
        data = self._reader.read_bytes(length)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise NbtUnicodeError(
                f"invalid UTF-8 string: {e}", pos=self._reader.pos
            ) from e

    def _read_array(self, fmt: str, width: int) -> tuple[int, ...]:
        length = self._reader.read_i32()
        if length < 0:
            raise InvalidHeaderLength(length)

        data = self._reader.read_available(length * width)
        if len(data) != length * width:
            raise InvalidHeaderLength(len(data) // width, declared=length)
        return self._reader.unpack_array(fmt, data)

    def _handle_eof(self) -> None:
        # 只有最外层 Compound 允许隐式结束
        if self._config.is_strict or self._depth > 1:
            raise NbtPartialDataError(
                "Unexpected end of stream, Compound is missing its End tag",
                pos=self._reader.pos,
            )
        logger.warning(
            "[TagDecoder] 在偏移 %d 处遇到 EOF, Compound 隐式结束", self._reader.pos
        )

    def _locate(self, error: NbtDecodeError, key: str | int) -> None:
        error.loc.insert(0, key)
        if error.pos is None:
            error.pos = self._reader.pos

    @contextlib.contextmanager
    def _nested(self) -> Iterator[None]:
        if self._depth >= self._config.max_depth:
            raise NbtDecodeError(
                f"Maximum nesting depth {self._config.max_depth} exceeded",
                pos=self._reader.pos,
            )
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1


def _recursion_error(pos: int) -> NbtDecodeError:
    # max_depth 超过解释器递归上限时, 由此转换为类型化错误
    return NbtDecodeError("Nesting exceeds the interpreter recursion limit", pos=pos)


def read_compound(
    fp: IO[bytes],
    option: NbtOption = NbtOption.NONE,
    *,
    max_depth: int | None = None,
) -> Compound:
    """从未压缩的二进制流读取一个 Compound 负载 (不含类型 ID 和名称).

    Args:
        fp: 二进制文件对象.
        option: 解码选项.
        max_depth: 最大嵌套深度.

    Returns:
        Compound: 解码结果.
    """
    config = DecodeConfig.from_params(option=option, max_depth=max_depth)
    decoder = TagDecoder.from_stream(fp, config)
    try:
        return decoder.read_compound()
    except RecursionError as e:
        raise _recursion_error(decoder.reader.pos) from e


def read_tag(
    fp: IO[bytes],
    type_id: int,
    option: NbtOption = NbtOption.NONE,
    *,
    max_depth: int | None = None,
) -> Tag:
    """从未压缩的二进制流读取一个指定类型的标签负载.

    Args:
        fp: 二进制文件对象.
        type_id: 标签类型 ID.
        option: 解码选项.
        max_depth: 最大嵌套深度.

    Returns:
        Tag: 解码结果.

    Raises:
        InvalidTagType: 类型 ID 不属于 NBT 规范.
    """
    config = DecodeConfig.from_params(option=option, max_depth=max_depth)
    decoder = TagDecoder.from_stream(fp, config)
    try:
        return decoder.read_payload(type_id)
    except RecursionError as e:
        raise _recursion_error(decoder.reader.pos) from e
