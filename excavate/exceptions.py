"""NBT特定的异常类.

该模块为 excavate 定义了异常层次结构.
所有解码错误对当前调用都是终止性的, 不会返回部分结果.
"""


class NbtError(Exception):
    """所有 NBT 异常的基类."""

    pass


class NbtDecodeError(NbtError):
    """反序列化失败时抛出.

    Case:
        - 输入数据被截断.
        - 格式错误 (如未知的类型 ID).
        - 长度头无效.
    """

    def __init__(
        self,
        msg: str,
        loc: list[str | int] | None = None,
        pos: int | None = None,
    ) -> None:
        """初始化解码错误.

        Args:
            msg: 错误描述信息.
            loc: 错误发生的位置路径 (Compound 键名 或 List 索引).
            pos: 错误发生时解压后数据流中的字节偏移.
        """
        super().__init__(msg)
        self.loc = loc or []
        self.pos = pos

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.loc:
            # 格式化为 dotted path
            loc_str = ".".join(str(x) for x in self.loc)
            return f"{base_msg} (at {loc_str})"
        return base_msg


class InvalidTagType(NbtDecodeError):
    """遇到不属于 NBT 规范的类型 ID 时抛出."""

    def __init__(self, type_id: int) -> None:
        super().__init__(f"invalid tag type: '0x{type_id:02X}'")
        self.type_id = type_id


class UnexpectedElement(InvalidTagType):
    """容器 (List / ByteArray / Root) 中出现不允许的元素类型时抛出."""

    def __init__(self, container: str, type_id: int) -> None:
        NbtDecodeError.__init__(
            self, f"invalid element in {container}: '0x{type_id:02X}'"
        )
        self.container = container
        self.type_id = type_id


class InvalidCompressionFormat(NbtDecodeError):
    """首字节无法识别为任何已知压缩格式时抛出."""

    def __init__(self, header: int) -> None:
        super().__init__(f"invalid compression format: '0x{header:02X}'")
        self.header = header


class InvalidHeaderLength(NbtDecodeError):
    """长度头为负数, 或实际读取的元素数与长度头不符时抛出.

    Attributes:
        length: 负数长度头本身, 或实际读取到的元素数.
        declared: 长度头声明的元素数 (仅在数据不足时设置).
    """

    def __init__(self, length: int, declared: int | None = None) -> None:
        if declared is None:
            msg = f"invalid header length: {length}"
        else:
            msg = f"header length mismatch, expected length of {declared}, got {length}"
        super().__init__(msg)
        self.length = length
        self.declared = declared


class NbtIOError(NbtDecodeError):
    """底层字节流读取或解压失败时抛出.

    原始异常 (OSError, EOFError, zlib.error) 通过 `__cause__` 保留.
    """

    pass


class NbtPartialDataError(NbtIOError):
    """输入数据不完整时抛出.

    表示定长字段 (基本类型, 长度头, 字符串内容) 读取时数据流提前结束.
    """

    pass


class NbtUnicodeError(NbtDecodeError, ValueError):
    """字符串内容不是有效的 UTF-8 时抛出."""

    pass
