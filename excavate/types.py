"""NBT数据类型模块.

本模块定义了NBT协议支持的全部13种标签类型. 每个类型都是不可变的
dataclass, 相等性按结构比较 (类型相同且负载递归相等).

`type_id` 和 `type_name` 是类属性, 与 `TAG_TYPES` 映射保持同步.
"""

import abc
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from .const import (
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
from .exceptions import InvalidTagType, UnexpectedElement

if TYPE_CHECKING:
    from .compression import Compression


@dataclass(frozen=True)
class Tag(abc.ABC):
    """NBT 标签的基类.

    所有具体的标签类型 (如 `Int`, `String`, `Compound` 等) 都继承自此类.
    """

    type_id: ClassVar[int]
    type_name: ClassVar[str]

    @abc.abstractmethod
    def unpack(self) -> Any:
        """转换为普通 Python 值.

        Returns:
            Any: Compound -> dict, List/数组 -> list, End -> None, 其他为原始值.
        """
        raise NotImplementedError


@dataclass(frozen=True)
class End(Tag):
    """Compound 的结束标记, 也用作 "End 类型列表" 的占位元素."""

    type_id: ClassVar[int] = TAG_END
    type_name: ClassVar[str] = "End"

    def unpack(self) -> None:
        return None


@dataclass(frozen=True)
class _Scalar(Tag):
    value: Any

    def unpack(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Byte(_Scalar):
    """有符号 8 位整数."""

    value: int
    type_id: ClassVar[int] = TAG_BYTE
    type_name: ClassVar[str] = "Byte"


@dataclass(frozen=True)
class Short(_Scalar):
    """有符号 16 位整数."""

    value: int
    type_id: ClassVar[int] = TAG_SHORT
    type_name: ClassVar[str] = "Short"


@dataclass(frozen=True)
class Int(_Scalar):
    """有符号 32 位整数."""

    value: int
    type_id: ClassVar[int] = TAG_INT
    type_name: ClassVar[str] = "Int"


@dataclass(frozen=True)
class Long(_Scalar):
    """有符号 64 位整数."""

    value: int
    type_id: ClassVar[int] = TAG_LONG
    type_name: ClassVar[str] = "Long"


@dataclass(frozen=True)
class Float(_Scalar):
    """IEEE-754 单精度浮点数."""

    value: float
    type_id: ClassVar[int] = TAG_FLOAT
    type_name: ClassVar[str] = "Float"


@dataclass(frozen=True)
class Double(_Scalar):
    """IEEE-754 双精度浮点数."""

    value: float
    type_id: ClassVar[int] = TAG_DOUBLE
    type_name: ClassVar[str] = "Double"


@dataclass(frozen=True)
class String(_Scalar):
    """UTF-8 字符串, 线上格式以 **无符号** 16 位整数作为长度前缀."""

    value: str
    type_id: ClassVar[int] = TAG_STRING
    type_name: ClassVar[str] = "String"


@dataclass(frozen=True)
class _Array(Tag):
    value: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.value, tuple):
            object.__setattr__(self, "value", tuple(self.value))

    def __len__(self) -> int:
        return len(self.value)

    def __iter__(self) -> Iterator[int]:
        return iter(self.value)

    def __getitem__(self, index: int) -> int:
        return self.value[index]

    def unpack(self) -> list[int]:
        return list(self.value)


@dataclass(frozen=True)
class ByteArray(_Array):
    """有符号字节数组, 以有符号 32 位整数作为长度前缀."""

    type_id: ClassVar[int] = TAG_BYTE_ARRAY
    type_name: ClassVar[str] = "ByteArray"


@dataclass(frozen=True)
class IntArray(_Array):
    """有符号 32 位整数数组."""

    type_id: ClassVar[int] = TAG_INT_ARRAY
    type_name: ClassVar[str] = "IntArray"


@dataclass(frozen=True)
class LongArray(_Array):
    """有符号 64 位整数数组."""

    type_id: ClassVar[int] = TAG_LONG_ARRAY
    type_name: ClassVar[str] = "LongArray"


@dataclass(frozen=True)
class List(Tag):
    """无名标签的同构列表.

    线上格式: 1 字节元素类型 + 有符号 32 位元素数 + 元素负载.
    `element_type` 保存声明的元素类型, 因此空列表也不会丢失类型信息.
    手动构造时若未指定 `element_type`, 则取第一个元素的类型 (空列表为 End).

    Raises:
        UnexpectedElement: 元素类型未知, 或与声明的类型不一致.
    """

    value: tuple[Tag, ...] = ()
    element_type: int | None = None
    type_id: ClassVar[int] = TAG_LIST
    type_name: ClassVar[str] = "List"

    def __post_init__(self) -> None:
        if not isinstance(self.value, tuple):
            object.__setattr__(self, "value", tuple(self.value))
        if self.element_type is None:
            first = self.value[0].type_id if self.value else TAG_END
            object.__setattr__(self, "element_type", first)
        if self.element_type not in TAG_TYPES:
            raise UnexpectedElement("List", self.element_type)
        for item in self.value:
            if item.type_id != self.element_type:
                raise UnexpectedElement("List", item.type_id)

    def __len__(self) -> int:
        return len(self.value)

    def __iter__(self) -> Iterator[Tag]:
        return iter(self.value)

    def __getitem__(self, index: int) -> Tag:
        return self.value[index]

    def unpack(self) -> list[Any]:
        return [item.unpack() for item in self.value]


@dataclass(frozen=True)
class Compound(Tag):
    """命名标签的有序集合.

    `value` 保存线上出现的全部 (名称, 标签) 对, 最后一项总是 `("", End())`.
    手动构造时如缺少结束标记会自动补上.
    """

    value: tuple[tuple[str, Tag], ...] = ()
    type_id: ClassVar[int] = TAG_COMPOUND
    type_name: ClassVar[str] = "Compound"

    def __post_init__(self) -> None:
        entries = tuple((name, tag) for name, tag in self.value)
        if not entries or entries[-1][1] != End():
            entries += (("", End()),)
        object.__setattr__(self, "value", entries)

    def items(self) -> Iterator[tuple[str, Tag]]:
        """遍历除结束标记外的 (名称, 标签) 对."""
        for name, tag in self.value:
            if tag.type_id != TAG_END:
                yield name, tag

    def names(self) -> list[str]:
        """返回所有子标签名称 (按出现顺序)."""
        return [name for name, _ in self.items()]

    def get(self, name: str, default: Tag | None = None) -> Tag | None:
        """按名称查找子标签, 重名时返回第一个."""
        for key, tag in self.items():
            if key == name:
                return tag
        return default

    def __getitem__(self, name: str) -> Tag:
        tag = self.get(name)
        if tag is None:
            raise KeyError(name)
        return tag

    def __contains__(self, name: object) -> bool:
        return any(key == name for key, _ in self.items())

    def unpack(self) -> dict[str, Any]:
        return {name: tag.unpack() for name, tag in self.items()}


TAG_TYPES: dict[int, type[Tag]] = {
    cls.type_id: cls
    for cls in (
        End,
        Byte,
        Short,
        Int,
        Long,
        Float,
        Double,
        ByteArray,
        String,
        List,
        Compound,
        IntArray,
        LongArray,
    )
}


def tag_class(type_id: int) -> type[Tag]:
    """根据类型 ID 获取标签类.

    Raises:
        InvalidTagType: 类型 ID 不属于 NBT 规范.
    """
    try:
        return TAG_TYPES[type_id]
    except KeyError:
        raise InvalidTagType(type_id) from None


@dataclass(frozen=True)
class NBTFile:
    """一次完整解码的结果.

    Attributes:
        compression: 检测到的压缩格式.
        root: 根 Compound.
        name: 根标签的名称 (通常为空字符串).
    """

    compression: "Compression"
    root: Compound
    name: str = ""
