"""提供 NBT 测试的公共 Fixtures 和字节构造工具."""

import gzip
import struct
import zlib
from collections.abc import Iterable

import pytest


class NbtBuilder:
    """按 NBT 线上格式 (大端) 拼接测试数据."""

    @staticmethod
    def string(value: str) -> bytes:
        data = value.encode("utf-8")
        return struct.pack(">H", len(data)) + data

    @staticmethod
    def named(type_id: int, name: str, payload: bytes) -> bytes:
        return bytes([type_id]) + NbtBuilder.string(name) + payload

    @staticmethod
    def compound(*entries: bytes) -> bytes:
        return b"".join(entries) + b"\x00"

    @staticmethod
    def root(name: str, *entries: bytes) -> bytes:
        return NbtBuilder.named(0x0A, name, NbtBuilder.compound(*entries))

    @staticmethod
    def list_of(type_id: int, payloads: Iterable[bytes], count: int | None = None) -> bytes:
        items = list(payloads)
        length = len(items) if count is None else count
        return bytes([type_id]) + struct.pack(">i", length) + b"".join(items)

    @staticmethod
    def array(fmt: str, values: Iterable[int], count: int | None = None) -> bytes:
        items = list(values)
        length = len(items) if count is None else count
        return struct.pack(">i", length) + struct.pack(f">{len(items)}{fmt}", *items)

    @staticmethod
    def pack(fmt: str, value: int | float) -> bytes:
        return struct.pack(f">{fmt}", value)


@pytest.fixture
def nbt() -> type[NbtBuilder]:
    """提供 NBT 字节构造工具.

    Returns:
        NbtBuilder 类 (全部为静态方法).
    """
    return NbtBuilder


@pytest.fixture
def hello_world() -> bytes:
    """经典的 hello_world.nbt 内容 (未压缩).

    根 Compound 名为 "hello world", 包含 String "name" -> "Bananrama".
    """
    return bytes.fromhex("0a000b") + b"hello world" + (
        bytes.fromhex("080004") + b"name" + bytes.fromhex("0009") + b"Bananrama" + b"\x00"
    )


@pytest.fixture
def bigtest() -> bytes:
    """覆盖全部标签类型的复杂结构 (未压缩)."""
    b = NbtBuilder
    nested = b.named(
        0x0A,
        "nested compound test",
        b.compound(
            b.named(
                0x0A,
                "egg",
                b.compound(
                    b.named(0x08, "name", b.string("Eggbert")),
                    b.named(0x05, "value", b.pack("f", 0.5)),
                ),
            ),
            b.named(
                0x0A,
                "ham",
                b.compound(
                    b.named(0x08, "name", b.string("Hampus")),
                    b.named(0x05, "value", b.pack("f", 0.75)),
                ),
            ),
        ),
    )
    compounds = b.named(
        0x09,
        "listTest (compound)",
        b.list_of(
            0x0A,
            [
                b.compound(
                    b.named(0x08, "name", b.string(f"Compound tag #{i}")),
                    b.named(0x04, "created-on", b.pack("q", 1264099775885)),
                )
                for i in range(2)
            ],
        ),
    )
    return b.root(
        "Level",
        b.named(0x04, "longTest", b.pack("q", 9223372036854775807)),
        b.named(0x02, "shortTest", b.pack("h", 32767)),
        b.named(0x08, "stringTest", b.string("HELLO WORLD THIS IS A TEST STRING ÅÄÖ!")),
        b.named(0x05, "floatTest", b.pack("f", 0.4982314705848694)),
        b.named(0x03, "intTest", b.pack("i", 2147483647)),
        nested,
        b.named(0x09, "listTest (long)", b.list_of(0x04, [b.pack("q", v) for v in range(11, 16)])),
        compounds,
        b.named(0x01, "byteTest", b.pack("b", 127)),
        b.named(0x07, "byteArrayTest", b.array("b", [(n * n * 255 + n * 7) % 100 for n in range(1000)])),
        b.named(0x06, "doubleTest", b.pack("d", 0.4931287132182315)),
        b.named(0x0B, "intArrayTest", b.array("i", [-1, 0, 1, 2147483647])),
        b.named(0x0C, "longArrayTest", b.array("q", [-(2**63), 2**63 - 1])),
    )


@pytest.fixture
def gzip_compress():
    """提供 gzip 压缩函数."""
    return gzip.compress


@pytest.fixture
def zlib_compress():
    """提供 zlib 压缩函数."""
    return zlib.compress
