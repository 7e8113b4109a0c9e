"""NBT反序列化的配置选项.

该模块定义了用于控制 `read_file` 和 `loads` 函数行为的选项标志.
"""

from enum import IntFlag


class NbtOption(IntFlag):
    """NBT 配置选项标志.

    可以使用位运算组合多个选项:
        option = NbtOption.LITTLE_ENDIAN | NbtOption.STRICT
    """

    # 默认行为: Java 版字节序(大端模式), 宽松的 EOF 终止
    NONE = 0x0000

    # 小端字节序(基岩版/Pocket Edition)
    LITTLE_ENDIAN = 0x0001

    # Compound 在 EOF 处缺少 End 标记时报错, 而不是隐式结束
    STRICT = 0x0002
