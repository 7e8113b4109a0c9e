"""NBT 解码配置对象."""

from dataclasses import dataclass

from .const import MAX_DEPTH
from .options import NbtOption


@dataclass(frozen=True)
class DecodeConfig:
    """解码配置 (不可变).

    在 API 入口层创建, 然后传递给 DataReader/TagDecoder.

    Attributes:
        flags: NBT 选项标志 (IntFlag).
        max_depth: 允许的最大嵌套深度.
    """

    flags: NbtOption = NbtOption.NONE
    max_depth: int = MAX_DEPTH

    @classmethod
    def from_params(
        cls,
        option: NbtOption = NbtOption.NONE,
        max_depth: int | None = None,
    ) -> "DecodeConfig":
        """从参数构建配置对象.

        Args:
            option: NbtOption 枚举.
            max_depth: 最大嵌套深度, None 表示使用默认值.

        Returns:
            DecodeConfig: 配置对象.

        Raises:
            ValueError: max_depth 不是正数.
        """
        depth = MAX_DEPTH if max_depth is None else max_depth
        if depth < 1:
            raise ValueError(f"max_depth must be positive, got {depth}")
        return cls(flags=NbtOption(option), max_depth=depth)

    @property
    def is_little_endian(self) -> bool:
        """是否使用小端字节序."""
        return bool(self.flags & NbtOption.LITTLE_ENDIAN)

    @property
    def is_strict(self) -> bool:
        """是否要求 Compound 显式以 End 结束."""
        return bool(self.flags & NbtOption.STRICT)
