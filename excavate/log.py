"""NBT日志记录器.

库本身只创建 `excavate` logger, 不添加任何 Handler, 由应用决定输出方式.
"""

import logging

logger = logging.getLogger("excavate")

# 十六进制转储每行的字节数
HEXDUMP_ROW = 16


def get_hexdump(
    data: bytes | bytearray | memoryview, pos: int, window: int = 16
) -> str:
    """获取出错位置前后数据的十六进制转储.

    每行以 8 位十六进制偏移开头, 出错位置的字节用方括号标出.
    pos 超出数据末尾时 (常见于截断的输入), 显示末尾附近的数据.

    Args:
        data: 解压后的完整数据.
        pos: 出错时的字节偏移 (`NbtDecodeError.pos`).
        window: 出错位置前后各显示的字节数.

    Returns:
        多行文本, 第一行为位置说明.
    """
    start = max(0, min(pos, len(data)) - window)
    end = min(len(data), pos + window)

    lines = [f"位置 {pos} 的上下文 (显示 {start}-{end}):"]
    for row in range(start, end, HEXDUMP_ROW):
        cells = []
        for offset in range(row, min(row + HEXDUMP_ROW, end)):
            cell = f"{data[offset]:02x}"
            cells.append(f"[{cell}]" if offset == pos else cell)
        lines.append(f"{row:08x}  {' '.join(cells)}")
    return "\n".join(lines)
