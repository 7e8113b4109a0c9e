"""NBT协议常量.

该模块定义了NBT协议中使用的类型ID.
"""

# NBT数据类型
TAG_END = 0x00
TAG_BYTE = 0x01
TAG_SHORT = 0x02
TAG_INT = 0x03
TAG_LONG = 0x04
TAG_FLOAT = 0x05
TAG_DOUBLE = 0x06
TAG_BYTE_ARRAY = 0x07
TAG_STRING = 0x08
TAG_LIST = 0x09
TAG_COMPOUND = 0x0A
TAG_INT_ARRAY = 0x0B
TAG_LONG_ARRAY = 0x0C

# 压缩格式首字节
GZIP_MAGIC = 0x1F
ZLIB_MAGIC = 0x78

# 默认最大嵌套深度
MAX_DEPTH = 512

# List 声明长度上限
MAX_CONTAINER_SIZE = 10_000_000  # 1000万元素
