"""NBT命令行工具."""

import io
import json
import sys
import zlib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from . import NbtOption, loads
from .compression import detect_compression, open_decompressed
from .exceptions import NbtDecodeError, NbtError
from .log import get_hexdump
from .types import (
    TAG_TYPES,
    ByteArray,
    Compound,
    IntArray,
    List,
    LongArray,
    NBTFile,
    String,
    Tag,
)

if TYPE_CHECKING:
    import click as click_module
    from rich.console import Console
    from rich.syntax import Syntax
    from rich.text import Text
    from rich.tree import Tree
else:
    try:
        import click as click_module
        from rich.console import Console
        from rich.syntax import Syntax
        from rich.text import Text
        from rich.tree import Tree
    except ImportError:
        click_module = None
        Console = None
        Syntax = None
        Text = None
        Tree = None

click = click_module

# 流式读取配置
FILE_SIZE_THRESHOLD = 10 * 1024 * 1024  # 10MB
CHUNK_SIZE = 8 * 1024 * 1024  # 8MB

# ByteArray 每行显示的字节数
BYTES_PER_ROW = 16


if not click:

    def main() -> None:
        """入口函数 (缺少 click)."""
        print("错误: 未检测到 'click' 模块,无法运行 CLI 工具。", file=sys.stderr)
        print(
            "\n该功能属于可选组件,请通过以下命令安装依赖:\n"
            "  pip install 'excavate-nbt[cli]'",
            file=sys.stderr,
        )
        sys.exit(1)

else:

    def _read_binary_file(file_path: Path, verbose: bool) -> bytes:
        """读取二进制文件,大文件使用分块以控制内存.

        Args:
            file_path: 文件路径.
            verbose: 是否显示详细信息.

        Returns:
            文件内容的bytes.
        """
        file_size = file_path.stat().st_size

        if file_size > FILE_SIZE_THRESHOLD:
            if verbose:
                click.echo(f"[DEBUG] 文件大小 {file_size} 字节,使用分块读取", err=True)

            chunks = []
            with open(file_path, "rb") as f:
                while chunk := f.read(CHUNK_SIZE):
                    chunks.append(chunk)
            return b"".join(chunks)
        return file_path.read_bytes()

    def _decompressed(data: bytes) -> bytes:
        """尽力获取解压后的数据, 用于错误时的十六进制转储."""
        stream = io.BufferedReader(io.BytesIO(data))  # type: ignore[arg-type]
        try:
            return open_decompressed(stream, detect_compression(stream)).read()
        except (NbtError, OSError, EOFError, zlib.error):
            return data

    def _tag_label(name: str | None, tag: Tag) -> "Text":
        """构建单个标签的显示文本.

        Args:
            name: 标签名称 (List 元素为 None).
            tag: 标签.
        """
        # 样式定义
        style_name = "bold blue"
        style_type = "cyan"
        style_value_str = "green"
        style_value_num = "magenta"

        label = Text()
        if name is not None:
            label.append(f"'{name}' ", style=style_name)

        if isinstance(tag, Compound):
            label.append(f"Compound : {len(tag.names())} entries", style=style_type)
        elif isinstance(tag, List):
            element_name = TAG_TYPES[tag.element_type or 0].type_name
            label.append(f"List<{element_name}> : {len(tag)} entries", style=style_type)
        elif isinstance(tag, ByteArray | IntArray | LongArray):
            label.append(f"{tag.type_name} : {len(tag)} entries", style=style_type)
        elif isinstance(tag, String):
            label.append(f"{tag.type_name}: ", style=style_type)
            label.append(repr(tag.value), style=style_value_str)
        else:
            label.append(f"{tag.type_name}: ", style=style_type)
            label.append(str(tag.unpack()), style=style_value_num)
        return label

    def _build_rich_tree(name: str | None, tag: Tag, tree: "Tree") -> None:
        """递归构建 Rich 树.

        Args:
            name: 标签名称 (List 元素为 None).
            tag: 当前标签.
            tree: 父级 Tree 对象.
        """
        branch = tree.add(_tag_label(name, tag))

        if isinstance(tag, Compound):
            for child_name, child in tag.items():
                _build_rich_tree(child_name, child, branch)
        elif isinstance(tag, List):
            for i, child in enumerate(tag):
                idx_branch = branch.add(Text(f"[{i}]", style="dim"))
                _build_rich_tree(None, child, idx_branch)
        elif isinstance(tag, ByteArray):
            for start in range(0, len(tag), BYTES_PER_ROW):
                row = tag.value[start : start + BYTES_PER_ROW]
                branch.add(
                    Text(", ".join(f"{v & 0xFF:02X}" for v in row), style="green")
                )
        elif isinstance(tag, IntArray | LongArray):
            for value in tag:
                branch.add(Text(str(value), style="magenta"))

    def _print_tree(nbt: NBTFile, source: str, file: Any = None) -> None:
        """打印NBT标签树 (使用 Rich).

        Args:
            nbt: 解码结果.
            source: 数据来源描述.
            file: 输出文件对象,默认为stdout.
        """
        console = Console(file=file, force_terminal=file is None)
        console.print(f"Source: {source}", highlight=False)
        console.print(f"Compression: {nbt.compression}", highlight=False)

        root = Tree(Text("NBT Root", style="bold white"))
        _build_rich_tree(nbt.name, nbt.root, root)
        console.print(root)

    def _decode_and_print(
        data: bytes,
        source: str,
        option: NbtOption,
        output_format: str,
        output_file: str | None,
        verbose: bool,
    ) -> None:
        """解码并输出结果."""
        if verbose:
            click.echo(f"[DEBUG] 数据大小: {len(data)} 字节", err=True)

        try:
            nbt = loads(data, option=option)
        except NbtError as e:
            if verbose:
                import traceback

                traceback.print_exc(file=sys.stderr)
                if isinstance(e, NbtDecodeError) and e.pos is not None:
                    click.echo(get_hexdump(_decompressed(data), e.pos), err=True)
            raise click.ClickException(f"解码失败: {e}") from e

        if verbose:
            click.echo(f"[DEBUG] 压缩格式: {nbt.compression}", err=True)

        if output_format == "tree":
            if output_file:
                with open(output_file, "w", encoding="utf-8") as f:
                    _print_tree(nbt, source, file=f)
                click.echo(f"结果已保存到: {output_file}", err=True)
            else:
                _print_tree(nbt, source)
            return

        result = nbt.root.unpack()
        output_text: str | None = None

        if output_format == "json":
            output_text = json.dumps(result, indent=2, ensure_ascii=False)
        elif output_file:
            import pprint

            output_text = pprint.pformat(result, width=100)

        # 执行输出
        if output_file:
            assert output_text is not None
            Path(output_file).write_text(output_text, encoding="utf-8")
            click.echo(f"结果已保存到: {output_file}", err=True)
        elif output_format == "json":
            assert output_text is not None
            Console().print(Syntax(output_text, "json", theme="monokai", word_wrap=True))
        else:  # pretty
            console = Console()
            console.print(f"Source: {source}", highlight=False)
            console.print(f"Compression: {nbt.compression}", highlight=False)
            console.print(result)

    @click.command(help="NBT 文件查看工具")
    @click.argument("source", type=click.Path(allow_dash=True, dir_okay=False, path_type=str))
    @click.option(
        "--format",
        "output_format",
        type=click.Choice(["tree", "json", "pretty"]),
        default="tree",
        show_default=True,
        help="输出格式",
    )
    @click.option(
        "-o",
        "--output",
        "output_file",
        type=click.Path(dir_okay=False, writable=True),
        help="将输出保存到文件 (如不指定则输出到控制台)",
    )
    @click.option(
        "-v",
        "--verbose",
        is_flag=True,
        help="显示详细的解码过程信息",
    )
    @click.option(
        "--strict",
        is_flag=True,
        help="Compound 缺少 End 标记时报错, 而不是在 EOF 处隐式结束",
    )
    @click.option(
        "--little-endian",
        is_flag=True,
        help="按小端字节序解码 (基岩版)",
    )
    def cli(
        source: str,
        output_format: str,
        output_file: str | None,
        verbose: bool,
        strict: bool,
        little_endian: bool,
    ) -> None:
        """NBT 文件查看工具.

        Examples:
          # 以树形结构查看文件
          excavate level.dat

          # 从标准输入读取
          cat level.dat | excavate -

          # 以 JSON 格式输出结果
          excavate level.dat --format json
        """
        option = NbtOption.NONE
        if strict:
            option |= NbtOption.STRICT
        if little_endian:
            option |= NbtOption.LITTLE_ENDIAN

        if source == "-":
            data = click.get_binary_stream("stdin").read()
            display = "stdin"
        else:
            file_path = Path(source)
            if not file_path.is_file():
                raise click.BadParameter(f"文件不存在: {source}", param_hint="SOURCE")
            data = _read_binary_file(file_path, verbose)
            display = str(file_path)

        _decode_and_print(data, display, option, output_format, output_file, verbose)

    def main() -> None:
        """入口函数."""
        cli()


if __name__ == "__main__":
    main()
