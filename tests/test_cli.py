"""测试 NBT 命令行工具."""

import gzip
import json
import re
from pathlib import Path

import pytest
from click.testing import CliRunner

try:
    from excavate.__main__ import cli
except ImportError:
    pytest.skip("click not installed", allow_module_level=True)


@pytest.fixture
def runner() -> CliRunner:
    """提供 Click CLI 测试运行器.

    Returns:
        CliRunner 实例.
    """
    return CliRunner()


def strip_ansi(text: str) -> str:
    """去除 ANSI 转义序列."""
    ansi_escape = re.compile(r"\x1B(?:[@-Z\-_]|\[[0-?]*[ -/]*[@-~])")
    return ansi_escape.sub("", text)


# --- 基础 CLI 功能测试 ---


def test_cli_help(runner: CliRunner) -> None:
    """--help 选项应显示帮助信息."""
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "Usage:" in result.output
    assert "--format" in result.output


def test_cli_missing_file(runner: CliRunner) -> None:
    """文件不存在时应报错."""
    with runner.isolated_filesystem():
        result = runner.invoke(cli, ["missing.nbt"])

    assert result.exit_code != 0
    assert "文件不存在" in result.output


def test_cli_tree(runner: CliRunner, hello_world: bytes) -> None:
    """默认以树形结构显示文件内容."""
    with runner.isolated_filesystem():
        Path("hello.nbt").write_bytes(hello_world)

        result = runner.invoke(cli, ["hello.nbt"])

    assert result.exit_code == 0
    output = strip_ansi(result.output)
    assert "Compression: None" in output
    assert "NBT Root" in output
    assert "'hello world' Compound : 1 entries" in output
    assert "'Bananrama'" in output


def test_cli_tree_gzip(runner: CliRunner, bigtest: bytes) -> None:
    """gzip 文件应显示压缩格式和列表/数组摘要."""
    with runner.isolated_filesystem():
        Path("bigtest.nbt").write_bytes(gzip.compress(bigtest))

        result = runner.invoke(cli, ["bigtest.nbt"])

    assert result.exit_code == 0
    output = strip_ansi(result.output)
    assert "Compression: Gzip" in output
    assert "List<Long> : 5 entries" in output
    assert "ByteArray : 1000 entries" in output


def test_cli_stdin(runner: CliRunner, hello_world: bytes) -> None:
    """SOURCE 为 '-' 时应从标准输入读取."""
    result = runner.invoke(cli, ["-"], input=gzip.compress(hello_world))

    assert result.exit_code == 0
    output = strip_ansi(result.output)
    assert "Source: stdin" in output
    assert "Bananrama" in output


def test_cli_json_output_file(runner: CliRunner, bigtest: bytes) -> None:
    """--format json 配合 -o 应写出合法的 JSON 文件."""
    with runner.isolated_filesystem():
        Path("bigtest.nbt").write_bytes(bigtest)

        result = runner.invoke(cli, ["bigtest.nbt", "--format", "json", "-o", "out.json"])

        assert result.exit_code == 0
        data = json.loads(Path("out.json").read_text(encoding="utf-8"))

    assert data["intTest"] == 2147483647
    assert data["listTest (long)"] == [11, 12, 13, 14, 15]
    assert data["nested compound test"]["egg"]["name"] == "Eggbert"


def test_cli_pretty_output_file(runner: CliRunner, hello_world: bytes) -> None:
    """--format pretty 配合 -o 应写出 Python 字面量."""
    with runner.isolated_filesystem():
        Path("hello.nbt").write_bytes(hello_world)

        result = runner.invoke(cli, ["hello.nbt", "--format", "pretty", "-o", "out.txt"])

        assert result.exit_code == 0
        content = Path("out.txt").read_text(encoding="utf-8")

    assert "'name': 'Bananrama'" in content


def test_cli_decode_error(runner: CliRunner) -> None:
    """无法识别的数据应以非零状态退出并显示错误."""
    with runner.isolated_filesystem():
        Path("bad.nbt").write_bytes(b"\x00\x01\x02")

        result = runner.invoke(cli, ["bad.nbt"])

    assert result.exit_code != 0
    assert "解码失败" in result.output
    assert "invalid compression format: '0x00'" in result.output


def test_cli_verbose_hexdump(runner: CliRunner, nbt) -> None:
    """-v 模式下解码错误应附带十六进制转储."""
    data = nbt.root("", nbt.named(0x0D, "x", b"\x00"))
    with runner.isolated_filesystem():
        Path("bad.nbt").write_bytes(data)

        result = runner.invoke(cli, ["bad.nbt", "-v"])

    assert result.exit_code != 0
    assert "位置" in result.output
    assert "invalid tag type: '0x0D' (at x)" in result.output


def test_cli_strict(runner: CliRunner, nbt) -> None:
    """--strict 选项应拒绝缺少 End 的 Compound."""
    data = nbt.named(0x0A, "", nbt.named(0x01, "b", nbt.pack("b", 1)))
    with runner.isolated_filesystem():
        Path("partial.nbt").write_bytes(data)

        assert runner.invoke(cli, ["partial.nbt"]).exit_code == 0
        result = runner.invoke(cli, ["partial.nbt", "--strict"])

    assert result.exit_code != 0
    assert "解码失败" in result.output
