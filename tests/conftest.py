"""Pytest configuration and shared fixtures."""
import pytest
import tempfile
from pathlib import Path

from dsconv.platform_info import HostIntInfo


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def int_info():
    """Fixed host facts so report output does not depend on the test machine."""
    return HostIntInfo(
        platform_tag="linux-x86_64",
        size_bytes=4,
        min_value=-2147483648,
        max_value=2147483647,
    )


@pytest.fixture
def mixed_source():
    """A C-like buffer mixing declarations with unrelated and broken statements."""
    return (
        "#include <stdio.h>\n"
        "int counter;\n"
        "int a[3] = {1, 2, 3};\n"
        "static const char *msg = \"hi\";\n"
        "char b[5] = {10,20};\n"
        "short bad[4 = {1};\n"
        "int c[2] = {1,2,3,4};\n"
        "long a[1] = {-7};\n"
    )


@pytest.fixture
def source_file(temp_dir, mixed_source):
    """mixed_source written to a .c file."""
    path = temp_dir / "tables.c"
    path.write_text(mixed_source, encoding="utf-8")
    return path
