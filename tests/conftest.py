import pytest

from tagfmt.convert.delegate import CodeFormatter, FormatError


class FailingFormatter(CodeFormatter):
    async def format(self, code, indent, dialect, options):
        raise FormatError(f"no {dialect} here")

    async def format_table(self, table, options):
        raise FormatError("no tables here")

    async def format_type(self, type_, options):
        raise FormatError("no types here")


@pytest.fixture
def failing_formatter():
    return FailingFormatter(prettier="prettier-not-installed")
