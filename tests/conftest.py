from pathlib import Path

import pytest

from strtpl import Settings, configure
from tests.infrastructure.file_utils import write_group


@pytest.fixture(autouse=True)
def _default_settings():
    """Каждый тест начинается и заканчивается с настройками по умолчанию."""
    configure(Settings())
    yield
    configure(Settings())


@pytest.fixture
def group_file(tmp_path: Path) -> Path:
    """Файл группы с включением и шаблоном с формальными аргументами."""
    return write_group(
        tmp_path / "greetings.stg",
        """
        // приветствия
        hello(name) ::= "Hello, <name>!"
        page() ::= <<[<hello()>]>>
        """,
    )
