from pathlib import Path

import pytest

from wrapgen import InterfaceParser


SAMPLES_DIR = Path(__file__).parent.parent / "samples"


@pytest.fixture
def samples_dir():
    return SAMPLES_DIR


@pytest.fixture
def parse():
    def _parse(content, module_name="test"):
        return InterfaceParser(content, module_name).parse()
    return _parse
