import os

import pytest

from mocha.utils.settings import Settings


@pytest.fixture(autouse=True)
def reset_settings():
    """ Every test starts with the default settings """
    Settings().reset()
    yield
    Settings().reset()


@pytest.fixture
def root_dir(tmp_path) -> str:
    """ Installation root in a temporary directory that is also set as the `root_dir` setting """
    root = os.path.join(str(tmp_path), "root")
    Settings()["root_dir"] = root
    return root
