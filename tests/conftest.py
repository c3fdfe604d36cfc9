import pytest


@pytest.fixture(autouse=True)
def isolate_working_directory(tmp_path, monkeypatch):
    """Run every test from an empty temporary directory.

    The loader looks for ``.versionrc.json`` in the current directory, so a
    file in the checkout must not leak into the tests.
    """
    monkeypatch.chdir(tmp_path)
    yield tmp_path
