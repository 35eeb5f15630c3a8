import json

import pytest


@pytest.fixture
def wallets_file(tmp_path):
    def write(content):
        path = tmp_path / "wallets.json"
        if isinstance(content, str):
            path.write_text(content)
        else:
            path.write_text(json.dumps(content))
        return str(path)
    return write


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
