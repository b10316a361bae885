from datetime import date

import pytest

from suprimentos.infra.migrations import apply_migrations
from suprimentos.infra.views import create_views


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "suprimentos_test.sqlite")
    apply_migrations(path)
    create_views(path)
    return path


@pytest.fixture
def hoje():
    return date(2025, 6, 15)
