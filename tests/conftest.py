import pytest

from command_catalog.catalog import CommandCatalog
from tests.testtools import StaticSourceStore


@pytest.fixture
def home_dir(tmp_path):
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def project_dir(tmp_path):
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def user_commands(home_dir):
    return home_dir / ".claude" / "commands"


@pytest.fixture
def project_commands(project_dir):
    return project_dir / ".claude" / "commands"


@pytest.fixture
def source_store():
    return StaticSourceStore()


@pytest.fixture
def catalog(home_dir, source_store):
    return CommandCatalog(home_dir=home_dir, source_store=source_store)
