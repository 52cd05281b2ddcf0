import json

import pytest

from repodash.core.config import DashboardSettings
from repodash.core.config import DEFAULT_TRACKED_PACKAGES
from repodash.core.config import GitHubConfig
from repodash.core.config import PathConfig


def test_path_config(tmp_path):
    paths = PathConfig(base_data_dir=tmp_path)
    assert paths.repositories_config_path == tmp_path / 'repositories.json'
    assert paths.snapshot_dir == tmp_path / 'cache'


def test_settings_from_file(tmp_path):
    path = tmp_path / 'repositories.json'
    path.write_text(
        json.dumps({
            'repositories': [{'owner': 'acme', 'repo': 'app'}],
            'trackedPackages': [{'name': 'typescript', 'targetVersion': '5.0.0'}],
        }),
    )

    settings = DashboardSettings.from_file(path)

    assert settings.repositories[0].full_name == 'acme/app'
    assert settings.tracked_packages[0].target_version == '5.0.0'


def test_settings_default_tracked_packages(tmp_path):
    path = tmp_path / 'repositories.json'
    path.write_text(json.dumps({'repositories': []}))

    settings = DashboardSettings.from_file(path)

    assert [p.name for p in settings.tracked_packages] == DEFAULT_TRACKED_PACKAGES
    assert all(p.target_version is None for p in settings.tracked_packages)


def test_settings_missing_file(tmp_path):
    with pytest.raises(ValueError, match='not found'):
        DashboardSettings.from_file(tmp_path / 'repositories.json')


def test_settings_invalid_file(tmp_path):
    path = tmp_path / 'repositories.json'
    path.write_text(json.dumps({'repositories': [{'owner': 'acme'}]}))
    with pytest.raises(ValueError, match='Invalid'):
        DashboardSettings.from_file(path)


def test_github_config_repr_masks_token():
    config = GitHubConfig(token='secret-token')
    assert 'secret-token' not in repr(config)
    assert '*****' in repr(config)


def test_github_config_env_overrides(monkeypatch):
    monkeypatch.setenv('REPODASH_WORKFLOW_NAME', 'Build')
    monkeypatch.setenv('REPODASH_BRANCH', 'main')
    config = GitHubConfig()
    assert config.workflow_name == 'Build'
    assert config.branch == 'main'
