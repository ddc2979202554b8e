import json

import pytest

from changelogger.versioning.inferencer import VersionInferencer
from changelogger.versioning.project_metadata import MetadataError, ProjectMetadataReader


def test_package_json_version(tmp_path):
    (tmp_path / "package.json").write_text(json.dumps({"name": "x", "version": "2.3.4"}))
    assert ProjectMetadataReader([tmp_path]).read_declared_version() == "2.3.4"


def test_pyproject_project_table(tmp_path):
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\nversion = "0.9.1"\n')
    assert ProjectMetadataReader([tmp_path]).read_declared_version() == "0.9.1"


def test_pyproject_poetry_table(tmp_path):
    (tmp_path / "pyproject.toml").write_text('[tool.poetry]\nname = "x"\nversion = "1.1.0"\n')
    assert ProjectMetadataReader([tmp_path]).read_declared_version() == "1.1.0"


def test_setup_cfg_metadata(tmp_path):
    (tmp_path / "setup.cfg").write_text("[metadata]\nname = x\nversion = 5.0.0\n")
    assert ProjectMetadataReader([tmp_path]).read_declared_version() == "5.0.0"


def test_dynamic_pyproject_falls_back_to_next_file(tmp_path):
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\ndynamic = ["version"]\n')
    (tmp_path / "setup.cfg").write_text("[metadata]\nversion = 0.0.7\n")
    assert ProjectMetadataReader([tmp_path]).read_declared_version() == "0.0.7"


def test_project_folder_searched_before_repo_root(tmp_path):
    project = tmp_path / "packages" / "web"
    project.mkdir(parents=True)
    (tmp_path / "package.json").write_text(json.dumps({"version": "1.0.0"}))
    (project / "package.json").write_text(json.dumps({"version": "3.0.0"}))
    reader = ProjectMetadataReader([project, tmp_path, project])
    assert reader.search_dirs == [project, tmp_path]
    assert reader.read_declared_version() == "3.0.0"


def test_missing_or_empty_version_is_none(tmp_path):
    assert ProjectMetadataReader([tmp_path]).read_declared_version() is None
    (tmp_path / "package.json").write_text(json.dumps({"version": "  "}))
    assert ProjectMetadataReader([tmp_path]).read_declared_version() is None
    (tmp_path / "package.json").write_text(json.dumps(["not", "an", "object"]))
    assert ProjectMetadataReader([tmp_path]).read_declared_version() is None


def test_malformed_file_raises(tmp_path):
    (tmp_path / "package.json").write_text("{invalid")
    with pytest.raises(MetadataError):
        ProjectMetadataReader([tmp_path]).read_declared_version()

    (tmp_path / "package.json").unlink()
    (tmp_path / "pyproject.toml").write_text("[project\nversion=")
    with pytest.raises(MetadataError):
        ProjectMetadataReader([tmp_path]).read_declared_version()


@pytest.mark.parametrize("filename", ["package.json", "pyproject.toml", "setup.cfg"])
def test_non_utf8_file_raises(tmp_path, filename):
    (tmp_path / filename).write_bytes(b'version = "\xff"\n')
    with pytest.raises(MetadataError):
        ProjectMetadataReader([tmp_path]).read_declared_version()


@pytest.mark.parametrize("content", ['project = "x"\n', 'tool = "x"\n', '[tool]\npoetry = 3\n'])
def test_pyproject_scalar_tables_are_ignored(tmp_path, content):
    (tmp_path / "pyproject.toml").write_text(content)
    assert ProjectMetadataReader([tmp_path]).read_declared_version() is None


def test_unreadable_metadata_does_not_stop_inference(tmp_path):
    (tmp_path / "package.json").write_bytes(b'{"version": "\xff"}')
    inferencer = VersionInferencer(lambda: [], ProjectMetadataReader([tmp_path]), None)
    assert inferencer.infer([], True) == "Unreleased"
