"""
Tests for the version module of the Tetto SDK.
"""
import importlib
import re
from importlib import metadata as importlib_metadata
from unittest.mock import mock_open, patch

from tetto_sdk import __version__


def test_version_format():
    """Test that the version string follows semantic versioning"""
    assert re.match(r'^\d+\.\d+\.\d+$', __version__), "Version should follow semantic versioning"


@patch('importlib.metadata.version')
@patch('pathlib.Path.open', new_callable=mock_open, read_data=b'[project]\nversion = "1.2.3"\n')
def test_version_from_file(mock_open_file, mock_metadata_version):
    """When metadata lookup fails, pyproject.toml is read"""
    mock_metadata_version.side_effect = importlib_metadata.PackageNotFoundError
    import tetto_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "1.2.3"


@patch('importlib.metadata.version')
def test_version_from_metadata(mock_metadata_version):
    """When metadata lookup succeeds, version comes from metadata"""
    mock_metadata_version.return_value = "2.3.4"
    import tetto_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "2.3.4"


def _no_metadata(monkeypatch):
    def missing(name):
        raise importlib_metadata.PackageNotFoundError(name)
    monkeypatch.setattr(importlib_metadata, 'version', missing)


def test_version_file_not_found(monkeypatch):
    """If pyproject.toml is missing, fallback to default"""
    _no_metadata(monkeypatch)

    def no_file(*args, **kwargs):
        raise FileNotFoundError()
    monkeypatch.setattr('pathlib.Path.open', no_file)

    import tetto_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "2.1.0"


def test_version_key_error(monkeypatch):
    """If TOML exists but missing version key, fallback to default"""
    _no_metadata(monkeypatch)
    monkeypatch.setattr('pathlib.Path.open', mock_open(read_data=b'[project]\nname = "tetto-sdk"\n'))
    import tetto_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "2.1.0"


def test_version_toml_decode_error(monkeypatch):
    """If TOML parse fails, fallback to default"""
    _no_metadata(monkeypatch)
    monkeypatch.setattr('pathlib.Path.open', mock_open(read_data=b'invalid toml content ['))
    import tetto_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "2.1.0"
