from pathlib import Path

from scripts.bump_version import bump_version, read_version, update_init, update_pyproject


def test_bump_version_increments_patch():
    assert bump_version("0.1.9") == "0.1.10"


def test_update_files(tmp_path: Path):
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text('[project]\nname = "x"\nversion = "1.2.3"\n\n[tool.x]\nversion = "9.9.9"\n')
    init = tmp_path / "__init__.py"
    init.write_text('"""Doc."""\n\n__version__ = "1.2.3"\n')

    new_version = bump_version(read_version(pyproject))
    update_pyproject(new_version, pyproject)
    update_init(new_version, init)

    assert read_version(pyproject) == "1.2.4"
    assert 'version = "9.9.9"' in pyproject.read_text()
    assert '__version__ = "1.2.4"' in init.read_text()


def test_update_init_skips_missing_file(tmp_path: Path):
    update_init("1.0.0", tmp_path / "missing.py")
