"""
Tests related to the parsing of package manifests
"""
import os

import pytest
import yaml

from mocha.package.errors import SpecParseError, FileSystemError, MochaError
from mocha.package.spec import Package, Bin, Sym, Library, Executable

ZSTD = """
source: https://github.com/facebook/zstd
dependencies: []
features: [zstd]
artifacts:
  - Bin: {name: zstd}
  - Bin: {name: zstdcat, rename_to: zcat}
  - Sym: {name: unzstd, points_to: zstd}
beta_artifacts:
  - ["lib zstd", ["lib/common/debug.c", "lib/compress/zstd_compress.c"]]
  - ["bin zstdcli", ["programs/zstdcli.c"]]
"""


def test_parse_full_manifest():
    package = Package.from_string("zstd", ZSTD)
    assert package.name == "zstd"
    assert package.source == "https://github.com/facebook/zstd"
    assert package.dependencies == ()
    assert package.features == ("zstd",)
    assert package.artifacts == (Bin("zstd"), Bin("zstdcat", "zcat"), Sym("unzstd", "zstd"))
    assert package.beta_artifacts == (
        Library("zstd", ("lib/common/debug.c", "lib/compress/zstd_compress.c")),
        Executable("zstdcli", ("programs/zstdcli.c",))
    )


def test_optional_fields_default_to_empty():
    package = Package.from_string("tool", """
source: https://example.com/tool
dependencies: [zstd]
artifacts:
  - Bin: {name: tool}
""")
    assert package.features == ()
    assert package.beta_artifacts == ()
    assert package.dependencies == ("zstd",)


def test_installed_name():
    assert Bin("zstd").installed_name == "zstd"
    assert Bin("zstdcat", "zcat").installed_name == "zcat"


def test_to_dict_parses_to_the_same_package():
    package = Package.from_string("zstd", ZSTD)
    data = package.to_dict()
    assert data["artifacts"][0] == {"Bin": {"name": "zstd"}}
    assert data["artifacts"][2] == {"Sym": {"name": "unzstd", "points_to": "zstd"}}
    assert data["beta_artifacts"][1] == ["bin zstdcli", ["programs/zstdcli.c"]]
    assert Package.from_string("zstd", yaml.safe_dump(data)) == package


def test_invalid_yaml():
    with pytest.raises(SpecParseError) as exc_info:
        Package.from_string("broken", "source: [")
    assert exc_info.value.name == "broken"
    assert exc_info.value.content == "source: ["
    assert isinstance(exc_info.value, MochaError)


def test_missing_source():
    with pytest.raises(SpecParseError) as exc_info:
        Package.from_string("tool", "dependencies: []\nartifacts: []")
    assert "source" in str(exc_info.value)


def test_wrong_field_type():
    with pytest.raises(SpecParseError):
        Package.from_string("tool", "source: a\ndependencies: zstd\nartifacts: []")


def test_unknown_artifact_tag():
    with pytest.raises(SpecParseError) as exc_info:
        Package.from_string("tool", "source: a\ndependencies: []\nartifacts:\n  - Lib: {name: x}")
    assert "Bin or Sym" in exc_info.value.cause


def test_sym_without_target():
    with pytest.raises(SpecParseError):
        Package.from_string("tool", "source: a\ndependencies: []\nartifacts:\n  - Sym: {name: x}")


def test_unknown_beta_artifact_label():
    with pytest.raises(SpecParseError) as exc_info:
        Package.from_string("tool", """
source: a
dependencies: []
artifacts: []
beta_artifacts:
  - ["dll zstd", ["a.c"]]
""")
    assert "'dll zstd'" in exc_info.value.cause


def test_invalid_beta_artifact_name():
    with pytest.raises(SpecParseError):
        Package.from_string("tool", """
source: a
dependencies: []
artifacts: []
beta_artifacts:
  - ["lib z-std", ["a.c"]]
""")


def test_invalid_package_name():
    with pytest.raises(SpecParseError):
        Package.from_string("a/b", ZSTD)


def test_from_path(tmp_path):
    path = os.path.join(str(tmp_path), "zstd.yaml")
    with open(path, "w") as f:
        f.write(ZSTD)
    assert Package.from_path(path) == Package.from_string("zstd", ZSTD)


def test_from_missing_path(tmp_path):
    with pytest.raises(FileSystemError) as exc_info:
        Package.from_path(os.path.join(str(tmp_path), "missing.yaml"))
    assert exc_info.value.operation == "read"


def test_undeclared_keys_are_ignored():
    package = Package.from_string("tool", """
source: https://example.com/tool
dependencies: []
description: a tool
artifacts:
  - Bin: {name: tool, mode: 755}
  - Sym: {name: t, points_to: tool, comment: short name}
""")
    assert package.artifacts == (Bin("tool"), Sym("t", "tool"))
    assert "description" not in package.to_dict()
