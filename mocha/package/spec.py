"""
Package manifests and their in memory representation.

A manifest is a YAML file whose file stem is the name of the package::

    source: https://github.com/facebook/zstd
    dependencies: []
    features: [zstd]
    artifacts:
      - Bin: {name: zstd}
      - Sym: {name: unzstd, points_to: zstd}
    beta_artifacts:
      - ["lib zstd", ["lib/common/debug.c", "lib/compress/zstd_compress.c"]]
      - ["bin zstdcli", ["programs/zstdcli.c"]]
"""

import os
import re
import typing as t

import yaml

from mocha.utils.typecheck import *
from mocha.utils.util import join_strs
from .errors import SpecParseError, FileSystemError


class Bin(t.NamedTuple):
    """ Executable produced by the primary build, installed as `rename_to` if set """
    name: str
    rename_to: t.Optional[str] = None

    @property
    def installed_name(self) -> str:
        return self.rename_to or self.name


class Sym(t.NamedTuple):
    """ Symbolic link in the binary directory whose target is literally `points_to` """
    name: str
    points_to: str


Artifact = t.Union[Bin, Sym]


class Library(t.NamedTuple):
    """ Static C library built by the secondary build tool """
    name: str
    sources: t.Tuple[str, ...]


class Executable(t.NamedTuple):
    """ C executable built by the secondary build tool """
    name: str
    sources: t.Tuple[str, ...]


BetaArtifact = t.Union[Library, Executable]

LABEL_PREFIXES = {
    "lib ": Library,
    "bin ": Executable
}  # type: t.Dict[str, type]
""" Label prefixes of beta artifacts and the kind of sub component they declare """

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

ARTIFACT_TYPES = {
    "Bin": Dict({
        "name": NonEmptyStr() // Description("Name of the executable in the build output directory"),
        "rename_to": (Optional(NonEmptyStr()) | NonExistent()) // Default(None)
                     // Description("Name of the installed file, defaults to the name")
    }, unknown_keys=True),
    "Sym": Dict({
        "name": NonEmptyStr() // Description("Name of the link in the binary directory"),
        "points_to": NonEmptyStr() // Description("Target of the link, stored as is")
    }, unknown_keys=True)
}  # type: t.Dict[str, Dict]
""" Type schemes of the tagged artifact records """

MANIFEST_TYPE = Dict({
    "source": NonEmptyStr() // Description("URL of the source repository"),
    "dependencies": List(Str()) // Description("Names of the packages this package depends on"),
    "features": (List(Str()) | NonExistent()) // Default([]) // Description("Enabled build features"),
    "artifacts": List(Dict(unknown_keys=True, key_type=Str())) // Description("Installed artifacts, in order"),
    "beta_artifacts": (List(Tuple(Str(), List(Str()))) | NonExistent()) // Default([])
                      // Description("Native sub components as [label, sources] pairs, "
                                     "the label is 'lib NAME' or 'bin NAME'")
}, unknown_keys=True)  # type: Dict
""" Type scheme of a manifest """


class Package:
    """
    A parsed manifest. It's immutable and doesn't own any resources.
    """

    def __init__(self, name: str, source: str, dependencies: t.List[str] = None, features: t.List[str] = None,
                 artifacts: t.List[Artifact] = None, beta_artifacts: t.List[BetaArtifact] = None):
        """
        Creates a package.

        :param name: name of the package, used as a path segment
        :param source: URL of the source repository
        :param dependencies: names of other packages, not used while installing
        :param features: build features of the primary build
        :param artifacts: artifacts to install, in installation order
        :param beta_artifacts: native sub components built by the secondary build tool
        """
        if not _is_valid_name(name):
            raise ValueError("Invalid package name {!r}".format(name))
        self._name = name
        self._source = source
        self._dependencies = tuple(dependencies or ())
        self._features = tuple(features or ())
        self._artifacts = tuple(artifacts or ())
        self._beta_artifacts = tuple(beta_artifacts or ())

    @property
    def name(self) -> str:
        return self._name

    @property
    def source(self) -> str:
        return self._source

    @property
    def dependencies(self) -> t.Tuple[str, ...]:
        return self._dependencies

    @property
    def features(self) -> t.Tuple[str, ...]:
        return self._features

    @property
    def artifacts(self) -> t.Tuple[Artifact, ...]:
        return self._artifacts

    @property
    def beta_artifacts(self) -> t.Tuple[BetaArtifact, ...]:
        return self._beta_artifacts

    @classmethod
    def from_path(cls, path: str) -> 'Package':
        """
        Loads the manifest at the passed path, the package is named after the file stem.

        :raises: FileSystemError if the file can't be read
        :raises: SpecParseError if the content isn't a valid manifest
        """
        name = os.path.splitext(os.path.basename(path))[0]
        try:
            with open(path, "r") as f:
                content = f.read()
        except OSError as err:
            raise FileSystemError("read", path, err)
        return cls.from_string(name, content)

    @classmethod
    def from_string(cls, name: str, content: str) -> 'Package':
        """
        Parses the passed manifest text.

        :param name: name of the package
        :param content: YAML text of the manifest
        :raises: SpecParseError if the content isn't a valid manifest
        """
        if not _is_valid_name(name):
            raise SpecParseError(name, content, "{!r} isn't a valid package name".format(name))
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as err:
            raise SpecParseError(name, content, str(err))
        res = verbose_isinstance(data, MANIFEST_TYPE, "manifest")
        if not res:
            raise SpecParseError(name, content, str(res))
        try:
            artifacts = [_parse_artifact(i, artifact) for i, artifact in enumerate(data["artifacts"])]
            beta_artifacts = [_parse_beta_artifact(i, label, sources)
                              for i, (label, sources) in enumerate(data.get("beta_artifacts", []))]
        except ValueError as err:
            raise SpecParseError(name, content, str(err))
        return Package(name, data["source"], data["dependencies"], data.get("features", []),
                       artifacts, beta_artifacts)

    def to_dict(self) -> t.Dict[str, t.Any]:
        """
        Returns the manifest representation of this package.
        """
        artifacts = []
        for artifact in self.artifacts:
            if isinstance(artifact, Bin):
                record = {"name": artifact.name}
                if artifact.rename_to is not None:
                    record["rename_to"] = artifact.rename_to
                artifacts.append({"Bin": record})
            else:
                artifacts.append({"Sym": {"name": artifact.name, "points_to": artifact.points_to}})
        prefixes = {kind: prefix for prefix, kind in LABEL_PREFIXES.items()}
        return {
            "source": self.source,
            "dependencies": list(self.dependencies),
            "features": list(self.features),
            "artifacts": artifacts,
            "beta_artifacts": [[prefixes[type(beta)] + beta.name, list(beta.sources)]
                               for beta in self.beta_artifacts]
        }

    def __eq__(self, other) -> bool:
        return isinstance(other, Package) and self.name == other.name and self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash(self.name)

    def __repr__(self) -> str:
        return "Package({!r}, source={!r})".format(self.name, self.source)


def _is_valid_name(name: str) -> bool:
    return isinstance(name, str) and name not in ["", ".", ".."] and "/" not in name


def _parse_artifact(index: int, record: t.Dict[str, t.Any]) -> Artifact:
    """
    Parses an externally tagged artifact record like {"Bin": {"name": "tool"}}.

    :raises: ValueError if the record is malformed
    """
    if len(record) != 1 or next(iter(record)) not in ARTIFACT_TYPES:
        raise ValueError("artifact {} has to be a mapping with exactly one of the keys {}, got {!r}"
                         .format(index, join_strs(sorted(ARTIFACT_TYPES), "or"), record))
    tag, fields = next(iter(record.items()))
    res = verbose_isinstance(fields, ARTIFACT_TYPES[tag], "artifact {} ({})".format(index, tag))
    if not res:
        raise ValueError(str(res))
    if tag == "Bin":
        return Bin(fields["name"], fields.get("rename_to"))
    return Sym(fields["name"], fields["points_to"])


def _parse_beta_artifact(index: int, label: str, sources: t.List[str]) -> BetaArtifact:
    """
    Parses a [label, sources] pair, the label prefix determines the kind of the sub component.

    :raises: ValueError if the label has no known prefix or an invalid name
    """
    for prefix, kind in LABEL_PREFIXES.items():
        if label.startswith(prefix):
            name = label[len(prefix):]
            if not _IDENTIFIER.match(name):
                raise ValueError("beta artifact {} has the invalid name {!r}".format(index, name))
            return kind(name, tuple(sources))
    raise ValueError("the label {!r} of beta artifact {} starts with neither {}"
                     .format(label, index, join_strs([repr(prefix) for prefix in LABEL_PREFIXES], "nor")))
