import os
from dataclasses import dataclass
from typing import Optional, Tuple

SEPARATOR = "::"


def normalize_dir(directory: str, root_dir: Optional[str] = None) -> str:
    """Absolute, normalized form of ``directory``.

    Relative directories are resolved against ``root_dir`` when one is set,
    otherwise against the process working directory.
    """
    if not os.path.isabs(directory) and root_dir:
        directory = os.path.join(root_dir, directory)
    return os.path.normpath(os.path.abspath(directory))


def encode(directory: str, script: str) -> str:
    return f"{directory}{SEPARATOR}{script}"


def decode(key: str) -> Tuple[str, str]:
    directory, sep, script = key.partition(SEPARATOR)
    if not sep:
        raise ValueError(f"Invalid run key: {key!r}")
    return directory, script


def _same_dir(left: str, right: str) -> bool:
    return os.path.normcase(os.path.normpath(left)) == os.path.normcase(os.path.normpath(right))


def label(directory: str, script: str, root_dir: Optional[str]) -> str:
    if root_dir and _same_dir(directory, root_dir):
        return script
    return f"{os.path.basename(os.path.normpath(directory))}:{script}"


def relative_display(directory: str, root_dir: Optional[str]) -> str:
    if not root_dir:
        return directory
    try:
        rel = os.path.relpath(directory, root_dir)
    except ValueError:
        # different drive on Windows
        return directory
    if rel == os.pardir or rel.startswith(os.pardir + os.sep) or os.path.isabs(rel):
        return directory
    return rel.replace(os.sep, "/")


@dataclass(frozen=True)
class RunKey:
    """Identity of a run: a package directory plus a script name."""
    package_dir: str
    script: str

    @classmethod
    def parse(cls, key: str, root_dir: Optional[str] = None) -> "RunKey":
        directory, script = decode(key)
        return cls(directory, script).resolve(root_dir)

    def resolve(self, root_dir: Optional[str] = None) -> "RunKey":
        return RunKey(normalize_dir(self.package_dir or root_dir or os.curdir, root_dir), self.script)

    @property
    def canonical(self) -> str:
        return encode(self.package_dir, self.script)

    def label(self, root_dir: Optional[str]) -> str:
        return label(self.package_dir, self.script, root_dir)

    def relative_path(self, root_dir: Optional[str]) -> str:
        return relative_display(self.package_dir, root_dir)

    def __str__(self):
        return self.canonical
