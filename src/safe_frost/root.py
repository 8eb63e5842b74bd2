"""
The workspace root: the directory whose files are the state of a signing
ceremony.

Every artifact has a fixed file name relative to the root. Artifacts that
exist once per signer embed the signer's share index in their name:

    key.pub                  public key package
    key.<i>                  signing key share of signer i
    round1.<i>.nonces        round-one nonces of signer i
    round1.<i>.commitments   round-one commitments of signer i
    round1                   signing package
    round2.<i>               signature share of signer i
    round2                   aggregate signature
"""

from __future__ import annotations
import os
import re
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

DEFAULT_ROOT = ".frost"


class Artifact(Enum):
    """The kinds of files in a workspace, by file name format."""

    PUBLIC_KEY = "key.pub"
    SIGNING_KEY = "key.{}"
    NONCES = "round1.{}.nonces"
    COMMITMENTS = "round1.{}.commitments"
    SIGNING_PACKAGE = "round1"
    SIGNATURE_SHARE = "round2.{}"
    SIGNATURE = "round2"

    @property
    def indexed(self) -> bool:
        return "{}" in self.value

    @property
    def pattern(self) -> "re.Pattern[str]":
        prefix, suffix = self.value.split("{}")
        return re.compile(re.escape(prefix) + r"(0|[1-9][0-9]*)" + re.escape(suffix))


class Root:
    """
    A workspace directory, passed explicitly to every ceremony command.

    Roots are immutable and hashable: the directory cannot be changed once
    the root is created.
    """

    __slots__ = ("_path",)

    def __init__(self, path: Union[str, "os.PathLike[str]"] = DEFAULT_ROOT):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Root):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({str(self.path)!r})"

    def __str__(self) -> str:
        return str(self.path)

    def path_for(self, kind: Artifact, index: Optional[int] = None) -> Path:
        """
        Map an artifact to its path.

        Raises:
        ValueError: If an index is missing for a per-signer artifact, given
        for a singleton artifact, or negative.
        """
        if kind.indexed:
            if index is None:
                raise ValueError(f"{kind.name} requires a share index")
            if index < 0:
                raise ValueError("share index must not be negative")
            return self.path / kind.value.format(index)
        if index is not None:
            raise ValueError(f"{kind.name} does not take a share index")
        return self.path / kind.value

    def list(self, kind: Artifact) -> List[Tuple[int, Path]]:
        """
        List the per-signer artifacts of a kind present in the workspace,
        ordered by share index. Files not matching the name format are
        ignored.

        Raises:
        ValueError: If the artifact is a singleton.
        OSError: If the directory cannot be read.
        """
        if not kind.indexed:
            raise ValueError(f"{kind.name} is not a per-signer artifact")

        pattern = kind.pattern
        entries = []
        with os.scandir(self.path) as directory:
            for entry in directory:
                match = pattern.fullmatch(entry.name)
                if match and entry.is_file():
                    entries.append((int(match.group(1)), Path(entry.path)))
        return sorted(entries)

    def ensure(self) -> None:
        """Create the root directory and its parents if they do not exist."""
        self.path.mkdir(parents=True, exist_ok=True)
