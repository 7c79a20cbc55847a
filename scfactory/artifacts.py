# Copyright 2025 R5
# This file is part of the R5 Core library.
#
# This software is provided "as is", without warranty of any kind,
# express or implied, including but not limited to the warranties
# of merchantability, fitness for a particular purpose and
# noninfringement. In no event shall the authors or copyright
# holders be liable for any claim, damages, or other liability,
# whether in an action of contract, tort or otherwise, arising
# from, out of or in connection with the software or the use or
# other dealings in the software.

"""
Discovery of compiled contract artifacts (Hardhat JSON output).

walk_artifacts() is the only function touching the filesystem; filtering and
selection operate on plain lists of ArtifactCandidate.
"""

import json
import logging
import os
import re
from dataclasses import dataclass
from typing import List

from scfactory.errors import NotFoundError

logger = logging.getLogger(__name__)

EXCLUDED_NAMES = re.compile(r"Mock|Test|Lib", re.IGNORECASE)


@dataclass(frozen=True)
class ArtifactCandidate:
    name: str
    path: str


@dataclass(frozen=True)
class ContractArtifact:
    name: str
    path: str
    abi: list
    bytecode: str

    def find(self, kind, name=None):
        for item in self.abi:
            if item.get("type") == kind and (name is None or item.get("name") == name):
                return item
        return None

    @property
    def constructor_inputs(self):
        ctor = self.find("constructor")
        return list(ctor.get("inputs", [])) if ctor else []


def _read_artifact(path):
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.debug("Skipping unreadable artifact %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        return None
    if not isinstance(data.get("abi"), list):
        return None
    if not isinstance(data.get("bytecode"), str) or data["bytecode"] in ("", "0x"):
        return None
    return data


def walk_artifacts(base_dir):
    """Return every deployable artifact under base_dir, in sorted path order."""
    candidates = []
    if not os.path.isdir(base_dir):
        return candidates
    for root, dirs, files in os.walk(base_dir):
        dirs.sort()
        for filename in sorted(files):
            if not filename.endswith(".json") or filename.endswith(".dbg.json"):
                continue
            path = os.path.join(root, filename)
            data = _read_artifact(path)
            if data is None:
                continue
            name = data.get("contractName")
            if not isinstance(name, str) or not name:
                name = os.path.splitext(filename)[0]
            candidates.append(ArtifactCandidate(name=name, path=path))
    logger.debug("Found %d artifact(s) under %s", len(candidates), base_dir)
    return candidates


def _matches(candidate, hint):
    return candidate.name == hint or hint in candidate.path


def filter_candidates(candidates, hint=None) -> List[ArtifactCandidate]:
    """
    Drop mocks, tests and libraries. With a hint, keep only the candidates
    matching it by declared name or path substring, excluded names included.
    """
    if hint:
        return [c for c in candidates if _matches(c, hint)]
    return [c for c in candidates if not EXCLUDED_NAMES.search(c.name)]


def select_candidate(candidates, hint=None, prompter=None) -> ArtifactCandidate:
    matching = filter_candidates(candidates, hint)
    if hint:
        if not matching:
            raise NotFoundError(f"Artifact not found for {hint}")
        # An exact name match wins over path substrings.
        for candidate in matching:
            if candidate.name == hint:
                return candidate
        return matching[0]
    if not matching:
        raise NotFoundError("No artifact found. Did you compile?")
    if len(matching) == 1:
        return matching[0]
    if prompter is None:
        raise NotFoundError(
            "Several artifacts found, use --contract to pick one: "
            + ", ".join(c.name for c in matching)
        )
    index = prompter.choose("Deploy which contract?", [c.name for c in matching])
    return matching[index]


def load_artifact(candidate) -> ContractArtifact:
    data = _read_artifact(candidate.path)
    if data is None:
        raise NotFoundError(f"Artifact {candidate.path} has no ABI or bytecode")
    return ContractArtifact(
        name=candidate.name,
        path=candidate.path,
        abi=data["abi"],
        bytecode=data["bytecode"],
    )


def find_artifact(base_dir, hint=None, prompter=None) -> ContractArtifact:
    """Scan base_dir and return the single artifact to deploy."""
    candidate = select_candidate(walk_artifacts(base_dir), hint, prompter)
    return load_artifact(candidate)
