import asyncio
import enum
import json
import logging
import os
from typing import Optional

from npm_buttons.exceptions import DetectionError

logger = logging.getLogger(__name__)

MANIFEST_FILE = "package.json"


class PackageManagerKind(enum.Enum):
    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"
    BUN = "bun"


# Checked in this order within a single directory.
LOCKFILES = (
    ("yarn.lock", PackageManagerKind.YARN),
    ("pnpm-lock.yaml", PackageManagerKind.PNPM),
    ("bun.lockb", PackageManagerKind.BUN),
    ("bun.lock", PackageManagerKind.BUN),
    ("package-lock.json", PackageManagerKind.NPM),
)

RUN_COMMAND_TEMPLATES = {
    PackageManagerKind.NPM: "npm run {script}",
    PackageManagerKind.YARN: "yarn {script}",
    PackageManagerKind.PNPM: "pnpm run {script}",
    PackageManagerKind.BUN: "bun run {script}",
}


def build_run_command(kind: PackageManagerKind, script: str) -> str:
    return RUN_COMMAND_TEMPLATES[kind].format(script=script)


def kind_from_package_manager_field(value) -> Optional[PackageManagerKind]:
    """Map a manifest ``packageManager`` value such as ``pnpm@8.6.0``."""
    if not isinstance(value, str):
        return None
    for kind in (PackageManagerKind.YARN, PackageManagerKind.PNPM,
                 PackageManagerKind.BUN, PackageManagerKind.NPM):
        if value.startswith(kind.value):
            return kind
    return None


def _list_dir(directory: str):
    try:
        return set(os.listdir(directory))
    except OSError as exc:
        raise DetectionError(directory, str(exc)) from exc


def _read_manifest(path: str):
    try:
        with open(path, "r", encoding="utf-8") as fp:
            return json.load(fp)
    except (OSError, ValueError) as exc:
        raise DetectionError(os.path.dirname(path), f"unreadable {MANIFEST_FILE}: {exc}") from exc


class PackageManagerDetector:
    """Resolve the package manager owning a directory.

    Walks upward from the directory towards the workspace root (inclusive),
    stopping at the first lockfile or ``packageManager`` manifest field.
    Falls back to npm. Never raises.
    """
    def __init__(self, root_dir: Optional[str] = None, loop=None):
        self._root_dir = os.path.normpath(os.path.abspath(root_dir)) if root_dir else None
        self._loop = loop

    @property
    def root_dir(self) -> Optional[str]:
        return self._root_dir

    async def detect(self, directory: str) -> PackageManagerKind:
        current = os.path.normpath(os.path.abspath(directory))
        while True:
            try:
                kind = await self._detect_in(current)
            except DetectionError as exc:
                logger.warning("Package manager detection skipped a level: %s", exc)
                kind = None
            except Exception:
                logger.warning("Package manager detection failed at %s", current, exc_info=True)
                kind = None
            if kind is not None:
                logger.debug("Detected %s for %s at %s", kind.value, directory, current)
                return kind
            if self._root_dir is not None and current == self._root_dir:
                break
            parent = os.path.dirname(current)
            if parent == current:
                break
            current = parent
        return PackageManagerKind.NPM

    async def _detect_in(self, directory: str) -> Optional[PackageManagerKind]:
        entries = await self._run_blocking(_list_dir, directory)
        for filename, kind in LOCKFILES:
            if filename in entries:
                return kind
        if MANIFEST_FILE not in entries:
            return None
        manifest = await self._run_blocking(_read_manifest, os.path.join(directory, MANIFEST_FILE))
        if not isinstance(manifest, dict):
            return None
        return kind_from_package_manager_field(manifest.get("packageManager"))

    async def _run_blocking(self, func, *args):
        loop = self._loop or asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)


async def detect(directory: str, root_dir: Optional[str] = None) -> PackageManagerKind:
    return await PackageManagerDetector(root_dir).detect(directory)
