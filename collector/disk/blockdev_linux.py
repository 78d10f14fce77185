import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from core.errors import SourceUnavailable, SymlinkResolutionFailure

logger = logging.getLogger(__name__)

# /sys/block/loop0 -> ../devices/virtual/block/loop0
VIRTUAL_BLOCK_PREFIX = "devices/virtual/block/"


@dataclass(frozen=True)
class BlockDeviceEntry:
    name: str
    is_symlink: bool
    # None means "read the link from disk when classifying"
    target: Optional[str] = None


def scan_block_devices(sys_block="/sys/block") -> List[BlockDeviceEntry]:
    try:
        with os.scandir(sys_block) as it:
            entries = [
                BlockDeviceEntry(name=e.name, is_symlink=e.is_symlink())
                for e in it
            ]
    except OSError as e:
        raise SourceUnavailable(sys_block, e) from e

    return sorted(entries, key=lambda e: e.name)


def is_virtual_target(target: str) -> bool:
    # Relative to /sys/block, or absolute under /sys
    if target.startswith("/sys/"):
        target = target[len("/sys/"):]

    parts = target.split("/")
    while parts and parts[0] in ("..", "."):
        parts.pop(0)

    return "/".join(parts).startswith(VIRTUAL_BLOCK_PREFIX)


def classify(entries: Iterable[BlockDeviceEntry], sys_block="/sys/block") -> Dict[str, bool]:
    """
    Map device name -> is physical.

    Every listed device starts out as not physical. Only a symlink whose
    target lies outside the virtual block subtree is flipped to physical,
    which matches how /sys/block exposes real disks.
    """
    blocks = {}

    for entry in entries:
        blocks[entry.name] = False

        if not entry.is_symlink:
            continue

        target = entry.target
        if target is None:
            path = os.path.join(sys_block, entry.name)
            try:
                target = os.readlink(path)
            except OSError as e:
                raise SymlinkResolutionFailure(path, e) from e

        if is_virtual_target(target):
            logger.debug("block device %s is virtual (%s)", entry.name, target)
            continue

        blocks[entry.name] = True

    return blocks
