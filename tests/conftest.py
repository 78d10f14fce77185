"""Pytest bootstrap: import the in-repo packages and share diskstats fixtures."""

import os, sys

import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

DISKSTATS = """\
 253       0 vda 62695 0 2880751 26352 1383415 166185 10725792 396176 0 25204 301208
 253       1 vda1 1534559 279 41576784 520420 46025748 7260487 540931528 8670868 0 3948708 9173652
   7       0 loop0 72 0 2584 12 0 0 0 0 0 40 12 0 0 0 0
 259       0 nvme0n1 8829 1214 1091564 2451 5128 4417 317184 3013 2 6720 5464 12 3 4096 7
"""


@pytest.fixture
def diskstats_text():
    return DISKSTATS


@pytest.fixture
def sys_block(tmp_path):
    """A fake /sys/block with one virtual and three physical devices."""
    root = tmp_path / "sys" / "block"
    root.mkdir(parents=True)
    (root / "loop0").symlink_to("../devices/virtual/block/loop0")
    (root / "vda").symlink_to("../devices/pci0000:00/0000:00:05.0/virtio2/block/vda")
    (root / "nvme0n1").symlink_to("../devices/pci0000:00/0000:00:01.0/nvme/nvme0/nvme0n1")
    return root
