import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from collector.disk.blockdev_linux import BlockDeviceEntry, classify, scan_block_devices
from collector.disk.diskstats_parser import (
    DEVICE_NAME_PATTERN,
    METRIC_NAMES,
    normalize,
    sanitize_device_name,
    tokenize,
)
from core.errors import CollectionError, SourceUnavailable

logger = logging.getLogger(__name__)


@dataclass
class CollectionResult:
    """Either the full metric mapping or the error that aborted the cycle."""

    metrics: Dict[str, float] = field(default_factory=dict)
    error: Optional[CollectionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Dict[str, float]:
        if self.error is not None:
            raise self.error
        return self.metrics


def collect(
    diskstats: str,
    entries: Iterable[BlockDeviceEntry],
    ignore_virtual: bool,
    sys_block="/sys/block",
    metric_names=METRIC_NAMES,
    device_name_pattern=DEVICE_NAME_PATTERN,
) -> CollectionResult:
    try:
        metrics = _collect(
            diskstats, entries, ignore_virtual, sys_block,
            metric_names, device_name_pattern,
        )
    except CollectionError as e:
        return CollectionResult(error=e)

    return CollectionResult(metrics=metrics)


def _collect(diskstats, entries, ignore_virtual, sys_block, metric_names, device_name_pattern):
    blocks = {}

    # Create list of virtual devices if required.
    if ignore_virtual:
        blocks = classify(entries, sys_block=sys_block)

    metrics = {}
    for row in tokenize(diskstats):
        # Too short a row has no device name; normalize rejects it.
        device = row[2] if len(row) > 2 else None

        if device is not None and blocks.get(device) is False:
            logger.debug("skipping virtual device %s", device)
            continue

        label = sanitize_device_name(device or "", device_name_pattern)
        normalize(label, row, metrics, metric_names)

    return metrics


def read_diskstats(path="/proc/diskstats") -> str:
    try:
        with open(path, "r") as f:
            return f.read()
    except OSError as e:
        raise SourceUnavailable(path, e) from e


def collect_from_system(
    diskstats_path="/proc/diskstats",
    sys_block="/sys/block",
    ignore_virtual=True,
) -> CollectionResult:
    """Read the live sources and run one collection cycle."""
    try:
        diskstats = read_diskstats(diskstats_path)
        entries = scan_block_devices(sys_block) if ignore_virtual else []
    except SourceUnavailable as e:
        return CollectionResult(error=e)

    return collect(diskstats, entries, ignore_virtual, sys_block=sys_block)
