import logging
import re

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily

from collector.disk.collect import collect_from_system
from core.config import settings

logger = logging.getLogger(__name__)

GAUGE_CATEGORIES = ("inprogress",)

_CAMEL = re.compile(r"(?<=[a-z0-9])([A-Z])")


def snake_case(name):
    # "ioWeighted" -> "io_weighted", "Discarded" -> "discarded"
    return _CAMEL.sub(r"_\1", name).lower()


class DiskIOCollector:
    def __init__(self, prefix=None, diskstats_path=None, sys_block=None, ignore_virtual=None):
        # None falls back to the current settings at scrape time
        self._prefix = prefix
        self._diskstats_path = diskstats_path
        self._sys_block = sys_block
        self._ignore_virtual = ignore_virtual

    def describe(self):
        # Families depend on the devices present, keep registration free of I/O.
        return []

    def collect(self):
        prefix = self._prefix or settings.METRIC_KEY_PREFIX
        ignore_virtual = settings.IGNORE_VIRTUAL if self._ignore_virtual is None else self._ignore_virtual
        success = GaugeMetricFamily(
            f"{prefix}_collection_success",
            "Whether the last diskstats collection succeeded.",
        )

        result = collect_from_system(
            self._diskstats_path or settings.DISKSTATS_PATH,
            self._sys_block or settings.SYS_BLOCK_PATH,
            ignore_virtual,
        )
        if not result.ok:
            logger.error("diskstats collection failed: %s", result.error)
            success.add_metric([], 0)
            yield success
            return

        families = {}
        for key, value in sorted(result.metrics.items()):
            category, device, subfield = key.split(".")
            name = f"{prefix}_{category}_{snake_case(subfield)}"

            family = families.get(name)
            if family is None:
                if category in GAUGE_CATEGORIES:
                    family = GaugeMetricFamily(
                        name, f"Disk {category} {subfield}.", labels=["device"]
                    )
                else:
                    family = CounterMetricFamily(
                        name, f"Disk {category} {subfield} (per-second scaled).", labels=["device"]
                    )
                families[name] = family

            family.add_metric([device], value)

        success.add_metric([], 1)

        yield from families.values()
        yield success
