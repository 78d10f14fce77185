"""
$ cat /proc/diskstats
 253       0 vda 1535048 279 41601294 520508 73249233 7260487 540931528 10616000 0 5871704 11113052
 253       1 vda1 1534559 279 41576784 520420 46025748 7260487 540931528 8670868 0 3948708 9173652
 253      16 vdb 72583 27934 814612 11784 36796 368511 3242456 23704 0 25272 35452

major, minor, device name, then one counter per METRIC_NAMES entry.
"""

import re

from core.errors import MalformedRow

IDENTITY_FIELDS = 3

# Discards appear with kernel 4.18, flushes with 5.5.
# See linux/Documentation/admin-guide/iostats.rst
METRIC_NAMES = (
    "request.reads",
    "merge.reads",
    "sector.read",
    "time.read",
    "request.writes",
    "merge.writes",
    "sector.written",
    "time.write",
    "inprogress.io",
    "time.io",
    "time.ioWeighted",
    "request.discards",
    "merge.discards",
    "sector.Discarded",
    "time.discard",
    "request.flushes",
    "time.flush",
)

# Cumulative counters are reported divided by 60 so that the agent's
# per-minute diff comes out per second. Gauges stay untouched.
PER_SECOND_CATEGORIES = frozenset(["request", "merge", "sector", "time"])

DEVICE_NAME_PATTERN = re.compile(r"[^A-Za-z0-9_-]")


def tokenize(text):
    rows = []

    for line in text.split("\n"):
        fields = line.split()

        if not fields or not fields[0]:
            continue

        rows.append(fields)

    return rows


def sanitize_device_name(device, pattern=DEVICE_NAME_PATTERN):
    return pattern.sub("", device)


def metric_key(template: str, label: str) -> str:
    # "time.io" -> "time.vda1.io"
    return template.replace(".", "." + label + ".", 1)


def normalize(label, row, metrics, metric_names=METRIC_NAMES):
    """
    Parse the counters of one diskstats row into metrics, keyed by
    metric_key(template, label).

    Counters are matched positionally against metric_names, so rows from
    kernels without discard or flush stats simply yield fewer metrics.
    Counters past the end of the catalogue are ignored.
    """
    counters = row[IDENTITY_FIELDS:]
    if not counters:
        device = row[2] if len(row) > 2 else label
        raise MalformedRow(device, "counters", " ".join(row))

    for template, token in zip(metric_names, counters):
        try:
            value = float(token)
        except ValueError:
            raise MalformedRow(row[2], template, token) from None

        if template.split(".", 1)[0] in PER_SECOND_CATEGORIES:
            value /= 60

        metrics[metric_key(template, label)] = value

    return metrics
