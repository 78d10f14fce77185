from dataclasses import asdict, dataclass, field
from typing import Dict, List, Tuple

UNIT_FLOAT = "float"
UNIT_INTEGER = "integer"
UNIT_IOPS = "iops"
UNIT_BYTES_PER_SECOND = "bytes/sec"


@dataclass
class GraphMetric:
    name: str
    label: str
    diff: bool = False
    stacked: bool = False
    scale: float = 0


@dataclass
class Graph:
    label: str
    unit: str
    metrics: List[GraphMetric] = field(default_factory=list)


def graph_definition(prefix="disk") -> Dict[str, Graph]:
    label_prefix = prefix.title()

    return {
        "request.#": Graph(
            label=label_prefix + " Requests (/sec)",
            unit=UNIT_IOPS,
            metrics=[
                GraphMetric("reads", "read", diff=True),
                GraphMetric("writes", "write", diff=True),
                GraphMetric("discards", "discard", diff=True),
                GraphMetric("flushes", "flush", diff=True),
            ],
        ),
        "merge.#": Graph(
            label=label_prefix + " Merge (/sec)",
            unit=UNIT_FLOAT,
            metrics=[
                GraphMetric("reads", "read", diff=True),
                GraphMetric("writes", "write", diff=True),
                GraphMetric("discards", "discard", diff=True),
            ],
        ),
        "sector.#": Graph(
            label=label_prefix + " Traffic",
            unit=UNIT_BYTES_PER_SECOND,
            # One sector is 512 bytes on Linux regardless of the hardware.
            metrics=[
                GraphMetric("read", "read", diff=True, scale=2),
                GraphMetric("written", "write", diff=True, scale=2),
                GraphMetric("Discarded", "discard", diff=True, scale=2),
            ],
        ),
        "time.#": Graph(
            label=label_prefix + " Time (ms/sec)",
            unit=UNIT_FLOAT,
            metrics=[
                GraphMetric("read", "read", diff=True),
                GraphMetric("write", "write", diff=True),
                GraphMetric("io", "io", diff=True),
                GraphMetric("ioWeighted", "io weighted", diff=True),
                GraphMetric("discard", "discard", diff=True),
                GraphMetric("flush", "flush", diff=True),
            ],
        ),
        "inprogress.#": Graph(
            label=label_prefix + " IO in Progress",
            unit=UNIT_INTEGER,
            metrics=[GraphMetric("io", "io")],
        ),
    }


def graph_meta(prefix="disk") -> dict:
    """Graph definitions keyed by "<prefix>.<category>.#", JSON ready."""
    return {
        "graphs": {
            f"{prefix}.{name}": asdict(graph)
            for name, graph in graph_definition(prefix).items()
        }
    }


def metric_scales(prefix="disk") -> Dict[Tuple[str, str], float]:
    """(category, subfield) -> multiplier the plugin applies before printing."""
    scales = {}
    for name, graph in graph_definition(prefix).items():
        category = name.split(".", 1)[0]
        for metric in graph.metrics:
            if metric.scale:
                scales[(category, metric.name)] = metric.scale
    return scales
