#!/usr/bin/env python3
"""
Diskstats plugin for a monitoring agent.

Prints one "<prefix>.<category>.<device>.<field>\t<value>\t<epoch>" line per
metric read from /proc/diskstats. When MACKEREL_AGENT_PLUGIN_META is set,
prints the graph definitions instead. With --serve, runs the HTTP exporter.
"""

import argparse
import json
import logging
import os
import sys
import time

from collector.disk.collect import collect_from_system
from collector.disk.graphs import graph_meta, metric_scales
from core.config import settings

logger = logging.getLogger(__name__)

META_ENV = "MACKEREL_AGENT_PLUGIN_META"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Linux diskstats metrics plugin")
    parser.add_argument("--metric-key-prefix", default=settings.METRIC_KEY_PREFIX,
                        help="Metric key prefix")
    parser.add_argument("--ignore-virtual", dest="ignore_virtual",
                        action=argparse.BooleanOptionalAction,
                        default=settings.IGNORE_VIRTUAL,
                        help="Skip virtual block devices such as loopback")
    parser.add_argument("--diskstats", default=settings.DISKSTATS_PATH,
                        help="Path of the diskstats file")
    parser.add_argument("--sys-block", default=settings.SYS_BLOCK_PATH,
                        help="Path of the block device registry")
    parser.add_argument("--serve", action="store_true",
                        help="Run the HTTP exporter instead of printing once")
    parser.add_argument("--port", type=int, default=settings.PORT)
    return parser.parse_args(argv)


def output_values(metrics, prefix, now, out):
    scales = metric_scales(prefix)

    for key in sorted(metrics):
        category, _, subfield = key.split(".")
        value = metrics[key] * scales.get((category, subfield), 1)
        out.write(f"{prefix}.{key}\t{value:f}\t{now}\n")


def output_meta(prefix, out):
    out.write("# mackerel-agent-plugin\n")
    out.write(json.dumps(graph_meta(prefix)) + "\n")


def run(argv=None, out=None, environ=None):
    logging.basicConfig(level=settings.LOG_LEVEL)
    out = sys.stdout if out is None else out
    environ = os.environ if environ is None else environ
    args = parse_args(argv)

    if args.serve:
        import uvicorn
        from main import app

        logger.info(f"Starting diskstats exporter on port {args.port}...")
        uvicorn.run(app, host="0.0.0.0", port=args.port)
        return 0

    if environ.get(META_ENV, "") != "":
        output_meta(args.metric_key_prefix, out)
        return 0

    result = collect_from_system(args.diskstats, args.sys_block, args.ignore_virtual)
    if not result.ok:
        logger.error("%s", result.error)
        return 1

    output_values(result.metrics, args.metric_key_prefix, int(time.time()), out)
    return 0


if __name__ == "__main__":
    sys.exit(run())
