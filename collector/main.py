from prometheus_client import REGISTRY
from collector.disk.diskio_collector_linux import DiskIOCollector

register = REGISTRY
register.register(DiskIOCollector())
