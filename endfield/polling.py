import asyncio, logging
from typing import Callable
from .commands import ClusterCommands
from .models import ClusterStatus, FieldStatus, FieldNode, PodInfo
from .lib.configuration import POLL_INTERVAL_SECONDS

logger = logging.getLogger(__name__)

def parse_ready(s: str) -> tuple[int, int]:
    """'2/3' -> (2, 3). anything unparseable counts as 0 of 1"""
    parts = s.split('/')
    if len(parts) != 2:
        return 0, 1
    ready = int(parts[0]) if parts[0].isdigit() else 0
    total = int(parts[1]) if parts[1].isdigit() else 1
    return ready, total

def compute_status(ready: int, desired: int) -> str:
    if desired == 0:
        return 'gray'
    if ready == 0:
        return 'red'
    if ready < desired:
        return 'yellow'
    return 'green'

def make_field_status(label: str, namespace: str, ready_column: str, available: int | None = None,
        pods: list[PodInfo] | None = None) -> FieldStatus:
    """builds a FieldStatus from a kubectl READY column such as '1/3'"""
    ready, desired = parse_ready(ready_column)
    return FieldStatus(
        label=label,
        namespace=namespace,
        desired=desired,
        ready=ready,
        available=ready if available is None else available,
        status=compute_status(ready, desired),
        pods=pods or [],
    )


class StatusPoller:
    """
    Polls cluster status on a fixed interval in the background.

    A failed poll is logged and skipped, the previous status stays available.
    Usage:
        poller = StatusPoller(cluster)
        await poller.start()
        ...
        await poller.stop()
    """

    def __init__(self, cluster: ClusterCommands, interval_seconds: float = POLL_INTERVAL_SECONDS,
            on_status: Callable[[ClusterStatus], None] | None = None):
        self.cluster = cluster
        self.interval_seconds = interval_seconds
        self.on_status = on_status
        self.latest: ClusterStatus | None = None
        self.poll_count = 0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> asyncio.Task:
        if self.running:
            logger.warning("Status poller already running")
            return self._task # type: ignore[return-value]
        self._task = asyncio.create_task(self._poll_loop())
        logger.info(f"Status poller started (interval={self.interval_seconds}s)")
        return self._task

    async def stop(self):
        if self._task is None:
            return
        if not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info(f"Status poller stopped after {self.poll_count} poll(s)")

    async def poll_once(self) -> ClusterStatus | None:
        try:
            status = await self.cluster.get_cluster_status()
        except Exception as e:
            logger.warning(f"Cluster status poll failed: {e}")
            return None
        self.poll_count += 1
        self.latest = status
        if status.error:
            logger.debug(f"Cluster status reported an error: {status.error}")
        if self.on_status is not None:
            self.on_status(status)
        return status

    async def _poll_loop(self):
        while True:
            await self.poll_once()
            await asyncio.sleep(self.interval_seconds)

    def status_for(self, node: FieldNode) -> FieldStatus | None:
        if self.latest is None:
            return None
        for workload in self.latest.workloads:
            if workload.label == node.label and workload.namespace == node.namespace:
                return workload
        return None
