from __future__ import annotations

import asyncio

import pytest

from endfield.models import ClusterStatus, FieldNode
from endfield.polling import StatusPoller, compute_status, make_field_status, parse_ready


class TestStatusHelpers:
    @pytest.mark.parametrize("column,expected", [("2/3", (2, 3)), ("0/1", (0, 1)), ("", (0, 1)), ("x/y", (0, 1))])
    def test_parse_ready(self, column, expected):
        assert parse_ready(column) == expected

    @pytest.mark.parametrize("ready,desired,status", [(0, 0, "gray"), (0, 2, "red"), (1, 2, "yellow"), (2, 2, "green")])
    def test_compute_status(self, ready, desired, status):
        assert compute_status(ready, desired) == status

    def test_make_field_status(self):
        status = make_field_status("db1", "ns1", "1/3")

        assert status.ready == 1
        assert status.desired == 3
        assert status.available == 1
        assert status.status == "yellow"
        assert status.pods == []


class TestStatusPoller:
    @pytest.mark.asyncio
    async def test_poll_once_stores_latest(self, cluster):
        cluster.status = ClusterStatus(workloads=[make_field_status("db1", "ns1", "1/1")])
        received = []
        poller = StatusPoller(cluster, interval_seconds=60, on_status=received.append)

        status = await poller.poll_once()

        assert status is cluster.status
        assert poller.latest is cluster.status
        assert poller.poll_count == 1
        assert received == [cluster.status]

    @pytest.mark.asyncio
    async def test_failed_poll_keeps_previous_status(self, cluster):
        poller = StatusPoller(cluster, interval_seconds=60)
        await poller.poll_once()
        previous = poller.latest
        cluster.fail.add("get_cluster_status")

        assert await poller.poll_once() is None
        assert poller.latest is previous
        assert poller.poll_count == 1

    @pytest.mark.asyncio
    async def test_start_and_stop(self, cluster):
        poller = StatusPoller(cluster, interval_seconds=0.01)

        await poller.start()
        assert poller.running
        await asyncio.sleep(0.05)
        await poller.stop()

        assert not poller.running
        assert poller.poll_count >= 2

    @pytest.mark.asyncio
    async def test_start_twice_reuses_task(self, cluster):
        poller = StatusPoller(cluster, interval_seconds=60)

        first = await poller.start()
        second = await poller.start()
        await poller.stop()

        assert first is second

    @pytest.mark.asyncio
    async def test_loop_survives_failures(self, cluster):
        cluster.fail.add("get_cluster_status")
        poller = StatusPoller(cluster, interval_seconds=0.01)

        await poller.start()
        await asyncio.sleep(0.05)
        assert poller.running
        await poller.stop()

        assert cluster.names().count("get_cluster_status") >= 2
        assert poller.latest is None

    @pytest.mark.asyncio
    async def test_stop_without_start(self, cluster):
        await StatusPoller(cluster).stop()

    @pytest.mark.asyncio
    async def test_status_for(self, cluster):
        cluster.status = ClusterStatus(workloads=[make_field_status("db1", "ns1", "1/1")])
        poller = StatusPoller(cluster, interval_seconds=60)
        node = FieldNode(id="db1-statefulset", label="db1", kind="StatefulSet", namespace="ns1")

        assert poller.status_for(node) is None
        await poller.poll_once()

        assert poller.status_for(node).status == "green"
        assert poller.status_for(node.model_copy(update={"namespace": "other"})) is None
