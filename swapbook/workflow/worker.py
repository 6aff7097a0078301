"""Worker for the trade lifecycle workflow.

Starts a Temporal worker with TradeLifecycleWorkflow and the lifecycle
activities registered on the configured task queue.

Usage::

    import asyncio
    from swapbook.workflow.worker import run_worker

    asyncio.run(run_worker(manager))
"""

from __future__ import annotations

import logging

from temporalio.client import Client
from temporalio.worker import Worker

from swapbook.infra.config import TemporalWorkerConfig
from swapbook.trade.lifecycle import TradeLifecycleManager
from swapbook.workflow.activities import TradeLifecycleActivities
from swapbook.workflow.lifecycle_workflow import TradeLifecycleWorkflow

logger = logging.getLogger(__name__)


def build_worker(client: Client, manager: TradeLifecycleManager, task_queue: str) -> Worker:
    """Worker serving the lifecycle workflow and activities for one manager."""
    activities = TradeLifecycleActivities(manager)
    return Worker(
        client,
        task_queue=task_queue,
        workflows=[TradeLifecycleWorkflow],
        activities=activities.all(),
    )


async def run_worker(
    manager: TradeLifecycleManager,
    config: TemporalWorkerConfig | None = None,
) -> None:
    """Connect to Temporal and run the worker until interrupted."""
    from swapbook.workflow.converter import SWAPBOOK_DATA_CONVERTER

    config = config if config is not None else TemporalWorkerConfig.from_env()
    client = await Client.connect(
        config.target_host, namespace=config.namespace,
        data_converter=SWAPBOOK_DATA_CONVERTER,
    )
    logger.info(
        "Starting lifecycle worker on %s (namespace %s, queue %s)",
        config.target_host, config.namespace, config.task_queue,
    )
    await build_worker(client, manager, config.task_queue).run()
