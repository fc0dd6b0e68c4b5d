# dashboard/scheduler.py

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List

logger = logging.getLogger(__name__)

JobFunc = Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class IntervalJob:
    name: str
    period: float      # secondes
    func: JobFunc


class IntervalScheduler:
    """
    Propriétaire de tous les timers du dashboard.

    - un job = une tâche asyncio : exécution immédiate puis toutes les `period` secondes
    - aucun ordre garanti entre jobs
    - stop() annule toutes les tâches et attend leur fin
    """

    def __init__(self) -> None:
        self._jobs: Dict[str, IntervalJob] = {}
        self._tasks: Dict[str, asyncio.Task] = {}

    @property
    def job_names(self) -> List[str]:
        return list(self._jobs)

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    def add(self, name: str, period: float, func: JobFunc) -> None:
        if name in self._jobs:
            raise ValueError(f"intervalle déjà déclaré : {name}")
        if period <= 0:
            raise ValueError(f"période invalide pour {name} : {period}")
        if self.running:
            raise RuntimeError("impossible d'ajouter un intervalle après start()")
        self._jobs[name] = IntervalJob(name=name, period=period, func=func)

    def start(self) -> None:
        if self.running:
            return
        for job in self._jobs.values():
            self._tasks[job.name] = asyncio.create_task(self._run(job), name=f"interval:{job.name}")
        logger.info("Scheduler démarré (%s)", ", ".join(self._jobs))

    async def stop(self) -> None:
        tasks = list(self._tasks.values())
        self._tasks.clear()

        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        if tasks:
            logger.info("Scheduler arrêté (%d intervalles annulés)", len(tasks))

    async def _run(self, job: IntervalJob) -> None:
        while True:
            try:
                await job.func()
            except Exception:
                # Un job en erreur ne coupe pas son intervalle
                logger.exception("Job %s en erreur", job.name)
            await asyncio.sleep(job.period)
