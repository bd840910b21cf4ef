"""Background ticker that drives virtual pet decay.

Runs as an asyncio task on the same loop as the state manager.
"""

import asyncio
import logging
from typing import Optional

from familyhome.services.app_state import AppStateManager

logger = logging.getLogger(__name__)


class PetTicker:
    """Calls ``update_pet_status`` on the manager at a fixed interval."""

    def __init__(self, manager: AppStateManager, interval: float):
        self._manager = manager
        self._interval = interval
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        if self._task and not self._task.done():
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="pet-ticker")
        logger.info("Pet ticker started (every %ss)", self._interval)

    async def stop(self) -> None:
        if not self._task:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Pet ticker stopped")

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            result = self._manager.update_pet_status()
            if result.is_applied:
                pet = result.value
                logger.info(
                    "Pet %s decayed: hunger=%.2f happiness=%.2f energy=%.2f health=%.2f",
                    pet.name, pet.hunger, pet.happiness, pet.energy, pet.health,
                )
