from typing import Any, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.play_arena.app.interface.i_roster_validator import IRosterValidator


class ListRosterUsersUseCase:
    def __init__(self, *, roster_validator: IRosterValidator) -> None:
        self.roster_validator = roster_validator

    @classmethod
    @inject
    def depends(
        cls,
        roster_validator: IRosterValidator = Depends(Provide[Container.roster_validator]),
    ) -> Self:
        return cls(roster_validator=roster_validator)

    @Logger.io
    async def list_users(self) -> list[dict[str, Any]]:
        return await self.roster_validator.list_users()
