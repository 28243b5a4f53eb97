from __future__ import annotations

from dataclasses import dataclass

from .database.connection import DBConfig, DatabaseConnection
from .schedules.mysql_schedule_repository import MySQLScheduleRepository, MySQLVacationRepository
from .schedules.repository import ScheduleRepository, VacationRepository
from .schedules.service import WeeklyScheduleService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection | None

    schedules_repo: ScheduleRepository
    vacations_repo: VacationRepository

    def weekly_schedule_service(self) -> WeeklyScheduleService:
        # Fresh service per request: its item cache belongs to one viewer.
        return WeeklyScheduleService(self.schedules_repo, self.vacations_repo)


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return Container(
        conn=conn,
        schedules_repo=MySQLScheduleRepository(conn),
        vacations_repo=MySQLVacationRepository(conn),
    )
