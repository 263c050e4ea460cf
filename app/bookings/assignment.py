# app/bookings/assignment.py

from typing import Optional

from app.agencies.utils import TenantContext
from app.bookings.exceptions import AssignmentTargetNotFoundException, MissingAssignmentException
from app.bookings.models import AssignmentSnapshot
from app.roster.models import Agent, Driver, Vehicle
from app.roster.repository import RosterRepository
from app.utils.logger import get_logger

logger = get_logger(__name__)


class AssignmentResolver:
    """
    Looks up the driver, vehicle and optional agent on the agency's roster
    and freezes their display fields into an AssignmentSnapshot.
    """

    def __init__(self, roster: RosterRepository):
        self.roster = roster

    async def resolve(
        self, tenant: TenantContext, driver_id: Optional[int], vehicle_id: Optional[int],
        agent_id: Optional[int] = None,
    ) -> AssignmentSnapshot:
        """
        Raises:
            MissingAssignmentException: driver or vehicle id absent
            AssignmentTargetNotFoundException: an id is not on this agency's roster
        """
        if not driver_id or not vehicle_id:
            logger.warning("Assignment rejected, driver or vehicle missing",
                           driver_id=driver_id, vehicle_id=vehicle_id)
            raise MissingAssignmentException()

        driver = await self.roster.get(Driver, tenant.uid, driver_id)
        if driver is None:
            raise AssignmentTargetNotFoundException("driver", driver_id)

        vehicle = await self.roster.get(Vehicle, tenant.uid, vehicle_id)
        if vehicle is None:
            raise AssignmentTargetNotFoundException("vehicle", vehicle_id)

        agent_name = None
        if agent_id:
            agent = await self.roster.get(Agent, tenant.uid, agent_id)
            if agent is None:
                raise AssignmentTargetNotFoundException("agent", agent_id)
            agent_name = agent.name

        return AssignmentSnapshot(
            driver_id=driver.id,
            driver_name=driver.name,
            driver_mobile=driver.mobile,
            vehicle_id=vehicle.id,
            vehicle_number=vehicle.number,
            vehicle_model=vehicle.model,
            agent_id=agent_id or None,
            agent_name=agent_name,
        )
