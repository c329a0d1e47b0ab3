"""Helpers shared by the rota tests."""

import uuid

from supportrota.domain.models import CalendarDate, Engineer, EngineerIdentifier


def make_engineer(name: str, last_served: CalendarDate) -> Engineer:
    """Create a test engineer with an identifier derived from the name."""
    return Engineer(
        id=EngineerIdentifier(uuid.uuid5(uuid.NAMESPACE_OID, name)),
        name=name,
        last_served=last_served,
    )
