"""Fixtures for case model."""

import pytest

from app.constants.helpdesk import CasePriority, CaseStatus
from app.models.case import Case


@pytest.fixture(scope="function")
def setup_case(db, faker, setup_channel):
    """
    Create a detected case in the client channel.
    """
    case = Case(
        channel_id=setup_channel.id,
        title=faker.sentence(nb_words=4),
        priority=CasePriority.MEDIUM.value,
        status=CaseStatus.DETECTED.value,
        ticket_number=faker.random_int(min=1, max=50),
    )
    db.add(case)
    db.commit()
    db.refresh(case)
    return case
