"""Fixtures for support agent directory."""

import pytest

from app.constants.helpdesk import UserRole
from app.models.agent import Agent


@pytest.fixture(scope="function")
def setup_agent(db, faker):
    """
    Create an active employee agent bound to an external id.
    """
    agent = Agent(
        name=faker.name(),
        username=faker.user_name(),
        external_id=str(faker.random_int(min=1000, max=9999)),
        role=UserRole.EMPLOYEE.value,
    )
    db.add(agent)
    db.commit()
    db.refresh(agent)
    return agent


@pytest.fixture(scope="function")
def setup_unbound_agent(db, faker):
    """Create an agent known only by username (no external id yet)."""
    agent = Agent(
        name=faker.name(),
        username="@" + faker.user_name(),
        external_id=None,
        role=UserRole.PARTNER.value,
    )
    db.add(agent)
    db.commit()
    db.refresh(agent)
    return agent
