"""Fixtures for channel model."""

import pytest

from app.constants.helpdesk import ChannelType
from app.models.channel import Channel


@pytest.fixture(scope="function")
def setup_channel(db, faker):
    """
    Create a client channel (private chat) for testing.
    """
    channel = Channel(
        external_chat_id=str(faker.random_int(min=100000, max=999999)),
        name=faker.name(),
        type=ChannelType.CLIENT.value,
        chat_kind="private",
    )
    db.add(channel)
    db.commit()
    db.refresh(channel)
    return channel


@pytest.fixture(scope="function")
def setup_partner_channel(db, faker):
    """Create a partner channel (supergroup) for testing."""
    channel = Channel(
        external_chat_id=str(-1000000000000 - faker.random_int(min=1, max=99999)),
        name=faker.company(),
        type=ChannelType.PARTNER.value,
        chat_kind="supergroup",
    )
    db.add(channel)
    db.commit()
    db.refresh(channel)
    return channel
