"""Tests for AgentDirectoryClassifier."""

from app.constants.helpdesk import RoleMethod, UserRole
from app.services.agent_directory_classifier import AgentDirectoryClassifier


def test_staff_name_pattern(db):
    result = AgentDirectoryClassifier(db).classify("1", None, "Support Team")
    assert result.role == UserRole.EMPLOYEE
    assert result.method == RoleMethod.NAME_PATTERN


def test_match_by_external_id(db, setup_agent):
    result = AgentDirectoryClassifier(db).classify(
        setup_agent.external_id, None, setup_agent.name
    )
    assert result.role == UserRole.EMPLOYEE
    assert result.method == RoleMethod.EXTERNAL_ID
    assert result.agent_id == setup_agent.id


def test_match_by_username_binds_external_id(db, setup_unbound_agent):
    username = setup_unbound_agent.username.lstrip("@").upper()
    result = AgentDirectoryClassifier(db).classify("424242", username, "Someone")

    assert result.role == UserRole.PARTNER
    assert result.method == RoleMethod.USERNAME
    assert result.agent_id == setup_unbound_agent.id
    db.refresh(setup_unbound_agent)
    assert setup_unbound_agent.external_id == "424242"

    again = AgentDirectoryClassifier(db).classify("424242", None, "Someone")
    assert again.method == RoleMethod.EXTERNAL_ID


def test_inactive_agent_ignored(db, setup_agent):
    setup_agent.is_active = False
    db.commit()
    result = AgentDirectoryClassifier(db).classify(setup_agent.external_id, None, "X")
    assert result.role == UserRole.CLIENT


def test_unknown_sender_is_client(db):
    result = AgentDirectoryClassifier(db).classify("999", "stranger", "Stranger")
    assert result.is_client is True
    assert result.method == RoleMethod.DEFAULT

