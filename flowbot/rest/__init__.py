"""Flowdock REST API adapters."""

from flowbot.rest.auth import basic_auth_header
from flowbot.rest.flows import FlowManager
from flowbot.rest.messages import MessageManager
from flowbot.rest.users import UserManager

__all__ = ["FlowManager", "MessageManager", "UserManager", "basic_auth_header"]
