"""Flow models and the flow directory."""

from flowbot.flows.directory import FlowDirectory, StaticFlowDirectory, find_flow
from flowbot.flows.models import Entry, Flow, MessageData, Organization, User

__all__ = [
    "Entry",
    "Flow",
    "FlowDirectory",
    "MessageData",
    "Organization",
    "StaticFlowDirectory",
    "User",
    "find_flow",
]
