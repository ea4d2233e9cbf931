"""Non-volatile memory emulation."""

from .memory import PersistentStore
