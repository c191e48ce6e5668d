#!/usr/bin/env python3
"""
FIT message definitions and the local-message-type table.

A Definition Message binds a local message type (0-15) to a global message
number and a field layout; later Data Messages for that local type are read
with the active layout. One table belongs to one decode call.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .interface import UndefinedLocalMessage
from .profile import BaseType, lookup_base_type


LOCAL_MESSAGE_SLOTS = 16
# Compressed-timestamp headers carry a 2-bit local type
COMPRESSED_LOCAL_SLOTS = 4

LITTLE_ENDIAN = 0
BIG_ENDIAN = 1


@dataclass(frozen=True)
class FieldDefinition:
    """One field descriptor from a Definition Message"""
    field_definition_number: int
    size: int
    base_type: int

    @property
    def base(self) -> BaseType:
        return lookup_base_type(self.base_type)


@dataclass(frozen=True)
class DeveloperFieldDefinition:
    """One developer field descriptor from a Definition Message"""
    field_number: int
    size: int
    developer_data_index: int


@dataclass(frozen=True)
class MessageDefinition:
    """Active field layout for a local message type"""
    local_type: int
    global_message_number: int
    architecture: int
    fields: Tuple[FieldDefinition, ...] = ()
    developer_fields: Tuple[DeveloperFieldDefinition, ...] = ()

    @property
    def little_endian(self) -> bool:
        return self.architecture == LITTLE_ENDIAN

    @property
    def data_size(self) -> int:
        """Bytes occupied by one Data Message body for this definition"""
        return sum(f.size for f in self.fields) + sum(f.size for f in self.developer_fields)


@dataclass
class MessageDefinitionTable:
    """Fixed 16-slot table of active message definitions"""
    _slots: List[Optional[MessageDefinition]] = field(
        default_factory=lambda: [None] * LOCAL_MESSAGE_SLOTS
    )

    def define(self, local_type: int, definition: MessageDefinition):
        """Store or overwrite the definition for a local message type"""
        if not 0 <= local_type < LOCAL_MESSAGE_SLOTS:
            raise ValueError(f"Local message type {local_type} outside 0-{LOCAL_MESSAGE_SLOTS - 1}")
        self._slots[local_type] = definition

    def lookup(self, local_type: int) -> MessageDefinition:
        """Return the active definition for a local message type"""
        if not 0 <= local_type < LOCAL_MESSAGE_SLOTS:
            raise UndefinedLocalMessage(local_type)
        definition = self._slots[local_type]
        if definition is None:
            raise UndefinedLocalMessage(local_type)
        return definition

    def reset(self):
        """Clear all slots"""
        self._slots = [None] * LOCAL_MESSAGE_SLOTS

    def active_types(self) -> List[int]:
        return [i for i, d in enumerate(self._slots) if d is not None]

    def __len__(self) -> int:
        return len(self.active_types())
