#!/usr/bin/env python3
"""
Processors module - FIT decoding and activity aggregation
"""

from .interface import (
    DecoderState, MessageCategory, MetricStatus, ProcessingStatus, WarningLog,
    ProcessingError, FitDecodeError, FitHeaderError,
    InvalidSignature, BufferTooShort, InvalidHeader,
    OutOfBounds, UndefinedLocalMessage, MalformedRecord
)

from .binary_reader import BinaryReader
from .definitions import (
    FieldDefinition, DeveloperFieldDefinition, MessageDefinition, MessageDefinitionTable
)
from .fit_decoder import FitDecoder, FitHeader, DecodedMessage, DecodeResult, decode_fit
from .activity import (
    ActivityAggregator, ActivityMetrics, LapMetrics, AggregationResult, Sample, map_sport
)

__all__ = [
    # States and containers
    'DecoderState', 'MessageCategory', 'MetricStatus', 'ProcessingStatus', 'WarningLog',

    # Exceptions
    'ProcessingError', 'FitDecodeError', 'FitHeaderError',
    'InvalidSignature', 'BufferTooShort', 'InvalidHeader',
    'OutOfBounds', 'UndefinedLocalMessage', 'MalformedRecord',

    # Decoding
    'BinaryReader',
    'FieldDefinition', 'DeveloperFieldDefinition', 'MessageDefinition', 'MessageDefinitionTable',
    'FitDecoder', 'FitHeader', 'DecodedMessage', 'DecodeResult', 'decode_fit',

    # Aggregation
    'ActivityAggregator', 'ActivityMetrics', 'LapMetrics', 'AggregationResult', 'Sample',
    'map_sport',
]
