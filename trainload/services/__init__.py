#!/usr/bin/env python3
"""
Services package - High-level services for trainload functionality
"""

from .activity_service import ActivityService, ActivityProcessingResult

__all__ = ['ActivityService', 'ActivityProcessingResult']
