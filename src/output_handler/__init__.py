"""
Output Handler Module for Job Sheet Extraction System.

This module persists finished job drafts:
    - SQLite job store with workshop status tracking

Author: Workshop Tools Team
"""

from .database_handler import JobStatus, JobStore

__all__ = ['JobStatus', 'JobStore']
