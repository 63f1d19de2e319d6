"""
School assistant scheduling core.

Leave requests, schedules with conflict detection, shift exchanges between
admins, disruptions and stored reports over a relational database.
"""

__version__ = "1.0.0"
