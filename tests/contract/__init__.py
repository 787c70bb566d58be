"""
Contract tests for the schedule sync core.

Test Categories:
- Sync window: Paris week anchoring, DST offsets, current-show override
- Snapshot store: 24-hour retention and absent IDs
"""
