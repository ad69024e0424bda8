"""
Society Fund Tracker

Fund collection and expense records for a residential society, with Excel and
PDF reports.
"""

__version__ = "1.0.0"
