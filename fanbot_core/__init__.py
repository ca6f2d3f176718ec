"""
Fanbot
======

Voice-driven baseball companion.

This package provides:
- Sports data loading with a readiness barrier (teams, standings, schedule)
- Schedule merging and team lookups (standing, upcoming games)
- A conversation orchestrator driving an external dialog engine
- Text notifications with the upcoming schedule and news headlines
"""

__version__ = "1.0.0"
