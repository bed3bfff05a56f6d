"""Timekeeping package.

Feature modules (sessions, records, projects, actors, reports) with a thin
Flask controller layer on top of service/repository layers. The session
engine in ``sessions`` owns the clock-in/clock-out lifecycle.
"""
