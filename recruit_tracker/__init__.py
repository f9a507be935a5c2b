"""Recruit Tracker - college baseball recruiting workflow backend."""

__version__ = "0.1.0"
