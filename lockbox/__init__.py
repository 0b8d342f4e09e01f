"""Lockbox: time-delayed disclosure vault (service + sync client)."""

__version__ = "2.0.0"
