"""Attendance module - clocking in and out."""
