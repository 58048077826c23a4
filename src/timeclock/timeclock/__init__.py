"""Timeclock package.

Turns raw time-clock punches (biometric exports, spreadsheet uploads) into
per-day and per-month attendance. Organized by feature modules (punches,
ingestion, classification, reports, ...) with thin Flask controllers over
service/repository layers.
"""
