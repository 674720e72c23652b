"""Attendance Reconciliation Engine.

This package is organized by feature modules (ingestion, hours, reconciliation,
approvals, ...) with a thin Flask controller layer and service/repository layers.
"""
