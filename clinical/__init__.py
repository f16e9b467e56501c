"""Clinical application for the clinicboard backend.

This package holds the patient state machine, staff availability and
shift evaluation, audit logging and the dashboard KPI aggregates,
together with the REST endpoints that expose them.
"""
