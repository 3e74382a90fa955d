"""
Appointments domain

Holds the availability calculator and the booking submission flow, plus
the agenda read endpoints.
"""
