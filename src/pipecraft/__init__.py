"""Pipecraft — company site backend.

Serves job postings, applications, contact requests, projects and
services, plus the user accounts and sessions that guard the admin side.
"""

__version__ = "0.1.0"
