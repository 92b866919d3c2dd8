"""Helpers shared by the API and the services: clock, security, mail, request guards."""
