"""Telehealth backend: accounts, profile/medical-record updates and appointment booking."""
