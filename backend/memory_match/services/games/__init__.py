"""Game domain services: board setup, move resolution and scoring.

This package contains the game mechanics imported by HTTP routes, keeping
transport concerns separated from the card grid and its rules.
"""
