"""Core Application Layer: request routing and the GET/PUT/DELETE handlers.

Connects incoming requests to the entry store through the domain interfaces.
"""
