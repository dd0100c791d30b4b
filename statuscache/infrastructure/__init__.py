"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the server to the outside world (filesystem, HTTP, console,
configuration sources) by implementing the interfaces defined in the domain layer.
"""
