"""Domain Layer: value objects, error taxonomy and the ports the server depends on."""
