"""Sample application scanned by the discovery tests."""
