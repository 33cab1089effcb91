"""MongoDB (Beanie) persistence adapters."""
