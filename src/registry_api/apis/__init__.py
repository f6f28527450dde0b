"""HTTP routers for the registry."""
