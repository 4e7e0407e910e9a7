"""HTTP routers for the explorer API."""
