"""Business logic services used by handlers.

Services open a database engine when constructed, so handlers load them
lazily on first use rather than at import time.
"""

# Do NOT import services here - use lazy loading in handlers instead
