"""Muslim Hunt backend.

Product directory, community forum and stories for Muslim makers, served as a
FastAPI application with session-based auth, file storage and realtime
change channels.
"""

__version__ = "0.1.0"
