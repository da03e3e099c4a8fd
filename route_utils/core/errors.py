"""
route_utils exception types

ResponseAlreadyCommittedError is raised by StarletteResponseSink on a second
commit; the resolver and wrappers never let it escape.
"""


class RouteUtilsError(Exception):
    """Base class for route_utils errors"""


class ResponseAlreadyCommittedError(RouteUtilsError):
    """A second commit was attempted on a sink that already sent its response"""

    def __init__(self, message: str = "Response already committed"):
        super().__init__(message)
        self.message = message
