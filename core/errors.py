class CollectionError(Exception):
    """Base class for everything that aborts a collection cycle."""


class SourceUnavailable(CollectionError):
    def __init__(self, path, cause):
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot read from {path}: {cause}")


class MalformedRow(CollectionError):
    def __init__(self, device, field, token):
        self.device = device
        self.field = field
        self.token = token
        super().__init__(
            f"Failed to parse value {token!r} of {field} for device {device}"
        )


class SymlinkResolutionFailure(CollectionError):
    def __init__(self, path, cause):
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot resolve block device link {path}: {cause}")
