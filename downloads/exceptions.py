# downloads/exceptions.py

"""
Two tiers of failure.

Request level (ManifestResolutionError): the token could not be turned
into a manifest. The message is shown to the client as-is.

Entry level (BlobFetchError): a single object could not be read. Logged
and skipped, never shown to the client.
"""


class ManifestResolutionError(Exception):
    default_message = "Could not load that batch download."

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class ManifestNotFound(ManifestResolutionError):
    default_message = "Could not find that batch download."


class ManifestError(ManifestResolutionError):
    """Payload undecodable or backend unavailable."""


class BlobFetchError(Exception):

    def __init__(self, key: str, reason: str = ""):
        self.key = key
        self.reason = reason
        super().__init__(f"Error downloading \"{key}\" - {reason}" if reason else key)


class BlobNotFound(BlobFetchError):

    def __init__(self, key: str):
        super().__init__(key)

    def __str__(self):
        return f"File not found. {self.key}"
