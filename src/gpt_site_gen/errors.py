from __future__ import annotations


class SiteGenError(Exception):
    """
    Base for every error the service turns into an HTTP response.

    `code` is stable and always returned to the client, even when the message
    itself is hidden in production.
    """

    status_code = 500
    code = "internal_error"
    title = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.title)
        self.message = message or self.title


class ValidationError(SiteGenError):
    status_code = 400
    code = "validation_error"
    title = "Validation Error"


class UploadError(ValidationError):
    code = "upload_error"
    title = "File Upload Error"


class UpstreamError(SiteGenError):
    code = "upstream_error"
    title = "Upstream Service Error"


class MalformedContentError(SiteGenError):
    code = "malformed_content"
    title = "Malformed Content"


class FilesystemError(SiteGenError):
    code = "filesystem_error"
    title = "Filesystem Error"


class ImageProcessingError(SiteGenError):
    code = "image_processing_error"
    title = "Image Processing Error"


class InternalError(SiteGenError):
    pass


class InvalidInput(ValidationError):
    title = "Invalid input"
