class BlogError(Exception):
    """Base class for every error raised by the loader, store and templates."""


class NotFoundError(BlogError):
    pass


class StorageIOError(BlogError):
    pass


class DecodeError(BlogError):
    pass


class EncodeError(BlogError):
    pass


class TemplateError(BlogError):
    pass


class InvalidTitleError(BlogError):
    """Title cannot be mapped to a single file inside a folder."""
