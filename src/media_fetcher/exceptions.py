class MediaFetcherError(Exception):
    """Base class for all media fetcher errors."""

    pass


class MetadataFetchError(MediaFetcherError):
    """Raised when media metadata cannot be fetched or parsed."""

    pass


class NoSuitableFormatError(MediaFetcherError):
    """Raised when no encoding matches the requested media type."""

    pass


class DownloadError(MediaFetcherError):
    """Raised when the extraction tool fails to produce a file."""

    pass


class SpeechToTextError(MediaFetcherError):
    """Raised when the speech-to-text service fails."""

    pass


class MissingCredentialError(SpeechToTextError):
    """Raised when no speech-to-text API key is configured."""

    pass


class CaptionParseError(MediaFetcherError):
    """Raised when a caption document contains no parsable cues."""

    pass


class TranscriptionUnavailableError(MediaFetcherError):
    """Raised when every text extraction method has been exhausted."""

    pass


class InvalidMediaTypeError(MediaFetcherError):
    """Raised for a media type other than video, audio or text."""

    def __init__(self, media_type: object):
        self.media_type = media_type
        super().__init__(f"Invalid media type: {media_type}")


class DeliveryError(MediaFetcherError):
    """Raised when an artifact cannot be delivered to the webhook."""

    pass
