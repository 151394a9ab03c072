"""
Custom exception hierarchy for warp10-frames.

Why a custom hierarchy:
- The shape dispatcher needs to tell a non-fatal mismatch (try the next
  decoder) apart from a terminal failure (stop and report) without
  relying on generic ValueError/TypeError.
- Per-series failures are returned as values so callers and tests can
  assert on them instead of scraping logs.
"""


class Warp10FramesError(Exception):
    """Base exception for all warp10-frames errors."""


class DecodeError(Warp10FramesError):
    """Base class for failures while turning a response into frames."""


class MalformedInputError(DecodeError):
    """Raised when a response does not fit the shape a decoder expects.

    Non-fatal: the shape dispatcher moves on to the next decoder.
    """


class UnsupportedShapeError(DecodeError):
    """Raised when no decoder accepts a response.

    Surfaced to the caller as the error of the query that produced it.
    """


class UnsupportedValueTypeError(DecodeError):
    """Raised when a scalar response holds an object, array or null.

    Terminal for the query: the dispatcher does not fall through.
    """


class MalformedSampleError(DecodeError):
    """Raised when a series sample has no usable timestamp.

    The series list decoder catches it per series, drops that series
    from the output and keeps the error in ``FrameSet.series_errors``.
    """

    def __init__(
        self,
        message: str,
        *,
        index: int | None = None,
        series_name: str | None = None,
    ) -> None:
        super().__init__(message)
        self.index = index
        self.series_name = series_name


class ConversionTimeoutError(DecodeError):
    """Raised when a parallel fan-out does not finish before its deadline."""


class QueryParseError(Warp10FramesError):
    """Raised when a host query blob is not valid query JSON."""


class TransportError(Warp10FramesError):
    """Raised by a transport when the query engine cannot execute a script.

    For example, connection refused, HTTP error status, or a WarpScript
    runtime error reported by the engine.
    """


class ConfigValidationError(Warp10FramesError):
    """Raised when a datasource configuration file is empty or unusable."""


class ExportError(Warp10FramesError):
    """Raised when frames cannot be written to disk.

    For example, permission errors, disk full, or unsupported format.
    """
