"""
Datasource orchestration for warp10-frames.

Ties the pieces together for a dashboard host:

  DataQuery (ref id + query JSON blob)
    -> WarpQuery (validated blob)
    -> build_script() (time range, variables, constants, macros)
    -> Transport.execute()
    -> classify_and_convert()
    -> DataResponse (frames, error)

``query_data()`` runs every query of a request in parallel and returns a
mapping keyed by ref id. A failing query only fails its own entry: its
error is recorded in its DataResponse and its siblings are unaffected.

The transport that actually talks to Warp 10 is supplied by the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field as ModelField, ValidationError

from warp10_frames.assembler import ConcurrentFrameAssembler
from warp10_frames.config import DatasourceOptions
from warp10_frames.detect import classify_and_convert
from warp10_frames.exceptions import (
    ConversionTimeoutError,
    DecodeError,
    MalformedSampleError,
    QueryParseError,
    TransportError,
    Warp10FramesError,
)
from warp10_frames.frames import Frame
from warp10_frames.variables import VariableValue, decode_variable_values
from warp10_frames.warpscript import TimeRange, build_script, context_header

logger = logging.getLogger(__name__)

HEALTH_CHECK_SCRIPT = "1 2 +"


class Transport(Protocol):
    """Executes WarpScript against a Warp 10 instance.

    Implementations raise ``TransportError`` on any failure (unreachable
    endpoint, HTTP error, WarpScript error).
    """

    def execute(self, expression: str) -> bytes:
        ...


class WarpQuery(BaseModel):
    """The query JSON blob the host stores for a panel query."""

    model_config = ConfigDict(populate_by_name=True)

    expr: str = ""
    hide_labels: bool = ModelField(False, alias="hideLabels")
    ref_id: str | None = ModelField(None, alias="refId")
    interval_ms: int | None = ModelField(None, alias="intervalMs")
    max_data_points: int | None = ModelField(None, alias="maxDataPoints")


@dataclass
class DataQuery:
    """One query of a host request.

    Attributes:
        ref_id: Host identifier for the query (the key in the response map).
        payload: Raw query JSON blob.
        time_range: Panel time range, exposed to the script as variables.
        max_data_points: Points the panel can draw; used for ``$__interval``.
            Falls back to the blob's ``maxDataPoints``.
        variables: Dashboard template variables for this query.
    """

    ref_id: str
    payload: bytes | str
    time_range: TimeRange | None = None
    max_data_points: int | None = None
    variables: dict[str, Any] = field(default_factory=dict)


@dataclass
class DataResponse:
    """Result of one query: frames, or the error that prevented them."""

    frames: list[Frame] = field(default_factory=list)
    error: Warp10FramesError | None = None
    series_errors: list[MalformedSampleError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


def _wrap(
    error_cls: type[Warp10FramesError], stage: str, exc: Exception
) -> Warp10FramesError:
    """Turn a stray exception into the package error for *stage*, keeping the cause."""
    error = error_cls(f"{stage}: {type(exc).__name__}: {exc}")
    error.__cause__ = exc
    return error


class HealthStatus(str, Enum):
    OK = "OK"
    ERROR = "ERROR"


@dataclass
class HealthResult:
    status: HealthStatus
    message: str


class Datasource:
    """A configured Warp 10 datasource.

    Attributes:
        options: Validated datasource settings.
        transport: Executes WarpScript; set to ``None`` by ``dispose()``.
    """

    def __init__(self, options: DatasourceOptions, transport: Transport) -> None:
        self.options = options
        self.transport: Transport | None = transport

    def __repr__(self) -> str:
        return f"Datasource(path={self.options.path!r})"

    def dispose(self) -> None:
        """Release the transport; the instance must not be used afterwards."""
        self.transport = None

    def _execute(self, script: str) -> bytes:
        if self.transport is None:
            raise TransportError("Datasource has been disposed")
        return self.transport.execute(script)

    # -- Queries ------------------------------------------------------------

    def query_data(self, queries: Sequence[DataQuery]) -> dict[str, DataResponse]:
        """Run all queries in parallel; one DataResponse per ref id.

        Queries still running when ``query_timeout`` expires get a
        ``ConversionTimeoutError`` response.
        """
        logger.info("Running %d query(ies) against %s", len(queries), self.options.path)
        assembler = ConcurrentFrameAssembler(
            max_workers=self.options.max_workers,
            timeout=self.options.query_timeout,
        )
        responses = assembler.map_ordered(self.query, queries, fallback=self._timed_out)
        return {q.ref_id: response for q, response in zip(queries, responses)}

    def _timed_out(self, query: DataQuery) -> DataResponse:
        return DataResponse(
            error=ConversionTimeoutError(
                f"Query {query.ref_id} did not complete within "
                f"{self.options.query_timeout}s"
            )
        )

    def query(self, query: DataQuery) -> DataResponse:
        """Run a single query. Never raises for query-level failures."""
        try:
            warp_query = WarpQuery.model_validate_json(query.payload)
        except ValidationError as exc:
            logger.error("json unmarshal: query %s: %s", query.ref_id, exc)
            return DataResponse(error=QueryParseError(f"json unmarshal: {exc}"))

        script = build_script(
            warp_query.expr,
            time_range=query.time_range,
            max_data_points=query.max_data_points or warp_query.max_data_points,
            variables=query.variables,
            constants=self.options.constants,
            macros=self.options.macros,
        )

        try:
            body = self._execute(script)
        except TransportError as exc:
            logger.error("client exec: query %s: %s", query.ref_id, exc)
            return DataResponse(error=exc)
        except Exception as exc:
            logger.exception("client exec: query %s: unexpected failure", query.ref_id)
            return DataResponse(error=_wrap(TransportError, "client exec", exc))

        try:
            frame_set = classify_and_convert(
                body, self.options.decode_options(hide_labels=warp_query.hide_labels)
            )
        except DecodeError as exc:
            logger.warning("Query %s: %s", query.ref_id, exc)
            return DataResponse(error=exc)
        except Exception as exc:
            logger.exception("Query %s: unexpected decode failure", query.ref_id)
            return DataResponse(error=_wrap(DecodeError, "decode", exc))

        return DataResponse(
            frames=frame_set.frames, series_errors=frame_set.series_errors
        )

    def metric_find_query(self, query_text: str) -> list[VariableValue]:
        """Run a template variable query and return its drop-down entries.

        Raises:
            TransportError: If the script cannot be executed.
            UnsupportedShapeError: If the response is not a list.
        """
        script = context_header(self.options.constants, self.options.macros) + query_text
        return decode_variable_values(self._execute(script))

    # -- Health ---------------------------------------------------------------

    def check_health(self) -> HealthResult:
        """Execute a trivial script to check the endpoint answers."""
        try:
            self._execute(HEALTH_CHECK_SCRIPT)
        except TransportError as exc:
            logger.warning("Health check failed for %s: %s", self.options.path, exc)
            return HealthResult(HealthStatus.ERROR, str(exc))
        return HealthResult(HealthStatus.OK, "Data source is working")
