"""Errors raised by the report pipeline. Any of them aborts the whole run."""


class PipelineError(Exception):
    """Base class for every pipeline failure."""


class DataIntegrityError(PipelineError, ValueError):
    """Input or intermediate data breaks an invariant the next stage relies on."""


class SchemaError(DataIntegrityError):
    """A column header is malformed: duplicated, or not '<crime_type> <year>'."""

    def __init__(self, column: str, reason: str):
        self.column = column
        self.reason = reason
        super().__init__(f"Malformed column {column!r}: {reason}")
