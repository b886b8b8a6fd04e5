"""Base database adapter and result containers."""

import logging
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Callable, Dict, Generator, Iterable, List, Optional, Sequence, Tuple

import pandas as pd
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.pool import NullPool

from dbbrowser.config.models import ConnectionDescriptor, EngineKind
from dbbrowser.db.models import ObjectKind, SchemaObject
from dbbrowser.exceptions import DatabaseError

logger = logging.getLogger(__name__)

STATEMENT_TIMEOUT_SECONDS = 300
READ_STATEMENT_PREFIXES = ("SELECT", "WITH")

SqlWithParams = Tuple[str, Dict[str, Any]]


def is_read_statement(statement: str) -> bool:
    """Return True when the statement is expected to produce a tabular result."""
    return statement.strip().upper().startswith(READ_STATEMENT_PREFIXES)


def render_value(value: Any) -> Optional[str]:
    """Render a scalar cell as text, keeping NULL as None."""
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "0x" + bytes(value).hex()
    return str(value)


class QueryResult:
    """Container for the outcome of a single statement."""

    def __init__(
        self,
        columns: Optional[List[str]] = None,
        rows: Optional[List[List[Optional[str]]]] = None,
        error_message: Optional[str] = None,
        rows_affected: int = 0,
        execution_time: float = 0.0,
    ) -> None:
        """Initialize query result.

        Args:
            columns: Column names of the tabular payload.
            rows: Positional rows of the tabular payload, cells rendered as text.
                None means the statement was not row-returning.
            error_message: Failure message; its presence marks the result failed.
            rows_affected: Returned row count for reads, engine count for writes.
            execution_time: Elapsed wall-clock time in seconds.
        """
        self.columns = columns if rows is None else (columns or [])
        self.rows = rows
        self.error_message = error_message
        self.rows_affected = rows_affected or 0
        self.execution_time = execution_time or 0.0

    @property
    def is_success(self) -> bool:
        return self.error_message is None

    @property
    def has_data(self) -> bool:
        """Check whether a tabular payload is present."""
        return self.rows is not None

    @property
    def row_count(self) -> int:
        return len(self.rows) if self.rows is not None else 0

    @property
    def execution_time_ms(self) -> float:
        return self.execution_time * 1000

    @property
    def data(self) -> Optional[pd.DataFrame]:
        """Tabular payload as a DataFrame, or None for non-row-returning statements."""
        if self.rows is None:
            return None
        return pd.DataFrame(self.rows, columns=self.columns)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        return {
            'columns': self.columns,
            'rows': self.rows,
            'error_message': self.error_message,
            'rows_affected': self.rows_affected,
            'execution_time': self.execution_time,
            'row_count': self.row_count,
            'is_success': self.is_success,
        }

    def __repr__(self) -> str:
        outcome = f"error={self.error_message!r}" if self.error_message else f"rows_affected={self.rows_affected}"
        return f"QueryResult(has_data={self.has_data}, {outcome}, execution_time={self.execution_time:.4f})"


class IntrospectionResult(list):
    """List of catalog entries that remembers whether the fetch degraded.

    A failed catalog query yields an empty result with ``degraded`` set, so a
    genuinely empty catalog can be told apart from an unreachable one.
    """

    def __init__(self, items: Iterable[Any] = (), degraded: bool = False, error: Optional[str] = None) -> None:
        super().__init__(items)
        self.degraded = degraded
        self.error = error

    @classmethod
    def failed(cls, error: BaseException) -> "IntrospectionResult":
        return cls(degraded=True, error=str(error))


class BaseAdapter(ABC):
    """Uniform capability contract implemented once per engine.

    Adapters hold no connection state: every operation opens its own
    connection from the descriptor and closes it before returning.
    """

    engine: EngineKind
    procedure_kind: ObjectKind = ObjectKind.STORED_PROCEDURE

    def __init__(self, statement_timeout: int = STATEMENT_TIMEOUT_SECONDS) -> None:
        self.statement_timeout = statement_timeout

    def _databases_query(self) -> SqlWithParams:
        """Catalog query listing user databases, one name per row.

        Engines with a fixed database list override ``list_databases`` instead.
        """
        raise NotImplementedError(f"{type(self).__name__} has no database catalog query")

    @abstractmethod
    def _tables_query(self, database: str) -> SqlWithParams:
        """Catalog query listing base tables as (schema, name) rows."""
        pass

    @abstractmethod
    def _views_query(self, database: str) -> SqlWithParams:
        """Catalog query listing views as (schema, name) rows."""
        pass

    def _procedures_query(self, database: str) -> Optional[SqlWithParams]:
        """Catalog query listing routines as (schema, name) rows.

        Engines without stored routines return None.
        """
        return None

    @abstractmethod
    def _columns_query(self, database: str, table_name: str) -> SqlWithParams:
        """Catalog query listing a table's columns as (name, data_type) rows."""
        pass

    def _get_engine_options(self, descriptor: ConnectionDescriptor) -> Dict[str, Any]:
        """Get engine-specific create_engine options."""
        return {}

    def _on_connect(self, dbapi_connection: Any, connection_record: Any) -> None:
        """Hook run on every new DBAPI connection."""
        pass

    def create_engine(self, descriptor: ConnectionDescriptor) -> Engine:
        """Create an unpooled SQLAlchemy engine for one operation.

        Raises:
            DatabaseError: If engine creation fails.
        """
        try:
            engine = create_engine(
                descriptor.to_url(),
                poolclass=NullPool,
                **self._get_engine_options(descriptor),
            )
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to create database engine: {e}", engine=self.engine.value) from e
        event.listen(engine, "connect", self._on_connect)
        return engine

    @contextmanager
    def get_connection(self, descriptor: ConnectionDescriptor) -> Generator[Connection, None, None]:
        """Open a connection for the duration of one operation.

        Work done on the connection is committed on a clean exit.

        Raises:
            DatabaseError: If connecting or executing fails.
        """
        engine = self.create_engine(descriptor)
        try:
            with engine.connect() as connection:
                yield connection
                connection.commit()
        except SQLAlchemyError as e:
            raise DatabaseError(_driver_message(e), engine=self.engine.value) from e
        finally:
            engine.dispose()

    def test_connection(self, descriptor: ConnectionDescriptor) -> bool:
        """Open and immediately close a connection.

        Returns:
            True if the connection opened, False on any failure.
        """
        try:
            with self.get_connection(descriptor):
                pass
        except Exception as e:
            logger.info("Connection test failed for '%s': %s", descriptor.display_name, e)
            return False
        return True

    def execute_query(self, descriptor: ConnectionDescriptor, statement: str) -> QueryResult:
        """Execute a single statement and capture its outcome.

        Statements starting with SELECT or WITH populate the tabular payload;
        anything else runs as a mutation reporting the engine's row count.
        Errors are returned on the result, never raised.
        """
        start_time = time.perf_counter()
        read_like = is_read_statement(statement)
        logger.debug(
            "Executing %s statement on '%s'", "read" if read_like else "write", descriptor.display_name
        )

        try:
            with self.get_connection(descriptor) as conn:
                cursor = conn.exec_driver_sql(statement)
                if read_like:
                    columns = list(cursor.keys()) if cursor.returns_rows else []
                    rows = [
                        [render_value(value) for value in row]
                        for row in (cursor.fetchall() if cursor.returns_rows else [])
                    ]
                    result = QueryResult(columns=columns, rows=rows, rows_affected=len(rows))
                else:
                    rowcount = cursor.rowcount
                    result = QueryResult(rows_affected=rowcount if rowcount and rowcount > 0 else 0)
            result.execution_time = time.perf_counter() - start_time
            return result

        except Exception as e:
            execution_time = time.perf_counter() - start_time
            logger.debug("Statement failed after %.2fs: %s", execution_time, e)
            return QueryResult(error_message=str(e), execution_time=execution_time)

    def list_databases(self, descriptor: ConnectionDescriptor) -> List[str]:
        """List user databases, excluding engine-internal ones."""
        sql, params = self._databases_query()
        return self._introspect("list_databases", descriptor, sql, params, lambda row: row[0])

    def list_tables(self, descriptor: ConnectionDescriptor, database: str) -> List[SchemaObject]:
        """List base tables of a database ordered by schema and name."""
        sql, params = self._tables_query(database)
        return self._introspect(
            "list_tables", self._scope(descriptor, database), sql, params,
            lambda row: self._object_from_row(row, ObjectKind.TABLE),
        )

    def list_views(self, descriptor: ConnectionDescriptor, database: str) -> List[SchemaObject]:
        """List views of a database ordered by schema and name."""
        sql, params = self._views_query(database)
        return self._introspect(
            "list_views", self._scope(descriptor, database), sql, params,
            lambda row: self._object_from_row(row, ObjectKind.VIEW),
        )

    def list_stored_procedures(self, descriptor: ConnectionDescriptor, database: str) -> List[SchemaObject]:
        """List stored procedures (or functions, depending on the engine)."""
        query = self._procedures_query(database)
        if query is None:
            return IntrospectionResult()
        sql, params = query
        return self._introspect(
            "list_stored_procedures", self._scope(descriptor, database), sql, params,
            lambda row: self._object_from_row(row, self.procedure_kind),
        )

    def list_columns(self, descriptor: ConnectionDescriptor, database: str, table_name: str) -> List[SchemaObject]:
        """List a table's or view's columns as "name (type)" nodes."""
        sql, params = self._columns_query(database, table_name)
        return self._introspect(
            "list_columns", self._scope(descriptor, database), sql, params, self._column_from_row,
        )

    def _scope(self, descriptor: ConnectionDescriptor, database: str) -> ConnectionDescriptor:
        return descriptor.with_database(database)

    @staticmethod
    def _object_from_row(row: Sequence[Any], kind: ObjectKind) -> SchemaObject:
        if len(row) >= 2:
            return SchemaObject(name=row[1], schema=row[0] or "", kind=kind)
        return SchemaObject(name=row[0], kind=kind)

    @staticmethod
    def _column_from_row(row: Sequence[Any]) -> SchemaObject:
        return SchemaObject(name=f"{row[0]} ({row[1]})", kind=ObjectKind.COLUMN)

    def _introspect(
        self,
        operation: str,
        descriptor: ConnectionDescriptor,
        sql: str,
        params: Dict[str, Any],
        mapper: Callable[[Sequence[Any]], Any],
    ) -> IntrospectionResult:
        """Run a catalog query, degrading to an empty result on failure."""
        try:
            with self.get_connection(descriptor) as conn:
                rows = conn.execute(text(sql), params).fetchall()
            return IntrospectionResult(mapper(row) for row in rows)
        except Exception as e:
            logger.warning(
                "%s %s degraded to empty for '%s': %s",
                self.engine.value, operation, descriptor.display_name, e,
            )
            return IntrospectionResult.failed(e)


def _driver_message(error: SQLAlchemyError) -> str:
    if isinstance(error, DBAPIError) and error.orig is not None:
        return str(error.orig)
    return str(error)
