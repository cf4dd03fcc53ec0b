"""
Engine construction for the connection pool and for migrations.

Accepts SQLAlchemy URLs (``mysql+pymysql://u:p@host:3306/db``, ``sqlite:///x.db``)
as well as classic MySQL driver DSNs (``u:p@tcp(host:3306)/db?charset=utf8mb4``).
"""

import logging
from typing import Any
from urllib.parse import parse_qsl

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.pool import NullPool, QueuePool

from .options import Options

_log = logging.getLogger(__name__)

DRIVER_NAME = "mysql+pymysql"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3306

# DSN params PyMySQL understands; everything else is driver specific.
_KEPT_PARAMS = frozenset({"charset"})


def _split_addr(addr: str) -> tuple[str, int]:
    host, sep, port = addr.rpartition(":")
    if not sep:
        return addr, DEFAULT_PORT
    try:
        return host or DEFAULT_HOST, int(port)
    except ValueError:
        raise ValueError(f"invalid port in DSN address: {addr!r}") from None


def _parse_classic_dsn(dsn: str) -> URL:
    """``[user[:password]@][net[(addr)]]/dbname[?params]``."""
    slash = dsn.rfind("/")
    if slash < 0:
        raise ValueError("invalid DSN: missing the slash separating the database name")
    head, tail = dsn[:slash], dsn[slash + 1 :]
    database, _, raw_params = tail.partition("?")

    username = password = None
    at = head.rfind("@")
    if at >= 0:
        creds, head = head[:at], head[at + 1 :]
        username, sep, pw = creds.partition(":")
        password = pw if sep else None

    net, addr = head, ""
    if "(" in head:
        if not head.endswith(")"):
            raise ValueError("invalid DSN: network address not terminated (missing closing brace)")
        net, _, addr = head[:-1].partition("(")
    net = net or "tcp"

    query: dict[str, str] = {}
    for key, value in parse_qsl(raw_params, keep_blank_values=True):
        if key in _KEPT_PARAMS:
            query[key] = value
        else:
            _log.warning("Ignoring DSN parameter %s: not supported by PyMySQL", key)

    host: str | None
    port: int | None
    if net == "tcp":
        host, port = _split_addr(addr) if addr else (DEFAULT_HOST, DEFAULT_PORT)
    elif net == "unix":
        if not addr:
            raise ValueError("invalid DSN: unix network requires a socket path")
        host, port = None, None
        query["unix_socket"] = addr
    else:
        raise ValueError(f"invalid DSN: unsupported network {net!r}")

    return URL.create(
        DRIVER_NAME,
        username=username or None,
        password=password,
        host=host,
        port=port,
        database=database or None,
        query=query,
    )


def to_url(dsn: str) -> URL:
    """Normalise *dsn* to a SQLAlchemy URL; bare ``mysql://`` gets the PyMySQL driver."""
    if not dsn or not dsn.strip():
        raise ValueError("DSN must not be empty")
    if "://" not in dsn:
        return _parse_classic_dsn(dsn)
    url = make_url(dsn)
    if url.drivername == "mysql":
        url = url.set(drivername=DRIVER_NAME)
    return url


def redact(url: URL) -> str:
    return url.render_as_string(hide_password=True)


def keeps_no_idle(opts: Options) -> bool:
    """Capped pool that closes every connection on checkin (max_idle <= 0, max_open > 0)."""
    return opts.max_idle_connections <= 0 and opts.max_open_connections > 0


def _discard_on_checkin(dbapi_connection: Any, connection_record: Any) -> None:
    # the slot stays in the pool; the physical connection does not
    if dbapi_connection is not None:
        connection_record.invalidate()


def pool_kwargs(opts: Options) -> dict:
    """Translate pool options into ``create_engine`` keyword arguments."""
    lifetime = opts.max_connection_lifetime.total_seconds()
    recycle = int(lifetime) if lifetime > 0 else -1

    max_open = opts.max_open_connections
    max_idle = opts.max_idle_connections
    if max_idle <= 0 and max_open <= 0:
        return {"poolclass": NullPool}
    if max_idle <= 0:
        return {
            "poolclass": QueuePool,
            "pool_size": max_open,
            "max_overflow": 0,
            "pool_recycle": recycle,
        }
    if max_open > 0:
        max_idle = min(max_idle, max_open)
        overflow = max_open - max_idle
    else:
        overflow = -1
    return {
        "poolclass": QueuePool,
        "pool_size": max_idle,
        "max_overflow": overflow,
        "pool_recycle": recycle,
    }


def create_pool_engine(dsn: str, opts: Options) -> Engine:
    url = to_url(dsn)
    kwargs = pool_kwargs(opts)
    _log.debug("Creating engine for %s with %s", redact(url), kwargs)
    engine = create_engine(url, **kwargs)
    if keeps_no_idle(opts):
        event.listen(engine, "checkin", _discard_on_checkin)
    return engine


def open_raw_engine(dsn: str) -> Engine:
    """Engine that opens a fresh connection per checkout, independent of the shared pool."""
    return create_engine(to_url(dsn), poolclass=NullPool)
