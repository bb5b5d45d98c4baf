"""
NUT (Network UPS Tools) protocol client.

This module provides an asynchronous client for a NUT server (upsd). It
speaks the line-oriented NUT network protocol directly over an asyncio
stream and implements the read-only subset the exporter needs: listing
UPS names and listing the variables of one UPS.
"""

import asyncio
import logging
import time
from typing import Dict, List, Optional

from ..config import settings
from .protocol import ENCODING, QuotingError, normalize_address, split_address, unquote

logger = logging.getLogger(__name__)


class NUTError(Exception):
    """Base exception for NUT client errors."""
    pass


class NUTConnectionError(NUTError):
    """Exception for failures establishing a connection to the NUT server."""
    pass


class NUTTransportError(NUTError):
    """
    Exception for read or write failures on an open connection.

    The connection must be considered unusable once this is raised.
    """
    pass


class NUTProtocolError(NUTError):
    """Exception for replies that violate the NUT protocol framing or format."""
    pass


class NUTServerError(NUTProtocolError):
    """Exception for an ``ERR`` reply sent by the NUT server."""

    def __init__(self, command: str, code: str, detail: str = ""):
        self.command = command
        self.code = code
        self.detail = detail
        message = f"{command!r} failed with {code}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)

    @classmethod
    def from_reply(cls, command: str, reply: str) -> "NUTServerError":
        parts = reply.split(" ", 2)
        code = parts[1] if len(parts) > 1 else "UNKNOWN"
        detail = parts[2] if len(parts) > 2 else ""
        return cls(command, code, detail)


class NUTClient:
    """
    An asynchronous client for a single connection to a NUT server.

    A client owns its connection exclusively and must not be shared between
    concurrent tasks. Use it as an async context manager, or call
    :meth:`open` and :meth:`close` explicitly.
    """

    def __init__(self, address: str = "localhost", timeout: Optional[float] = settings.TIMEOUT):
        """
        Initialize the NUT client.

        Args:
            address: The NUT server as "host" or "host:port". The default
                NUT port (3493) is used when no port is given.
            timeout: Deadline in seconds for the whole connection, armed when
                the connection is opened. None disables the deadline.
        """
        self.address = address
        self.timeout = timeout
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._deadline: Optional[float] = None

    @classmethod
    def from_streams(
        cls,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        address: str = "<stream>",
        timeout: Optional[float] = None,
    ) -> "NUTClient":
        """Wrap an already open stream pair."""
        client = cls(address, timeout=timeout)
        client._arm_deadline()
        client._reader = reader
        client._writer = writer
        return client

    @property
    def is_open(self) -> bool:
        return self._writer is not None

    async def __aenter__(self) -> "NUTClient":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def open(self) -> None:
        """
        Connect to the NUT server.

        Raises:
            NUTConnectionError: If the address is invalid or the connection
                cannot be established (DNS failure, refused, timeout).
        """
        try:
            host, port = split_address(self.address)
        except ValueError as e:
            raise NUTConnectionError(f"Invalid NUT server address {self.address!r}: {e}") from e

        target = normalize_address(self.address)
        logger.debug("Connecting to NUT server %s", target)
        self._arm_deadline()
        try:
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_connection(host, port),
                timeout=self.timeout,
            )
        except (OSError, asyncio.TimeoutError) as e:
            raise NUTConnectionError(f"Failed to connect to NUT server {target}") from e

    async def close(self) -> None:
        """
        Close the connection.

        Safe to call on a broken connection; calls after the first are no-ops.
        """
        writer = self._writer
        self._reader = None
        self._writer = None
        if writer is None:
            return

        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.debug("Ignoring error while closing connection to %s: %s", self.address, e)

    async def list_ups(self) -> List[str]:
        """
        List the UPS devices on the NUT server.

        Returns:
            The UPS names, in the order the server reported them.

        Raises:
            NUTProtocolError: If the reply is malformed.
            NUTTransportError: If the connection fails.
        """
        names = []
        for line in await self._list("UPS"):
            name, sep, _ = line.partition(" ")
            if not sep:
                raise NUTProtocolError(f"UPS entry without description: {line!r}")
            names.append(name)
        logger.debug("NUT list_ups ok on %s: %d devices", self.address, len(names))
        return names

    async def list_vars(self, ups_name: str) -> Dict[str, str]:
        """
        Get all variables for a specific UPS.

        Args:
            ups_name: The name of the UPS device.

        Returns:
            A dictionary mapping variable names to their unquoted values.

        Raises:
            NUTProtocolError: If the reply is malformed or a value is badly quoted.
            NUTTransportError: If the connection fails.
        """
        variables: Dict[str, str] = {}
        for line in await self._list(f"VAR {ups_name}"):
            key, sep, raw_value = line.partition(" ")
            if not sep:
                raise NUTProtocolError(f"Variable entry without value: {line!r}")
            try:
                variables[key] = unquote(raw_value)
            except QuotingError as e:
                raise NUTProtocolError(f"Bad value for variable {key!r} of UPS {ups_name!r}") from e
        logger.debug("NUT list_vars ok for '%s' (%d vars)", ups_name, len(variables))
        return variables

    async def _list(self, query: str) -> List[str]:
        """
        Run ``LIST <query>`` and return the body lines with the entry prefix removed.

        A bad body line fails the whole listing, but the reply is still read
        up to its END line so the connection stays usable for the next query.
        """
        command = f"LIST {query}"
        await self._write_line(command)

        line = self._decode(await self._read_raw_line())
        if line.startswith("ERR "):
            raise NUTServerError.from_reply(command, line)
        begin = f"BEGIN {command}"
        if line != begin:
            raise NUTProtocolError(f"Expected {begin!r}, got {line!r}")

        end = f"END {command}".encode(ENCODING)
        prefix = f"{query} "
        lines = []
        error: Optional[NUTProtocolError] = None
        while True:
            raw = await self._read_raw_line()
            if raw == end:
                break
            if error is not None:
                continue
            try:
                line = self._decode(raw)
            except NUTProtocolError as e:
                error = e
                continue
            if not line.startswith(prefix):
                error = NUTProtocolError(f"Expected line starting with {prefix!r}, got {line!r}")
                continue
            lines.append(line[len(prefix):])

        if error is not None:
            logger.debug("NUT %s drained after bad line from %s", command, self.address)
            raise error
        return lines

    async def _write_line(self, line: str) -> None:
        if self._writer is None:
            raise NUTTransportError(f"Connection to {self.address} is not open")
        timeout = self._remaining()
        try:
            self._writer.write(f"{line}\n".encode(ENCODING))
            await asyncio.wait_for(self._writer.drain(), timeout=timeout)
        except (OSError, asyncio.TimeoutError) as e:
            raise NUTTransportError(f"Failed to send {line!r} to {self.address}") from e

    async def _read_raw_line(self) -> bytes:
        """Read one line, without its newline, within the connection deadline."""
        if self._reader is None:
            raise NUTTransportError(f"Connection to {self.address} is not open")
        timeout = self._remaining()
        try:
            raw = await asyncio.wait_for(self._reader.readline(), timeout=timeout)
        except (OSError, ValueError, asyncio.TimeoutError) as e:
            raise NUTTransportError(f"Failed to read from {self.address}") from e

        if not raw.endswith(b"\n"):
            raise NUTTransportError(f"Connection to {self.address} closed mid-reply")
        return raw[:-1]

    def _decode(self, raw: bytes) -> str:
        try:
            return raw.decode(ENCODING)
        except UnicodeDecodeError as e:
            raise NUTProtocolError(f"Reply from {self.address} is not valid {ENCODING}") from e

    def _arm_deadline(self) -> None:
        self._deadline = None if self.timeout is None else time.monotonic() + self.timeout

    def _remaining(self) -> Optional[float]:
        if self._deadline is None:
            return None
        remaining = self._deadline - time.monotonic()
        if remaining <= 0:
            raise NUTTransportError(f"Deadline of {self.timeout}s exceeded on {self.address}")
        return remaining
