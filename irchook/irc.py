"""IRC transport — connect, register, and stream raw protocol lines."""

import asyncio
import logging
import ssl
from typing import AsyncIterator, NamedTuple, Optional, Sequence

logger = logging.getLogger("irchook.irc")

# Numeric replies we react to
RPL_WELCOME = "001"
ERR_NICKNAMEINUSE = "433"


class IrcMessage(NamedTuple):
    prefix: Optional[str]
    command: str
    params: list[str]


def parse_message(line: str) -> IrcMessage:
    """Split a raw line into prefix, command and params (trailing param included)."""
    line = line.rstrip("\r\n")
    prefix = None
    if line.startswith(":"):
        prefix, _, line = line[1:].partition(" ")
    line, sep, trailing = line.partition(" :")
    parts = line.split()
    command = parts[0].upper() if parts else ""
    params = parts[1:]
    if sep:
        params.append(trailing)
    return IrcMessage(prefix, command, params)


class IrcConnection:
    """Minimal IRC client yielding every line the server sends.

    PING is answered automatically; after the welcome numeric the client
    identifies with NickServ (when a password is set) and joins channels.
    """

    def __init__(
        self,
        server: str,
        nick: str,
        port: int = 6697,
        password: Optional[str] = None,
        channels: Sequence[str] = (),
        use_tls: bool = True,
    ):
        self.server = server
        self.port = port
        self.nick = nick
        self.password = password
        self.channels = list(channels)
        self.use_tls = use_tls
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None

    @classmethod
    def from_settings(cls, settings) -> "IrcConnection":
        return cls(
            server=settings.server,
            nick=settings.nick,
            port=settings.port,
            password=settings.password,
            channels=settings.channels,
            use_tls=settings.use_tls,
        )

    async def connect(self):
        """Open the connection and send registration."""
        ssl_ctx = ssl.create_default_context() if self.use_tls else None
        logger.info(f"Connecting to {self.server}:{self.port} (tls={self.use_tls})")
        reader, writer = await asyncio.open_connection(self.server, self.port, ssl=ssl_ctx)
        await self.attach(reader, writer)

    async def attach(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Use an already-open stream pair and register on it."""
        self._reader = reader
        self._writer = writer
        await self.send(f"NICK {self.nick}")
        await self.send(f"USER {self.nick} 0 * :{self.nick}")

    async def send(self, line: str):
        if self._writer is None:
            raise RuntimeError("IRC connection is not open")
        if line.startswith("PRIVMSG NickServ"):
            logger.debug("> PRIVMSG NickServ :IDENTIFY ***")
        else:
            logger.debug(f"> {line}")
        self._writer.write(line.encode("utf-8") + b"\r\n")
        await self._writer.drain()

    async def lines(self) -> AsyncIterator[str]:
        """Yield raw lines until the server closes the connection.

        Socket errors propagate to the caller.
        """
        if self._reader is None:
            raise RuntimeError("IRC connection is not open")
        while True:
            data = await self._reader.readline()
            if not data:
                logger.info("IRC connection closed by server")
                return
            line = data.decode("utf-8", errors="replace").rstrip("\r\n")
            logger.debug(f"< {line}")
            await self._handle_protocol(parse_message(line))
            yield line

    async def _handle_protocol(self, msg: IrcMessage):
        if msg.command == "PING":
            token = msg.params[-1] if msg.params else self.server
            await self.send(f"PONG :{token}")
        elif msg.command == RPL_WELCOME:
            logger.info(f"Registered as {self.nick}")
            if self.password:
                await self.send(f"PRIVMSG NickServ :IDENTIFY {self.password}")
            for channel in self.channels:
                await self.send(f"JOIN {channel}")
        elif msg.command == ERR_NICKNAMEINUSE:
            self.nick = self.nick + "_"
            logger.warning(f"Nickname in use, retrying as {self.nick}")
            await self.send(f"NICK {self.nick}")

    async def close(self):
        if self._writer is None:
            return
        try:
            await self.send("QUIT :irchook shutting down")
        except (ConnectionError, OSError) as e:
            logger.debug(f"QUIT not sent: {e}")
        self._writer.close()
        try:
            await self._writer.wait_closed()
        except (ConnectionError, OSError) as e:
            logger.debug(f"Error while closing connection: {e}")
        self._writer = None
        self._reader = None
