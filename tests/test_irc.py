"""Tests for the IRC transport."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from irchook.irc import IrcConnection, parse_message


class FakeWriter:
    """Collects written lines in place of an asyncio.StreamWriter."""

    def __init__(self):
        self.data = b""
        self.closed = False

    def write(self, data: bytes):
        self.data += data

    async def drain(self):
        pass

    def close(self):
        self.closed = True

    async def wait_closed(self):
        pass

    @property
    def lines(self) -> list[str]:
        return self.data.decode().split("\r\n")[:-1]


def _reader(*lines: str) -> asyncio.StreamReader:
    reader = asyncio.StreamReader()
    for line in lines:
        reader.feed_data(line.encode() + b"\r\n")
    reader.feed_eof()
    return reader


async def _collect(conn: IrcConnection) -> list[str]:
    return [line async for line in conn.lines()]


class TestParseMessage:
    def test_privmsg(self):
        msg = parse_message(":alice!a@host PRIVMSG #builds :hello world\r\n")
        assert msg.prefix == "alice!a@host"
        assert msg.command == "PRIVMSG"
        assert msg.params == ["#builds", "hello world"]

    def test_ping(self):
        msg = parse_message("PING :irc.example.net")
        assert msg.prefix is None
        assert msg.command == "PING"
        assert msg.params == ["irc.example.net"]

    def test_numeric(self):
        msg = parse_message(":irc.example.net 001 hookbot :Welcome")
        assert msg.command == "001"
        assert msg.params == ["hookbot", "Welcome"]


class TestIrcConnection:
    @pytest.mark.asyncio
    async def test_registration(self):
        conn = IrcConnection("irc.example.net", "hookbot")
        writer = FakeWriter()
        await conn.attach(_reader(), writer)
        assert writer.lines == ["NICK hookbot", "USER hookbot 0 * :hookbot"]

    @pytest.mark.asyncio
    async def test_yields_every_line(self):
        conn = IrcConnection("irc.example.net", "hookbot")
        lines = [
            ":irc.example.net NOTICE * :Looking up your hostname",
            ":alice!a@host PRIVMSG #builds :build 1 ok",
        ]
        await conn.attach(_reader(*lines), FakeWriter())
        assert await _collect(conn) == lines

    @pytest.mark.asyncio
    async def test_ping_answered(self):
        conn = IrcConnection("irc.example.net", "hookbot")
        writer = FakeWriter()
        await conn.attach(_reader("PING :token123"), writer)
        assert await _collect(conn) == ["PING :token123"]
        assert "PONG :token123" in writer.lines

    @pytest.mark.asyncio
    async def test_welcome_identifies_and_joins(self):
        conn = IrcConnection(
            "irc.example.net", "hookbot", password="hunter2", channels=["#builds", "#alerts"]
        )
        writer = FakeWriter()
        await conn.attach(_reader(":irc.example.net 001 hookbot :Welcome"), writer)
        await _collect(conn)
        assert writer.lines[2:] == [
            "PRIVMSG NickServ :IDENTIFY hunter2",
            "JOIN #builds",
            "JOIN #alerts",
        ]

    @pytest.mark.asyncio
    async def test_welcome_without_password(self):
        conn = IrcConnection("irc.example.net", "hookbot", channels=["#builds"])
        writer = FakeWriter()
        await conn.attach(_reader(":irc.example.net 001 hookbot :Welcome"), writer)
        await _collect(conn)
        assert writer.lines[2:] == ["JOIN #builds"]

    @pytest.mark.asyncio
    async def test_nick_in_use(self):
        conn = IrcConnection("irc.example.net", "hookbot")
        writer = FakeWriter()
        await conn.attach(_reader(":irc.example.net 433 * hookbot :Nickname is already in use"), writer)
        await _collect(conn)
        assert conn.nick == "hookbot_"
        assert writer.lines[-1] == "NICK hookbot_"

    @pytest.mark.asyncio
    async def test_lines_requires_connection(self):
        conn = IrcConnection("irc.example.net", "hookbot")
        with pytest.raises(RuntimeError):
            await _collect(conn)

    @pytest.mark.asyncio
    async def test_close_sends_quit(self):
        conn = IrcConnection("irc.example.net", "hookbot")
        writer = FakeWriter()
        await conn.attach(_reader(), writer)
        await conn.close()
        assert writer.lines[-1].startswith("QUIT")
        assert writer.closed

    @pytest.mark.asyncio
    async def test_connect_uses_tls(self):
        conn = IrcConnection("irc.example.net", "hookbot", port=6697, use_tls=True)
        writer = FakeWriter()
        with patch("irchook.irc.asyncio.open_connection", new=AsyncMock(return_value=(_reader(), writer))) as mock_open:
            await conn.connect()
        args, kwargs = mock_open.call_args
        assert args == ("irc.example.net", 6697)
        assert kwargs["ssl"] is not None

    @pytest.mark.asyncio
    async def test_connect_plain(self):
        conn = IrcConnection("irc.example.net", "hookbot", port=6667, use_tls=False)
        with patch("irchook.irc.asyncio.open_connection", new=AsyncMock(return_value=(_reader(), FakeWriter()))) as mock_open:
            await conn.connect()
        assert mock_open.call_args.kwargs["ssl"] is None
