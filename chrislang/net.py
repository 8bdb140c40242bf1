"""TCP, UDP, DNS and minimal HTTP client/server helpers of the runtime."""

from __future__ import annotations

import re
import socket
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_RECV_SIZE = 4096
LISTEN_BACKLOG = 128
DEFAULT_HTTP_PORT = 80
MAX_HOST = 255
MAX_PATH = 2047
MAX_METHOD = 15
REQUEST_BUFFER = 8192
GET_REQUEST_LIMIT = 4096
POST_REQUEST_LIMIT = 8192

_STATUS_TEXT = {
    201: "Created",
    204: "No Content",
    400: "Bad Request",
    404: "Not Found",
    500: "Internal Server Error",
}
_ATOI = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


def _text(raw: bytes) -> str:
    """Decode received bytes; the text ends at the first NUL byte."""
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def _check_port(port: int) -> int:
    if not 0 <= port <= 0xFFFF:
        raise ValueError(f"port out of range: {port}")
    return port


# -- TCP ---------------------------------------------------------------------


def tcp_connect(host: str, port: int) -> socket.socket:
    """Open a TCP connection to ``host:port`` over IPv4."""
    family, kind, proto, _, address = socket.getaddrinfo(
        host, port, socket.AF_INET, socket.SOCK_STREAM
    )[0]
    sock = socket.socket(family, kind, proto)
    try:
        sock.connect(address)
    except OSError:
        sock.close()
        raise
    return sock


def tcp_listen(port: int) -> socket.socket:
    """Create a TCP socket listening on every interface at ``port``."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind(("", _check_port(port)))
        sock.listen(LISTEN_BACKLOG)
    except (OSError, ValueError):
        sock.close()
        raise
    return sock


def tcp_accept(server: socket.socket) -> socket.socket:
    """Wait for and return the next connection on a listening socket."""
    conn, _ = server.accept()
    return conn


def tcp_send(conn: socket.socket, data: str) -> int:
    """Send ``data`` and return the number of bytes sent."""
    payload = data.encode("utf-8")
    conn.sendall(payload)
    return len(payload)


def tcp_recv(conn: socket.socket, max_bytes: int = DEFAULT_RECV_SIZE) -> str:
    """Receive up to ``max_bytes`` bytes; an empty string once the peer has closed."""
    if max_bytes <= 0:
        max_bytes = DEFAULT_RECV_SIZE
    return _text(conn.recv(max_bytes))


# -- UDP ---------------------------------------------------------------------


def udp_create() -> socket.socket:
    """Create an IPv4 UDP socket."""
    return socket.socket(socket.AF_INET, socket.SOCK_DGRAM)


def udp_bind(sock: socket.socket, port: int) -> None:
    """Bind a UDP socket to ``port`` on every interface."""
    sock.bind(("", _check_port(port)))


def udp_send_to(sock: socket.socket, host: str, port: int, data: str) -> int:
    """Send ``data`` as one datagram to ``host:port``; return bytes sent."""
    address = socket.getaddrinfo(host, port, socket.AF_INET, socket.SOCK_DGRAM)[0][4]
    return sock.sendto(data.encode("utf-8"), address)


def udp_recv_from(sock: socket.socket, max_bytes: int = DEFAULT_RECV_SIZE) -> str:
    """Receive one datagram of up to ``max_bytes`` bytes."""
    if max_bytes <= 0:
        max_bytes = DEFAULT_RECV_SIZE
    data, _ = sock.recvfrom(max_bytes)
    return _text(data)


# -- DNS ---------------------------------------------------------------------


def dns_lookup(hostname: str) -> str:
    """The first IPv4 address ``hostname`` resolves to."""
    return socket.getaddrinfo(hostname, None, socket.AF_INET, socket.SOCK_STREAM)[0][4][0]


# -- HTTP client -------------------------------------------------------------


@dataclass(frozen=True)
class ParsedUrl:
    """Host, port and path taken from an HTTP URL."""

    host: str
    port: int
    path: str


def parse_url(url: str) -> ParsedUrl:
    """Split ``url`` into host, port (80 by default) and path ("/" by default)."""
    if url is None:
        raise ValueError("missing URL")
    for scheme in ("http://", "https://"):
        if url.startswith(scheme):
            url = url[len(scheme):]
            break
    host_end = len(url)
    for position, char in enumerate(url):
        if char in "/:":
            host_end = position
            break
    host = url[:host_end][:MAX_HOST]
    rest = url[host_end:]
    port = DEFAULT_HTTP_PORT
    if rest.startswith(":"):
        slash = rest.find("/")
        port_text = rest[1:] if slash < 0 else rest[1:slash]
        match = _ATOI.match(port_text)
        port = int(match.group(1)) if match else 0
        rest = "" if slash < 0 else rest[slash:]
    path = rest[:MAX_PATH] if rest.startswith("/") else "/"
    return ParsedUrl(host, port, path)


def _response_body(raw: bytes) -> str:
    text = _text(raw)
    marker = text.find("\r\n\r\n")
    return text[marker + 4:] if marker >= 0 else text


def _exchange(target: ParsedUrl, request: bytes) -> str:
    with tcp_connect(target.host, target.port) as conn:
        conn.sendall(request)
        chunks = []
        while True:
            chunk = conn.recv(REQUEST_BUFFER)
            if not chunk:
                break
            chunks.append(chunk)
    return _response_body(b"".join(chunks))


def http_get(url: str) -> str:
    """Send a GET request and return the response body."""
    target = parse_url(url)
    request = (
        f"GET {target.path} HTTP/1.1\r\nHost: {target.host}\r\n"
        "Connection: close\r\n\r\n"
    ).encode("utf-8")
    return _exchange(target, request[: GET_REQUEST_LIMIT - 1])


def http_post(url: str, body: Optional[str] = None, content_type: Optional[str] = None) -> str:
    """Send a POST request with ``body`` and return the response body."""
    target = parse_url(url)
    payload = (body or "").encode("utf-8")
    kind = content_type if content_type is not None else "text/plain"
    head = (
        f"POST {target.path} HTTP/1.1\r\nHost: {target.host}\r\n"
        f"Content-Type: {kind}\r\nContent-Length: {len(payload)}\r\n"
        "Connection: close\r\n\r\n"
    ).encode("utf-8")
    return _exchange(target, (head + payload)[: POST_REQUEST_LIMIT - 1])


# -- HTTP server -------------------------------------------------------------


def status_text(code: int) -> str:
    """Reason phrase for a status code; anything unknown reads as "OK"."""
    return _STATUS_TEXT.get(code, "OK")


@dataclass
class HttpRequest:
    """One request received by an ``HttpServer``."""

    method: str = ""
    path: str = ""
    body: str = ""
    connection: Optional[socket.socket] = field(default=None, repr=False)

    def respond(self, status_code: int, body: Optional[str] = None) -> None:
        """Send a plain-text response and close the connection."""
        if self.connection is None:
            raise RuntimeError("request has no open connection")
        payload = (body or "").split("\0", 1)[0].encode("utf-8")
        header = (
            f"HTTP/1.1 {status_code} {status_text(status_code)}\r\n"
            f"Content-Length: {len(payload)}\r\n"
            "Content-Type: text/plain\r\nConnection: close\r\n\r\n"
        ).encode("utf-8")
        conn, self.connection = self.connection, None
        try:
            conn.sendall(header)
            if payload:
                conn.sendall(payload)
        finally:
            conn.close()


def parse_request(data: bytes) -> HttpRequest:
    """Read method, path and body from the raw bytes of an HTTP request."""
    raw = data.split(b"\0", 1)[0]
    method = path = b""
    first_space = raw.find(b" ")
    if first_space >= 0:
        method = raw[:first_space][:MAX_METHOD]
        second_space = raw.find(b" ", first_space + 1)
        if second_space >= 0:
            path = raw[first_space + 1:second_space][:MAX_PATH]
    marker = raw.find(b"\r\n\r\n")
    body = raw[marker + 4:] if marker >= 0 else b""
    return HttpRequest(
        method=method.decode("utf-8", errors="replace"),
        path=path.decode("utf-8", errors="replace"),
        body=body.decode("utf-8", errors="replace"),
    )


class HttpServer:
    """A blocking HTTP server handing out one request at a time."""

    def __init__(self, port: int) -> None:
        self._socket = tcp_listen(port)

    @property
    def port(self) -> int:
        """The port the server is listening on."""
        return self._socket.getsockname()[1]

    def __enter__(self) -> "HttpServer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def accept(self) -> Optional[HttpRequest]:
        """Wait for the next request; None if the client sent nothing."""
        conn = tcp_accept(self._socket)
        try:
            data = conn.recv(REQUEST_BUFFER - 1)
        except OSError:
            conn.close()
            raise
        if not data:
            conn.close()
            return None
        request = parse_request(data)
        request.connection = conn
        return request

    def close(self) -> None:
        """Stop listening."""
        self._socket.close()