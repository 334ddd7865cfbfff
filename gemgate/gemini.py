import collections, logging, re, socket, ssl, urllib.parse

from gemgate.errors import AddressError, TransportError

DEFAULT_PORT = 1965
MAX_HEADER = 1024 + 3 + 2  # status, space, meta, CRLF

Content = collections.namedtuple("Content", "body")
RedirectTo = collections.namedtuple("RedirectTo", "target")
Failure = collections.namedtuple("Failure", "status reason")


def absolutise_url(base, relative):
    if "://" in relative:
        return relative
    if relative=="": # an empty reference drops the query, urljoin keeps it
        return base.split("?")[0]
    return urllib.parse.urljoin(base.replace("gemini://","http://"), relative).replace("http://", "gemini://", 1)


class ResourceURL(collections.namedtuple("ResourceURL", "scheme host port path query")):
    """An absolute gemini:// URL.

    `str()` gives the canonical form, and parsing the canonical form gives
    back an equal value.
    """

    __slots__ = ()

    @classmethod
    def parse(cls, text):
        text = text.strip()
        try:
            parts = urllib.parse.urlsplit(text)
            port = parts.port
        except ValueError as e:
            raise AddressError(f"Invalid URL '{text}': {e}") from e
        if parts.scheme.lower() != "gemini":
            raise AddressError(f"Not a gemini URL: '{text}'")
        if not parts.hostname:
            raise AddressError(f"Missing host in '{text}'")
        if port == 0:
            raise AddressError(f"Invalid port 0 in '{text}'")
        if parts.username is not None:
            raise AddressError(f"User info is not allowed in '{text}'")
        path = urllib.parse.quote(parts.path, safe="/%:@!$&'()*+,;=~-._") or "/"
        return cls("gemini", parts.hostname, port, path, parts.query or None)

    @property
    def netloc(self):
        host = f"[{self.host}]" if ":" in self.host else self.host
        return host if self.port is None else f"{host}:{self.port}"

    def __str__(self):
        query = f"?{self.query}" if self.query else ""
        return f"{self.scheme}://{self.netloc}{self.path}{query}"


class GeminiResponse:
    def __init__(self, url, status, meta, body=b""):
        self.url = url
        self.status = status
        self.meta = meta
        self.body = body
        logging.debug(f"{url} {status} {len(body)}")

    def __repr__(self):
        return f"<GeminiResponse {self.status} {self.meta!r} from {self.url}>"


def classify(response):
    """Map a raw response onto Content, RedirectTo or Failure."""
    if response.status.startswith("2"):
        return Content(response.body)
    if response.status.startswith("3"):
        return RedirectTo(response.meta)
    return Failure(response.status, response.meta)


def fetch(url, timeout=None):
    """Make a single Gemini request; redirects are returned, not followed.

    Raises TransportError when the exchange itself fails.
    """
    if not isinstance(url, ResourceURL):
        url = ResourceURL.parse(url)
    port = DEFAULT_PORT if url.port is None else url.port

    # TOFU is the norm in Geminispace, so any server certificate is accepted
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE

    try:
        logging.debug(f"connecting to {url.host} port {port}")
        with socket.create_connection((url.host, port), timeout=timeout) as s:
            with context.wrap_socket(s, server_hostname=url.host) as s:
                s.sendall((str(url) + "\r\n").encode("UTF-8"))
                with s.makefile("rb") as fp:
                    header = fp.readline(MAX_HEADER)
                    if len(header) == MAX_HEADER and not header.endswith(b"\n"):
                        raise TransportError(f"Header too long from {url.netloc}")
                    header = header.decode("UTF-8").strip()
                    logging.debug(header)

                    if not header:
                        raise TransportError(f"Empty response from {url.netloc}")
                    status, meta = (header.split(maxsplit=1)+[""])[:2]
                    if not re.match('^[0-9][0-9]$',status):
                        raise TransportError(f"Bad header '{status}'")

                    body = fp.read() if status.startswith("2") else b""
    except (OSError, UnicodeError) as e:
        raise TransportError(f"{url.netloc}: {str(e) or e.__class__.__name__}") from e

    return GeminiResponse(url, status, meta, body)
