"""Process-wide settings, read once at start-up.

Environment variables give the defaults and command line options
override them. The resulting Config is immutable and is handed to
`proxy.make_app`.
"""

import argparse, collections, logging, os

Config = collections.namedtuple(
    "Config", "host port max_redirects timeout report_redirect_exhaustion server log_level")

DEFAULTS = Config(
    host="127.0.0.1",
    port=1414,
    max_redirects=5,
    timeout=30.0,
    report_redirect_exhaustion=False,
    server="wsgiref",
    log_level="INFO",
)


def parse_socket(value):
    """Split 'ip:port' (or '[ipv6]:port') into a host and an int port."""
    host, sep, port = value.rpartition(":")
    if not sep or not host:
        raise ValueError(f"expected ip:port, got '{value}'")
    host = host[1:-1] if host.startswith("[") and host.endswith("]") else host
    port = int(port)
    if not 0 < port < 65536:
        raise ValueError(f"port out of range: {port}")
    return host, port


def parse_bool(value):
    value = value.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"not a boolean: '{value}'")


def parse_level(value):
    value = value.upper()
    if not isinstance(logging.getLevelName(value), int):
        raise ValueError(f"unknown log level: '{value}'")
    return value


def non_negative_int(value):
    value = int(value)
    if value < 0:
        raise ValueError(f"must not be negative: {value}")
    return value


def positive_float(value):
    value = float(value)
    if value <= 0:
        raise ValueError(f"must be positive: {value}")
    return value


def from_env(environ=os.environ):
    config = DEFAULTS
    if environ.get("GEMGATE_SOCKET"):
        host, port = parse_socket(environ["GEMGATE_SOCKET"])
        config = config._replace(host=host, port=port)
    if environ.get("GEMGATE_MAX_REDIRECTS"):
        config = config._replace(max_redirects=non_negative_int(environ["GEMGATE_MAX_REDIRECTS"]))
    if environ.get("GEMGATE_TIMEOUT"):
        config = config._replace(timeout=positive_float(environ["GEMGATE_TIMEOUT"]))
    if "GEMGATE_REPORT_EXHAUSTION" in environ:
        config = config._replace(report_redirect_exhaustion=parse_bool(environ["GEMGATE_REPORT_EXHAUSTION"]))
    if environ.get("GEMGATE_SERVER"):
        config = config._replace(server=environ["GEMGATE_SERVER"])
    if environ.get("GEMGATE_LOG_LEVEL"):
        config = config._replace(log_level=parse_level(environ["GEMGATE_LOG_LEVEL"]))
    return config


def _argtype(func):
    def convert(value):
        try:
            return func(value)
        except ValueError as e:
            raise argparse.ArgumentTypeError(str(e))
    convert.__name__ = func.__name__
    return convert


def build_argument_parser(defaults=DEFAULTS):
    parser = argparse.ArgumentParser(prog="gemgate", description="A simple gemini proxy for the web.")
    parser.add_argument("-i", "--socket", type=_argtype(parse_socket),
                        default=(defaults.host, defaults.port), metavar="IP:PORT",
                        help=f"address to serve on (default {defaults.host}:{defaults.port})")
    parser.add_argument("-r", "--max-redirects", type=_argtype(non_negative_int),
                        default=defaults.max_redirects,
                        help="maximum number of gemini requests per page, redirects included")
    parser.add_argument("-t", "--timeout", type=_argtype(positive_float), default=defaults.timeout,
                        help="socket timeout in seconds for each gemini request")
    exhaustion = parser.add_mutually_exclusive_group()
    exhaustion.add_argument("--report-exhaustion", dest="report_exhaustion", action="store_true",
                            help="show an error when the redirect limit is reached")
    exhaustion.add_argument("--no-report-exhaustion", dest="report_exhaustion", action="store_false",
                            help="stop silently when the redirect limit is reached")
    parser.set_defaults(report_exhaustion=defaults.report_redirect_exhaustion)
    parser.add_argument("-s", "--server", default=defaults.server,
                        help="bottle server adapter, e.g. wsgiref, waitress, gunicorn")
    parser.add_argument("-l", "--log-level", type=_argtype(parse_level), default=defaults.log_level)
    return parser


def load(argv=None, environ=os.environ):
    defaults = from_env(environ)
    args = build_argument_parser(defaults).parse_args(argv)
    host, port = args.socket
    return Config(
        host=host,
        port=port,
        max_redirects=args.max_redirects,
        timeout=args.timeout,
        report_redirect_exhaustion=args.report_exhaustion,
        server=args.server,
        log_level=args.log_level,
    )
