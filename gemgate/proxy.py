import bottle, functools, logging, os, socketserver, sys, urllib.parse
from wsgiref.simple_server import WSGIServer

from gemgate import config as settings, gemini, gemtext, resolver
from gemgate.errors import AddressError

VIEWS = [os.path.join(os.path.dirname(os.path.abspath(__file__)), "views")]
PAGE_TEMPLATE = "page"
PATH_SAFE = "/:@!$&'()*+,;=~-._"


class ThreadingWSGIServer(socketserver.ThreadingMixIn, WSGIServer):
    daemon_threads = True


def render_page(error=None, gemini_url=None, content=None):
    try:
        return bottle.template(PAGE_TEMPLATE, template_lookup=VIEWS,
                               error=error, gemini_url=gemini_url, content=content)
    except Exception as e:
        logging.error(f"Error rendering template: {e}")
        return f"<p>Error rendering template: {e}</p>"


def make_app(config=settings.DEFAULTS, fetch=None):
    """Build the WSGI application around one immutable Config."""
    app = bottle.Bottle()
    fetch = fetch or functools.partial(gemini.fetch, timeout=config.timeout)

    @app.get('/')
    def index():
        return render_page()

    @app.get('/go')
    def go():
        target = bottle.request.query.getunicode("url", default="").strip()
        if not target:
            bottle.redirect("/", 303)
        if "://" not in target:
            target = "gemini://" + target
        if not target.lower().startswith("gemini://"):
            logging.warning(f"Leaving Geminispace: {target}")
            bottle.redirect(target, 303)
        path = urllib.parse.quote(target[len("gemini://"):], safe="/%:@!$&'()*+,;=~-._?")
        bottle.redirect(f"{gemtext.GEMINI_PREFIX}/{path}", 303)

    @app.get('/gemini')
    @app.get('/gemini/')
    @app.get('/gemini/<path:path>')
    def serve(path=""):
        request_path = "/" + urllib.parse.quote(path, safe=PATH_SAFE)
        query = bottle.request.query_string
        gemini_url = "gemini:/" + request_path + (query and "?" + query)

        try:
            start = gemini.ResourceURL.parse(gemini_url)
        except AddressError as e:
            start = e

        outcome = resolver.resolve(start, config.max_redirects, fetch,
                                   report_exhaustion=config.report_redirect_exhaustion)

        content = None
        if outcome.content is not None:
            content = gemtext.to_html(outcome.content, request_path)
        return render_page(outcome.error, gemini_url, content)

    return app


def main(argv=None):
    config = settings.load(argv)
    logging.basicConfig(level=config.log_level, format="%(asctime)s %(levelname)s %(message)s")

    app = make_app(config)
    logging.info(f"Server started at http://{config.host}:{config.port}")
    options = {}
    if config.server == "wsgiref":
        options["server_class"] = ThreadingWSGIServer
    bottle.run(app, server=config.server, host=config.host, port=config.port, quiet=True, **options)


if __name__ == "__main__":
    sys.exit(main())
