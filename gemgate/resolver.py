import collections, logging

from gemgate import gemini
from gemgate.errors import AddressError, RedirectExhaustion, TransportError, UnrecognizedStatus

ResolutionOutcome = collections.namedtuple("ResolutionOutcome", "content error")


def resolve(start, max_redirects, fetch=gemini.fetch, report_exhaustion=False):
    """Follow redirects from `start` until content arrives or something fails.

    `start` is a ResourceURL, or the AddressError raised while building one.
    At most `max_redirects` fetches are made. When the budget runs out the
    outcome is empty unless `report_exhaustion` is set.
    """
    if isinstance(start, AddressError):
        logging.error(f"Invalid address: {start}")
        return ResolutionOutcome(None, str(start))

    url = start
    for _ in range(max_redirects):
        logging.info(f"Accessing {url}")
        try:
            result = gemini.classify(fetch(url))
        except TransportError as e:
            return _failed(url, e)

        if isinstance(result, gemini.Content):
            return ResolutionOutcome(result.body.decode("UTF-8", errors="replace"), None)
        elif isinstance(result, gemini.RedirectTo):
            try:
                url = gemini.ResourceURL.parse(gemini.absolutise_url(str(url), result.target))
            except AddressError as e:
                return _failed(url, e)
        elif isinstance(result, gemini.Failure):
            return _failed(url, UnrecognizedStatus(result.status, result.reason))
        else:
            raise TypeError(f"unexpected fetch result {result!r}")

    if report_exhaustion:
        return _failed(url, RedirectExhaustion(max_redirects))
    logging.warning(f"Gave up on {start} after {max_redirects} redirects")
    return ResolutionOutcome(None, None)


def _failed(url, error):
    logging.error(f"Error accessing {url}: {error}")
    return ResolutionOutcome(None, str(error))
