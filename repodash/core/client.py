import requests
import structlog
from requests.adapters import HTTPAdapter

logger = structlog.get_logger('client')


def get_http_client(pool_size: int = 10) -> requests.Session:
    """
    Returns a plain requests session with connection pooling and request logging.

    Every fetch cycle re-reads everything from the API, so responses are not
    cached and failed requests are not retried.
    """
    session = requests.Session()

    def logging_hook(response, *args, **kwargs):
        log_kwargs = {
            'method': response.request.method,
            'url': response.url,
            'status': response.status_code,
            'content_length': len(response.content) if response.content else 0,
            'elapsed': f"{response.elapsed.total_seconds():.3f}s",
        }

        # GitHub rate limit info, useful when running without a token
        remaining = response.headers.get('X-RateLimit-Remaining')
        limit = response.headers.get('X-RateLimit-Limit')
        if remaining and limit:
            log_kwargs['ratelimit'] = f"{remaining}/{limit}"

        if response.ok:
            logger.info('HTTP Request', **log_kwargs)
        else:
            logger.warning('HTTP Request', _style='yellow', **log_kwargs)
    session.hooks['response'].append(logging_hook)

    adapter = HTTPAdapter(
        pool_connections=pool_size,
        pool_maxsize=pool_size,
        max_retries=0,
    )
    session.mount('https://', adapter)
    session.mount('http://', adapter)

    logger.debug('Initialized HTTP Client', pool_size=pool_size)

    return session
