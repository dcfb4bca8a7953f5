"""
Cache utilities for the loyalty platform.

Redis-backed Flask-Caching with fallback to an in-process SimpleCache.

Usage:
    from loyalty.utils.cache import cache

    @cache.memoize(timeout=300)
    def get_region_rates(region):
        ...

    cache.delete_memoized(get_region_rates, 'NOLA')

Holds the region points-config lookups and the revoked-token blocklist.
"""
import logging

import redis
from flask_caching import Cache

logger = logging.getLogger(__name__)

cache = Cache()

DEFAULT_TIMEOUT = 300
KEY_PREFIX = 'loyalty:'


def init_cache(app):
    """
    Initialize Flask-Caching with Redis, or fall back to simple cache.

    Args:
        app: Flask application instance

    Returns:
        bool: True if Redis connected, False if using fallback
    """
    redis_url = app.config.get('REDIS_URL')

    if redis_url:
        try:
            r = redis.from_url(redis_url, socket_connect_timeout=2)
            r.ping()

            app.config['CACHE_TYPE'] = 'RedisCache'
            app.config['CACHE_REDIS_URL'] = redis_url
            app.config['CACHE_DEFAULT_TIMEOUT'] = DEFAULT_TIMEOUT
            app.config['CACHE_KEY_PREFIX'] = KEY_PREFIX

            cache.init_app(app)
            logger.info('Redis cache connected: %s', redis_url.split('@')[-1])
            return True

        except (redis.RedisError, ValueError) as e:
            logger.warning('Redis unavailable (%s), using simple cache', str(e))

    app.config['CACHE_TYPE'] = 'SimpleCache'
    app.config['CACHE_DEFAULT_TIMEOUT'] = DEFAULT_TIMEOUT

    cache.init_app(app)
    logger.info('Using simple in-memory cache (no Redis)')
    return False


def cache_key(*args, **kwargs):
    """
    Generate a cache key from arguments.

        key = cache_key('revoked', jti='abc')   # 'revoked:jti=abc'
    """
    parts = list(args)
    for k, v in sorted(kwargs.items()):
        parts.append(f'{k}={v}')
    return ':'.join(str(p) for p in parts)
