"""

    restr.wsgi -- serving collections over HTTP with WebOb
    ======================================================

    :class:`Application` exposes every collection of a
    :class:`restr.registry.Registry` as::

        /<collection>          GET, POST, PUT, DELETE
        /<collection>/<id>     GET, PATCH, PUT, DELETE

    JSON is the default representation. Requests asking for anything else are
    handed to the ``formatter``, see :class:`restr.context.Context`.

"""

import json
from urllib.parse import quote

from webob import Response, exc
from webob.dec import wsgify

from restr.context import Context
from restr.log import get_logger
from restr.operations import dispatch, POST, PUT, PATCH

__all__ = ('Application', 'encode')

logger = get_logger(__name__)

JSON = 'application/json'

def encode(obj):
    """ JSON encoding hook for resources

    Uses ``obj.__json__()`` if resource defines it, its attributes otherwise.
    """
    if hasattr(obj, '__json__'):
        return obj.__json__()
    if hasattr(obj, '__dict__'):
        return {k: v for k, v in vars(obj).items() if not k.startswith('_')}
    raise TypeError('%r is not JSON serializable' % (obj,))

class Application(object):
    """ WSGI application serving collections of ``registry``

    :param registry:
        :class:`restr.registry.Registry`
    :param formatter:
        formatter capability passed to every :class:`restr.context.Context`
    :param get_user:
        ``callable(request)`` returning caller identity for rights decisions,
        defaults to ``request.remote_user``
    """

    def __init__(self, registry, formatter=None, get_user=None):
        self.registry = registry
        self.formatter = formatter
        self.get_user = get_user or (lambda request: request.remote_user)

    def context(self, request):
        return Context(
            user=self.get_user(request),
            json=wants_json(request),
            formatter=self.formatter,
            request=request)

    @wsgify
    def __call__(self, request):
        base_url = request.application_url
        name = request.path_info_pop()
        collection = self.registry.get(name) if name else None
        if collection is None:
            return exc.HTTPNotFound()

        id = request.path_info_pop() or None
        if request.path_info.strip('/'):
            return exc.HTTPNotFound()

        context = self.context(request)
        info = None
        if request.method in (POST, PUT, PATCH) and context.is_json():
            try:
                info = request.json_body
            except ValueError:
                logger.info('undecodable payload',
                    collection=collection.name, method=request.method)
                return exc.HTTPBadRequest('payload is not valid JSON')

        outcome = dispatch(collection, context, request.method, id, info)
        return self.render(base_url, name, outcome)

    def render(self, base_url, name, outcome):
        """ Turn ``outcome`` into :class:`webob.Response`"""
        if outcome.error is not None:
            detail = outcome.body if isinstance(outcome.body, str) else None
            return outcome.error.response.__class__(detail=detail)

        response = Response(status=outcome.status)
        if outcome.body is not None:
            response.content_type = JSON
            response.charset = 'utf-8'
            response.text = json.dumps(outcome.body, default=encode)
        if outcome.location is not None:
            response.location = '%s/%s/%s' % (
                base_url, quote(name), quote(str(outcome.location)))
        return response

def wants_json(request):
    """ Whether ``request`` uses the default JSON representation"""
    if not request.accept.acceptable_offers([JSON]):
        return False
    if request.content_length and request.content_type:
        return request.content_type == JSON
    return True
