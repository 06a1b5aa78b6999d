"""

    restr.operations -- REST verbs as CRUD operations on collections
    ================================================================

    Every handler receives a :class:`restr.collection.Collection` and a
    :class:`restr.context.Context`, returns an :class:`restr.outcome.Outcome`
    on success and raises :class:`restr.exc.OperationFailed` at its first
    terminal failure, before anything was changed.

    :func:`dispatch` selects the handler for a verb and scope and always
    produces exactly one outcome.

"""

from collections.abc import Mapping

from restr.exc import (
    OperationFailed, NotFound, BadRequest, Forbidden, UnsupportedFormat,
    MethodNotSupported, Conflict, InternalError, PersistenceError)
from restr.log import get_logger
from restr.outcome import Outcome, OK, CREATED, NO_CONTENT
from restr.resource import ValidationError
from restr.rights import CREATE, READ, UPDATE, DELETE as DELETE_KIND

__all__ = (
    'dispatch', 'list_all', 'create', 'put_all', 'delete_all',
    'get', 'post', 'patch', 'put', 'delete',
    'COLLECTION_METHODS', 'ITEM_METHODS',
    'GET', 'POST', 'PUT', 'PATCH', 'DELETE')

GET     = 'GET'
POST    = 'POST'
PUT     = 'PUT'
PATCH   = 'PATCH'
DELETE  = 'DELETE'

MUTATING = frozenset([POST, PUT, PATCH, DELETE])

logger = get_logger(__name__)

def _authorize(collection, context, kind, resource, id=None):
    if not collection.rights.authorize(kind, context, resource):
        logger.info('operation denied', collection=collection.name,
            kind=kind, id=id, user=context.user)
        raise Forbidden('%s denied' % kind)

def _custom(context, kind, resource):
    fn = context.create_custom_fn(kind, resource)
    if not fn:
        raise UnsupportedFormat()
    return fn()

def _commit(fn, *args):
    try:
        fn(*args)
    except PersistenceError as e:
        raise InternalError(str(e))

# collection scope

def list_all(collection, context):
    """ List resources caller may read"""
    resources = [r for r in collection.get_list()
        if collection.rights.authorize(READ, context, r)]
    return Outcome(OK, body=resources)

def create(collection, context, info):
    """ Create resource with identifier assigned by the resource itself"""
    try:
        resource = collection.instantiate(None, info)
    except ValidationError as e:
        raise BadRequest(e.error)

    if not collection.adapter.supports_create_id:
        raise MethodNotSupported(
            "%s doesn't assign identifiers" % collection.adapter.name)

    id = collection.create_id(resource)
    if collection.has(id):
        raise Conflict("resource '%s' already exists" % id)

    _authorize(collection, context, CREATE, resource, id)

    _commit(collection.set, id, resource)
    return Outcome(CREATED, body=resource, location=id)

def put_all(collection, context, data):
    """ Replace whole collection with resources described by ``data``

    ``data`` maps identifiers to resource info. Every creation, update and
    implied deletion is checked before any existing resource is edited, and
    nothing is committed until all of them pass.
    """
    if not isinstance(data, Mapping):
        raise BadRequest('expected mapping of identifiers to resources')

    resources = {}
    updates = {}
    to_delete = collection.get_map()

    for id, info in data.items():
        resource = to_delete.pop(id, None)

        if resource is None:
            try:
                resource = collection.instantiate(id, info)
            except ValidationError as e:
                raise BadRequest(e.error)
            _authorize(collection, context, CREATE, resource, id)
            resources[id] = resource
        else:
            _authorize(collection, context, UPDATE, resource, id)
            updates[id] = (resource, info)

    for id, resource in to_delete.items():
        _authorize(collection, context, DELETE_KIND, resource, id)

    # edits go last, resources without copy() are changed in place
    for id, (resource, info) in updates.items():
        try:
            resources[id] = collection.edited(resource, info)
        except ValidationError as e:
            raise BadRequest(e.error)

    _commit(collection.set_all, resources)
    return Outcome(NO_CONTENT)

def delete_all(collection, context):
    """ Delete every resource, or none if any deletion is denied"""
    for id, resource in collection.get_map().items():
        _authorize(collection, context, DELETE_KIND, resource, id)
    _commit(collection.delete_all)
    return Outcome(NO_CONTENT)

# item scope

def get(collection, context, id):
    resource = collection.get(id)
    if resource is None:
        raise NotFound(id)

    if not context.is_json():
        return _custom(context, 'get', resource)

    _authorize(collection, context, READ, resource, id)
    return Outcome(OK, body=resource)

def post(collection, context, id, info):
    raise MethodNotSupported('cannot POST to a single resource')

def patch(collection, context, id, info):
    """ Update existing resource"""
    resource = collection.get(id)
    if resource is None:
        raise NotFound(id)

    if not context.is_json():
        return _custom(context, 'patch', resource)

    return _update(collection, context, id, resource, info)

def put(collection, context, id, info):
    """ Update resource or create it under ``id`` if it doesn't exist"""
    resource = collection.get(id)

    if not context.is_json():
        return _custom(context, 'put', resource)

    if resource is not None:
        return _update(collection, context, id, resource, info)

    try:
        resource = collection.instantiate(id, info)
    except ValidationError as e:
        raise BadRequest(e.error)

    _authorize(collection, context, CREATE, resource, id)

    _commit(collection.set, id, resource)
    return Outcome(CREATED, location=id)

def _update(collection, context, id, resource, info):
    _authorize(collection, context, UPDATE, resource, id)

    try:
        resource = collection.edited(resource, info)
    except ValidationError as e:
        raise BadRequest(e.error)

    _commit(collection.set, id, resource)
    return Outcome(NO_CONTENT)

def delete(collection, context, id):
    resource = collection.get(id)
    if resource is None:
        raise NotFound(id)

    _authorize(collection, context, DELETE_KIND, resource, id)

    _commit(collection.delete, id)
    return Outcome(NO_CONTENT)

COLLECTION_METHODS = {
    GET: list_all,
    POST: create,
    PUT: put_all,
    DELETE: delete_all,
    }

ITEM_METHODS = {
    GET: get,
    POST: post,
    PATCH: patch,
    PUT: put,
    DELETE: delete,
    }

_with_payload = frozenset([POST, PUT, PATCH])

def dispatch(collection, context, method, id=None, info=None):
    """ Perform ``method`` on ``collection`` and return its outcome

    :param method:
        one of ``GET``, ``POST``, ``PUT``, ``PATCH``, ``DELETE``
    :param id:
        resource identifier for item scope, ``None`` for collection scope
    :param info:
        request payload for ``POST``, ``PUT`` and ``PATCH``
    """
    methods = COLLECTION_METHODS if id is None else ITEM_METHODS
    handler = methods.get(method)

    args = [collection, context]
    if id is not None:
        args.append(id)
    if method in _with_payload:
        args.append(info)

    try:
        if handler is None:
            raise MethodNotSupported(
                '%s is not supported here' % method)
        if method in MUTATING:
            with collection.lock:
                return handler(*args)
        return handler(*args)
    except OperationFailed as e:
        return Outcome(e.status, body=e.detail, error=e)
