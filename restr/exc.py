"""

    restr.exc -- exceptions
    =======================

"""

from webob import exc

__all__ = (
    'OperationFailed', 'NotFound', 'BadRequest', 'Forbidden',
    'UnsupportedFormat', 'MethodNotSupported', 'Conflict', 'InternalError',
    'PersistenceError', 'ConfigurationError', 'RightsConfigurationError',
    'RegistryConfigurationError')

class OperationFailed(Exception):
    """ Raised by operation handlers on the first terminal failure

    :attr status:
        status code of the failure
    :attr response:
        :class:`webob.exc.HTTPException` to return to client
    """

    status = NotImplemented
    response = NotImplemented

    def __init__(self, detail=None):
        super(OperationFailed, self).__init__(detail)
        self.detail = detail

class NotFound(OperationFailed):
    """ Requested resource does not exist"""

    status = 404
    response = exc.HTTPNotFound()

class BadRequest(OperationFailed):
    """ Payload is malformed or was rejected by the resource"""

    status = 400
    response = exc.HTTPBadRequest()

class Forbidden(OperationFailed):
    """ Rights policy denied the operation for the resource"""

    status = 403
    response = exc.HTTPForbidden()

class UnsupportedFormat(OperationFailed):
    """ Non-default representation requested but no formatter handles it"""

    status = 415
    response = exc.HTTPUnsupportedMediaType()

class MethodNotSupported(OperationFailed):
    """ Verb isn't supported on this scope or for this resource type"""

    status = 405
    response = exc.HTTPMethodNotAllowed()

class Conflict(OperationFailed):
    """ Identifier collides with an existing resource"""

    status = 409
    response = exc.HTTPConflict()

class InternalError(OperationFailed):
    """ Persistence notifier failed after all checks passed"""

    status = 500
    response = exc.HTTPInternalServerError()

class PersistenceError(Exception):
    """ Persistence notifier reported failure for a commit

    :param ids:
        identifiers affected by the failed commit
    :param reason:
        underlying exception
    """

    def __init__(self, ids, reason):
        super(PersistenceError, self).__init__(
            'persisting %r failed: %s' % (ids, reason))
        self.ids = ids
        self.reason = reason

class ConfigurationError(Exception):
    """ Collections were configured improperly

    Errors of such type can be only raised during initial configuration and not
    during runtime.
    """

class RightsConfigurationError(ConfigurationError):
    """ Rights policy leaves an operation kind undecided"""

class RegistryConfigurationError(ConfigurationError):
    """ Collection registered under a name already taken"""
