"""

    restr.resource -- adapting application types into resources
    ============================================================

    Resources are instances of an application class the engine knows nothing
    about beyond these capabilities::

        class User(object):

            def __init__(self, id, info):
                ...

            def edit(self, info):
                ...

            def create_id(self):    # optional
                ...

            def copy(self):         # optional
                ...

    :class:`ResourceAdapter` is the only place the engine calls into them.

"""

from restr.exc import ConfigurationError

__all__ = ('ResourceAdapter', 'ValidationError')

class ValidationError(ValueError):
    """ Resource rejected a payload"""

    def __init__(self, error):
        self.error = error
        super(ValueError, self).__init__(error)

# errors from resource code which mean "payload is invalid"
_rejections = (ValidationError, ValueError, TypeError, KeyError)

class ResourceAdapter(object):
    """ Capability boundary around resource class ``cls``

    :param cls:
        class constructed as ``cls(id, info)`` and edited by
        ``resource.edit(info)``; may define ``create_id()`` which assigns and
        returns a fresh identifier, and ``copy()`` which returns an independent
        copy to apply edits to before they are committed
    """

    def __init__(self, cls):
        if not callable(getattr(cls, 'edit', None)):
            raise ConfigurationError(
                "resource type %r doesn't define 'edit'" % cls)
        self.cls = cls

    @property
    def name(self):
        return getattr(self.cls, '__name__', str(self.cls))

    @property
    def supports_create_id(self):
        return callable(getattr(self.cls, 'create_id', None))

    @property
    def supports_copy(self):
        return callable(getattr(self.cls, 'copy', None))

    def instantiate(self, id, info):
        """ Construct resource with ``id`` (``None`` to assign one later)

        :raises ValidationError:
            if resource rejects ``info``
        """
        try:
            return self.cls(id, info)
        except _rejections as e:
            raise _as_validation_error(e)

    def edit(self, resource, info):
        """ Apply ``info`` to ``resource`` in place

        :raises ValidationError:
            if resource rejects ``info``
        """
        try:
            resource.edit(info)
        except _rejections as e:
            raise _as_validation_error(e)

    def create_id(self, resource):
        """ Ask ``resource`` to assign itself a new identifier"""
        return resource.create_id()

    def copy(self, resource):
        """ Return a copy of ``resource`` which can be edited without
        affecting it
        """
        return resource.copy()

    def __repr__(self):
        return '%s(%s)' % (self.__class__.__name__, self.name)

def _as_validation_error(e):
    if isinstance(e, ValidationError):
        return e
    return ValidationError(str(e))
