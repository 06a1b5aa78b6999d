"""

    restr.context -- caller context of an operation
    ===============================================

"""

__all__ = ('Context',)

class Context(object):
    """ Who performs an operation and which representation they want

    :param user:
        ambient caller identity handed to rights decisions, opaque to the
        engine
    :param json:
        whether the caller wants the default structured representation
    :param formatter:
        ``callable(kind, resource)`` returning a no-argument callable which
        produces the :class:`restr.outcome.Outcome` for a non-default
        representation, or ``None`` if it can't handle it
    :param request:
        underlying transport request, if any
    """

    def __init__(self, user=None, json=True, formatter=None, request=None):
        self.user = user
        self.json = json
        self.formatter = formatter
        self.request = request

    def is_json(self):
        return self.json

    def create_custom_fn(self, kind, resource):
        if self.formatter is None:
            return None
        return self.formatter(kind, resource)

    def __repr__(self):
        return '%s(user=%r, json=%r)' % (
            self.__class__.__name__, self.user, self.json)
