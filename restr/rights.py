"""

    restr.rights -- per-operation rights policy
    ===========================================

    Each collection is configured with a :class:`Rights` object deciding, for
    every operation kind, whether a caller may perform it on a resource::

        rights = Rights(
            read=True,
            update=lambda context, resource: context.user == resource.owner,
            default=False)

    Plain booleans and callables are wrapped into :class:`Static` and
    :class:`Decision` respectively.

"""

import inspect

from restr.exc import RightsConfigurationError

__all__ = (
    'Rights', 'Static', 'Decision', 'resolve',
    'CREATE', 'READ', 'UPDATE', 'DELETE', 'KINDS')

CREATE  = 'create'
READ    = 'read'
UPDATE  = 'update'
DELETE  = 'delete'

KINDS = (CREATE, READ, UPDATE, DELETE)

class Static(object):
    """ Constant decision"""

    def __init__(self, allowed):
        if not isinstance(allowed, bool):
            raise RightsConfigurationError(
                'static rights must be bool, got %r' % (allowed,))
        self.allowed = allowed

    def __call__(self, context, resource):
        return self.allowed

    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, self.allowed)

class Decision(object):
    """ Decision made by ``fn(context, resource)`` for each operation"""

    def __init__(self, fn):
        if not callable(fn):
            raise RightsConfigurationError(
                'decision %r is not callable' % (fn,))
        self.fn = fn

    def __call__(self, context, resource):
        allowed = self.fn(context, resource)
        if inspect.isawaitable(allowed):
            raise RightsConfigurationError(
                'decision %r must answer synchronously' % (self.fn,))
        return bool(allowed)

    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, self.fn)

def resolve(value):
    """ Turn rights configuration ``value`` into :class:`Static` or
    :class:`Decision`
    """
    if isinstance(value, (Static, Decision)):
        return value
    if isinstance(value, bool):
        return Static(value)
    if callable(value):
        return Decision(value)
    raise RightsConfigurationError(
        'rights should be bool or callable, got %r' % (value,))

class Rights(object):
    """ Rights policy of a collection

    :param create, read, update, delete:
        bool or ``callable(context, resource)`` for the operation kind
    :param default:
        used for kinds which weren't given; if omitted every kind has to be
        given explicitly
    """

    def __init__(self, create=None, read=None, update=None, delete=None,
            default=None):
        given = {CREATE: create, READ: read, UPDATE: update, DELETE: delete}
        decisions = {}
        for kind in KINDS:
            value = given[kind] if given[kind] is not None else default
            if value is None:
                raise RightsConfigurationError(
                    "no rights given for '%s' and no default" % kind)
            decisions[kind] = resolve(value)
        self.__dict__['_decisions'] = decisions

    def authorize(self, kind, context, resource):
        """ Check whether ``context`` may perform ``kind`` on ``resource``"""
        if kind not in self._decisions:
            raise ValueError("unknown operation kind '%s'" % kind)
        return self._decisions[kind](context, resource)

    def __getitem__(self, kind):
        return self._decisions[kind]

    def __setattr__(self, name, value):
        raise AttributeError('rights are immutable')

    def __repr__(self):
        return '%s(%s)' % (self.__class__.__name__, ', '.join(
            '%s=%r' % (k, self._decisions[k]) for k in KINDS))
