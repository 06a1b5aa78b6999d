"""

    restr -- REST verbs over in-memory resource collections
    =======================================================

    This package maps REST verbs onto CRUD operations over named collections
    of application-defined resources, checks a rights policy for every
    operation and resource, and notifies a persistence hook of every committed
    change::

        users = Collection(User, Rights(read=True, default=False),
            notifier=save_users)
        outcome = dispatch(users, Context(user='admin'), PUT, 'bob',
            {'name': 'Bob'})

"""

from restr.collection import Collection
from restr.context import Context
from restr.exc import (
    OperationFailed, NotFound, BadRequest, Forbidden, UnsupportedFormat,
    MethodNotSupported, Conflict, InternalError, PersistenceError,
    ConfigurationError)
from restr.operations import dispatch, GET, POST, PUT, PATCH, DELETE
from restr.outcome import Outcome, OK, CREATED, NO_CONTENT
from restr.registry import Registry
from restr.resource import ValidationError
from restr.rights import Rights, Static, Decision

__all__ = (
    'Collection', 'Context', 'Registry', 'Rights', 'Static', 'Decision',
    'dispatch', 'Outcome', 'OK', 'CREATED', 'NO_CONTENT',
    'GET', 'POST', 'PUT', 'PATCH', 'DELETE',
    'OperationFailed', 'NotFound', 'BadRequest', 'Forbidden',
    'UnsupportedFormat', 'MethodNotSupported', 'Conflict', 'InternalError',
    'PersistenceError', 'ConfigurationError', 'ValidationError')
