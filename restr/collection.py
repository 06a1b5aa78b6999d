"""

    restr.collection -- in-memory resource collections
    ==================================================

    A :class:`Collection` maps identifiers to resources of one type. All
    mutation goes through its commit primitives -- :meth:`Collection.set`,
    :meth:`Collection.set_all`, :meth:`Collection.delete` and
    :meth:`Collection.delete_all` -- each of which reports the affected
    identifiers to the persistence notifier.

    If the notifier fails, the mapping is restored to what it was before the
    commit and :class:`restr.exc.PersistenceError` is raised, so a failed
    commit is never visible after it returns.

"""

import threading
from concurrent.futures import Future

from restr.exc import PersistenceError
from restr.log import get_logger
from restr.resource import ResourceAdapter

__all__ = ('Collection',)

logger = get_logger(__name__)

class Collection(object):
    """ Collection of resources keyed by identifier

    :param resource_cls:
        resource type, see :mod:`restr.resource`
    :param rights:
        :class:`restr.rights.Rights` policy for operations on the collection
    :param notifier:
        ``callable(ids)`` invoked after every commit with the list of affected
        identifiers; it fails by raising, and may return a
        :class:`concurrent.futures.Future` which is then waited on
    :param name:
        collection name, defaults to the resource type name lowercased
    """

    def __init__(self, resource_cls, rights, notifier=None, name=None):
        self.adapter = ResourceAdapter(resource_cls)
        self.rights = rights
        self.notifier = notifier
        self.name = name or self.adapter.name.lower()
        self.lock = threading.RLock()
        self._resources = {}

    def get(self, id):
        return self._resources.get(id)

    def has(self, id):
        return id in self._resources

    __contains__ = has

    def __len__(self):
        return len(self._resources)

    def get_ids(self):
        return list(self._resources)

    def get_map(self):
        """ Return a copy of identifier to resource mapping"""
        return dict(self._resources)

    def get_list(self):
        return list(self._resources.values())

    def instantiate(self, id, info):
        """ Construct a new resource, not yet part of the collection

        :param id:
            identifier or ``None`` if it will be assigned later
        :raises restr.resource.ValidationError:
            if resource rejects ``info``
        """
        return self.adapter.instantiate(id, info)

    def edited(self, resource, info):
        """ Apply ``info`` to ``resource`` and return the edited resource

        If the resource defines ``copy()`` the edit goes to the copy and the
        stored resource stays untouched until the copy is committed, otherwise
        ``resource`` is edited in place.

        :raises restr.resource.ValidationError:
            if resource rejects ``info``
        """
        if self.adapter.supports_copy:
            resource = self.adapter.copy(resource)
        self.adapter.edit(resource, info)
        return resource

    def create_id(self, resource):
        return self.adapter.create_id(resource)

    def load_one(self, id, info):
        """ Populate collection with a resource bypassing rights and
        persistence, meant for startup
        """
        resource = self.instantiate(id, info)
        with self.lock:
            resources = dict(self._resources)
            resources[id] = resource
            self._resources = resources
        return resource

    def load_map(self, data):
        """ Populate collection from mapping of identifier to resource info"""
        resources = {id: self.instantiate(id, info)
            for id, info in data.items()}
        with self.lock:
            merged = dict(self._resources)
            merged.update(resources)
            self._resources = merged
        return resources

    def set(self, id, resource):
        """ Insert or replace resource with ``id``

        :raises restr.exc.PersistenceError:
            if notifier fails, collection is left as before the call
        """
        if resource is None:
            raise ValueError('cannot store None as resource %r' % id)
        with self.lock:
            resources = dict(self._resources)
            resources[id] = resource
            self._commit([id], resources)

    def set_all(self, resources):
        """ Replace whole collection with ``resources`` mapping

        Identifiers missing from ``resources`` are deleted, the others are
        created or replaced. Notifier receives all of them.

        :raises restr.exc.PersistenceError:
            if notifier fails, collection is left as before the call
        """
        if any(r is None for r in resources.values()):
            raise ValueError('cannot store None as resource')
        with self.lock:
            deleted = [id for id in self._resources if id not in resources]
            self._commit(list(resources) + deleted, dict(resources))

    def delete(self, id):
        """ Delete resource with ``id``

        :raises KeyError:
            if there is no such resource
        :raises restr.exc.PersistenceError:
            if notifier fails, collection is left as before the call
        """
        with self.lock:
            resources = dict(self._resources)
            del resources[id]
            self._commit([id], resources)

    def delete_all(self):
        with self.lock:
            self._commit(list(self._resources), {})

    def _commit(self, ids, resources):
        # readers copy whichever mapping is current, never one being changed
        previous, self._resources = self._resources, resources
        try:
            self._notify(ids)
        except Exception as e:
            self._resources = previous
            logger.error('persisting failed, rolled back',
                collection=self.name, ids=ids, error=str(e))
            raise PersistenceError(ids, e)
        logger.info('committed', collection=self.name, ids=ids)

    def _notify(self, ids):
        if self.notifier is None:
            return
        result = self.notifier(ids)
        if isinstance(result, Future):
            result.result()

    def __repr__(self):
        return '%s(name=%r, adapter=%r, size=%d)' % (
            self.__class__.__name__, self.name, self.adapter, len(self))
