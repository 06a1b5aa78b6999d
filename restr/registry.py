"""

    restr.registry -- named collections of an application
    =====================================================

"""

from restr.exc import RegistryConfigurationError

__all__ = ('Registry',)

class Registry(object):
    """ Mapping from names to collections

    Owned by the application which passes it to whatever exposes the
    collections, e.g. :class:`restr.wsgi.Application`.

    :param collections:
        collections to register under their own names
    """

    def __init__(self, *collections):
        self._collections = {}
        for c in collections:
            self.add(c)

    def add(self, collection, name=None):
        """ Register ``collection`` under ``name`` (defaults to its name)"""
        name = name or collection.name
        if not name or '/' in name:
            raise RegistryConfigurationError(
                "invalid collection name '%s'" % name)
        if name in self._collections:
            raise RegistryConfigurationError(
                "collection with name '%s' already registered" % name)
        self._collections[name] = collection
        return collection

    def get(self, name):
        return self._collections.get(name)

    def names(self):
        return sorted(self._collections)

    def __contains__(self, name):
        return name in self._collections

    def __iter__(self):
        return iter(self._collections.values())

    def __len__(self):
        return len(self._collections)

    def __repr__(self):
        return '%s(%s)' % (self.__class__.__name__, ', '.join(self.names()))
