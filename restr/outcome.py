"""

    restr.outcome -- result of handled operation
    ============================================

"""

__all__ = ('Outcome', 'OK', 'CREATED', 'NO_CONTENT')

OK          = 200
CREATED     = 201
NO_CONTENT  = 204

class Outcome(object):
    """ Outcome of an operation

    :attr status:
        status code, see :mod:`restr.exc` for failure codes
    :attr body:
        resource, list of resources or ``None``
    :attr location:
        identifier of a newly created resource
    :attr error:
        :class:`restr.exc.OperationFailed` the outcome reports, if any
    """

    def __init__(self, status, body=None, location=None, error=None):
        self.status = status
        self.body = body
        self.location = location
        self.error = error

    def __eq__(self, o):
        return (isinstance(o, Outcome)
            and (self.status, self.body, self.location)
                == (o.status, o.body, o.location))

    def __ne__(self, o):
        return not self == o

    __hash__ = None

    def __repr__(self):
        return '%s(status=%r, body=%r, location=%r)' % (
            self.__class__.__name__, self.status, self.body, self.location)
