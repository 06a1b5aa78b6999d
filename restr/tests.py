"""

    restr.tests -- test suite
    =========================

"""

import copy
import itertools
import json
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from unittest import TestCase

from webob import Request

from restr import (
    Collection, Context, Registry, Rights, Static, Decision, Outcome,
    dispatch, OK, CREATED, NO_CONTENT, GET, POST, PUT, PATCH, DELETE)
from restr.exc import (
    PersistenceError, ConfigurationError, RightsConfigurationError,
    RegistryConfigurationError, NotFound, Forbidden)
from restr.operations import COLLECTION_METHODS, ITEM_METHODS
from restr.resource import ResourceAdapter, ValidationError
from restr.wsgi import Application, encode

__all__ = ()

_ids = itertools.count(1)

class Item(object):

    def __init__(self, id, info):
        if not isinstance(info, dict) or not isinstance(info.get('value'), int):
            raise ValidationError('value should be int')
        self.id = id
        self.value = info['value']
        self.owner = info.get('owner')

    def edit(self, info):
        if not isinstance(info, dict):
            raise ValidationError('expected mapping')
        if 'value' in info:
            self.value = info['value']
        if 'owner' in info:
            self.owner = info['owner']
        if not isinstance(self.value, int):
            raise ValidationError('value should be int')

    def create_id(self):
        self.id = 'item-%d' % next(_ids)
        return self.id

    def copy(self):
        return copy.copy(self)

class Note(object):
    """ Resource which can't assign its own identifiers"""

    def __init__(self, id, info):
        self.id = id
        self.text = info['text']

    def edit(self, info):
        self.text = info['text']

class Guarded(object):
    """ Resource holding state which can't be copied"""

    def __init__(self, id, info):
        self.id = id
        self.value = info['value']
        self.guard = threading.Lock()

    def edit(self, info):
        if not isinstance(info.get('value'), int):
            raise ValidationError('value should be int')
        with self.guard:
            self.value = info['value']

class Clashing(Item):

    def create_id(self):
        self.id = 'a'
        return self.id

class Recorder(object):
    """ Notifier remembering what it was told"""

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def __call__(self, ids):
        self.calls.append(sorted(ids))
        if self.fail:
            raise IOError('disk full')

ALLOW_ALL = Rights(default=True)

def state(collection):
    return {id: r.value for id, r in collection.get_map().items()}

def make(data=None, rights=ALLOW_ALL, notifier=None, cls=Item):
    c = Collection(cls, rights, notifier=notifier)
    c.load_map(data or {})
    return c

class TestResourceAdapter(TestCase):

    def test_instantiate(self):
        a = ResourceAdapter(Item)
        r = a.instantiate('a', {'value': 1})
        self.assertEqual((r.id, r.value), ('a', 1))

    def test_instantiate_rejected(self):
        a = ResourceAdapter(Note)
        self.assertRaises(ValidationError, a.instantiate, 'a', {})
        self.assertRaises(ValidationError, a.instantiate, 'a', None)

    def test_edit_rejected(self):
        a = ResourceAdapter(Item)
        r = a.instantiate('a', {'value': 1})
        self.assertRaises(ValidationError, a.edit, r, 'garbage')

    def test_create_id(self):
        self.assertTrue(ResourceAdapter(Item).supports_create_id)
        self.assertFalse(ResourceAdapter(Note).supports_create_id)
        r = ResourceAdapter(Item).instantiate(None, {'value': 1})
        self.assertEqual(ResourceAdapter(Item).create_id(r), r.id)

    def test_copy(self):
        self.assertTrue(ResourceAdapter(Item).supports_copy)
        self.assertFalse(ResourceAdapter(Guarded).supports_copy)
        a = ResourceAdapter(Item)
        r = a.instantiate('a', {'value': 1})
        other = a.copy(r)
        self.assertIsNot(other, r)
        self.assertEqual((other.id, other.value), ('a', 1))

    def test_requires_edit(self):
        class NoEdit(object):
            def __init__(self, id, info):
                pass
        self.assertRaises(ConfigurationError, ResourceAdapter, NoEdit)

class TestRights(TestCase):

    def test_explicit_answer_required(self):
        self.assertRaises(RightsConfigurationError, Rights, read=True)
        self.assertRaises(RightsConfigurationError, Rights)

    def test_default(self):
        r = Rights(read=True, default=False)
        ctx = Context()
        self.assertTrue(r.authorize('read', ctx, None))
        for kind in ('create', 'update', 'delete'):
            self.assertFalse(r.authorize(kind, ctx, None))

    def test_decision(self):
        seen = []
        def may_update(context, resource):
            seen.append((context.user, resource))
            return context.user == resource
        r = Rights(update=may_update, default=False)
        self.assertIsInstance(r['update'], Decision)
        self.assertIsInstance(r['read'], Static)
        self.assertTrue(r.authorize('update', Context(user='bob'), 'bob'))
        self.assertFalse(r.authorize('update', Context(user='eve'), 'bob'))
        self.assertEqual(seen, [('bob', 'bob'), ('eve', 'bob')])

    def test_decision_must_be_synchronous(self):
        class Pending(object):
            def __await__(self):
                yield
        r = Rights(read=lambda c, res: Pending(), default=False)
        self.assertRaises(
            RightsConfigurationError, r.authorize, 'read', Context(), None)

    def test_invalid_config(self):
        self.assertRaises(RightsConfigurationError, Rights, default='yes')
        self.assertRaises(RightsConfigurationError, Static, 1)
        self.assertRaises(RightsConfigurationError, Decision, True)

    def test_unknown_kind(self):
        self.assertRaises(
            ValueError, ALLOW_ALL.authorize, 'publish', Context(), None)

    def test_immutable(self):
        self.assertRaises(AttributeError, setattr, ALLOW_ALL, 'read', False)

class TestCollection(TestCase):

    def test_get_absent(self):
        c = make({'a': {'value': 1}})
        self.assertIsNone(c.get('b'))
        self.assertFalse(c.has('b'))
        self.assertTrue('a' in c)
        self.assertEqual(len(c), 1)

    def test_snapshots_are_copies(self):
        c = make({'a': {'value': 1}})
        c.get_map()['b'] = c.get('a')
        c.get_ids().append('c')
        c.get_list().clear()
        self.assertEqual(c.get_ids(), ['a'])
        self.assertEqual(len(c.get_list()), 1)

    def test_load_bypasses_notifier(self):
        n = Recorder()
        c = make({'a': {'value': 1}}, notifier=n)
        c.load_one('b', {'value': 2})
        self.assertEqual(state(c), {'a': 1, 'b': 2})
        self.assertEqual(n.calls, [])

    def test_load_rejected(self):
        c = make()
        self.assertRaises(ValidationError, c.load_map, {'a': {'value': 'x'}})
        self.assertEqual(len(c), 0)

    def test_set_get(self):
        n = Recorder()
        c = make(notifier=n)
        r = c.edited(c.instantiate('a', {'value': 1}), {'value': 5})
        c.set('a', r)
        self.assertIs(c.get('a'), r)
        self.assertEqual(c.get('a').value, 5)
        self.assertEqual(n.calls, [['a']])

    def test_set_none(self):
        c = make()
        self.assertRaises(ValueError, c.set, 'a', None)
        self.assertRaises(ValueError, c.set_all, {'a': None})

    def test_set_all(self):
        n = Recorder()
        c = make({'a': {'value': 1}, 'b': {'value': 2}}, notifier=n)
        c.set_all({
            'b': c.edited(c.get('b'), {'value': 3}),
            'c': c.instantiate('c', {'value': 4})})
        self.assertEqual(state(c), {'b': 3, 'c': 4})
        self.assertEqual(n.calls, [['a', 'b', 'c']])

    def test_delete(self):
        n = Recorder()
        c = make({'a': {'value': 1}, 'b': {'value': 2}}, notifier=n)
        c.delete('a')
        self.assertEqual(state(c), {'b': 2})
        self.assertRaises(KeyError, c.delete, 'a')
        c.delete_all()
        self.assertEqual(state(c), {})
        self.assertEqual(n.calls, [['a'], ['b']])

    def test_edited_leaves_original(self):
        c = make({'a': {'value': 1}})
        r = c.get('a')
        self.assertRaises(ValidationError, c.edited, r, {'value': 'x'})
        self.assertEqual(r.value, 1)
        edited = c.edited(r, {'value': 2})
        self.assertEqual((r.value, edited.value), (1, 2))

    def test_notifier_failure_rolls_back(self):
        c = make({'a': {'value': 1}}, notifier=Recorder(fail=True))
        before = c.get_map()
        self.assertRaises(
            PersistenceError, c.set, 'b', c.instantiate('b', {'value': 2}))
        self.assertRaises(PersistenceError, c.set_all, {})
        self.assertRaises(PersistenceError, c.delete, 'a')
        self.assertRaises(PersistenceError, c.delete_all)
        self.assertEqual(c.get_map(), before)

    def test_future_notifier(self):
        def succeed(ids):
            f = Future()
            f.set_result(None)
            return f
        def fail(ids):
            f = Future()
            f.set_exception(IOError('disk full'))
            return f

        c = make(notifier=succeed)
        c.set('a', c.instantiate('a', {'value': 1}))
        self.assertEqual(state(c), {'a': 1})

        c = make(notifier=fail)
        try:
            c.set('a', c.instantiate('a', {'value': 1}))
        except PersistenceError as e:
            self.assertEqual(e.ids, ['a'])
            self.assertIsInstance(e.reason, IOError)
        else:
            self.fail('PersistenceError not raised')
        self.assertEqual(state(c), {})

    def test_name(self):
        self.assertEqual(make().name, 'item')
        self.assertEqual(Collection(Item, ALLOW_ALL, name='things').name,
            'things')

    def test_edited_in_place_without_copy(self):
        c = make({'a': {'value': 1}}, cls=Guarded)
        r = c.get('a')
        self.assertIs(c.edited(r, {'value': 2}), r)
        self.assertEqual(r.value, 2)

class TestItemOperations(TestCase):

    def test_not_found(self):
        c = make({'a': {'value': 1}})
        ctx = Context()
        for method, info in ((GET, None), (PATCH, {'value': 2}),
                (DELETE, None)):
            outcome = dispatch(c, ctx, method, 'b', info)
            self.assertEqual(outcome.status, 404)
            self.assertIsInstance(outcome.error, NotFound)
        self.assertEqual(state(c), {'a': 1})

    def test_get(self):
        c = make({'a': {'value': 1}})
        outcome = dispatch(c, Context(), GET, 'a')
        self.assertEqual(outcome, Outcome(OK, body=c.get('a')))

    def test_read_denied_is_forbidden(self):
        rights = Rights(read=lambda ctx, r: r.id != 'x', default=True)
        c = make({'a': {'value': 1}, 'x': {'value': 2}}, rights=rights)
        listing = dispatch(c, Context(), GET)
        self.assertEqual([r.id for r in listing.body], ['a'])
        outcome = dispatch(c, Context(), GET, 'x')
        self.assertEqual(outcome.status, 403)
        self.assertIsInstance(outcome.error, Forbidden)

    def test_unsupported_format(self):
        c = make({'a': {'value': 1}})
        ctx = Context(json=False)
        self.assertEqual(dispatch(c, ctx, GET, 'a').status, 415)
        self.assertEqual(dispatch(c, ctx, PATCH, 'a', {}).status, 415)
        self.assertEqual(dispatch(c, ctx, PUT, 'a', {}).status, 415)
        self.assertEqual(dispatch(c, ctx, PUT, 'b', {}).status, 415)

    def test_custom_format(self):
        calls = []
        def formatter(kind, resource):
            calls.append((kind, resource))
            if kind == 'get':
                return lambda: Outcome(OK, body='value=%d' % resource.value)
        c = make({'a': {'value': 1}})
        ctx = Context(json=False, formatter=formatter)
        self.assertEqual(dispatch(c, ctx, GET, 'a'), Outcome(OK, 'value=1'))
        self.assertEqual(dispatch(c, ctx, PATCH, 'a', 'v=2').status, 415)
        self.assertEqual(calls, [('get', c.get('a')), ('patch', c.get('a'))])

    def test_custom_format_checked_before_rights(self):
        c = make({'a': {'value': 1}}, rights=Rights(default=False))
        ctx = Context(json=False)
        self.assertEqual(dispatch(c, ctx, GET, 'a').status, 415)

    def test_patch(self):
        n = Recorder()
        c = make({'a': {'value': 1}}, notifier=n)
        outcome = dispatch(c, Context(), PATCH, 'a', {'value': 2})
        self.assertEqual(outcome.status, NO_CONTENT)
        self.assertEqual(state(c), {'a': 2})
        self.assertEqual(n.calls, [['a']])

    def test_patch_denied(self):
        n = Recorder()
        c = make({'a': {'value': 1}}, notifier=n,
            rights=Rights(read=True, default=False))
        outcome = dispatch(c, Context(), PATCH, 'a', {'value': 2})
        self.assertEqual(outcome.status, 403)
        self.assertEqual(state(c), {'a': 1})
        self.assertEqual(n.calls, [])

    def test_patch_rejected_leaves_resource(self):
        c = make({'a': {'value': 1, 'owner': 'bob'}})
        r = c.get('a')
        outcome = dispatch(c, Context(), PATCH, 'a',
            {'owner': 'eve', 'value': 'x'})
        self.assertEqual(outcome.status, 400)
        self.assertIs(c.get('a'), r)
        self.assertEqual((r.value, r.owner), (1, 'bob'))

    def test_update_resource_without_copy(self):
        c = make({'a': {'value': 1}}, cls=Guarded)
        r = c.get('a')
        self.assertEqual(
            dispatch(c, Context(), PATCH, 'a', {'value': 2}).status,
            NO_CONTENT)
        self.assertEqual(
            dispatch(c, Context(), PUT, 'a', {'value': 3}).status,
            NO_CONTENT)
        self.assertIs(c.get('a'), r)
        self.assertEqual(r.value, 3)
        self.assertEqual(
            dispatch(c, Context(), PATCH, 'a', {'value': 'x'}).status, 400)

    def test_put_creates(self):
        c = make()
        outcome = dispatch(c, Context(), PUT, 'a', {'value': 1})
        self.assertEqual(outcome, Outcome(CREATED, location='a'))
        self.assertEqual(state(c), {'a': 1})

    def test_put_create_rejected(self):
        c = make()
        self.assertEqual(dispatch(c, Context(), PUT, 'a', {}).status, 400)
        self.assertEqual(len(c), 0)

    def test_put_create_denied(self):
        c = make(rights=Rights(update=True, default=False))
        self.assertEqual(
            dispatch(c, Context(), PUT, 'a', {'value': 1}).status, 403)
        self.assertEqual(len(c), 0)

    def test_put_idempotent(self):
        c = make({'a': {'value': 1}})
        first = dispatch(c, Context(), PUT, 'a', {'value': 2})
        after_first = state(c)
        second = dispatch(c, Context(), PUT, 'a', {'value': 2})
        self.assertEqual((first.status, second.status),
            (NO_CONTENT, NO_CONTENT))
        self.assertEqual(state(c), after_first)
        self.assertEqual(state(c), {'a': 2})

    def test_post_not_supported(self):
        c = make({'a': {'value': 1}})
        self.assertEqual(
            dispatch(c, Context(), POST, 'a', {'value': 2}).status, 405)
        self.assertEqual(
            dispatch(c, Context(), POST, 'b', {'value': 2}).status, 405)
        self.assertEqual(state(c), {'a': 1})

    def test_delete(self):
        c = make({'a': {'value': 1}, 'b': {'value': 2}})
        self.assertEqual(dispatch(c, Context(), DELETE, 'a').status, 204)
        self.assertEqual(state(c), {'b': 2})

    def test_delete_denied(self):
        c = make({'a': {'value': 1}}, rights=Rights(delete=False,
            default=True))
        self.assertEqual(dispatch(c, Context(), DELETE, 'a').status, 403)
        self.assertEqual(state(c), {'a': 1})

    def test_ids_reusable_only_explicitly(self):
        c = make({'a': {'value': 1}})
        dispatch(c, Context(), DELETE, 'a')
        self.assertEqual(dispatch(c, Context(), GET, 'a').status, 404)
        outcome = dispatch(c, Context(), PUT, 'a', {'value': 7})
        self.assertEqual(outcome.status, CREATED)
        self.assertEqual(state(c), {'a': 7})

class TestCollectionOperations(TestCase):

    def test_list(self):
        c = make({'a': {'value': 1}, 'b': {'value': 2}})
        outcome = dispatch(c, Context(), GET)
        self.assertEqual(outcome.status, OK)
        self.assertEqual(sorted(r.id for r in outcome.body), ['a', 'b'])

    def test_list_filters_by_read(self):
        rights = Rights(
            read=lambda ctx, r: r.owner == ctx.user, default=False)
        c = make({
            'a': {'value': 1, 'owner': 'bob'},
            'b': {'value': 2, 'owner': 'eve'}}, rights=rights)
        outcome = dispatch(c, Context(user='bob'), GET)
        self.assertEqual([r.id for r in outcome.body], ['a'])

    def test_create(self):
        n = Recorder()
        c = make(notifier=n)
        outcome = dispatch(c, Context(), POST, info={'value': 3})
        self.assertEqual(outcome.status, CREATED)
        id = outcome.location
        self.assertTrue(id.startswith('item-'))
        self.assertIs(c.get(id), outcome.body)
        self.assertEqual(c.get(id).id, id)
        self.assertEqual(n.calls, [[id]])

    def test_create_rejected(self):
        c = make()
        self.assertEqual(dispatch(c, Context(), POST, info={}).status, 400)
        self.assertEqual(len(c), 0)

    def test_create_without_create_id(self):
        c = make(cls=Note)
        outcome = dispatch(c, Context(), POST, info={'text': 'hi'})
        self.assertEqual(outcome.status, 405)
        self.assertEqual(len(c), 0)

    def test_create_conflict(self):
        c = make({'a': {'value': 1}}, cls=Clashing)
        outcome = dispatch(c, Context(), POST, info={'value': 2})
        self.assertEqual(outcome.status, 409)
        self.assertEqual(state(c), {'a': 1})

    def test_create_denied(self):
        c = make(rights=Rights(read=True, default=False))
        outcome = dispatch(c, Context(), POST, info={'value': 2})
        self.assertEqual(outcome.status, 403)
        self.assertEqual(len(c), 0)

    def test_put_all_replaces(self):
        n = Recorder()
        c = make({'a': {'value': 1}, 'b': {'value': 2}}, notifier=n)
        outcome = dispatch(c, Context(), PUT,
            info={'b': {'value': 3}, 'c': {'value': 4}})
        self.assertEqual(outcome.status, NO_CONTENT)
        self.assertEqual(state(c), {'b': 3, 'c': 4})
        self.assertEqual(n.calls, [['a', 'b', 'c']])

    def test_put_all_is_atomic(self):
        n = Recorder()
        rights = Rights(update=lambda ctx, r: r.id != 'locked', default=True)
        c = make({'locked': {'value': 0}}, rights=rights, notifier=n)
        before = c.get_map()
        outcome = dispatch(c, Context(), PUT, info={
            'x': {'value': 1},
            'y': {'value': 2},
            'z': {'value': 3},
            'locked': {'value': 4}})
        self.assertEqual(outcome.status, 403)
        self.assertEqual(c.get_map(), before)
        self.assertEqual(c.get('locked').value, 0)
        self.assertEqual(n.calls, [])

    def test_put_all_rejected_edit(self):
        c = make({'a': {'value': 1}, 'b': {'value': 2}})
        before = c.get_map()
        outcome = dispatch(c, Context(), PUT, info={
            'a': {'value': 5},
            'b': {'value': 'x'}})
        self.assertEqual(outcome.status, 400)
        self.assertEqual(c.get_map(), before)
        self.assertEqual(state(c), {'a': 1, 'b': 2})

    def test_put_all_resource_without_copy(self):
        c = make({'a': {'value': 1}, 'b': {'value': 2}}, cls=Guarded)
        outcome = dispatch(c, Context(), PUT,
            info={'a': {'value': 5}, 'c': {'value': 6}})
        self.assertEqual(outcome.status, NO_CONTENT)
        self.assertEqual(state(c), {'a': 5, 'c': 6})

    def test_put_all_checks_rights_before_editing(self):
        c = make({'a': {'value': 1}, 'b': {'value': 2}}, cls=Guarded,
            rights=Rights(delete=False, default=True))
        a = c.get('a')
        outcome = dispatch(c, Context(), PUT, info={'a': {'value': 5}})
        self.assertEqual(outcome.status, 403)
        self.assertEqual(a.value, 1)
        self.assertEqual(state(c), {'a': 1, 'b': 2})

    def test_put_all_rejected_create(self):
        c = make({'a': {'value': 1}})
        outcome = dispatch(c, Context(), PUT, info={'b': {}})
        self.assertEqual(outcome.status, 400)
        self.assertEqual(state(c), {'a': 1})

    def test_put_all_delete_denied(self):
        c = make({'a': {'value': 1}, 'b': {'value': 2}},
            rights=Rights(delete=False, default=True))
        outcome = dispatch(c, Context(), PUT, info={'b': {'value': 3}})
        self.assertEqual(outcome.status, 403)
        self.assertEqual(state(c), {'a': 1, 'b': 2})

    def test_put_all_create_denied(self):
        c = make({'a': {'value': 1}},
            rights=Rights(create=False, default=True))
        outcome = dispatch(c, Context(), PUT,
            info={'a': {'value': 1}, 'b': {'value': 3}})
        self.assertEqual(outcome.status, 403)
        self.assertEqual(state(c), {'a': 1})

    def test_put_all_not_mapping(self):
        c = make({'a': {'value': 1}})
        for data in ([{'value': 1}], 'a', None, 42):
            self.assertEqual(
                dispatch(c, Context(), PUT, info=data).status, 400)
        self.assertEqual(state(c), {'a': 1})

    def test_delete_all(self):
        n = Recorder()
        c = make({'a': {'value': 1}, 'b': {'value': 2}}, notifier=n)
        self.assertEqual(dispatch(c, Context(), DELETE).status, NO_CONTENT)
        self.assertEqual(len(c), 0)
        self.assertEqual(n.calls, [['a', 'b']])

    def test_delete_all_denied_for_one(self):
        n = Recorder()
        rights = Rights(delete=lambda ctx, r: r.id != 'b', default=True)
        c = make({'a': {'value': 1}, 'b': {'value': 2}, 'c': {'value': 3}},
            rights=rights, notifier=n)
        self.assertEqual(dispatch(c, Context(), DELETE).status, 403)
        self.assertEqual(state(c), {'a': 1, 'b': 2, 'c': 3})
        self.assertEqual(n.calls, [])

    def test_patch_not_supported(self):
        c = make({'a': {'value': 1}})
        self.assertEqual(
            dispatch(c, Context(), PATCH, info={'a': {'value': 2}}).status,
            405)
        self.assertEqual(dispatch(c, Context(), 'HEAD').status, 405)

    def test_methods_table(self):
        self.assertEqual(sorted(COLLECTION_METHODS),
            ['DELETE', 'GET', 'POST', 'PUT'])
        self.assertEqual(sorted(ITEM_METHODS),
            ['DELETE', 'GET', 'PATCH', 'POST', 'PUT'])

class TestPersistenceFailure(TestCase):

    def test_mutations_report_internal_error(self):
        c = make({'a': {'value': 1}, 'b': {'value': 2}},
            notifier=Recorder(fail=True))
        ctx = Context()
        for method, id, info in (
                (PATCH, 'a', {'value': 5}),
                (PUT, 'a', {'value': 5}),
                (PUT, 'z', {'value': 5}),
                (DELETE, 'a', None),
                (POST, None, {'value': 5}),
                (PUT, None, {'c': {'value': 5}}),
                (DELETE, None, None)):
            outcome = dispatch(c, ctx, method, id, info)
            self.assertEqual(outcome.status, 500, (method, id))
        self.assertEqual(state(c), {'a': 1, 'b': 2})

    def test_reads_unaffected(self):
        c = make({'a': {'value': 1}}, notifier=Recorder(fail=True))
        self.assertEqual(dispatch(c, Context(), GET, 'a').status, OK)
        self.assertEqual(dispatch(c, Context(), GET).status, OK)

    def test_notifier_reads_from_another_thread(self):
        pool = ThreadPoolExecutor(max_workers=1)
        self.addCleanup(pool.shutdown, wait=False)
        seen = []
        c = make({'a': {'value': 1}})
        c.notifier = lambda ids: pool.submit(lambda: seen.append(state(c)))
        outcomes = []
        worker = threading.Thread(target=lambda: outcomes.append(
            dispatch(c, Context(), PATCH, 'a', {'value': 2})))
        worker.daemon = True
        worker.start()
        worker.join(3)
        self.assertFalse(worker.is_alive(), 'dispatch did not finish')
        self.assertEqual(outcomes[0].status, NO_CONTENT)
        self.assertEqual(seen, [{'a': 2}])

class TestRegistry(TestCase):

    def test_add(self):
        items = make()
        notes = Collection(Note, ALLOW_ALL)
        r = Registry(items)
        r.add(notes, 'notes')
        self.assertIs(r.get('item'), items)
        self.assertIs(r.get('notes'), notes)
        self.assertIsNone(r.get('other'))
        self.assertTrue('notes' in r)
        self.assertEqual(r.names(), ['item', 'notes'])
        self.assertEqual(len(r), 2)
        self.assertEqual(set(r), set([items, notes]))

    def test_duplicate(self):
        r = Registry(make())
        self.assertRaises(RegistryConfigurationError, r.add, make())

    def test_invalid_name(self):
        r = Registry()
        self.assertRaises(RegistryConfigurationError, r.add, make(), 'a/b')

class TestApplication(TestCase):

    def setUp(self):
        self.notifier = Recorder()
        self.items = Collection(Item,
            Rights(read=True, delete=False,
                update=lambda ctx, r: ctx.user == 'admin', default=True),
            notifier=self.notifier, name='items')
        self.items.load_map({'a': {'value': 1}, 'b': {'value': 2}})
        self.app = Application(Registry(self.items),
            get_user=lambda request: request.headers.get('X-User'))

    def request(self, path, method='GET', data=None, **kw):
        if data is not None:
            kw['body'] = json.dumps(data).encode('utf-8')
            kw.setdefault('content_type', 'application/json')
        return Request.blank(path, method=method, **kw).get_response(self.app)

    def test_list(self):
        resp = self.request('/items')
        self.assertEqual(resp.status_int, 200)
        self.assertEqual(resp.content_type, 'application/json')
        self.assertEqual(
            sorted(resp.json_body, key=lambda r: r['id']),
            [{'id': 'a', 'value': 1, 'owner': None},
             {'id': 'b', 'value': 2, 'owner': None}])

    def test_get(self):
        resp = self.request('/items/a')
        self.assertEqual(resp.status_int, 200)
        self.assertEqual(resp.json_body['value'], 1)

    def test_not_found(self):
        self.assertEqual(self.request('/items/zz').status_int, 404)
        self.assertEqual(self.request('/others').status_int, 404)
        self.assertEqual(self.request('/').status_int, 404)
        self.assertEqual(self.request('/items/a/more').status_int, 404)

    def test_create(self):
        resp = self.request('/items', 'POST', {'value': 9})
        self.assertEqual(resp.status_int, 201)
        id = resp.json_body['id']
        self.assertEqual(resp.location, 'http://localhost/items/%s' % id)
        self.assertEqual(self.items.get(id).value, 9)

    def test_put_creates(self):
        resp = self.request('/items/c', 'PUT', {'value': 3})
        self.assertEqual(resp.status_int, 201)
        self.assertEqual(resp.location, 'http://localhost/items/c')
        self.assertEqual(self.notifier.calls, [['c']])

    def test_patch(self):
        resp = self.request('/items/a', 'PATCH', {'value': 5},
            headers={'X-User': 'admin'})
        self.assertEqual(resp.status_int, 204)
        self.assertEqual(self.items.get('a').value, 5)

    def test_patch_forbidden(self):
        resp = self.request('/items/a', 'PATCH', {'value': 5},
            headers={'X-User': 'guest'})
        self.assertEqual(resp.status_int, 403)
        self.assertEqual(self.items.get('a').value, 1)

    def test_invalid_json(self):
        resp = self.request('/items/a', 'PATCH', body=b'{not json',
            content_type='application/json', headers={'X-User': 'admin'})
        self.assertEqual(resp.status_int, 400)

    def test_delete_forbidden(self):
        self.assertEqual(self.request('/items/a', 'DELETE').status_int, 403)
        self.assertEqual(self.request('/items', 'DELETE').status_int, 403)
        self.assertEqual(len(self.items), 2)

    def test_post_to_item(self):
        resp = self.request('/items/a', 'POST', {'value': 5})
        self.assertEqual(resp.status_int, 405)

    def test_unsupported_format(self):
        resp = self.request('/items/a', headers={'Accept': 'text/csv'})
        self.assertEqual(resp.status_int, 415)

    def test_formatter(self):
        def formatter(kind, resource):
            return lambda: Outcome(OK, body='%s,%d' % (resource.id,
                resource.value))
        app = Application(Registry(self.items), formatter=formatter)
        resp = Request.blank('/items/a', headers={'Accept': 'text/csv'}
            ).get_response(app)
        self.assertEqual(resp.status_int, 200)
        self.assertEqual(resp.json_body, 'a,1')

    def test_put_all(self):
        resp = self.request('/items', 'PUT',
            {'a': {'value': 7}, 'b': {'value': 8}},
            headers={'X-User': 'admin'})
        self.assertEqual(resp.status_int, 204)
        self.assertEqual(state(self.items), {'a': 7, 'b': 8})

    def test_encode(self):
        class WithJSON(object):
            def __json__(self):
                return 'custom'
        self.assertEqual(encode(WithJSON()), 'custom')
        self.assertRaises(TypeError, encode, object())
