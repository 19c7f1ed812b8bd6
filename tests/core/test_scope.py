from decolower.core.scope import TempScope


def test_fresh_names_count_up():
    scope = TempScope()
    assert [scope.fresh('dec') for _ in range(3)] == ['_dec', '_dec2', '_dec3']
    assert scope.declared == ['_dec', '_dec2', '_dec3']


def test_shared_names_are_declared_once():
    scope = TempScope()
    assert scope.shared('res') == '_res'
    assert scope.shared('res') == '_res'
    assert scope.declared == ['_res']


def test_taken_identifiers_are_skipped():
    scope = TempScope('_', taken=['_dec', '_dec2', '_res'])
    assert scope.fresh('dec') == '_dec3'
    assert scope.shared('res') == '_res2'
    assert scope.declared == ['_dec3', '_res2']


def test_reserved_names_are_not_declared():
    scope = TempScope('$', taken=['$this'])
    assert scope.reserve('this') == '$this2'
    assert scope.reserve('this') == '$this2'
    assert scope.declared == []
    assert scope.fresh('this') == '$this3'


def test_taken_set_is_copied():
    taken = {'_a'}
    TempScope('_', taken).fresh('b')
    assert taken == {'_a'}
