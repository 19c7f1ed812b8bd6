import pytest

from decolower.core.classifier import DeclarationClassifier
from decolower.core.error_handling import ClassificationError
from decolower.core.scope import TempScope
from decolower.models.enums import DecorationLevel, DescriptorKind, MemberKind, TargetKind
from decolower.models.syntax import (
    ClassDeclaration,
    DecoratorExpression,
    MemberNode,
    ObjectLiteral,
    PropertyKeyNode,
)


def _decorators(*names):
    return [DecoratorExpression(text=name, callee=name) for name in names]


def _member(name, *decorators, kind=MemberKind.METHOD, static=False, computed=False, private=False, literal=None):
    return MemberNode(
        kind=kind,
        key=PropertyKeyNode(text=name, computed=computed, private=private, literal=literal),
        is_static=static,
        decorators=_decorators(*decorators),
        source=f'{name}() {{}}',
    )


@pytest.fixture
def classifier():
    return DeclarationClassifier()


def test_instance_and_static_targets(classifier):
    declaration = ClassDeclaration(name='Foo', members=[
        _member('bar', 'log'),
        _member('create', 'memo', static=True),
        _member('plain'),
    ])
    units = classifier.classify(declaration)
    assert len(units) == 2
    assert units[0].target.kind == TargetKind.PROTOTYPE
    assert units[0].target.expression == 'Foo.prototype'
    assert units[0].key.name == 'bar'
    assert units[1].target.kind == TargetKind.CONSTRUCTOR
    assert units[1].target.expression == 'Foo'
    assert units[1].is_static


def test_class_unit_comes_last_and_keeps_source_order(classifier):
    declaration = ClassDeclaration(
        name='Foo',
        decorators=_decorators('sealed', 'tracked'),
        members=[_member('bar', 'f', 'g')],
    )
    units = classifier.classify(declaration)
    assert [u.level for u in units] == [DecorationLevel.MEMBER, DecorationLevel.CLASS]
    assert [d.text for d in units[0].decorators] == ['f', 'g']
    assert [d.text for d in units[1].decorators] == ['sealed', 'tracked']
    assert units[1].key is None and units[1].initial_descriptor is None


def test_accessor_pair_merges_into_one_unit(classifier):
    getter = _member('full', 'enumerable', kind=MemberKind.GETTER)
    setter = _member('full', kind=MemberKind.SETTER)
    units = classifier.classify(ClassDeclaration(name='P', members=[getter, setter]))
    assert len(units) == 1
    descriptor = units[0].initial_descriptor
    assert descriptor.kind == DescriptorKind.ACCESSOR
    assert descriptor.getter is getter
    assert descriptor.setter is setter
    assert descriptor.enumerable is True
    assert units[0].members == [getter, setter]


def test_static_and_instance_accessors_stay_apart(classifier):
    units = classifier.classify(ClassDeclaration(name='P', members=[
        _member('x', 'a', kind=MemberKind.GETTER),
        _member('x', 'b', kind=MemberKind.GETTER, static=True),
    ]))
    assert [u.target.kind for u in units] == [TargetKind.PROTOTYPE, TargetKind.CONSTRUCTOR]


def test_both_accessors_decorated_is_an_error(classifier):
    with pytest.raises(ClassificationError):
        classifier.classify(ClassDeclaration(name='P', members=[
            _member('x', 'a', kind=MemberKind.GETTER),
            _member('x', 'b', kind=MemberKind.SETTER),
        ]))


@pytest.mark.parametrize('kind', [MemberKind.FIELD, MemberKind.CONSTRUCTOR, MemberKind.STATIC_BLOCK])
def test_ineligible_class_members(classifier, kind):
    with pytest.raises(ClassificationError):
        classifier.classify(ClassDeclaration(name='P', members=[_member('x', 'dec', kind=kind)]))


def test_private_members_cannot_be_decorated(classifier):
    with pytest.raises(ClassificationError):
        classifier.classify(ClassDeclaration(name='P', members=[_member('#secret', 'dec', private=True)]))


def test_decorated_data_property_in_literal(classifier):
    literal = ObjectLiteral(members=[_member('a', 'dec', kind=MemberKind.PROPERTY)])
    with pytest.raises(ClassificationError):
        classifier.classify(literal)


def test_object_literal_units(classifier):
    literal = ObjectLiteral(members=[_member('a', kind=MemberKind.PROPERTY), _member('greet', 'readonly')])
    units = classifier.classify(literal)
    assert len(units) == 1
    assert units[0].target.kind == TargetKind.OBJECT_LITERAL
    assert units[0].target.binding == '_obj'
    assert units[0].initial_descriptor.writable is True


def test_computed_keys_get_snapshots():
    classifier = DeclarationClassifier(temp_prefix='$$')
    units = classifier.classify(ClassDeclaration(name='P', members=[
        _member('KEY', 'a', computed=True),
        _member('OTHER', 'b', computed=True),
    ]))
    assert [u.key.snapshot for u in units] == ['$$key', '$$key2']
    assert units[0].key.expression == 'KEY'
    assert str(units[0].key) == '[KEY]'


def test_literal_keys_are_normalized(classifier):
    units = classifier.classify(ClassDeclaration(name='P', members=[
        _member("'a-b'", 'x', literal='string'),
        _member('1.50', 'y', literal='number'),
        _member('0x10', 'z', literal='number'),
    ]))
    assert [u.key.name for u in units] == ['a-b', '1.5', '16']


def test_string_and_identifier_keys_pair_up(classifier):
    units = classifier.classify(ClassDeclaration(name='P', members=[
        _member('"size"', 'dec', kind=MemberKind.GETTER, literal='string'),
        _member('size', kind=MemberKind.SETTER),
    ]))
    assert len(units) == 1
    assert len(units[0].members) == 2


def test_units_follow_source_order(classifier):
    units = classifier.classify(ClassDeclaration(name='P', members=[
        _member('b', kind=MemberKind.GETTER),
        _member('a', 'first'),
        _member('b', 'second', kind=MemberKind.SETTER),
    ]))
    assert [u.key.name for u in units] == ['a', 'b']


def test_snapshots_and_anonymous_binding_avoid_taken_names(classifier):
    scope = TempScope('_', taken={'_key', '_class'})
    units = classifier.classify(ClassDeclaration(members=[_member('KEY', 'a', computed=True)]), scope)
    assert units[0].key.snapshot == '_key2'
    assert units[0].target.binding == '_class2'
    assert scope.reserve('class') == '_class2'
    assert scope.declared == ['_key2']
