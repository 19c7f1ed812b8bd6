import json
import shutil
import subprocess

import pytest

from decolower import DecoLower

pytestmark = pytest.mark.skipif(shutil.which('node') is None, reason='node is not installed')

PRELUDE = '''
var result;
function readonly(target, key, descriptor) {
  descriptor.writable = false;
  return descriptor;
}
function describe(object, key) {
  var descriptor = Object.getOwnPropertyDescriptor(object, key);
  var out = {};
  Object.keys(descriptor).forEach(function (name) {
    out[name] = typeof descriptor[name] === 'function' ? 'function' : descriptor[name];
  });
  return out;
}
'''

METHOD = {'value': 'function', 'writable': True, 'enumerable': False, 'configurable': True}
READONLY_METHOD = dict(METHOD, writable=False)

SCENARIOS = {
    'evaluation_and_application_order': ('''
var log = [];
function f(name) {
  log.push('f(' + name + ') evaluated');
  return function () { log.push('f applied'); };
}
function g() {
  log.push('g() evaluated');
  return function (target, key, descriptor) {
    log.push('g applied');
    descriptor.writable = false;
    return descriptor;
  };
}
class C {
  @f("color")
  @g()
  method() {}
}
result = { log: log, method: describe(C.prototype, 'method') };
''', {
        'log': ['f(color) evaluated', 'g() evaluated', 'g applied', 'f applied'],
        'method': READONLY_METHOD,
    }),
    'mutation_without_return_is_not_installed': ('''
function mutate(target, key, descriptor) {
  descriptor.enumerable = true;
}
class M {
  @mutate
  m() {}
}
result = describe(M.prototype, 'm');
''', METHOD),
    'partial_descriptor_return': ('''
function constant() {
  return { value: 1 };
}
class P {
  @constant
  m() {}
}
result = describe(P.prototype, 'm');
''', {'value': 1, 'writable': True, 'enumerable': False, 'configurable': True}),
    'static_method': ('''
class S {
  @readonly
  static make() {}
}
result = describe(S, 'make');
''', READONLY_METHOD),
    'computed_accessor_pair': ('''
var reads = 0;
var keys = { get name() { reads += 1; return 'size'; } };
function hide(target, key, descriptor) {
  descriptor.enumerable = false;
  return descriptor;
}
class Store {
  @hide
  get [keys.name]() { return 1; }
  set [keys.name](value) {}
}
result = { reads: reads, size: describe(Store.prototype, 'size'), value: new Store().size };
''', {
        'reads': 1,
        'size': {'get': 'function', 'set': 'function', 'enumerable': False, 'configurable': True},
        'value': 1,
    }),
    'derived_from_native_class': ('''
class Base {
  constructor() { this.b = 1; }
}
class Sub extends Base {
  tag = 'sub';
  @readonly
  m() { return this.b; }
}
var sub = new Sub();
result = { b: sub.b, tag: sub.tag, m: sub.m(), isBase: sub instanceof Base, isSub: sub instanceof Sub };
''', {'b': 1, 'tag': 'sub', 'm': 1, 'isBase': True, 'isSub': True}),
    'class_decorator_rebinds_inner_references': ('''
var wrap = function (target) { return class extends target {}; };
@wrap
class Foo {
  static self() { return Foo; }
}
result = { same: Foo.self() === Foo, wrapped: Object.getPrototypeOf(Foo) !== Function.prototype };
''', {'same': True, 'wrapped': True}),
    'user_names_that_look_like_temporaries': ('''
var _dec = readonly;
var _res = 'user';
class H {
  @_dec
  m() {}
}
result = { writable: describe(H.prototype, 'm').writable, res: _res };
''', {'writable': False, 'res': 'user'}),
    'object_literal': ('''
var api = {
  @readonly
  greet() { return 'hi'; },
  size: 2,
};
result = { greet: describe(api, 'greet'), keys: Object.keys(api), said: api.greet() };
''', {'greet': READONLY_METHOD, 'keys': ['size'], 'said': 'hi'}),
}


@pytest.fixture(params=['classBased', 'constructorFunction'])
def form(request):
    return request.param


@pytest.mark.parametrize('name', sorted(SCENARIOS))
def test_lowered_source_runs_with_decorator_semantics(tmp_path, form, name):
    code, expected = SCENARIOS[name]
    source = PRELUDE + code + 'console.log(JSON.stringify(result));\n'
    lowered = DecoLower('javascript', emit_form=form).desugar(source)
    path = tmp_path / 'case.js'
    path.write_text(lowered)
    completed = subprocess.run(['node', str(path)], capture_output=True, text=True, check=True)
    assert json.loads(completed.stdout) == expected
