from decolower.core.formatting import BraceFormatter


def test_rebase_makes_fragment_relative_to_first_line():
    formatter = BraceFormatter()
    fragment = 'run() {\n      work();\n    }'
    assert formatter.rebase(fragment) == 'run() {\n  work();\n}'


def test_rebase_leaves_single_lines_alone():
    assert BraceFormatter().rebase('run() {}') == 'run() {}'


def test_block_body_strips_braces_and_indentation():
    formatter = BraceFormatter()
    assert formatter.block_body('{\n    this.a = a;\n    if (a) {\n      go();\n    }\n  }') == (
        'this.a = a;\nif (a) {\n  go();\n}'
    )
    assert formatter.block_body('{ return 1; }') == 'return 1;'
    assert formatter.block_body('{}') == ''


def test_block_and_indentation():
    formatter = BraceFormatter(indent_size=4)
    assert formatter.block('class A', []) == 'class A {}'
    assert formatter.block('class A', ['a() {\n}', 'b;']) == 'class A {\n    a() {\n    }\n    b;\n}'
    assert formatter.continue_at('x\ny\n\nz', '  ') == 'x\n  y\n\n  z'
