from pathlib import Path

from seminterp.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_4(capsys):
    with open(EXAMPLES / 'program_4.sem', 'r', encoding='utf-8') as f:
        source = f.read()
    tree = parse_program(source)
    interp = Interpreter()
    interp.run(tree)
    out = capsys.readouterr().out.strip().splitlines()
    assert out == ['[1, 4, 9, 16]', '15.0']
