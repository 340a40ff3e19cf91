from timeit import timeit

from nino.interpreter import Interpreter
from nino.evaluation.evaluator import evaluate
from nino.reader.parser import parse_expression
from nino.types.ast import Declaration, Number, NUMBER
from nino.types.environment import Environment


def time_interpreter(setup_code: str, code: str, rounds: int) -> float:
    """Time evaluation only: declarations in `setup_code` run once, `code` is
    parsed once and the same AST is evaluated repeatedly.
    """
    itp = Interpreter(strict_types=False)
    itp.eval(setup_code)
    expr = parse_expression(code)
    # Warmup
    evaluate(expr, itp.env)
    # Timed
    return timeit(lambda: evaluate(expr, itp.env), number=rounds)


# Environment lookup chain (no evaluation)

def bench_lookup_chain(n_envs: int = 1000, n_lookups: int = 10000) -> float:
    # Build an environment chain with a binding at the root
    root = Environment()
    root.define("answer", Declaration("answer", NUMBER, Number(42.0)))
    env = root
    for _ in range(n_envs):
        env = Environment(outer=env)
    # Warmup
    for _ in range(1000):
        env.lookup("answer")
    # Timed
    return timeit(lambda: env.lookup("answer"), number=n_lookups)


FUNCTION_CALL_SETUP = "let add:fn = (x:num, y:num):num => x + y;"
FUNCTION_CALL_CODE = "add(1, 2)"

FACTORIAL_SETUP = r"""
let fact:fn = (n:num, acc:num):num => n ? {
    0 => acc,
    fact(n - 1, n * acc)
};
"""
FACTORIAL_CODE = "fact(100, 1)"

# Sum 1..N with a tail-recursive accumulator
SUM_SETUP = r"""
let sum:fn = (n:num, acc:num):num => n ? {
    0 => acc,
    sum(n - 1, acc + n)
};
"""
SUM_CODE = "sum(5000, 0)"

STRING_CONCAT_SETUP = r"""
let greet:fn = (name:[char]):[char] => "Hello, " + name;
"""
STRING_CONCAT_CODE = 'greet("World")'


def _report(name: str, setup_code: str, code: str, rounds: int) -> None:
    t = time_interpreter(setup_code, code, rounds)
    print(f"Benchmark: {name}")
    print(f"  interpreter: {t:.6f}s  [rounds={rounds}]")


if __name__ == "__main__":
    # Pure environment benchmark
    print("Benchmark: environment lookup chain (pure Python env lookup)")
    print(f"  time: {bench_lookup_chain():.6f}s")

    _report("function application", FUNCTION_CALL_SETUP, FUNCTION_CALL_CODE, rounds=20000)
    _report("tail recursion (factorial)", FACTORIAL_SETUP, FACTORIAL_CODE, rounds=500)
    _report("sum 1..5000 (tail-rec)", SUM_SETUP, SUM_CODE, rounds=20)
    _report("string concatenation", STRING_CONCAT_SETUP, STRING_CONCAT_CODE, rounds=20000)
