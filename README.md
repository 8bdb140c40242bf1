# chrislang

Syntax tree definitions and runtime support for the Chris programming
language. The package is pure Python and has no third-party dependencies.

## What is inside

- `chrislang.syntax` holds the syntax tree node types: expressions such as
  `BinaryExpr`, `CallExpr`, `LambdaExpr` and `MatchExpr`, statements such as
  `IfStmt`, `ForStmt` and `TryCatchStmt`, and declarations such as
  `FuncDecl`, `ClassDecl`, `EnumDecl` and `Program`. Every node is a
  dataclass. `to_string(indent)` renders it as an indented S-expression,
  with two spaces for each level (`indent_str`).
- `chrislang.heap` is a mark-and-sweep heap model. `Heap.alloc` returns
  `GCObject`s tagged with an `ObjectKind`. `Heap.push_root`, `pop_root` and
  `pop_roots` manage a shadow stack of `Root` slots. The heap supports
  finalizers and collects on its own once allocations pass an adaptive
  threshold, which starts at 1 MiB. `bytes_allocated`, `object_count` and
  `total_collections` report statistics. `Heap.shutdown`, which also runs
  when the heap is used as a context manager, finalizes every object.
- `chrislang.errors` has `TryStack`, which tracks nested `try` blocks up to
  64 deep by default. Its `throw` method raises `ThrownError`.
- `chrislang.strings` holds the string and array helpers: `concat`,
  `substring`, `replace`, `trim`, `to_upper`, `to_lower`, `split`, `join`,
  `str_to_int`, `str_to_float`, `float_to_str`, `check_bounds`, `pop` and
  others. Missing (`None`) inputs are treated leniently, as the language
  runtime does.
- `chrislang.containers` holds `StringMap` and `StringSet`, which are
  chained hash tables using the `djb2` hash. It also has the bounded
  blocking `Channel`, which raises `ChannelClosed` once closed and drained,
  and `ConcurrentMap`, `ConcurrentQueue` and `AtomicInt`.
- `chrislang.tasks` runs async tasks on threads. `TaskRegistry.spawn`
  returns a `Future`. `Future.wait` returns the task's result or re-raises
  its error. `TaskRegistry.run_loop` waits for every registered task.
- `chrislang.jsonvalue` has a lenient JSON reader, `parse`. It returns a
  `JsonValue` with typed accessors (`get_string`, `get_int`, `get_bool`,
  `get_float`, `get_array`, `get_object`, `array_length`, `array_get`) and
  `stringify`.
- `chrislang.mathlib` holds integer and floating-point math with C-style
  results for edge cases, plus `random_int` and `read_line`.
- `chrislang.testing` has `TestRunner`, `AssertionTracker`, `assert_eq` and
  `assert_true` for the language's test framework.
- `chrislang.system` runs shell commands (`run_command`, `command_output`)
  and does whole-file I/O (`read_file`, `write_file`, `append_file`,
  `file_exists`).
- `chrislang.net` covers TCP, UDP and DNS lookup. It also has a small HTTP
  client (`http_get`, `http_post`, `parse_url`) and a blocking
  `HttpServer`, which hands out `HttpRequest` objects to `respond` to.
  Network failures raise `OSError`.

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Render a syntax tree:

```python
from chrislang.syntax import BinaryExpr, IntLiteralExpr

expr = BinaryExpr(op="+", left=IntLiteralExpr(value=1), right=IntLiteralExpr(value=2))
print(expr.to_string())
# (BinaryExpr +
#   (IntLiteral 1)
#   (IntLiteral 2))
```

Collect garbage:

```python
from chrislang.heap import Heap, ObjectKind, Root

heap = Heap()
kept = heap.alloc(16, ObjectKind.STRING)
heap.alloc(16, ObjectKind.STRING)
heap.push_root(Root(kept))
heap.collect()
assert heap.object_count() == 1
```

Read JSON:

```python
from chrislang.jsonvalue import parse

doc = parse('{"name": "Alice", "age": 30}')
assert doc.get_string("name") == "Alice"
assert doc.get_int("age") == 30
print(doc.stringify())  # {"name":"Alice","age":30}
```

Use the containers:

```python
from chrislang.containers import StringMap, AtomicInt

counts = StringMap()
counts.set("apples", 3)
assert counts.get("apples") == 3
assert counts.get("pears") == 0

counter = AtomicInt(0)
assert counter.add(5) == 5
assert counter.compare_swap(5, 10)
```

## What this package does not do

This package is a library only. It has no lexer, no parser, no type
checker, no code generator, no formatter and no language server, and it
installs no command. Syntax trees have to be built by constructing the
node classes directly, and nothing here turns source text into a program
or runs one.