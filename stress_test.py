"""
Stress tests / adversarial evaluation of structdoc.

This script attempts to BREAK the claimed properties on random documents:
  1. Diff emptiness is symmetric and matches canonical equality
  2. delete(p) then get(p) is empty for member and wildcard paths
  3. unflatten(flatten(v)) == v when v has no empty containers
  4. Merge: the later object wins for every shared top-level key
  5. Patch move leaves no trace at the source
  6. An inferred schema validates its own example
  7. Wall-clock behaviour on large and deep inputs
"""

import sys, os, random, time
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from structdoc import (
    apply_patch, delete_path, diff, flatten, from_python,
    infer_schema, is_equal, merge, query, to_python, unflatten, validate,
)


def test(name, condition, detail=""):
    status = "PASS" if condition else "FAIL"
    print(f"  [{status}] {name}" + (f"  ({detail})" if detail else ""))
    return condition


KEYS = ["a", "b", "c", "d", "x", "y", "odd key"]
SCALARS = [0, 1, 42, -7, 2.5, "hello", "", None, True, False]


def random_doc(depth=0, max_depth=3, allow_empty=True):
    """Generate a random plain-Python JSON document."""
    if depth >= max_depth:
        return random.choice(SCALARS)

    kind = random.choice(["scalar", "array", "object"])
    low = 0 if allow_empty else 1
    if kind == "scalar":
        return random.choice(SCALARS)
    elif kind == "array":
        n = random.randint(low, 3)
        return [random_doc(depth+1, max_depth, allow_empty) for _ in range(n)]
    else:
        n = random.randint(low, 3)
        keys = random.sample(KEYS, n)
        return {k: random_doc(depth+1, max_depth, allow_empty) for k in keys}


def random_object(max_depth=3, allow_empty=True):
    n = random.randint(1, 4)
    return {k: random_doc(1, max_depth, allow_empty) for k in random.sample(KEYS, n)}


# ═══════════════════════════════════════════════════════════════
#  §1  DIFF SYMMETRY
# ═══════════════════════════════════════════════════════════════

print("=" * 70)
print("  §1  DIFF SYMMETRY — random pairs")
print("=" * 70)

random.seed(42)
docs = [from_python(random_doc()) for _ in range(40)]

sym_violations = 0
for a in docs:
    for b in docs:
        ab, ba = diff(a, b), diff(b, a)
        if (not ab) != (not ba) or (not ab) != is_equal(a, b):
            sym_violations += 1
            if sym_violations <= 3:
                print(f"    VIOLATION: a = {to_python(a)!r}, b = {to_python(b)!r}")

test(f"diff(a,b) empty ⇔ diff(b,a) empty ⇔ equal ({len(docs)**2} pairs)",
     sym_violations == 0,
     f"{sym_violations} violations")

self_violations = sum(1 for d in docs if diff(d, d.clone()))
test(f"diff(v, clone(v)) empty ({len(docs)} values)",
     self_violations == 0)


# ═══════════════════════════════════════════════════════════════
#  §2  DELETE THEN GET
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §2  DELETE THEN GET — member and wildcard paths")
print("=" * 70)

random.seed(123)
paths = ["$.a", "$.b.c", "$.*", "$.a.*", "$..x", "$..*", "$['odd key']", "$.*.d"]

delete_violations = 0
delete_checks = 0
for _ in range(200):
    for path in paths:
        doc = from_python(random_object())
        if not query(doc, path):
            continue
        delete_path(doc, path)
        delete_checks += 1
        if query(doc, path):
            delete_violations += 1
            if delete_violations <= 3:
                print(f"    FAIL: {path} still matches in {to_python(doc)!r}")

test(f"delete(p) then get(p) is empty ({delete_checks} deletions)",
     delete_violations == 0,
     f"{delete_violations} violations")


# ═══════════════════════════════════════════════════════════════
#  §3  FLATTEN ROUND TRIP
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §3  FLATTEN / UNFLATTEN ROUND TRIP")
print("=" * 70)

random.seed(456)
roundtrip_failures = 0
for _ in range(300):
    raw = random_object(max_depth=4, allow_empty=False)
    back = to_python(unflatten(flatten(from_python(raw))))
    if back != raw:
        roundtrip_failures += 1
        if roundtrip_failures <= 3:
            print(f"    FAIL: {raw!r} → {back!r}")

test("unflatten(flatten(v)) == v (300 objects, no empty containers)",
     roundtrip_failures == 0,
     f"{roundtrip_failures} failures")

for sep in ["/", "::", "|"]:
    raw = {"a.b": {"c": [1, {"d": 2}]}, "e": "f"}
    back = to_python(unflatten(flatten(from_python(raw), sep), sep))
    test(f"Round trip with separator {sep!r}", back == raw, f"got {back!r}")


# ═══════════════════════════════════════════════════════════════
#  §4  MERGE
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §4  MERGE — later object wins")
print("=" * 70)

random.seed(789)
merge_violations = 0
for _ in range(300):
    a, b = random_object(), random_object()
    merged = to_python(merge([from_python(a), from_python(b)]))
    expected = dict(a)
    expected.update(b)
    if merged != expected:
        merge_violations += 1

test("Shallow merge equals dict update (300 pairs)",
     merge_violations == 0,
     f"{merge_violations} violations")

deep_violations = 0
for _ in range(300):
    a, b = from_python(random_object()), from_python(random_object())
    merged = merge([a, b], deep=True)
    for key, value in b.entries.items():
        if not isinstance(value, type(merged.entries[key])):
            deep_violations += 1
        elif value.kind != "object" and not is_equal(value, merged.entries[key]):
            deep_violations += 1

test("Deep merge keeps every non-object value of the later input",
     deep_violations == 0,
     f"{deep_violations} violations")


# ═══════════════════════════════════════════════════════════════
#  §5  PATCH
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §5  PATCH — move and replace")
print("=" * 70)

random.seed(1011)
move_failures = 0
for _ in range(200):
    raw = random_object()
    source = random.choice(list(raw))
    target = "moved-" + source
    doc = from_python(raw)
    apply_patch(doc, [{"op": "move", "from": "/" + source, "path": "/" + target}])
    if query(doc, f"$['{source}']") or \
            to_python(query(doc, f"$['{target}']")[0]) != raw[source]:
        move_failures += 1

test("move: source gone, target holds the value (200 moves)",
     move_failures == 0,
     f"{move_failures} failures")

replace_failures = 0
for _ in range(200):
    a, b = from_python(random_doc()), from_python(random_doc())
    result = apply_patch(a, [{"op": "replace", "path": "", "value": to_python(b)}])
    if diff(result, b):
        replace_failures += 1

test("Replacing the root leaves no diff against the new value",
     replace_failures == 0,
     f"{replace_failures} failures")


# ═══════════════════════════════════════════════════════════════
#  §6  SCHEMA INFERENCE
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §6  INFER THEN VALIDATE")
print("=" * 70)


def homogeneous(value):
    """Arrays whose elements all share the shape of the first."""
    if isinstance(value, list):
        return [homogeneous(value[0])] * len(value) if value else []
    if isinstance(value, dict):
        return {k: homogeneous(v) for k, v in value.items()}
    return value


random.seed(1213)
schema_failures = 0
for _ in range(200):
    doc = from_python(homogeneous(random_doc()))
    report = validate(infer_schema(doc), doc)
    if not report.valid:
        schema_failures += 1
        if schema_failures <= 3:
            print(f"    FAIL: {to_python(doc)!r}: {report.to_python()}")

test("validate(infer(v), v) is valid (200 homogeneous documents)",
     schema_failures == 0,
     f"{schema_failures} failures")


# ═══════════════════════════════════════════════════════════════
#  §7  PERFORMANCE
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §7  PERFORMANCE (wall-clock)")
print("=" * 70)

for n in [1000, 10000, 100000]:
    a = from_python(list(range(n)))
    b = from_python(list(range(1, n + 1)))
    t0 = time.perf_counter()
    entries = diff(a, b)
    dt = time.perf_counter() - t0
    print(f"  diff Array({n}) shifted: {dt*1000:.1f}ms  {len(entries)} entries")


def make_deep(depth):
    v = "leaf"
    for i in range(depth):
        v = {"child": v, "level": i}
    return v


for depth in [10, 50, 200]:
    doc = from_python(make_deep(depth))
    t0 = time.perf_counter()
    found = query(doc, "$..level")
    flat = flatten(doc)
    dt = time.perf_counter() - t0
    print(f"  Depth {depth}: {dt*1000:.3f}ms  {len(found)} matches, {len(flat)} keys")


# ═══════════════════════════════════════════════════════════════
#  SUMMARY
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  STRESS TEST SUMMARY")
print("=" * 70)
print("  If you see FAIL above, there's a bug.")
print("  If everything is PASS, the implementation is correct")
print("  for the tested cases (not a proof, but high confidence).")
