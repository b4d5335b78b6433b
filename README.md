# polyref

`polyref` holds the core data model for checking that a refactoring which spans
several kinds of artifact (source files, API schemas, build files, workflows)
still holds together. It performs no I/O and has no third-party dependencies.

## Modules

- **`polyref.kinds`**: the closed tag enums `ArtifactKind`,
  `CorrespondenceKind`, `Language` and `Visibility`, each with `as_tag()` and
  `parse(text)`. An unknown tag raises `TagParseError`.
  `Visibility.default()` is `Visibility.VISIBLE`.
- **`polyref.ids`**: `EntityId`, `ArtifactId`, `CorrId` and `EdgeId`, obtained
  only through `parse(text)`. Parsing rejects empty or over-long input, NUL
  and control characters, bidi overrides, zero-width characters, non-NFC
  text, absolute paths and `..` segments, and raises `IdParseError` whose
  `kind` is an `IdErrorKind`. `EntityId` exposes `repo_side()`, `language()`,
  `kind()`, `local_path()` and `stable_hash()`.
- **`polyref.status`**: `Outcome` is `Outcome.pres()`, `Outcome.migrated()`,
  `Outcome.broken(BrokenReason...)` or `Outcome.unknown(UnknownReason...)`.
  Only `broken` and `unknown` carry a reason; `is_accepting()` is true for
  `pres` and `migrated`. `to_dict()` / `from_dict()` give the wire form.
- **`polyref.evidence`**: `Evidence` records built with `ok_pres`,
  `ok_migrated`, `broken` and `unknown`, with `to_dict()` / `from_dict()`.
  `EvidencePointer.parse` accepts only relative paths under `evidence/` and
  raises `EvidencePointerError` otherwise. `PredicateId` and `Version` are
  plain string wrappers.
- **`polyref.source_span`**: `LineCol` (1-indexed line, 0-indexed column) and
  `SourceSpan`, which raises `SpanError` for an inverted range or an inverted
  UTF-16 column pair.
- **`polyref.canonical`**: `canonicalize(value)` returns canonical JSON bytes:
  object keys sorted by UTF-16 code units, no whitespace, minimal string
  escaping. It raises `OversizeError` above 16 MiB, `TooDeepError` beyond a
  nesting depth of 64 and `NonFiniteError` for NaN or infinities; all are
  `CanonicalError`s.
- **`polyref.migration_map`**: `MigrationMap` maps old entity ids to new ones.
  Every rewrite must keep the entity *kind* (a change of language is allowed),
  otherwise `KindMismatchError` is raised. `items()` iterates in sorted order;
  `is_type_respecting()` is false once conflicts are recorded.
- **`polyref.observation`**: the observation kinds `ApiCallObs`, `TestObs`,
  `BuildTargetObs`, `WorkflowObs` and `SchemaObs`, their shared `ObsHeader`,
  and `parse_support_ref(text)` for correspondence or build-edge ids.
- **`polyref.report`**: `ValidationReport.assemble(parts)` computes the
  candidate decision as the meet over visible observations and fails closed:
  a report cannot be `accepted` while `missing_endpoint_unknown` is true, and
  an accepted observation may not hold a non-accepting item. Violations raise
  `ReportInvariantError` with an `InvariantViolation`.

## Example

```python
from polyref.ids import EntityId
from polyref.migration_map import MigrationMap

old = EntityId.parse("old:ts:handler:src/h.ts#h:0123456789ab")
new = EntityId.parse("new:py:handler:src/h.py#h:abcdef012345")

mapping = MigrationMap({old: new})
assert mapping.get(old) == new
assert mapping.is_type_respecting()
```

```python
from polyref.canonical import canonicalize

assert canonicalize({"b": 2, "a": 1}) == b'{"a":1,"b":2}'
```

## What it does not do

This package is the data model only. It does not extract entities from
source files, store graphs or reports on disk, compute frontiers, generate or
discharge obligations, or run checkers, and it has no command-line interface.